"""
Entity: Domain Events

Eventos emitidos pelo motor após o commit de cada mudança de estado.
Consumidores (toasts, caches, dashboards) assinam via NotificationPort.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum

from src.core.entities.common import utcnow


@dataclass(frozen=True)
class ApplicationStatusChanged:
    application_id: str
    carrier_id: str
    from_status: str
    to_status: str
    actor_id: str
    occurred_at: datetime = field(default_factory=utcnow)

    kind = "application_status_changed"


@dataclass(frozen=True)
class DocumentStatusChanged:
    document_id: str
    application_id: str
    from_status: str
    to_status: str
    actor_id: str
    occurred_at: datetime = field(default_factory=utcnow)

    kind = "document_status_changed"


@dataclass(frozen=True)
class CarrierActivated:
    carrier_id: str
    application_id: str
    occurred_at: datetime = field(default_factory=utcnow)

    kind = "carrier_activated"


DomainEvent = ApplicationStatusChanged | DocumentStatusChanged | CarrierActivated


def event_to_dict(event: DomainEvent) -> dict:
    """Serializa um evento para JSON (datas em ISO-8601, enums pelo valor)."""
    data = {"kind": event.kind}
    for key, value in asdict(event).items():
        if isinstance(value, datetime):
            value = value.isoformat()
        elif isinstance(value, Enum):
            value = value.value
        data[key] = value
    return data
