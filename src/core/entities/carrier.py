"""
Entity: Carrier

Participante do marketplace que oferece capacidade de transporte.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from src.core.entities.common import new_id, utcnow


class CarrierType(str, Enum):
    SOLO = "solo"
    ENTERPRISE = "enterprise"


def resolve_carrier_type(carrier_type: str | CarrierType | None, fleet_size: int | None = None) -> CarrierType:
    """
    carrier_type é autoritativo; registros legados só trazem fleet_size.
    """
    if carrier_type:
        return CarrierType(carrier_type)
    if fleet_size is not None and fleet_size > 1:
        return CarrierType.ENTERPRISE
    return CarrierType.SOLO


@dataclass
class Carrier:
    """Entidade de domínio: Carrier."""
    id: str = field(default_factory=new_id)
    carrier_type: CarrierType | None = None
    fleet_size: int = 1
    name: str = ""
    company_name: str = ""
    email: str = ""
    phone: str | None = None
    listed: bool = False                 # visível no diretório público
    listed_at: datetime | None = None
    created_at: datetime = field(default_factory=utcnow)

    @property
    def resolved_type(self) -> CarrierType:
        return resolve_carrier_type(self.carrier_type, self.fleet_size)
