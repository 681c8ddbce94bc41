"""
Entity helpers: identidade, relógio e ator.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone


def utcnow() -> datetime:
    """UTC naive — mesmo formato que o SQLAlchemy guarda em DateTime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Actor:
    """Quem executa a ação (carrier ou admin)."""
    id: str
    role: str = "carrier"            # "carrier" | "admin"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

