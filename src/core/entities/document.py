"""
Entity: Document Record

Metadados de um documento enviado pelo carrier.
Modelo puro — sem dependência de framework ou banco.
O arquivo em si fica no storage; aqui só a referência.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from src.core.entities.common import new_id, utcnow


class DocStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class DocDecision(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"


DOC_DECISION_TARGET = {
    DocDecision.APPROVE: DocStatus.APPROVED,
    DocDecision.REJECT: DocStatus.REJECTED,
}


@dataclass
class DocumentRecord:
    """Entidade de domínio: Documento de verificação."""
    application_id: str
    document_type: str                   # chave do registry, ex: "aadhaar_card"
    file_reference: str                  # ponteiro opaco para o storage
    id: str = field(default_factory=new_id)
    file_name: str = ""
    status: DocStatus = DocStatus.PENDING
    rejection_reason: str | None = None
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    uploaded_at: datetime = field(default_factory=utcnow)
    superseded_by: str | None = None     # id do upload mais novo do mesmo tipo
    version: int = 1

    @property
    def is_current(self) -> bool:
        return self.superseded_by is None
