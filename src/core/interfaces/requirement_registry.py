"""
Contract: Requirement Registry

Tabela estática de quais documentos cada tipo de carrier precisa
enviar e em que ordem o admin os revisa. Fonte única de verdade —
rótulos e prioridades exibidos na UI são projeções destes dados.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from src.core.entities.carrier import CarrierType

DEFAULT_FORMATS = ("pdf", "jpg", "jpeg", "png")


@dataclass(frozen=True)
class DocumentRequirement:
    """Um tipo de documento conhecido pelo registry."""
    document_type: str                   # chave canônica, ex: "gstin_certificate"
    display_priority: int                # menor = revisado primeiro
    label: str = ""
    formats_accepted: tuple[str, ...] = DEFAULT_FORMATS
    required: bool = True
    variants: tuple[str, ...] = field(default_factory=tuple)   # tipos que satisfazem este


class IRequirementRegistry(ABC):
    """
    Port: Requirement Registry

    Tolerante a tipos desconhecidos: nunca levanta erro por um
    document_type que não reconhece — apenas o ordena por último.
    """

    @abstractmethod
    def requirements_for(self, carrier_type: CarrierType) -> list[DocumentRequirement]:
        """
        Tipos obrigatórios para o carrier_type, ordenados por prioridade.

        Args:
            carrier_type: "solo" ou "enterprise".

        Returns:
            Lista de DocumentRequirement (apenas required=True).
        """
        ...

    @abstractmethod
    def canonical_type(self, document_type: str) -> str:
        """Normaliza aliases legados e variantes para a chave canônica."""
        ...

    @abstractmethod
    def requirement_for(self, carrier_type: CarrierType, document_type: str) -> DocumentRequirement | None:
        """Entrada do tipo (já canonizado) para o carrier_type, ou None se não registrado."""
        ...

    def priority_for(self, carrier_type: CarrierType, document_type: str) -> int | None:
        """Prioridade de exibição, ou None se o tipo não é registrado para o carrier_type."""
        req = self.requirement_for(carrier_type, document_type)
        return req.display_priority if req else None

    def formats_for(self, carrier_type: CarrierType, document_type: str) -> tuple[str, ...]:
        """Formatos aceitos; tipos não registrados aceitam os formatos padrão."""
        req = self.requirement_for(carrier_type, document_type)
        return req.formats_accepted if req else DEFAULT_FORMATS

    @abstractmethod
    def label_for(self, document_type: str) -> str:
        """Rótulo de exibição (fallback: a própria chave humanizada)."""
        ...

    def missing_types(self, carrier_type: CarrierType, present_types) -> list[str]:
        """Tipos obrigatórios sem nenhum registro presente."""
        present = {self.canonical_type(t) for t in present_types}
        return [
            req.document_type
            for req in self.requirements_for(carrier_type)
            if req.document_type not in present
        ]
