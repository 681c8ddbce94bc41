"""
Adapter: Static Document Requirements — tabela de documentos por tipo de carrier.

Solo: identidade do motorista + documentos do veículo + cheque cancelado.
Enterprise: registro da empresa, comprovante de endereço e cadastros fiscais.
Tipos legados/livres ("other", "fleet_proof") recebem prioridade alta
(numericamente) em vez de serem rejeitados.
"""

from src.core.entities.carrier import CarrierType
from src.core.interfaces.requirement_registry import (
    DEFAULT_FORMATS,
    DocumentRequirement,
    IRequirementRegistry,
)

PDF_OR_IMAGE = DEFAULT_FORMATS
IMAGE_ONLY = ("jpg", "jpeg", "png")

SOLO_REQUIREMENTS = (
    DocumentRequirement("aadhaar_card", 1, "Aadhaar Card"),
    DocumentRequirement("driver_license", 2, "Driving License"),
    DocumentRequirement("permit", 3, "Road Permit"),
    DocumentRequirement("registration_certificate", 4, "RC Book"),
    DocumentRequirement("insurance_certificate", 5, "Insurance Policy"),
    DocumentRequirement("fitness_certificate", 6, "Fitness Certificate"),
    DocumentRequirement("void_cheque", 7, "Cancelled Cheque"),
)

ENTERPRISE_REQUIREMENTS = (
    DocumentRequirement("incorporation_certificate", 1, "Incorporation Certificate"),
    DocumentRequirement("trade_license", 2, "Trade License"),
    DocumentRequirement(
        "address_proof", 3, "Address Proof",
        variants=("rent_agreement", "electricity_bill", "office_photo_with_board"),
    ),
    DocumentRequirement("pan_card", 4, "PAN Card"),
    DocumentRequirement("gstin_certificate", 5, "GST Certificate"),
    DocumentRequirement("tan_certificate", 6, "TAN Certificate"),
)

# Aceitos para ambos os tipos, sempre depois dos obrigatórios
LEGACY_TYPES = (
    DocumentRequirement("other", 900, "Other Document", formats_accepted=PDF_OR_IMAGE, required=False),
    DocumentRequirement("fleet_proof", 910, "Fleet Proof", formats_accepted=IMAGE_ONLY, required=False),
)

# Chaves antigas ainda presentes em dados legados
ALIASES = {
    "aadhaar": "aadhaar_card",
    "aadhar": "aadhaar_card",
    "license": "driver_license",
    "driving_license": "driver_license",
    "rc": "registration_certificate",
    "insurance": "insurance_certificate",
    "fitness": "fitness_certificate",
    "pan": "pan_card",
    "gstin": "gstin_certificate",
    "gst_certificate": "gstin_certificate",
    "cancelled_cheque": "void_cheque",
}

VARIANT_LABELS = {
    "rent_agreement": "Rent Agreement",
    "electricity_bill": "Electricity Bill",
    "office_photo_with_board": "Office Photo with Board",
}


class StaticRequirementRegistry(IRequirementRegistry):
    """
    Registry em memória, montado a partir das tabelas acima.

    Aditivo: tipos que não constam da tabela são aceitos e ordenados
    por último — novos tipos de documento não quebram nada.
    """

    def __init__(
        self,
        solo: tuple[DocumentRequirement, ...] = SOLO_REQUIREMENTS,
        enterprise: tuple[DocumentRequirement, ...] = ENTERPRISE_REQUIREMENTS,
        legacy: tuple[DocumentRequirement, ...] = LEGACY_TYPES,
        aliases: dict[str, str] | None = None,
    ):
        self._tables = {
            CarrierType.SOLO: {r.document_type: r for r in solo + legacy},
            CarrierType.ENTERPRISE: {r.document_type: r for r in enterprise + legacy},
        }
        self._aliases = dict(ALIASES if aliases is None else aliases)
        for req in solo + enterprise + legacy:
            for variant in req.variants:
                self._aliases[variant] = req.document_type
        self._labels = {r.document_type: r.label for r in solo + enterprise + legacy}
        self._labels.update(VARIANT_LABELS)

    def requirements_for(self, carrier_type: CarrierType) -> list[DocumentRequirement]:
        table = self._tables[CarrierType(carrier_type)]
        return sorted(
            (r for r in table.values() if r.required),
            key=lambda r: r.display_priority,
        )

    def canonical_type(self, document_type: str) -> str:
        key = (document_type or "").strip().lower()
        return self._aliases.get(key, key)

    def requirement_for(self, carrier_type: CarrierType, document_type: str) -> DocumentRequirement | None:
        return self._tables[CarrierType(carrier_type)].get(self.canonical_type(document_type))

    def label_for(self, document_type: str) -> str:
        key = (document_type or "").strip().lower()
        if key in self._labels:
            return self._labels[key]
        canonical = self.canonical_type(key)
        if canonical in self._labels:
            return self._labels[canonical]
        return key.replace("_", " ").title()
