"""
Entity: Verification Application

Uma tentativa de onboarding de um carrier — agregado revisado pelo admin.
Os campos específicos de cada tipo de carrier formam uma variante
(SoloDetails | EnterpriseDetails) escolhida pelo carrier_type.
"""

from dataclasses import asdict, dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import ClassVar

from src.core.entities.carrier import CarrierType
from src.core.entities.common import new_id, utcnow
from src.core.errors import ValidationError


class AppStatus(str, Enum):
    DRAFT = "draft"
    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"
    ON_HOLD = "on_hold"


class AppAction(str, Enum):
    SUBMIT = "submit"
    START_REVIEW = "start_review"
    APPROVE = "approve"
    REJECT = "reject"
    HOLD = "hold"
    REOPEN = "reopen"


# (from, action) -> to. Nenhuma outra transição é legal.
TRANSITIONS: dict[tuple[AppStatus, AppAction], AppStatus] = {
    (AppStatus.DRAFT, AppAction.SUBMIT): AppStatus.PENDING,
    (AppStatus.PENDING, AppAction.START_REVIEW): AppStatus.UNDER_REVIEW,
    (AppStatus.PENDING, AppAction.APPROVE): AppStatus.APPROVED,
    (AppStatus.UNDER_REVIEW, AppAction.APPROVE): AppStatus.APPROVED,
    (AppStatus.PENDING, AppAction.REJECT): AppStatus.REJECTED,
    (AppStatus.UNDER_REVIEW, AppAction.REJECT): AppStatus.REJECTED,
    (AppStatus.PENDING, AppAction.HOLD): AppStatus.ON_HOLD,
    (AppStatus.UNDER_REVIEW, AppAction.HOLD): AppStatus.ON_HOLD,
    (AppStatus.ON_HOLD, AppAction.REOPEN): AppStatus.PENDING,
}

ACTION_TARGET: dict[AppAction, AppStatus] = {action: to for (_, action), to in TRANSITIONS.items()}

ADMIN_ACTIONS = frozenset({
    AppAction.START_REVIEW,
    AppAction.APPROVE,
    AppAction.REJECT,
    AppAction.HOLD,
    AppAction.REOPEN,
})

TERMINAL_STATUSES = frozenset({AppStatus.APPROVED, AppStatus.REJECTED})
ACTIVE_STATUSES = frozenset(set(AppStatus) - {AppStatus.REJECTED})
EDITABLE_STATUSES = frozenset({AppStatus.DRAFT, AppStatus.ON_HOLD})
UPLOAD_STATUSES = frozenset({AppStatus.DRAFT, AppStatus.PENDING, AppStatus.UNDER_REVIEW, AppStatus.ON_HOLD})


def next_status(current: AppStatus, action: AppAction) -> AppStatus | None:
    return TRANSITIONS.get((current, action))


# ─── Details (variante por carrier_type) ────────────────────


@dataclass
class BankDetails:
    bank_name: str | None = None
    account_number: str | None = None
    ifsc_code: str | None = None
    account_holder_name: str | None = None


def _typed(scope: str, name: str, value, int_fields: tuple[str, ...] = ()):
    """Campos de texto aceitam str/None; campos inteiros aceitam int/None."""
    if value is None:
        return None
    if name in int_fields:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        expected = "an integer"
    elif isinstance(value, str):
        return value
    else:
        expected = "a string"
    raise ValidationError(
        f"{scope}.{name} must be {expected}, got {type(value).__name__}",
        {"field": f"{scope}.{name}"},
    )


@dataclass
class _Details:
    REQUIRED: ClassVar[tuple[str, ...]] = ()
    INT_FIELDS: ClassVar[tuple[str, ...]] = ()
    bank: BankDetails = field(default_factory=BankDetails)

    def missing_fields(self) -> list[str]:
        """Campos obrigatórios vazios (informativo, não bloqueia a submissão)."""
        missing = []
        for name in self.REQUIRED:
            value = getattr(self, name)
            if value is None or not str(value).strip():
                missing.append(name)
        return missing

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict | None):
        """
        Monta a variante a partir de um dict livre (JSON da API, coluna JSON).

        Chaves desconhecidas são ignoradas; tipos errados levantam
        ValidationError.
        """
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValidationError("details must be an object", {"field": "details"})
        data = dict(data)
        known = {f.name for f in fields(cls)}

        bank = data.pop("bank", None)
        if bank is None:
            bank = BankDetails()
        elif isinstance(bank, dict):
            bank = BankDetails(**{
                k: _typed("bank", k, v) for k, v in bank.items() if k in BankDetails.__dataclass_fields__
            })
        elif not isinstance(bank, BankDetails):
            raise ValidationError(
                f"details.bank must be an object, got {type(bank).__name__}", {"field": "details.bank"},
            )

        kwargs = {
            k: _typed("details", k, v, cls.INT_FIELDS)
            for k, v in data.items() if k in known and k != "bank"
        }
        return cls(bank=bank, **kwargs)


@dataclass
class SoloDetails(_Details):
    REQUIRED: ClassVar[tuple[str, ...]] = (
        "aadhaar_number", "driver_license_number", "chassis_number", "license_plate_number",
    )
    aadhaar_number: str | None = None
    driver_license_number: str | None = None
    permit_type: str | None = None           # "national" | "domestic"
    unique_registration_number: str | None = None
    chassis_number: str | None = None
    license_plate_number: str | None = None


@dataclass
class EnterpriseDetails(_Details):
    REQUIRED: ClassVar[tuple[str, ...]] = (
        "business_registration_number", "business_address", "pan_number",
    )
    INT_FIELDS: ClassVar[tuple[str, ...]] = ("fleet_size",)
    incorporation_type: str | None = None
    business_registration_number: str | None = None
    business_address: str | None = None
    pan_number: str | None = None
    gstin_number: str | None = None
    tan_number: str | None = None
    fleet_size: int | None = None


DETAILS_BY_TYPE = {
    CarrierType.SOLO: SoloDetails,
    CarrierType.ENTERPRISE: EnterpriseDetails,
}


def details_for(carrier_type: CarrierType, data: dict | None = None) -> SoloDetails | EnterpriseDetails:
    return DETAILS_BY_TYPE[CarrierType(carrier_type)].from_dict(data)


# ─── Aggregate ──────────────────────────────────────────────


@dataclass
class VerificationApplication:
    """Entidade de domínio: Aplicação de verificação."""
    carrier_id: str
    carrier_type: CarrierType
    id: str = field(default_factory=new_id)
    status: AppStatus = AppStatus.DRAFT
    details: SoloDetails | EnterpriseDetails | None = None
    created_at: datetime = field(default_factory=utcnow)
    submitted_at: datetime | None = None
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    rejection_reason: str | None = None
    hold_notes: str | None = None
    version: int = 1

    def __post_init__(self):
        self.carrier_type = CarrierType(self.carrier_type)
        self.status = AppStatus(self.status)
        if self.details is None:
            self.details = details_for(self.carrier_type)

    @property
    def queue_key(self) -> datetime:
        """Ordem da fila do admin: submitted_at se houver, senão created_at."""
        return self.submitted_at or self.created_at

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES


@dataclass
class StatusTransition:
    """Trilha de auditoria — uma linha por transição registrada."""
    application_id: str
    action: AppAction
    from_status: AppStatus
    to_status: AppStatus
    actor_id: str
    note: str | None = None
    occurred_at: datetime = field(default_factory=utcnow)
