"""
Pydantic schemas — Request/Response models para a API.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from src.core.entities.application import StatusTransition, VerificationApplication
from src.core.entities.carrier import Carrier
from src.core.use_cases.get_application import ApplicationView, DocumentView


# ── Requests ──

class RegisterCarrierRequest(BaseModel):
    carrier_type: str | None = None
    fleet_size: int = 1
    name: str = ""
    company_name: str = ""
    email: str = ""
    phone: str | None = None
    carrier_id: str | None = None


class BankDetailsPayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    bank_name: str | None = None
    account_number: str | None = None
    ifsc_code: str | None = None
    account_holder_name: str | None = None


class SoloDetailsPayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    aadhaar_number: str | None = None
    driver_license_number: str | None = None
    permit_type: str | None = None
    unique_registration_number: str | None = None
    chassis_number: str | None = None
    license_plate_number: str | None = None
    bank: BankDetailsPayload | None = None


class EnterpriseDetailsPayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    incorporation_type: str | None = None
    business_registration_number: str | None = None
    business_address: str | None = None
    pan_number: str | None = None
    gstin_number: str | None = None
    tan_number: str | None = None
    fleet_size: int | None = None
    bank: BankDetailsPayload | None = None


DetailsPayload = SoloDetailsPayload | EnterpriseDetailsPayload


def details_dict(details: DetailsPayload | None) -> dict | None:
    """Só os campos enviados; a variante final é escolhida pelo carrier_type."""
    if details is None:
        return None
    return details.model_dump(exclude_unset=True)


class StartApplicationRequest(BaseModel):
    carrier_type: str | None = None
    details: DetailsPayload | None = None


class SaveDraftRequest(BaseModel):
    details: DetailsPayload | None = None
    carrier_type: str | None = None
    expected_version: int | None = None


class SubmitRequest(BaseModel):
    expected_version: int | None = None


class UploadDocumentRequest(BaseModel):
    document_type: str
    file_reference: str
    file_name: str = ""


class DecisionRequest(BaseModel):
    decision: str
    reason: str | None = None
    expected_version: int | None = None


class ReopenRequest(BaseModel):
    expected_version: int | None = None


# ── Responses ──

class ErrorResponse(BaseModel):
    detail: str
    code: str
    retryable: bool = False
    context: dict = {}


class CarrierResponse(BaseModel):
    id: str
    carrier_type: str
    fleet_size: int
    name: str
    company_name: str
    email: str
    phone: str | None = None
    listed: bool
    listed_at: datetime | None = None
    created_at: datetime

    @classmethod
    def from_entity(cls, carrier: Carrier) -> "CarrierResponse":
        return cls(
            id=carrier.id,
            carrier_type=carrier.resolved_type.value,
            fleet_size=carrier.fleet_size,
            name=carrier.name,
            company_name=carrier.company_name,
            email=carrier.email,
            phone=carrier.phone,
            listed=carrier.listed,
            listed_at=carrier.listed_at,
            created_at=carrier.created_at,
        )


class ApplicationSummary(BaseModel):
    id: str
    carrier_id: str
    carrier_type: str
    status: str
    details: dict
    created_at: datetime
    submitted_at: datetime | None = None
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    rejection_reason: str | None = None
    hold_notes: str | None = None
    version: int

    @classmethod
    def from_entity(cls, app: VerificationApplication) -> "ApplicationSummary":
        return cls(
            id=app.id,
            carrier_id=app.carrier_id,
            carrier_type=app.carrier_type.value,
            status=app.status.value,
            details=app.details.to_dict() if app.details else {},
            created_at=app.created_at,
            submitted_at=app.submitted_at,
            reviewed_by=app.reviewed_by,
            reviewed_at=app.reviewed_at,
            rejection_reason=app.rejection_reason,
            hold_notes=app.hold_notes,
            version=app.version,
        )


class DocumentResponse(BaseModel):
    id: str
    application_id: str
    document_type: str
    label: str = ""
    display_priority: int | None = None
    required: bool = False
    formats_accepted: list[str] = []
    file_reference: str
    file_name: str = ""
    status: str
    rejection_reason: str | None = None
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    uploaded_at: datetime
    version: int

    @classmethod
    def from_view(cls, view: DocumentView) -> "DocumentResponse":
        doc = view.document
        return cls(
            id=doc.id,
            application_id=doc.application_id,
            document_type=doc.document_type,
            label=view.label,
            display_priority=view.display_priority,
            required=view.required,
            formats_accepted=list(view.formats_accepted),
            file_reference=doc.file_reference,
            file_name=doc.file_name,
            status=doc.status.value,
            rejection_reason=doc.rejection_reason,
            reviewed_by=doc.reviewed_by,
            reviewed_at=doc.reviewed_at,
            uploaded_at=doc.uploaded_at,
            version=doc.version,
        )


class TransitionResponse(BaseModel):
    action: str
    from_status: str
    to_status: str
    actor_id: str
    note: str | None = None
    occurred_at: datetime

    @classmethod
    def from_entity(cls, t: StatusTransition) -> "TransitionResponse":
        return cls(
            action=t.action.value,
            from_status=t.from_status.value,
            to_status=t.to_status.value,
            actor_id=t.actor_id,
            note=t.note,
            occurred_at=t.occurred_at,
        )


class ReadinessResponse(BaseModel):
    ready_to_submit: bool
    missing_documents: list[str]
    missing_fields: list[str]
    document_counts: dict[str, int]


class ApplicationDetailResponse(BaseModel):
    application: ApplicationSummary
    carrier: CarrierResponse | None = None
    documents: list[DocumentResponse]
    readiness: ReadinessResponse
    history: list[TransitionResponse]

    @classmethod
    def from_view(cls, view: ApplicationView) -> "ApplicationDetailResponse":
        return cls(
            application=ApplicationSummary.from_entity(view.application),
            carrier=CarrierResponse.from_entity(view.carrier) if view.carrier else None,
            documents=[DocumentResponse.from_view(d) for d in view.documents],
            readiness=ReadinessResponse(
                ready_to_submit=view.readiness.ready_to_submit,
                missing_documents=view.readiness.missing_documents,
                missing_fields=view.readiness.missing_fields,
                document_counts=view.readiness.document_counts,
            ),
            history=[TransitionResponse.from_entity(t) for t in view.history],
        )


class SubmitResponse(BaseModel):
    application_id: str
    status: str


class StatusResponse(BaseModel):
    id: str
    status: str


class GatingResponse(BaseModel):
    carrier_id: str
    can_transact: bool


class QueueResponse(BaseModel):
    items: list[ApplicationSummary]
    count: int


class SegmentedQueueResponse(BaseModel):
    solo: list[ApplicationSummary]
    enterprise: list[ApplicationSummary]
