"""
Use Case: Read side — visão da aplicação e fila de revisão do admin.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from src.core.entities.application import AppStatus, StatusTransition, VerificationApplication
from src.core.entities.carrier import Carrier, CarrierType
from src.core.entities.document import DocStatus, DocumentRecord
from src.core.errors import NotFound, ValidationError
from src.core.interfaces.requirement_registry import IRequirementRegistry
from src.core.interfaces.verification_repository import IVerificationRepository


@dataclass
class DocumentView:
    document: DocumentRecord
    label: str
    display_priority: int | None        # None = tipo não registrado p/ o carrier_type
    required: bool
    formats_accepted: tuple[str, ...] = ()


def describe_document(
    document: DocumentRecord,
    carrier_type: CarrierType,
    registry: IRequirementRegistry,
) -> DocumentView:
    """Projeta o registro com rótulo, prioridade e formatos do registry."""
    requirement = registry.requirement_for(carrier_type, document.document_type)
    return DocumentView(
        document=document,
        label=registry.label_for(document.document_type),
        display_priority=requirement.display_priority if requirement else None,
        required=bool(requirement and requirement.required),
        formats_accepted=registry.formats_for(carrier_type, document.document_type),
    )


@dataclass
class Readiness:
    """Prontidão calculada — informativa, não altera status."""
    missing_documents: list[str] = field(default_factory=list)
    missing_fields: list[str] = field(default_factory=list)
    document_counts: dict[str, int] = field(default_factory=dict)

    @property
    def ready_to_submit(self) -> bool:
        return not self.missing_documents


@dataclass
class ApplicationView:
    application: VerificationApplication
    carrier: Carrier | None
    documents: list[DocumentView]
    readiness: Readiness
    history: list[StatusTransition]


def sort_documents(
    documents: Iterable[DocumentRecord],
    carrier_type: CarrierType,
    registry: IRequirementRegistry,
) -> list[DocumentRecord]:
    """
    Ordena pela prioridade do registry; tipos sem prioridade vão por último.
    Empates ficam na ordem de upload (sort estável sobre uploaded_at).
    """
    by_upload = sorted(documents, key=lambda d: d.uploaded_at)

    def key(doc: DocumentRecord):
        priority = registry.priority_for(carrier_type, doc.document_type)
        return (priority is None, priority or 0)

    return sorted(by_upload, key=key)


class GetApplicationUseCase:

    def __init__(self, repository: IVerificationRepository, registry: IRequirementRegistry):
        self._repo = repository
        self._registry = registry

    def execute(self, application_id: str) -> ApplicationView:
        app = self._repo.get_application(application_id)
        if app is None:
            raise NotFound(f"Application {application_id} not found", {"application_id": application_id})

        documents = sort_documents(self._repo.list_documents(app.id), app.carrier_type, self._registry)

        counts = {s.value: 0 for s in DocStatus}
        for doc in documents:
            counts[doc.status.value] += 1

        return ApplicationView(
            application=app,
            carrier=self._repo.get_carrier(app.carrier_id),
            documents=[describe_document(doc, app.carrier_type, self._registry) for doc in documents],
            readiness=Readiness(
                missing_documents=self._registry.missing_types(
                    app.carrier_type, [d.document_type for d in documents]
                ),
                missing_fields=app.details.missing_fields() if app.details else [],
                document_counts=counts,
            ),
            history=self._repo.list_transitions(app.id),
        )


AWAITING_REVIEW = (AppStatus.PENDING, AppStatus.UNDER_REVIEW)


class ReviewQueueUseCase:
    """
    Fila do admin: submitted_at desc (senão created_at desc).
    Segmentação solo/enterprise é só apresentação.
    """

    def __init__(self, repository: IVerificationRepository):
        self._repo = repository

    def list_queue(
        self,
        statuses: Iterable[str] | None = None,
        carrier_type: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[VerificationApplication]:
        try:
            wanted = [AppStatus(s) for s in statuses] if statuses else list(AWAITING_REVIEW)
            ctype = CarrierType(carrier_type) if carrier_type else None
        except ValueError as e:
            raise ValidationError(str(e), {"field": "status/carrier_type"})
        return self._repo.list_applications(wanted, ctype, limit=limit, offset=offset)

    def segmented(self, statuses: Iterable[str] | None = None, limit: int = 50) -> dict[str, list[VerificationApplication]]:
        apps = self.list_queue(statuses, limit=limit)
        segments: dict[str, list[VerificationApplication]] = {t.value: [] for t in CarrierType}
        for app in apps:
            segments[app.carrier_type.value].append(app)
        return segments

    def stats(self) -> dict[str, int]:
        counts = {s.value: 0 for s in AppStatus}
        counts.update(self._repo.count_by_status())
        counts["awaiting_review"] = sum(counts[s.value] for s in AWAITING_REVIEW)
        counts["total"] = sum(counts[s.value] for s in AppStatus)
        return counts
