"""
Use Case: Upload Document

Registra os metadados de um upload. O arquivo já está no storage;
aqui só guardamos a referência. Um novo upload do mesmo tipo
substitui o registro atual (que sai de todas as views e checagens).
"""

import logging

from src.core.entities.application import UPLOAD_STATUSES
from src.core.entities.common import Actor
from src.core.entities.document import DocumentRecord
from src.core.errors import InvalidTransition, ValidationError
from src.core.interfaces.requirement_registry import IRequirementRegistry
from src.core.interfaces.verification_repository import IVerificationRepository
from src.core.use_cases.start_application import ensure_owner_or_admin
from src.core.use_cases.transition_engine import StatusTransitionEngine, clean_text

logger = logging.getLogger(__name__)


class UploadDocumentUseCase:

    def __init__(
        self,
        repository: IVerificationRepository,
        registry: IRequirementRegistry,
        engine: StatusTransitionEngine,
    ):
        self._repo = repository
        self._registry = registry
        self._engine = engine

    def execute(
        self,
        application_id: str,
        document_type: str,
        file_reference: str,
        actor: Actor,
        file_name: str = "",
    ) -> DocumentRecord:
        document_type = clean_text(document_type)
        file_reference = clean_text(file_reference)
        if document_type is None:
            raise ValidationError("document_type is required", {"field": "document_type"})
        if file_reference is None:
            raise ValidationError("file_reference is required", {"field": "file_reference"})
        document_type = document_type.lower()

        with self._engine.locked(application_id):
            app = self._engine.load(application_id)
            ensure_owner_or_admin(actor, app.carrier_id)
            if app.status not in UPLOAD_STATUSES:
                raise InvalidTransition(
                    f"Cannot upload documents to an application in status '{app.status.value}'",
                    {"application_id": app.id, "status": app.status.value},
                )

            canonical = self._registry.canonical_type(document_type)
            previous = next(
                (
                    d for d in self._repo.list_documents(app.id)
                    if self._registry.canonical_type(d.document_type) == canonical
                ),
                None,
            )
            doc = DocumentRecord(
                application_id=app.id,
                document_type=document_type,
                file_reference=file_reference,
                file_name=file_name or "",
                uploaded_at=self._engine.clock(),
            )
            self._repo.add_document(doc, supersedes=previous.id if previous else None)

        if previous is not None:
            logger.info(f"Document {doc.id} supersedes {previous.id} [{canonical}] on application {app.id}")
        return doc
