"""
Use Case: Decide Document

Aprova ou rejeita um documento individual. O status do documento é
independente dos irmãos e da aplicação-pai: aprovar todos não aprova
a aplicação, rejeitar um não a rejeita.
"""

import logging

from src.core.entities.common import Actor
from src.core.entities.document import DOC_DECISION_TARGET, DocDecision, DocStatus, DocumentRecord
from src.core.entities.events import DocumentStatusChanged
from src.core.errors import ConcurrencyConflict, InvalidTransition, NotFound, PermissionDenied, ValidationError
from src.core.interfaces.verification_repository import IVerificationRepository
from src.core.use_cases.transition_engine import StatusTransitionEngine, clean_text

logger = logging.getLogger(__name__)


class DecideDocumentUseCase:

    def __init__(self, repository: IVerificationRepository, engine: StatusTransitionEngine):
        self._repo = repository
        self._engine = engine

    def execute(
        self,
        document_id: str,
        decision: DocDecision | str,
        actor: Actor,
        reason: str | None = None,
        expected_version: int | None = None,
    ) -> DocStatus:
        try:
            decision = DocDecision(decision)
        except ValueError:
            raise ValidationError(f"Unknown decision '{decision}'", {"field": "decision"})
        if not actor.is_admin:
            raise PermissionDenied("Document decisions require an admin", {"actor_id": actor.id})
        reason = clean_text(reason)
        if decision == DocDecision.REJECT and reason is None:
            raise ValidationError("rejection_reason is required to reject a document", {"field": "rejection_reason"})

        doc = self._load(document_id)
        with self._engine.locked(doc.application_id):
            doc = self._load(document_id)
            read_version = doc.version
            if expected_version is not None and expected_version != read_version:
                raise ConcurrencyConflict(
                    f"Document {document_id} changed: expected version {expected_version}, found {read_version}",
                    {"document_id": document_id, "expected_version": expected_version,
                     "current_version": read_version},
                )
            if not doc.is_current:
                raise InvalidTransition(
                    f"Document {document_id} was superseded by {doc.superseded_by}",
                    {"document_id": document_id, "superseded_by": doc.superseded_by},
                )

            target = DOC_DECISION_TARGET[decision]
            if doc.status == target:
                logger.debug(f"Document {doc.id} already {target.value}; no-op")
                return doc.status

            from_status = doc.status
            now = self._engine.clock()
            doc.status = target
            doc.rejection_reason = reason if target == DocStatus.REJECTED else None
            doc.reviewed_by = actor.id
            doc.reviewed_at = now
            self._repo.update_document(doc, read_version)
            logger.info(
                f"Document {doc.id} [{doc.document_type}]: {from_status.value} -> {target.value} by {actor.id}"
            )

            self._engine.notify(DocumentStatusChanged(
                document_id=doc.id,
                application_id=doc.application_id,
                from_status=from_status.value,
                to_status=target.value,
                actor_id=actor.id,
                occurred_at=now,
            ))
        return doc.status

    def _load(self, document_id: str) -> DocumentRecord:
        doc = self._repo.get_document(document_id)
        if doc is None:
            raise NotFound(f"Document {document_id} not found", {"document_id": document_id})
        return doc
