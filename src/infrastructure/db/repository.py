"""
Verification Repository — SQLAlchemy implementation.

Handles:
  - Carriers and directory listing flag
  - Applications with optimistic concurrency (version column)
  - Document records (superseded, never deleted)
  - Transition audit trail
"""

import logging
from collections.abc import Iterable
from typing import Optional

from sqlalchemy import desc, func
from sqlalchemy.orm import sessionmaker

from src.core.entities.application import AppStatus, StatusTransition, VerificationApplication
from src.core.entities.carrier import Carrier, CarrierType
from src.core.entities.common import utcnow
from src.core.entities.document import DocumentRecord
from src.core.errors import ConcurrencyConflict, NotFound
from src.core.interfaces.verification_repository import IVerificationRepository
from src.infrastructure.db.database import session_scope
from src.infrastructure.db.models import ApplicationRow, CarrierRow, DocumentRow, TransitionRow

logger = logging.getLogger(__name__)


class SqlVerificationRepository(IVerificationRepository):
    """Repository for carriers, applications and their documents."""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self._factory = session_factory

    # ── Carriers ──

    def add_carrier(self, carrier: Carrier) -> Carrier:
        with session_scope(self._factory) as db:
            db.add(CarrierRow.from_entity(carrier))
            logger.info(f"Saved carrier {carrier.id} [{carrier.resolved_type.value}]")
        return carrier

    def get_carrier(self, carrier_id: str) -> Optional[Carrier]:
        with session_scope(self._factory) as db:
            row = db.get(CarrierRow, carrier_id)
            return row.to_entity() if row else None

    def mark_carrier_listed(self, carrier_id: str) -> None:
        with session_scope(self._factory) as db:
            row = db.get(CarrierRow, carrier_id)
            if row is None:
                raise NotFound(f"Carrier {carrier_id} not found", {"carrier_id": carrier_id})
            if not row.listed:
                row.listed = True
                row.listed_at = utcnow()

    # ── Applications ──

    def add_application(self, application: VerificationApplication) -> VerificationApplication:
        with session_scope(self._factory) as db:
            row = ApplicationRow.from_entity(application)
            row.attempt = self._next_seq(db, ApplicationRow.attempt, ApplicationRow.carrier_id, application.carrier_id)
            db.add(row)
            logger.info(f"Saved application {application.id} for carrier {application.carrier_id}")
        return application

    def get_application(self, application_id: str) -> Optional[VerificationApplication]:
        with session_scope(self._factory) as db:
            row = db.get(ApplicationRow, application_id)
            return row.to_entity() if row else None

    def get_current_application(self, carrier_id: str) -> Optional[VerificationApplication]:
        with session_scope(self._factory) as db:
            row = (
                db.query(ApplicationRow)
                .filter_by(carrier_id=carrier_id)
                .order_by(desc(ApplicationRow.created_at), desc(ApplicationRow.attempt))
                .first()
            )
            return row.to_entity() if row else None

    def update_application(
        self,
        application: VerificationApplication,
        expected_version: int,
        transition: StatusTransition | None = None,
    ) -> VerificationApplication:
        new_version = expected_version + 1
        with session_scope(self._factory) as db:
            # Conditional UPDATE: only one writer can move version N -> N+1
            updated = (
                db.query(ApplicationRow)
                .filter_by(id=application.id, version=expected_version)
                .update(
                    {**ApplicationRow.values_from(application), "version": new_version},
                    synchronize_session=False,
                )
            )
            if updated == 0:
                self._raise_missing_or_stale(db, ApplicationRow, application.id, expected_version)
            if transition is not None:
                db.add(TransitionRow.from_entity(transition))
        application.version = new_version
        return application

    def list_applications(
        self,
        statuses: Iterable[AppStatus] | None = None,
        carrier_type: CarrierType | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[VerificationApplication]:
        with session_scope(self._factory) as db:
            query = db.query(ApplicationRow)
            if statuses:
                query = query.filter(ApplicationRow.status.in_([AppStatus(s).value for s in statuses]))
            if carrier_type:
                query = query.filter_by(carrier_type=CarrierType(carrier_type).value)
            queue_key = func.coalesce(ApplicationRow.submitted_at, ApplicationRow.created_at)
            rows = query.order_by(desc(queue_key)).offset(offset).limit(limit).all()
            return [r.to_entity() for r in rows]

    def count_by_status(self) -> dict[str, int]:
        with session_scope(self._factory) as db:
            rows = (
                db.query(ApplicationRow.status, func.count(ApplicationRow.id))
                .group_by(ApplicationRow.status)
                .all()
            )
            return {status: count for status, count in rows}

    def list_transitions(self, application_id: str) -> list[StatusTransition]:
        with session_scope(self._factory) as db:
            rows = (
                db.query(TransitionRow)
                .filter_by(application_id=application_id)
                .order_by(TransitionRow.occurred_at, TransitionRow.id)
                .all()
            )
            return [r.to_entity() for r in rows]

    # ── Documents ──

    def add_document(self, document: DocumentRecord, supersedes: str | None = None) -> DocumentRecord:
        with session_scope(self._factory) as db:
            if supersedes:
                previous = db.get(DocumentRow, supersedes)
                if previous is not None:
                    previous.superseded_by = document.id
                    previous.version = previous.version + 1
            row = DocumentRow.from_entity(document)
            row.seq = self._next_seq(db, DocumentRow.seq, DocumentRow.application_id, document.application_id)
            db.add(row)
            logger.info(
                f"Saved document {document.id} [{document.document_type}] "
                f"for application {document.application_id}"
            )
        return document

    def get_document(self, document_id: str) -> Optional[DocumentRecord]:
        with session_scope(self._factory) as db:
            row = db.get(DocumentRow, document_id)
            return row.to_entity() if row else None

    def list_documents(self, application_id: str, include_superseded: bool = False) -> list[DocumentRecord]:
        with session_scope(self._factory) as db:
            query = db.query(DocumentRow).filter_by(application_id=application_id)
            if not include_superseded:
                query = query.filter(DocumentRow.superseded_by.is_(None))
            rows = query.order_by(DocumentRow.uploaded_at, DocumentRow.seq).all()
            return [r.to_entity() for r in rows]

    def update_document(self, document: DocumentRecord, expected_version: int) -> DocumentRecord:
        new_version = expected_version + 1
        with session_scope(self._factory) as db:
            updated = (
                db.query(DocumentRow)
                .filter_by(id=document.id, version=expected_version)
                .update(
                    {**DocumentRow.values_from(document), "version": new_version},
                    synchronize_session=False,
                )
            )
            if updated == 0:
                self._raise_missing_or_stale(db, DocumentRow, document.id, expected_version)
        document.version = new_version
        return document

    @staticmethod
    def _next_seq(db, column, owner_column, owner_id: str) -> int:
        """Insertion counter scoped to one owner (carrier or application)."""
        current = db.query(func.max(column)).filter(owner_column == owner_id).scalar()
        return (current or 0) + 1

    @staticmethod
    def _raise_missing_or_stale(db, model, row_id: str, expected_version: int):
        current = db.get(model, row_id)
        if current is None:
            raise NotFound(f"{model.__tablename__} row {row_id} not found", {"id": row_id})
        raise ConcurrencyConflict(
            f"Stale write on {row_id}: expected version {expected_version}, found {current.version}",
            {"id": row_id, "expected_version": expected_version, "current_version": current.version},
        )
