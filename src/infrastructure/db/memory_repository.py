"""
Verification Repository — in-memory implementation.

Same contract as the SQLAlchemy repository (including version checks);
used by tests and by `storage_backend=memory`.
"""

import copy
import threading
from collections.abc import Iterable
from typing import Optional

from src.core.entities.application import AppStatus, StatusTransition, VerificationApplication
from src.core.entities.carrier import Carrier, CarrierType
from src.core.entities.common import utcnow
from src.core.entities.document import DocumentRecord
from src.core.errors import ConcurrencyConflict, NotFound
from src.core.interfaces.verification_repository import IVerificationRepository


class InMemoryVerificationRepository(IVerificationRepository):
    """Dict-backed repository. Returns copies so callers never alias stored state."""

    process_local = True

    def __init__(self):
        self._lock = threading.Lock()
        self._carriers: dict[str, Carrier] = {}
        self._applications: dict[str, VerificationApplication] = {}
        self._documents: dict[str, DocumentRecord] = {}
        self._transitions: list[StatusTransition] = []

    # ── Carriers ──

    def add_carrier(self, carrier: Carrier) -> Carrier:
        with self._lock:
            self._carriers[carrier.id] = copy.deepcopy(carrier)
        return carrier

    def get_carrier(self, carrier_id: str) -> Optional[Carrier]:
        with self._lock:
            carrier = self._carriers.get(carrier_id)
            return copy.deepcopy(carrier) if carrier else None

    def mark_carrier_listed(self, carrier_id: str) -> None:
        with self._lock:
            carrier = self._carriers.get(carrier_id)
            if carrier is None:
                raise NotFound(f"Carrier {carrier_id} not found", {"carrier_id": carrier_id})
            if not carrier.listed:
                carrier.listed = True
                carrier.listed_at = utcnow()

    # ── Applications ──

    def add_application(self, application: VerificationApplication) -> VerificationApplication:
        with self._lock:
            self._applications[application.id] = copy.deepcopy(application)
        return application

    def get_application(self, application_id: str) -> Optional[VerificationApplication]:
        with self._lock:
            app = self._applications.get(application_id)
            return copy.deepcopy(app) if app else None

    def get_current_application(self, carrier_id: str) -> Optional[VerificationApplication]:
        with self._lock:
            owned = [a for a in self._applications.values() if a.carrier_id == carrier_id]
            if not owned:
                return None
            # on equal created_at the last inserted wins
            latest = max(enumerate(owned), key=lambda pair: (pair[1].created_at, pair[0]))[1]
            return copy.deepcopy(latest)

    def update_application(
        self,
        application: VerificationApplication,
        expected_version: int,
        transition: StatusTransition | None = None,
    ) -> VerificationApplication:
        with self._lock:
            stored = self._applications.get(application.id)
            self._check_version(stored, application.id, expected_version)
            application.version = expected_version + 1
            self._applications[application.id] = copy.deepcopy(application)
            if transition is not None:
                self._transitions.append(copy.deepcopy(transition))
        return application

    def list_applications(
        self,
        statuses: Iterable[AppStatus] | None = None,
        carrier_type: CarrierType | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[VerificationApplication]:
        wanted = {AppStatus(s) for s in statuses} if statuses else None
        with self._lock:
            apps = [
                a for a in self._applications.values()
                if (wanted is None or a.status in wanted)
                and (carrier_type is None or a.carrier_type == CarrierType(carrier_type))
            ]
            apps.sort(key=lambda a: a.queue_key, reverse=True)
            return [copy.deepcopy(a) for a in apps[offset:offset + limit]]

    def count_by_status(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        with self._lock:
            for app in self._applications.values():
                counts[app.status.value] = counts.get(app.status.value, 0) + 1
        return counts

    def list_transitions(self, application_id: str) -> list[StatusTransition]:
        with self._lock:
            return [copy.deepcopy(t) for t in self._transitions if t.application_id == application_id]

    # ── Documents ──

    def add_document(self, document: DocumentRecord, supersedes: str | None = None) -> DocumentRecord:
        with self._lock:
            previous = self._documents.get(supersedes) if supersedes else None
            if previous is not None:
                previous.superseded_by = document.id
                previous.version += 1
            self._documents[document.id] = copy.deepcopy(document)
        return document

    def get_document(self, document_id: str) -> Optional[DocumentRecord]:
        with self._lock:
            doc = self._documents.get(document_id)
            return copy.deepcopy(doc) if doc else None

    def list_documents(self, application_id: str, include_superseded: bool = False) -> list[DocumentRecord]:
        with self._lock:
            docs = [
                d for d in self._documents.values()
                if d.application_id == application_id and (include_superseded or d.is_current)
            ]
            # dicts keep insertion order, so equal timestamps stay in upload order
            docs.sort(key=lambda d: d.uploaded_at)
            return [copy.deepcopy(d) for d in docs]

    def update_document(self, document: DocumentRecord, expected_version: int) -> DocumentRecord:
        with self._lock:
            stored = self._documents.get(document.id)
            self._check_version(stored, document.id, expected_version)
            document.version = expected_version + 1
            self._documents[document.id] = copy.deepcopy(document)
        return document

    @staticmethod
    def _check_version(stored, row_id: str, expected_version: int) -> None:
        if stored is None:
            raise NotFound(f"Record {row_id} not found", {"id": row_id})
        if stored.version != expected_version:
            raise ConcurrencyConflict(
                f"Stale write on {row_id}: expected version {expected_version}, found {stored.version}",
                {"id": row_id, "expected_version": expected_version, "current_version": stored.version},
            )
