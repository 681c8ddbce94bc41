"""
Contract: Verification Repository

Persistência de carriers, aplicações, documentos e trilha de auditoria.
Toda escrita de aplicação/documento é condicionada à versão lida
(concorrência otimista): versão divergente → ConcurrencyConflict.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from src.core.entities.application import AppStatus, StatusTransition, VerificationApplication
from src.core.entities.carrier import Carrier, CarrierType
from src.core.entities.document import DocumentRecord


class IVerificationRepository(ABC):
    """
    Port: Verification Repository

    Implementações: SQLAlchemy (SQLite/PostgreSQL) e memória.
    Métodos get_* retornam None quando o id não existe; a camada
    de use cases converte isso em NotFound.
    """

    # True quando todo escritor vive neste processo
    process_local = False

    # ── Carriers ──

    @abstractmethod
    def add_carrier(self, carrier: Carrier) -> Carrier:
        ...

    @abstractmethod
    def get_carrier(self, carrier_id: str) -> Carrier | None:
        ...

    @abstractmethod
    def mark_carrier_listed(self, carrier_id: str) -> None:
        ...

    # ── Applications ──

    @abstractmethod
    def add_application(self, application: VerificationApplication) -> VerificationApplication:
        ...

    @abstractmethod
    def get_application(self, application_id: str) -> VerificationApplication | None:
        ...

    @abstractmethod
    def get_current_application(self, carrier_id: str) -> VerificationApplication | None:
        """Aplicação mais recente do carrier (created_at; empate = última inserida)."""
        ...

    @abstractmethod
    def update_application(
        self,
        application: VerificationApplication,
        expected_version: int,
        transition: StatusTransition | None = None,
    ) -> VerificationApplication:
        """
        Grava a aplicação se a versão armazenada == expected_version.

        Args:
            application: Estado novo (version é ignorada na entrada).
            expected_version: Versão lida antes da mudança.
            transition: Linha de auditoria gravada na mesma transação.

        Returns:
            A aplicação com version = expected_version + 1.

        Raises:
            ConcurrencyConflict: se outra escrita aconteceu no meio.
        """
        ...

    @abstractmethod
    def list_applications(
        self,
        statuses: Iterable[AppStatus] | None = None,
        carrier_type: CarrierType | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[VerificationApplication]:
        """Fila do admin: submitted_at desc (ou created_at desc)."""
        ...

    @abstractmethod
    def count_by_status(self) -> dict[str, int]:
        ...

    @abstractmethod
    def list_transitions(self, application_id: str) -> list[StatusTransition]:
        ...

    # ── Documents ──

    @abstractmethod
    def add_document(self, document: DocumentRecord, supersedes: str | None = None) -> DocumentRecord:
        """Grava um upload; `supersedes` marca o registro anterior como substituído."""
        ...

    @abstractmethod
    def get_document(self, document_id: str) -> DocumentRecord | None:
        ...

    @abstractmethod
    def list_documents(self, application_id: str, include_superseded: bool = False) -> list[DocumentRecord]:
        """Documentos em ordem de upload (uploaded_at asc)."""
        ...

    @abstractmethod
    def update_document(self, document: DocumentRecord, expected_version: int) -> DocumentRecord:
        ...
