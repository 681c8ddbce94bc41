"""
Use Case: Submit Application

draft → pending, desde que cada tipo obrigatório para o carrier_type
tenha ao menos um registro atual — qualquer status conta. Só a
presença é checada aqui; aprovação é decisão do admin.
"""

from src.core.entities.application import AppAction, VerificationApplication
from src.core.entities.common import Actor
from src.core.errors import IncompleteDocuments, NotFound
from src.core.interfaces.requirement_registry import IRequirementRegistry
from src.core.interfaces.verification_repository import IVerificationRepository
from src.core.use_cases.start_application import ensure_owner_or_admin
from src.core.use_cases.transition_engine import StatusTransitionEngine


class SubmitApplicationUseCase:

    def __init__(
        self,
        repository: IVerificationRepository,
        registry: IRequirementRegistry,
        engine: StatusTransitionEngine,
    ):
        self._repo = repository
        self._registry = registry
        self._engine = engine

    def execute(self, carrier_id: str, actor: Actor, expected_version: int | None = None) -> str:
        """
        Submete a aplicação atual do carrier.

        Returns:
            application_id.

        Raises:
            NotFound: carrier sem aplicação.
            IncompleteDocuments: faltam tipos obrigatórios.
            InvalidTransition: aplicação fora de `draft`.
        """
        ensure_owner_or_admin(actor, carrier_id)
        current = self._repo.get_current_application(carrier_id)
        if current is None:
            raise NotFound(f"Carrier {carrier_id} has no application", {"carrier_id": carrier_id})

        app = self._engine.apply(
            current.id,
            AppAction.SUBMIT,
            actor,
            expected_version=expected_version,
            guard=self._require_documents,
        )
        return app.id

    def _require_documents(self, app: VerificationApplication) -> None:
        present = [d.document_type for d in self._repo.list_documents(app.id)]
        missing = self._registry.missing_types(app.carrier_type, present)
        if missing:
            raise IncompleteDocuments(missing, {"application_id": app.id})
