"""
Use Case: Decide Application

Decisão do admin sobre a aplicação como um todo. É sempre uma ação
explícita — decisões por documento nunca mudam o status daqui.
"""

from enum import Enum

from src.core.entities.application import AppAction, AppStatus
from src.core.entities.common import Actor
from src.core.errors import ValidationError
from src.core.use_cases.transition_engine import StatusTransitionEngine


class AppDecision(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"
    HOLD = "hold"
    START_REVIEW = "start_review"


class DecideApplicationUseCase:

    def __init__(self, engine: StatusTransitionEngine):
        self._engine = engine

    def execute(
        self,
        application_id: str,
        decision: AppDecision | str,
        actor: Actor,
        reason: str | None = None,
        expected_version: int | None = None,
    ) -> AppStatus:
        try:
            decision = AppDecision(decision)
        except ValueError:
            raise ValidationError(f"Unknown decision '{decision}'", {"field": "decision"})

        app = self._engine.apply(
            application_id,
            AppAction(decision.value),
            actor,
            note=reason,
            expected_version=expected_version,
        )
        return app.status


class ReopenApplicationUseCase:
    """on_hold → pending: a aplicação volta para o topo da fila."""

    def __init__(self, engine: StatusTransitionEngine):
        self._engine = engine

    def execute(self, application_id: str, actor: Actor, expected_version: int | None = None) -> AppStatus:
        app = self._engine.apply(application_id, AppAction.REOPEN, actor, expected_version=expected_version)
        return app.status
