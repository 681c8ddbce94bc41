"""
Use Case: Carrier onboarding — cadastro, rascunho e edição do rascunho.
"""

import logging

from src.core.entities.application import (
    EDITABLE_STATUSES,
    DETAILS_BY_TYPE,
    VerificationApplication,
    details_for,
)
from src.core.entities.carrier import Carrier, CarrierType
from src.core.entities.common import Actor
from src.core.errors import InvalidTransition, NotFound, PermissionDenied, ValidationError
from src.core.interfaces.verification_repository import IVerificationRepository
from src.core.use_cases.transition_engine import StatusTransitionEngine

logger = logging.getLogger(__name__)


def ensure_owner_or_admin(actor: Actor, carrier_id: str) -> None:
    if actor.is_admin or actor.id == carrier_id:
        return
    raise PermissionDenied(
        f"Actor {actor.id} cannot act on behalf of carrier {carrier_id}",
        {"actor_id": actor.id, "carrier_id": carrier_id},
    )


class RegisterCarrierUseCase:

    def __init__(self, repository: IVerificationRepository):
        self._repo = repository

    def execute(
        self,
        carrier_type: str | None = None,
        fleet_size: int = 1,
        name: str = "",
        company_name: str = "",
        email: str = "",
        phone: str | None = None,
        carrier_id: str | None = None,
    ) -> Carrier:
        if fleet_size is None or fleet_size < 1:
            raise ValidationError("fleet_size must be >= 1", {"field": "fleet_size"})
        try:
            ctype = CarrierType(carrier_type) if carrier_type else None
        except ValueError:
            raise ValidationError(f"Unknown carrier_type '{carrier_type}'", {"field": "carrier_type"})

        carrier = Carrier(
            carrier_type=ctype,
            fleet_size=fleet_size,
            name=name,
            company_name=company_name,
            email=email,
            phone=phone,
        )
        if carrier_id:
            if self._repo.get_carrier(carrier_id) is not None:
                raise ValidationError(f"Carrier {carrier_id} already exists", {"carrier_id": carrier_id})
            carrier.id = carrier_id
        return self._repo.add_carrier(carrier)


class StartApplicationUseCase:
    """
    Cria a aplicação em `draft`.

    Um carrier tem no máximo uma aplicação ativa; depois de uma
    rejeição ele começa outra (a rejeitada fica como histórico).
    """

    def __init__(self, repository: IVerificationRepository, engine: StatusTransitionEngine):
        self._repo = repository
        self._engine = engine

    def execute(
        self,
        carrier_id: str,
        actor: Actor,
        carrier_type: str | None = None,
        details: dict | None = None,
    ) -> VerificationApplication:
        ensure_owner_or_admin(actor, carrier_id)
        carrier = self._repo.get_carrier(carrier_id)
        if carrier is None:
            raise NotFound(f"Carrier {carrier_id} not found", {"carrier_id": carrier_id})

        try:
            ctype = CarrierType(carrier_type) if carrier_type else carrier.resolved_type
        except ValueError:
            raise ValidationError(f"Unknown carrier_type '{carrier_type}'", {"field": "carrier_type"})

        with self._engine.locked(f"carrier:{carrier_id}"):
            current = self._repo.get_current_application(carrier_id)
            if current is not None and current.is_active:
                raise InvalidTransition(
                    f"Carrier {carrier_id} already has an active application ({current.status.value})",
                    {"carrier_id": carrier_id, "application_id": current.id, "status": current.status.value},
                )
            app = VerificationApplication(
                carrier_id=carrier_id,
                carrier_type=ctype,
                details=details_for(ctype, details),
                created_at=self._engine.clock(),
            )
            self._repo.add_application(app)
        logger.info(f"Carrier {carrier_id} started application {app.id} [{ctype.value}]")
        return app


class SaveDraftUseCase:
    """Substitui os campos estruturados enquanto a aplicação está editável."""

    def __init__(self, repository: IVerificationRepository, engine: StatusTransitionEngine):
        self._repo = repository
        self._engine = engine

    def execute(
        self,
        application_id: str,
        details: dict,
        actor: Actor,
        carrier_type: str | None = None,
        expected_version: int | None = None,
    ) -> VerificationApplication:
        with self._engine.locked(application_id):
            app = self._engine.load(application_id)
            ensure_owner_or_admin(actor, app.carrier_id)
            if carrier_type and carrier_type != app.carrier_type.value:
                raise ValidationError(
                    f"Details for '{carrier_type}' do not match application type '{app.carrier_type.value}'",
                    {"field": "carrier_type"},
                )
            if app.status not in EDITABLE_STATUSES:
                raise InvalidTransition(
                    f"Application {app.id} is not editable in status '{app.status.value}'",
                    {"application_id": app.id, "status": app.status.value},
                )
            app.details = DETAILS_BY_TYPE[app.carrier_type].from_dict(details)
            saved = self._repo.update_application(
                app, app.version if expected_version is None else expected_version,
            )
        logger.info(f"Draft details saved for application {application_id}")
        return saved
