"""
Use Case: Status Transition Engine

Aplica a tabela de transições do agregado VerificationApplication:
quem pode agir, o que é exigido, o que fica registrado.

Ordem de cada transição:
  1. Validação (ator, texto obrigatório) — antes de qualquer leitura
  2. Lock por aplicação + leitura + guarda
  3. Escrita condicionada à versão lida (+ linha de auditoria)
  4. Invalidação síncrona do gating
  5. Notificações e ativação no diretório (falhas não desfazem nada)
"""

import logging
from collections.abc import Callable
from contextlib import contextmanager
from datetime import datetime

from src.core.concurrency import KeyedLock
from src.core.entities.application import (
    ACTION_TARGET,
    ADMIN_ACTIONS,
    AppAction,
    AppStatus,
    StatusTransition,
    VerificationApplication,
    next_status,
)
from src.core.entities.common import Actor, utcnow
from src.core.entities.events import ApplicationStatusChanged, CarrierActivated, DomainEvent
from src.core.errors import ConcurrencyConflict, InvalidTransition, NotFound, PermissionDenied, ValidationError
from src.core.interfaces.carrier_directory import ICarrierDirectory
from src.core.interfaces.notification_port import INotificationPort
from src.core.interfaces.verification_repository import IVerificationRepository
from src.core.use_cases.gating import GatingService

logger = logging.getLogger(__name__)

# Ações que exigem texto (motivo / notas)
TEXT_REQUIRED = {
    AppAction.REJECT: "rejection_reason",
    AppAction.HOLD: "hold_notes",
}

Guard = Callable[[VerificationApplication], None]


def clean_text(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class StatusTransitionEngine:
    """
    Motor de transições de status.

    Dependency Injection: repositório, porta de notificação, gating e
    diretório vêm pelo construtor. O diretório é opcional.
    """

    def __init__(
        self,
        repository: IVerificationRepository,
        notifier: INotificationPort,
        gating: GatingService,
        directory: ICarrierDirectory | None = None,
        locks: KeyedLock | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._repo = repository
        self._notifier = notifier
        self._gating = gating
        self._directory = directory
        self._locks = locks or KeyedLock()
        self.clock = clock

    @contextmanager
    def locked(self, application_id: str):
        """Serializa todas as escritas de uma aplicação (e dos seus documentos)."""
        with self._locks.hold(application_id):
            yield

    def load(self, application_id: str) -> VerificationApplication:
        app = self._repo.get_application(application_id)
        if app is None:
            raise NotFound(f"Application {application_id} not found", {"application_id": application_id})
        return app

    def apply(
        self,
        application_id: str,
        action: AppAction | str,
        actor: Actor,
        note: str | None = None,
        expected_version: int | None = None,
        guard: Guard | None = None,
    ) -> VerificationApplication:
        """
        Executa uma ação sobre a aplicação.

        Args:
            application_id: Aplicação alvo.
            action: submit | start_review | approve | reject | hold | reopen.
            actor: Quem age (ações de admin exigem role="admin").
            note: Motivo da rejeição / notas do hold.
            expected_version: Versão que o chamador leu (opcional).
            guard: Checagem extra feita dentro do lock (ex: documentos).

        Returns:
            A aplicação após a transição (ou inalterada, se no-op).

        Raises:
            PermissionDenied, ValidationError, NotFound,
            ConcurrencyConflict, InvalidTransition.
        """
        action = AppAction(action)
        if action in ADMIN_ACTIONS and not actor.is_admin:
            raise PermissionDenied(
                f"Action '{action.value}' requires an admin",
                {"actor_id": actor.id, "action": action.value},
            )

        note = clean_text(note)
        if action in TEXT_REQUIRED and note is None:
            field_name = TEXT_REQUIRED[action]
            raise ValidationError(f"{field_name} is required to {action.value}", {"field": field_name})

        with self.locked(application_id):
            app = self.load(application_id)
            read_version = app.version
            if expected_version is not None and expected_version != read_version:
                raise ConcurrencyConflict(
                    f"Application {application_id} changed: expected version {expected_version}, found {read_version}",
                    {"application_id": application_id, "expected_version": expected_version,
                     "current_version": read_version},
                )

            # Mesma ação repetida sem mudança no meio: no-op
            if app.status == ACTION_TARGET[action]:
                logger.debug(f"Application {app.id} already {app.status.value}; '{action.value}' is a no-op")
                return app

            to_status = next_status(app.status, action)
            if to_status is None:
                raise InvalidTransition(
                    f"Cannot {action.value} an application in status '{app.status.value}'",
                    {"application_id": app.id, "status": app.status.value, "action": action.value},
                )
            if guard is not None:
                guard(app)

            from_status = app.status
            now = self.clock()
            self._mutate(app, action, to_status, actor, note, now)
            transition = StatusTransition(
                application_id=app.id,
                action=action,
                from_status=from_status,
                to_status=to_status,
                actor_id=actor.id,
                note=note,
                occurred_at=now,
            )
            app = self._repo.update_application(app, read_version, transition)
            logger.info(
                f"Application {app.id}: {from_status.value} -> {to_status.value} "
                f"({action.value} by {actor.id})"
            )

            self._gating.invalidate(app.carrier_id)
            self.notify(ApplicationStatusChanged(
                application_id=app.id,
                carrier_id=app.carrier_id,
                from_status=from_status.value,
                to_status=to_status.value,
                actor_id=actor.id,
                occurred_at=now,
            ))
            if to_status == AppStatus.APPROVED:
                self._activate(app, now)
        return app

    @staticmethod
    def _mutate(
        app: VerificationApplication,
        action: AppAction,
        to_status: AppStatus,
        actor: Actor,
        note: str | None,
        now: datetime,
    ) -> None:
        app.status = to_status
        if action in (AppAction.SUBMIT, AppAction.REOPEN):
            # reopen volta para o topo da fila
            app.submitted_at = now
        if action in ADMIN_ACTIONS:
            app.reviewed_by = actor.id
            app.reviewed_at = now
        app.rejection_reason = note if action == AppAction.REJECT else None
        app.hold_notes = note if action == AppAction.HOLD else None

    def notify(self, event: DomainEvent) -> None:
        """Publica após o commit; falha de entrega só gera log."""
        try:
            self._notifier.publish(event)
        except Exception as e:
            logger.warning(f"Failed to publish {event.kind}: {e}")

    def _activate(self, app: VerificationApplication, now: datetime) -> None:
        if self._directory is not None:
            try:
                self._directory.activate(app.carrier_id, app.id)
            except Exception as e:
                logger.warning(f"Directory activation failed for carrier {app.carrier_id}: {e}")
        self.notify(CarrierActivated(carrier_id=app.carrier_id, application_id=app.id, occurred_at=now))
