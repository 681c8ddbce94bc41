"""
Wiring — builds the use cases with concrete adapters.

Lazy singleton, like the rest of the API: the first request pays for
the construction, tests swap the whole container with `set_services`.
"""

import logging
import secrets
from dataclasses import dataclass
from typing import Optional

from fastapi import Header

from src.config.settings import get_settings
from src.core.concurrency import KeyedLock
from src.core.entities.common import Actor
from src.core.interfaces.notification_port import INotificationPort
from src.core.interfaces.requirement_registry import IRequirementRegistry
from src.core.interfaces.verification_repository import IVerificationRepository
from src.core.use_cases.decide_application import DecideApplicationUseCase, ReopenApplicationUseCase
from src.core.use_cases.decide_document import DecideDocumentUseCase
from src.core.use_cases.gating import GatingService
from src.core.use_cases.get_application import GetApplicationUseCase, ReviewQueueUseCase
from src.core.use_cases.start_application import (
    RegisterCarrierUseCase,
    SaveDraftUseCase,
    StartApplicationUseCase,
)
from src.core.use_cases.submit_application import SubmitApplicationUseCase
from src.core.use_cases.transition_engine import StatusTransitionEngine
from src.core.use_cases.upload_document import UploadDocumentUseCase
from src.infrastructure.directory.repository_directory import RepositoryCarrierDirectory
from src.infrastructure.notifications.composite_notifier import CompositeNotifier
from src.infrastructure.notifications.logging_notifier import LoggingNotifier
from src.infrastructure.rules.document_requirements import StaticRequirementRegistry

logger = logging.getLogger(__name__)


@dataclass
class Services:
    repository: IVerificationRepository
    registry: IRequirementRegistry
    notifier: INotificationPort
    gating: GatingService
    engine: StatusTransitionEngine
    register_carrier: RegisterCarrierUseCase
    start_application: StartApplicationUseCase
    save_draft: SaveDraftUseCase
    upload_document: UploadDocumentUseCase
    submit_application: SubmitApplicationUseCase
    decide_application: DecideApplicationUseCase
    reopen_application: ReopenApplicationUseCase
    decide_document: DecideDocumentUseCase
    get_application: GetApplicationUseCase
    review_queue: ReviewQueueUseCase


def build_services(
    repository: IVerificationRepository,
    notifier: INotificationPort,
    registry: Optional[IRequirementRegistry] = None,
    gating_cache_enabled: bool = True,
    clock=None,
) -> Services:
    """Factory — one engine (and one lock table) per repository."""
    registry = registry or StaticRequirementRegistry()
    gating = GatingService(repository, cache_enabled=gating_cache_enabled)
    engine_kwargs = {"clock": clock} if clock is not None else {}
    engine = StatusTransitionEngine(
        repository=repository,
        notifier=notifier,
        gating=gating,
        directory=RepositoryCarrierDirectory(repository),
        locks=KeyedLock(),
        **engine_kwargs,
    )
    return Services(
        repository=repository,
        registry=registry,
        notifier=notifier,
        gating=gating,
        engine=engine,
        register_carrier=RegisterCarrierUseCase(repository),
        start_application=StartApplicationUseCase(repository, engine),
        save_draft=SaveDraftUseCase(repository, engine),
        upload_document=UploadDocumentUseCase(repository, registry, engine),
        submit_application=SubmitApplicationUseCase(repository, registry, engine),
        decide_application=DecideApplicationUseCase(engine),
        reopen_application=ReopenApplicationUseCase(engine),
        decide_document=DecideDocumentUseCase(repository, engine),
        get_application=GetApplicationUseCase(repository, registry),
        review_queue=ReviewQueueUseCase(repository),
    )


# ── Singleton ──
_services: Optional[Services] = None


def _default_repository() -> IVerificationRepository:
    settings = get_settings()
    if settings.storage_backend == "memory":
        from src.infrastructure.db.memory_repository import InMemoryVerificationRepository
        logger.info("Using in-memory verification repository")
        return InMemoryVerificationRepository()

    from src.infrastructure.db.repository import SqlVerificationRepository
    return SqlVerificationRepository()


def get_services() -> Services:
    """Get or create the global service container."""
    global _services
    if _services is None:
        settings = get_settings()
        notifier = CompositeNotifier([LoggingNotifier(level=settings.notification_log_level.upper())])
        _services = build_services(
            repository=_default_repository(),
            notifier=notifier,
            gating_cache_enabled=settings.gating_cache_enabled,
        )
    return _services


def set_services(services: Optional[Services]) -> None:
    global _services
    _services = services


# ── Actor ──

def get_actor(
    x_actor_id: Optional[str] = Header(default=None),
    x_admin_key: Optional[str] = Header(default=None),
) -> Actor:
    """
    Quem está chamando. Sem X-Actor-Id o ator é anônimo (e não é dono
    de nenhum carrier); X-Admin-Key válida concede o papel de admin.
    Sem admin_api_key configurada ninguém é admin pela API.
    """
    actor_id = (x_actor_id or "").strip() or "anonymous"
    admin_key = get_settings().admin_api_key
    if admin_key and x_admin_key and secrets.compare_digest(x_admin_key.encode(), admin_key.encode()):
        return Actor(id=actor_id, role="admin")
    return Actor(id=actor_id)
