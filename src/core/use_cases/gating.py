"""
Use Case: Gating — "este carrier pode negociar no marketplace?"

Único ponto de acoplamento que o resto da plataforma (postagem de
cargas, lances) pode consultar. Nunca olha detalhes de documentos.
"""

import logging
import threading

from src.core.entities.application import AppStatus
from src.core.interfaces.verification_repository import IVerificationRepository

logger = logging.getLogger(__name__)


class GatingService:
    """
    can_transact(carrier_id) == True sse a aplicação atual está `approved`.

    Cache em processo, invalidado de forma síncrona pelo motor de
    transições antes de qualquer notificação. Só é usado quando o
    repositório é local ao processo (`process_local`): com um banco
    compartilhado, outro worker pode aprovar sem passar por este motor,
    então toda consulta vai ao banco.

    Um contador de geração por carrier impede que uma leitura concorrente
    com a invalidação grave de volta um valor velho. Carriers sem
    aplicação não entram no cache.
    """

    def __init__(self, repository: IVerificationRepository, cache_enabled: bool = True):
        self._repo = repository
        self._cache_enabled = cache_enabled and repository.process_local
        self._lock = threading.Lock()
        self._cache: dict[str, bool] = {}
        self._generation: dict[str, int] = {}

    @property
    def cache_enabled(self) -> bool:
        return self._cache_enabled

    def can_transact(self, carrier_id: str) -> bool:
        if self._cache_enabled:
            with self._lock:
                if carrier_id in self._cache:
                    return self._cache[carrier_id]
                generation = self._generation.get(carrier_id, 0)

        app = self._repo.get_current_application(carrier_id)
        if app is None:
            return False
        allowed = app.status == AppStatus.APPROVED

        if self._cache_enabled:
            with self._lock:
                if self._generation.get(carrier_id, 0) == generation:
                    self._cache[carrier_id] = allowed
        return allowed

    def invalidate(self, carrier_id: str) -> None:
        if not self._cache_enabled:
            return
        with self._lock:
            self._cache.pop(carrier_id, None)
            self._generation[carrier_id] = self._generation.get(carrier_id, 0) + 1
        logger.debug(f"Gating cache invalidated for carrier {carrier_id}")
