"""
Adapter: Repository-backed Carrier Directory

Activation flips the carrier's `listed` flag in the carriers table,
which is what the public directory and the bidding pages read.
"""

import logging

from src.core.interfaces.carrier_directory import ICarrierDirectory
from src.core.interfaces.verification_repository import IVerificationRepository

logger = logging.getLogger(__name__)


class RepositoryCarrierDirectory(ICarrierDirectory):

    def __init__(self, repository: IVerificationRepository):
        self._repo = repository

    def activate(self, carrier_id: str, application_id: str) -> None:
        self._repo.mark_carrier_listed(carrier_id)
        logger.info(f"Carrier {carrier_id} listed in directory (application {application_id})")
