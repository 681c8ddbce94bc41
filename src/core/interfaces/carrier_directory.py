"""
Contract: Carrier Directory

Diretório público de carriers. Na aprovação, o motor ativa o
carrier — a partir daí ele aparece na busca e pode dar lances.
"""

from abc import ABC, abstractmethod


class ICarrierDirectory(ABC):
    """Port: Carrier Directory (efeito colateral externo)."""

    @abstractmethod
    def activate(self, carrier_id: str, application_id: str) -> None:
        ...
