"""
Contract: Notification Port

Sinaliza admins/carriers e invalida caches dependentes.
Entrega at-least-once: o consumidor deve ser idempotente.
"""

from abc import ABC, abstractmethod

from src.core.entities.events import DomainEvent


class INotificationPort(ABC):
    """
    Port: Change Notification

    Chamado somente depois do commit. Falhas de entrega
    nunca desfazem a transição.
    """

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        ...
