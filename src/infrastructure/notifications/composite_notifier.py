import logging

from src.core.entities.events import DomainEvent
from src.core.interfaces.notification_port import INotificationPort

logger = logging.getLogger(__name__)


class CompositeNotifier(INotificationPort):
    """
    Fan events out to multiple subscribers.

    A failing subscriber is logged and skipped; the others still receive
    the event and the committed transition is never affected.
    """

    def __init__(self, subscribers: list[INotificationPort]):
        self._subscribers = [s for s in subscribers if s is not None]

    def subscribe(self, subscriber: INotificationPort) -> None:
        self._subscribers.append(subscriber)

    def publish(self, event: DomainEvent) -> None:
        for subscriber in self._subscribers:
            try:
                subscriber.publish(event)
            except Exception as e:
                logger.warning(f"Notification subscriber {type(subscriber).__name__} failed on {event.kind}: {e}")
