from src.core.entities.events import DomainEvent
from src.core.interfaces.notification_port import INotificationPort


class InMemoryNotifier(INotificationPort):
    """Keeps published events in a list (useful for tests and the demo seed)."""

    def __init__(self) -> None:
        self.events: list[DomainEvent] = []

    def publish(self, event: DomainEvent) -> None:
        self.events.append(event)

    def of_kind(self, kind: str) -> list[DomainEvent]:
        return [e for e in self.events if e.kind == kind]

    def clear(self) -> None:
        self.events.clear()
