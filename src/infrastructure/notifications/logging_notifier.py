"""
Adapter: Logging Notifier

Emits every domain event as a JSON line through the Python logger.
Gives observability without a broker; dashboards can tail the log.
"""

import json
import logging
from typing import Optional

from src.core.entities.events import DomainEvent, event_to_dict
from src.core.interfaces.notification_port import INotificationPort


class LoggingNotifier(INotificationPort):

    def __init__(self, logger: Optional[logging.Logger] = None, level: int | str = logging.INFO):
        self._logger = logger or logging.getLogger("carrier_verification.events")
        self._level = logging.getLevelName(level) if isinstance(level, str) else level

    def publish(self, event: DomainEvent) -> None:
        self._logger.log(self._level, json.dumps(event_to_dict(event), ensure_ascii=False))
