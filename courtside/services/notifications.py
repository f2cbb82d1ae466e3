"""User-facing notifications (toasts) for the Courtside rotation tracker."""

import logging
from dataclasses import asdict, dataclass
from typing import Dict, List, Optional, Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    """A success or error message shown to the user."""
    title: str
    description: Optional[str] = None
    variant: str = "default"

    @property
    def is_error(self) -> bool:
        return self.variant == "destructive"

    def to_dict(self) -> Dict[str, Optional[str]]:
        return asdict(self)


class Notifier(Protocol):
    """Fire-and-forget sink for notifications."""

    def notify(self, notification: Notification) -> None:
        ...


class LoggingNotifier:
    """Writes notifications to the application log."""

    def notify(self, notification: Notification) -> None:
        level = logging.ERROR if notification.is_error else logging.INFO
        logger.log(level, "%s%s", notification.title,
                   f": {notification.description}" if notification.description else "")


class CollectingNotifier:
    """Buffers notifications so a request handler can return them with its response."""

    def __init__(self) -> None:
        self._items: List[Notification] = []

    def notify(self, notification: Notification) -> None:
        self._items.append(notification)
        LoggingNotifier().notify(notification)

    def drain(self) -> List[Notification]:
        items, self._items = self._items, []
        return items


def success(title: str, description: Optional[str] = None) -> Notification:
    return Notification(title=title, description=description)


def error(title: str, description: Optional[str] = None) -> Notification:
    return Notification(title=title, description=description, variant="destructive")
