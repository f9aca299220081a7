import logging
from dataclasses import dataclass, asdict, field
from datetime import datetime, timezone
from typing import List

logger = logging.getLogger(__name__)


@dataclass
class Notification:
    """A user-facing message the client shows as a toast."""

    title: str
    description: str = ""
    variant: str = "default"  # default | destructive
    created_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> dict:
        return asdict(self)


class NotificationQueue:
    """Per-workspace queue drained by the client."""

    def __init__(self) -> None:
        self._items: List[Notification] = []

    def push(self, title: str, description: str = "", variant: str = "default") -> Notification:
        note = Notification(title=title, description=description, variant=variant)
        self._items.append(note)
        logger.info("notifications: [%s] %s - %s", variant, title, description)
        return note

    def drain(self) -> List[Notification]:
        items, self._items = self._items, []
        return items

    def peek(self) -> List[Notification]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)
