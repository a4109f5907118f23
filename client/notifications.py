# =============================================================================
# client/notifications.py - Transient Operator Notices
# =============================================================================
# Views and forms report outcomes here instead of raising: a successful
# save pushes a success notice, a failed remote call pushes an error
# notice. A UI layer drains the board and shows each notice as a toast.
# =============================================================================

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

logger = logging.getLogger(__name__)


class NoticeLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    level: NoticeLevel
    title: str
    message: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class NoticeBoard:
    """Ordered list of notices not yet shown."""

    def __init__(self):
        self.notices: list[Notice] = []

    def success(self, title: str, message: str = "") -> Notice:
        return self.push(Notice(NoticeLevel.SUCCESS, title, message))

    def error(self, title: str, message: str = "") -> Notice:
        return self.push(Notice(NoticeLevel.ERROR, title, message))

    def push(self, notice: Notice) -> Notice:
        if notice.level == NoticeLevel.ERROR:
            logger.warning(f"{notice.title}: {notice.message}")
        else:
            logger.info(f"{notice.title}: {notice.message}")
        self.notices.append(notice)
        return notice

    def drain(self) -> list[Notice]:
        """Return pending notices and clear the board."""
        notices, self.notices = self.notices, []
        return notices

    def clear(self) -> None:
        self.notices.clear()

    @property
    def latest(self) -> Notice | None:
        return self.notices[-1] if self.notices else None
