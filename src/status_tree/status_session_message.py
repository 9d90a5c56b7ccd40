"""Notifications raised by a status session."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict
import uuid

from status_tree.status_session_log_level import SessionLogLevel


@dataclass
class SessionMessage:
    """
    One notification in a session's history.

    Messages are what a front end shows in its status line: failed builds,
    refused hunk actions, the commit currently on display. `session_id` ties
    each one to the session that raised it so several open views can share a
    single message pane.
    """
    message_id: str
    level: SessionLogLevel
    content: str
    timestamp: datetime
    session_id: str = ""

    @classmethod
    def create(
        cls,
        level: SessionLogLevel,
        content: str,
        timestamp: datetime | None = None,
        session_id: str = ""
    ) -> 'SessionMessage':
        """Create a message with a fresh id, stamped now (UTC) unless told otherwise."""
        return cls(
            message_id=str(uuid.uuid4()),
            level=level,
            content=content,
            timestamp=timestamp or datetime.now(timezone.utc),
            session_id=session_id
        )

    def is_problem(self) -> bool:
        """Check whether the message reports a refusal or a failure."""
        return self.level in (SessionLogLevel.WARN, SessionLogLevel.ERROR)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "messageId": self.message_id,
            "sessionId": self.session_id,
            "level": self.level.value,
            "content": self.content,
            "timestamp": self.timestamp.isoformat()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SessionMessage':
        return cls(
            message_id=data["messageId"],
            level=SessionLogLevel(data["level"]),
            content=data["content"],
            timestamp=datetime.fromisoformat(data["timestamp"]),
            session_id=data.get("sessionId", "")
        )
