"""Severity of the notifications a session raises for its user."""

from enum import Enum
import logging


class SessionLogLevel(Enum):
    """
    How prominently a session notification should be shown.

    TRACE marks navigation chatter (the commit now on display), INFO reports
    completed actions and harmless refusals, WARN covers actions refused in
    the current mode, and ERROR means git or the filesystem failed.
    """
    TRACE = "trace"
    INFO = "info"
    WARN = "warning"
    ERROR = "error"

    def logging_level(self) -> int:
        """Standard library logging level the notification is mirrored at."""
        return _LOGGING_LEVELS[self]


_LOGGING_LEVELS = {
    SessionLogLevel.TRACE: logging.DEBUG,
    SessionLogLevel.INFO: logging.INFO,
    SessionLogLevel.WARN: logging.WARNING,
    SessionLogLevel.ERROR: logging.ERROR,
}
