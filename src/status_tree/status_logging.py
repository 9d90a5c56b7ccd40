"""Log file setup for applications that embed status sessions."""

from datetime import datetime, timezone
import glob
import logging
from logging.handlers import RotatingFileHandler
import os


LOG_FILE_PREFIX = "diffwatch-"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(
    log_dir: str,
    level: int = logging.DEBUG,
    max_logs: int = 50,
    max_bytes: int = 1024 * 1024
) -> str:
    """
    Send all loggers to a new rotating log file.

    Each run gets its own `diffwatch-<UTC timestamp>.log`; only diffwatch logs
    are pruned, so the directory can be shared with the host application.

    Args:
        log_dir: Directory for log files, created if missing
        level: Root logger level
        max_logs: Number of log files (rotated backups included) to keep
        max_bytes: Size at which the current file rotates

    Returns:
        Path of the new log file
    """
    os.makedirs(log_dir, exist_ok=True)

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d-%H-%M-%S-%f")[:23]
    log_file = os.path.join(log_dir, f"{LOG_FILE_PREFIX}{timestamp}.log")

    handler = RotatingFileHandler(
        log_file,
        maxBytes=max_bytes,
        backupCount=max(max_logs - 1, 0),
        encoding='utf-8'
    )

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=[handler])

    cleanup_old_logs(log_dir, max_logs=max_logs)
    return log_file


def cleanup_old_logs(log_dir: str, max_logs: int) -> None:
    """Delete the least recently written diffwatch logs beyond max_logs."""
    log_files = glob.glob(os.path.join(log_dir, f"{LOG_FILE_PREFIX}*.log*"))
    log_files.sort(key=os.path.getmtime)

    for path in log_files[:max(len(log_files) - max_logs, 0)]:
        try:
            os.remove(path)

        except FileNotFoundError:
            continue  # Removed by a concurrent cleanup
