"""
Repository status trees kept in sync with git.

Builds trees of files annotated with their status against a ref, keeps them
current by polling, and ties it together with history navigation and hunk
actions in a Session.
"""

from status_tree.status_change_detector import (
    ChangeDetector,
    ChangeDetectorEvent,
    hash_status,
    hash_submodules,
)
from status_tree.status_code import StatusCode
from status_tree.status_history import (
    HistoryCommit,
    HistoryCursor,
    HistoryMode,
    HistoryNavigator,
    HistoryStep,
)
from status_tree.status_logging import cleanup_old_logs, setup_logging
from status_tree.status_node import StatusNode
from status_tree.status_parser import parse_name_status, parse_porcelain_status
from status_tree.status_session import Session, SessionEvent
from status_tree.status_session_log_level import SessionLogLevel
from status_tree.status_session_message import SessionMessage
from status_tree.status_submodule_info import SubmoduleHeadStatus, SubmoduleInfo
from status_tree.status_submodule_scanner import SubmoduleScanner
from status_tree.status_tree import StatusTree
from status_tree.status_tree_builder import StatusTreeBuilder
from status_tree.status_tree_error import StatusTreeBuildError, StatusTreeError
from status_tree.status_tree_settings import StatusTreeSettings

__all__ = [
    # Exceptions
    'StatusTreeError',
    'StatusTreeBuildError',
    # Types
    'StatusCode',
    'StatusNode',
    'SubmoduleHeadStatus',
    'SubmoduleInfo',
    'HistoryMode',
    'HistoryCursor',
    'HistoryCommit',
    'HistoryStep',
    'SessionLogLevel',
    'SessionMessage',
    'StatusTreeSettings',
    'ChangeDetectorEvent',
    'SessionEvent',
    # Core classes
    'StatusTree',
    'StatusTreeBuilder',
    'SubmoduleScanner',
    'ChangeDetector',
    'HistoryNavigator',
    'Session',
    # Functions
    'parse_porcelain_status',
    'parse_name_status',
    'hash_status',
    'hash_submodules',
    'setup_logging',
    'cleanup_old_logs',
]
