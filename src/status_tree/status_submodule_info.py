from dataclasses import dataclass, field
from enum import Enum
from typing import Dict

from status_tree.status_code import StatusCode


class SubmoduleHeadStatus(Enum):
    """State of a submodule's checkout relative to the commit recorded by its parent."""
    UNCHANGED = " "
    HEAD_DIFFERS = "+"
    UNINITIALIZED = "-"
    CONFLICTED = "U"


@dataclass
class SubmoduleInfo:
    """A submodule and the changes inside it."""
    path: str  # Relative to the parent repository root
    head_status: SubmoduleHeadStatus
    sha: str
    is_dirty: bool = False
    changed_files: Dict[str, StatusCode] = field(default_factory=dict)  # Keyed by absolute path
