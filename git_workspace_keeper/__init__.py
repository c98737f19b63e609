"""
git-workspace-keeper - Isolated git worktrees for concurrent agent sessions
"""

from .__version__ import __version__
from .core import WorkspaceKeeper
from .exceptions import (
    BRANCH_ALREADY_EXISTS,
    BRANCH_CHECKED_OUT,
    WORKTREE_PATH_EXISTS,
    ClassifiedError,
    CommandError,
    WorkspaceKeeperError,
)

__all__ = [
    "WorkspaceKeeper",
    "ClassifiedError",
    "CommandError",
    "WorkspaceKeeperError",
    "WORKTREE_PATH_EXISTS",
    "BRANCH_CHECKED_OUT",
    "BRANCH_ALREADY_EXISTS",
    "__version__",
]
