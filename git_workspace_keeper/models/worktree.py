"""Worktree data models."""

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class WorktreeInfo:
    """Snapshot of one entry in git's worktree registry."""

    path: str
    branch: str  # Empty for detached or bare worktrees
    head: str
    is_bare: bool = False
    is_main: bool = False  # First entry in the registry is the main working tree

    @property
    def is_orphaned(self) -> bool:
        """Directory missing from disk but still registered."""
        return not os.path.exists(self.path)

    def __str__(self) -> str:
        """String representation of worktree."""
        status = "orphaned" if self.is_orphaned else "active"
        main_marker = " (main)" if self.is_main else ""
        branch = self.branch or "(detached)"
        return f"{branch} @ {self.path}{main_marker} [{status}]"


@dataclass(frozen=True)
class WorktreeStatus:
    """File status flags of a worktree."""

    path: str
    modified: bool = False
    untracked: bool = False
    staged: bool = False

    @property
    def is_clean(self) -> bool:
        return not (self.modified or self.untracked or self.staged)
