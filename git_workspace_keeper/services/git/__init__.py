"""Git-related services for git-workspace-keeper."""

from .branches import BranchQueries
from .default_branch import DefaultBranchResolver
from .pr_fetcher import PrBranchFetcher
from .provisioner import WorktreeProvisioner, worktree_path_for
from .worktrees import WorktreeService

__all__ = [
    "BranchQueries",
    "DefaultBranchResolver",
    "PrBranchFetcher",
    "WorktreeProvisioner",
    "WorktreeService",
    "worktree_path_for",
]
