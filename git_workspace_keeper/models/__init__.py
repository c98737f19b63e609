"""Data models for git-workspace-keeper."""

from .progress import ProvisioningProgress, ProvisioningStage, STAGE_MESSAGES
from .workspace import Project, Workspace
from .worktree import WorktreeInfo, WorktreeStatus

__all__ = [
    "ProvisioningProgress",
    "ProvisioningStage",
    "STAGE_MESSAGES",
    "Project",
    "Workspace",
    "WorktreeInfo",
    "WorktreeStatus",
]
