"""Provisioning progress models."""

from dataclasses import dataclass
from enum import Enum


class ProvisioningStage(str, Enum):
    """Stages of worktree provisioning, in the order they run."""

    PRUNE_WORKTREES = "prune-worktrees"
    FETCH_ORIGIN = "fetch-origin"
    RESOLVE_DEFAULT_BRANCH = "resolve-default-branch"
    PREPARE_WORKTREE_DIR = "prepare-worktree-dir"
    INSPECT_BRANCH = "inspect-branch"
    CREATE_WORKTREE = "create-worktree"
    SYNC_BRANCH = "sync-branch"
    COPY_ENV_FILES = "copy-env-files"

    def __str__(self) -> str:
        return self.value


STAGE_MESSAGES = {
    ProvisioningStage.PRUNE_WORKTREES: "Pruning stale worktrees...",
    ProvisioningStage.FETCH_ORIGIN: "Fetching latest from origin...",
    ProvisioningStage.RESOLVE_DEFAULT_BRANCH: "Resolving default branch...",
    ProvisioningStage.PREPARE_WORKTREE_DIR: "Preparing worktree directory...",
    ProvisioningStage.INSPECT_BRANCH: "Inspecting branch...",
    ProvisioningStage.CREATE_WORKTREE: "Creating worktree...",
    ProvisioningStage.SYNC_BRANCH: "Syncing branch with remote...",
    ProvisioningStage.COPY_ENV_FILES: "Copying .env files...",
}


@dataclass(frozen=True)
class ProvisioningProgress:
    """A single stage transition reported to a progress sink."""

    stage: ProvisioningStage
    message: str
