"""Worktree registry operations for git-workspace-keeper."""

import asyncio
import os
from typing import Any, Dict, Iterable

from git_workspace_keeper.exceptions import CommandError
from git_workspace_keeper.logging_config import get_logger
from git_workspace_keeper.models.worktree import WorktreeInfo, WorktreeStatus
from git_workspace_keeper.services.command_runner import CommandRunner
from git_workspace_keeper.services.error_classifier import classify_command_error

logger = get_logger(__name__)


def parse_worktree_porcelain(output: str) -> list[WorktreeInfo]:
    """Parse ``git worktree list --porcelain`` output.

    Format (blank line between worktrees)::

        worktree /path/to/worktree
        HEAD commit_sha
        branch refs/heads/branch-name
    """
    worktrees: list[WorktreeInfo] = []
    for block in output.strip().split("\n\n"):
        entry: Dict[str, Any] = {"branch": "", "head": "", "is_bare": False}
        for line in block.split("\n"):
            line = line.strip()
            if line.startswith("worktree "):
                entry["path"] = line[len("worktree "):]
            elif line.startswith("HEAD "):
                entry["head"] = line[len("HEAD "):]
            elif line.startswith("branch "):
                branch_ref = line[len("branch "):]
                if branch_ref.startswith("refs/heads/"):
                    branch_ref = branch_ref[len("refs/heads/"):]
                entry["branch"] = branch_ref
            elif line == "bare":
                entry["is_bare"] = True
            elif line == "detached":
                entry["branch"] = ""

        if entry.get("path"):
            worktrees.append(WorktreeInfo(
                path=entry["path"],
                branch=entry["branch"],
                head=entry["head"],
                is_bare=entry["is_bare"],
                is_main=not worktrees,
            ))
    return worktrees


def parse_status_porcelain(path: str, output: str) -> WorktreeStatus:
    """Reduce ``git status --porcelain`` output to modified/untracked/staged flags."""
    has_modified = False
    has_untracked = False
    has_staged = False

    for line in output.split("\n"):
        if len(line) < 2:
            continue
        if line.startswith("??"):
            has_untracked = True
            continue
        # XY: X = index status, Y = working tree status
        if line[0] != " ":
            has_staged = True
        if line[1] != " ":
            has_modified = True

    return WorktreeStatus(path=path, modified=has_modified, untracked=has_untracked, staged=has_staged)


class WorktreeService:
    """Service for listing, inspecting and removing git worktrees."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    async def list_worktrees(self, repo_path: str) -> list[WorktreeInfo]:
        """Read git's worktree registry. Recomputed on every call.

        Raises:
            ClassifiedError: If git cannot list worktrees
        """
        try:
            output = await self.runner.git(["worktree", "list", "--porcelain"], repo_path)
        except CommandError as e:
            raise classify_command_error(e, "Failed to list worktrees") from e

        worktrees = parse_worktree_porcelain(output) if output else []
        logger.debug(f"Found {len(worktrees)} worktrees")
        for wt in worktrees:
            logger.debug(f"  {wt}")
        return worktrees

    async def prune_worktrees(self, repo_path: str) -> bool:
        """Prune stale worktree metadata. Failures are logged, never raised."""
        try:
            await self.runner.git(["worktree", "prune"], repo_path)
            logger.debug("Pruned stale worktree metadata")
            return True
        except CommandError as e:
            logger.debug(f"git worktree prune failed (ignored): {e}")
            return False

    async def remove_worktree(self, repo_path: str, worktree_path: str) -> None:
        """Remove a worktree with ``git worktree remove <path> --force``.

        Raises:
            ClassifiedError: If git refuses or fails
        """
        try:
            await self.runner.git(["worktree", "remove", worktree_path, "--force"], repo_path)
        except CommandError as e:
            error = classify_command_error(e, "Failed to remove worktree")
            logger.error(f"Failed to remove worktree at {worktree_path}: {error}")
            raise error from e
        logger.info(f"Removed worktree at {worktree_path}")

    async def get_worktree_status(self, worktree_path: str) -> WorktreeStatus:
        """File status flags of a worktree; all False if it cannot be read."""
        if not os.path.exists(worktree_path):
            logger.debug(f"Worktree path {worktree_path} doesn't exist (orphaned)")
            return WorktreeStatus(path=worktree_path)
        try:
            output = await self.runner.git(["status", "--porcelain"], worktree_path)
        except CommandError as e:
            logger.warning(f"Could not check worktree status for {worktree_path}: {e}")
            return WorktreeStatus(path=worktree_path)
        return parse_status_porcelain(worktree_path, output)

    async def get_worktree_statuses(self, worktree_paths: Iterable[str]) -> list[WorktreeStatus]:
        """Status of several worktrees, queried concurrently."""
        return list(await asyncio.gather(*(self.get_worktree_status(p) for p in worktree_paths)))
