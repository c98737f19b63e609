"""Staged provisioning of workspace worktrees."""

import asyncio
import os
import shutil
from pathlib import Path
from typing import Callable, Optional

from git_workspace_keeper.exceptions import WORKTREE_PATH_EXISTS, ClassifiedError, CommandError
from git_workspace_keeper.logging_config import get_logger
from git_workspace_keeper.models.progress import STAGE_MESSAGES, ProvisioningStage
from git_workspace_keeper.services.command_runner import CommandRunner
from git_workspace_keeper.services.env_copier import EnvFileCopier
from git_workspace_keeper.services.error_classifier import classify_command_error
from git_workspace_keeper.services.git.branches import BranchQueries
from git_workspace_keeper.services.git.default_branch import DefaultBranchResolver
from git_workspace_keeper.services.git.naming import sanitize_branch_name, sanitize_worktree_name
from git_workspace_keeper.services.git.pr_fetcher import PrBranchFetcher
from git_workspace_keeper.services.git.worktrees import WorktreeService

logger = get_logger(__name__)

ProgressCallback = Callable[[ProvisioningStage, str], None]

WORKTREE_DIR_INFIX = "-ws-"


def _ignore_progress(stage: ProvisioningStage, message: str) -> None:
    pass


def worktree_path_for(repo_path: str, name: str) -> str:
    """Absolute worktree directory for workspace ``name``: ``{parent}/{repo}-ws-{name}``.

    Raises:
        ClassifiedError: If the path would not lie strictly inside the
            repository's parent directory
    """
    repo = Path(repo_path).resolve()
    parent = repo.parent
    path = (parent / f"{repo.name}{WORKTREE_DIR_INFIX}{sanitize_worktree_name(name)}").resolve()
    if path == parent or parent not in path.parents:
        raise ClassifiedError(message="Invalid workspace name")
    return str(path)


class WorktreeProvisioner:
    """Produces ready-to-use worktrees through a fixed sequence of stages.

    Stages run strictly in order, each reported to the progress callback
    before it starts. Prune, fetch, pull, PR lookup and .env copying are
    best-effort; every other failure aborts with a ClassifiedError.
    The provisioner never records a Workspace; callers do that once a path
    has been returned.
    """

    def __init__(
        self,
        runner: CommandRunner,
        branches: Optional[BranchQueries] = None,
        default_branch_resolver: Optional[DefaultBranchResolver] = None,
        worktrees: Optional[WorktreeService] = None,
        pr_fetcher: Optional[PrBranchFetcher] = None,
        env_copier: Optional[EnvFileCopier] = None,
    ):
        self.runner = runner
        self.branches = branches or BranchQueries(runner)
        self.default_branch_resolver = default_branch_resolver or DefaultBranchResolver(runner, self.branches)
        self.worktrees = worktrees or WorktreeService(runner)
        self.pr_fetcher = pr_fetcher
        self.env_copier = env_copier or EnvFileCopier()

    @property
    def remote_name(self) -> str:
        return self.branches.remote_name

    async def create_worktree(
        self,
        repo_path: str,
        name: str,
        branch: str,
        new_branch: bool,
        base_branch: Optional[str] = None,
        force: bool = False,
        on_progress: Optional[ProgressCallback] = None,
    ) -> str:
        """Provision a worktree for ``branch`` and return its absolute path.

        Args:
            repo_path: Path to the primary repository
            name: Workspace name (sanitized into the directory name)
            branch: Branch to check out or create (sanitized)
            new_branch: Create ``branch`` from ``base_branch`` if it does not exist
            base_branch: Start point for a new branch; defaults to the
                repository's default branch
            force: Replace an existing directory and let git override
                checked-out-elsewhere protection
            on_progress: Called with (stage, message) before each stage

        Raises:
            ClassifiedError: On invalid input, collisions or git failures
        """
        return await self._provision(
            repo_path, name, branch, new_branch, base_branch, force, on_progress
        )

    async def create_worktree_from_pr(
        self,
        repo_path: str,
        name: str,
        pr_number: int,
        local_branch: str,
        force: bool = False,
        on_progress: Optional[ProgressCallback] = None,
    ) -> tuple[str, str]:
        """Fetch PR ``pr_number`` into ``local_branch`` and provision a worktree for it.

        Returns:
            Tuple of (worktree_path, branch)

        Raises:
            ClassifiedError: If the PR cannot be fetched or the worktree created
        """
        branch = sanitize_branch_name(local_branch) or f"pr/{pr_number}"
        path = await self._provision(
            repo_path, name, branch, False, None, force, on_progress, pr_number=pr_number
        )
        return path, branch

    async def _provision(
        self,
        repo_path: str,
        name: str,
        requested_branch: str,
        new_branch: bool,
        base_branch: Optional[str],
        force: bool,
        on_progress: Optional[ProgressCallback],
        pr_number: Optional[int] = None,
    ) -> str:
        branch = sanitize_branch_name(requested_branch)
        if not branch:
            raise ClassifiedError(message="Branch name is empty after sanitization")
        repo_path = str(Path(repo_path).resolve())
        worktree_path = worktree_path_for(repo_path, name)
        report = on_progress or _ignore_progress
        logger.debug(f"Provisioning {worktree_path} for branch '{branch}' (new={new_branch}, force={force})")

        self._report(report, ProvisioningStage.PRUNE_WORKTREES)
        await self.worktrees.prune_worktrees(repo_path)

        self._report(report, ProvisioningStage.FETCH_ORIGIN)
        has_remote = await self._fetch_remote(repo_path)

        if new_branch and not base_branch:
            self._report(report, ProvisioningStage.RESOLVE_DEFAULT_BRANCH)
            base_branch = await self.default_branch_resolver.resolve(repo_path)
            logger.debug(f"New branch '{branch}' will start from {base_branch}")

        self._report(report, ProvisioningStage.PREPARE_WORKTREE_DIR)
        await asyncio.to_thread(self._prepare_worktree_dir, worktree_path, force)

        self._report(report, ProvisioningStage.INSPECT_BRANCH)
        if pr_number is not None:
            await self._fetch_pr_branch(repo_path, pr_number, branch)
        branch_exists = await self.branches.local_branch_exists(repo_path, branch)
        if not new_branch and not branch_exists:
            await self._try_pr_fallback(repo_path, requested_branch, branch, has_remote)

        creates_branch = new_branch and not branch_exists
        self._report(report, ProvisioningStage.CREATE_WORKTREE)
        await self._add_worktree(repo_path, worktree_path, branch, creates_branch, base_branch, force)
        logger.info(f"Created worktree at {worktree_path} on branch '{branch}'")

        self._report(report, ProvisioningStage.SYNC_BRANCH)
        if not creates_branch:
            await self._sync_branch(worktree_path)

        self._report(report, ProvisioningStage.COPY_ENV_FILES)
        await asyncio.to_thread(self.env_copier.copy_env_files, repo_path, worktree_path)

        return worktree_path

    @staticmethod
    def _report(report: ProgressCallback, stage: ProvisioningStage) -> None:
        logger.debug(f"[{stage.value}] {STAGE_MESSAGES[stage]}")
        report(stage, STAGE_MESSAGES[stage])

    async def _fetch_remote(self, repo_path: str) -> bool:
        """Fetch the remote if it exists. Returns whether it exists."""
        if not await self.branches.has_remote(repo_path):
            logger.debug(f"No '{self.remote_name}' remote; using local refs only")
            return False
        try:
            await self.runner.git(["fetch", "--prune", self.remote_name], repo_path)
        except CommandError as e:
            logger.info(f"Fetch from {self.remote_name} failed; continuing with local refs: {e}")
        return True

    @staticmethod
    def _prepare_worktree_dir(worktree_path: str, force: bool) -> None:
        if not os.path.lexists(worktree_path):
            return
        if not force:
            raise ClassifiedError(WORKTREE_PATH_EXISTS)
        logger.info(f"Replacing existing path {worktree_path}")
        if os.path.isdir(worktree_path) and not os.path.islink(worktree_path):
            shutil.rmtree(worktree_path)
        else:
            os.remove(worktree_path)

    async def _fetch_pr_branch(self, repo_path: str, pr_number: int, branch: str) -> None:
        if self.pr_fetcher is None:
            raise ClassifiedError(message=f"Failed to fetch PR #{pr_number}")
        try:
            await self.pr_fetcher.fetch_pr(repo_path, pr_number, branch)
        except CommandError as e:
            error = classify_command_error(e, f"Failed to fetch PR #{pr_number}")
            logger.error(f"Could not fetch PR #{pr_number}: {error}")
            raise error from e

    async def _try_pr_fallback(self, repo_path: str, requested: str, branch: str, has_remote: bool) -> None:
        """Look for ``branch`` as a PR head when it is neither local nor on the remote."""
        if has_remote and await self.branches.remote_branch_exists(repo_path, branch):
            return
        if self.pr_fetcher is None:
            return
        try:
            await self.pr_fetcher.fetch(repo_path, requested, branch)
        except Exception as e:
            # Falling through to git's own "invalid reference" error is fine
            logger.debug(f"PR fallback for '{branch}' failed: {e}")

    async def _add_worktree(
        self,
        repo_path: str,
        worktree_path: str,
        branch: str,
        creates_branch: bool,
        base_branch: Optional[str],
        force: bool,
    ) -> None:
        args = ["worktree", "add"]
        if force:
            args.append("--force")
        if creates_branch:
            args.extend(["-b", branch, worktree_path])
            if base_branch:
                args.append(base_branch)
        else:
            args.extend([worktree_path, branch])

        try:
            await self.runner.git(args, repo_path)
        except CommandError as e:
            error = classify_command_error(e, "Failed to create worktree")
            logger.error(f"git worktree add failed for '{branch}': {error}")
            raise error from e

    async def _sync_branch(self, worktree_path: str) -> None:
        try:
            await self.runner.git(["pull", "--ff-only"], worktree_path)
        except CommandError as e:
            logger.debug(f"Fast-forward pull skipped in {worktree_path}: {e}")
