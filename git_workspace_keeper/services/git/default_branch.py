"""Default branch resolution."""

from typing import Optional

from git_workspace_keeper.exceptions import CommandError
from git_workspace_keeper.logging_config import get_logger
from git_workspace_keeper.services.command_runner import CommandRunner
from git_workspace_keeper.services.git.branches import BranchQueries

logger = get_logger(__name__)

FALLBACK_DEFAULT_BRANCH = "main"
CONVENTIONAL_DEFAULTS = ("main", "master")


class DefaultBranchResolver:
    """Determines a repository's default branch.

    Resolution order, first hit wins:

    1. ``refs/remotes/origin/HEAD`` after a best-effort ``remote set-head --auto``
    2. ``origin/main`` then ``origin/master``
    3. the locally checked-out branch (unless HEAD is detached)
    4. local ``main`` then ``master``
    5. ``"main"``

    Only step 1 touches the network and it never fails the resolution.
    """

    def __init__(self, runner: CommandRunner, branches: Optional[BranchQueries] = None):
        self.runner = runner
        self.branches = branches or BranchQueries(runner)

    @property
    def remote_name(self) -> str:
        return self.branches.remote_name

    async def resolve(self, repo_path: str) -> str:
        """Return the default branch, e.g. ``origin/main`` or ``main``."""
        remote = self.remote_name

        if await self.branches.has_remote(repo_path, remote):
            symbolic = await self._remote_head(repo_path)
            if symbolic:
                logger.debug(f"Default branch from {remote}/HEAD: {symbolic}")
                return symbolic

            for candidate in CONVENTIONAL_DEFAULTS:
                ref = f"{remote}/{candidate}"
                if await self.branches.ref_exists(repo_path, f"refs/remotes/{ref}"):
                    logger.debug(f"Default branch from remote probe: {ref}")
                    return ref

        current = await self.branches.current_branch(repo_path)
        if current:
            logger.debug(f"Default branch from checked-out branch: {current}")
            return current

        for candidate in CONVENTIONAL_DEFAULTS:
            if await self.branches.local_branch_exists(repo_path, candidate):
                logger.debug(f"Default branch from local probe: {candidate}")
                return candidate

        logger.debug(f"Falling back to default branch '{FALLBACK_DEFAULT_BRANCH}'")
        return FALLBACK_DEFAULT_BRANCH

    async def _remote_head(self, repo_path: str) -> Optional[str]:
        """Read the remote's symbolic HEAD; every failure yields None."""
        remote = self.remote_name
        try:
            await self.runner.git(["remote", "set-head", remote, "--auto"], repo_path)
        except CommandError as e:
            logger.debug(f"remote set-head {remote} --auto failed (ignored): {e.stderr.strip()}")

        try:
            ref = await self.runner.git(["symbolic-ref", f"refs/remotes/{remote}/HEAD"], repo_path)
        except CommandError as e:
            logger.debug(f"No symbolic {remote}/HEAD: {e.stderr.strip()}")
            return None

        prefix = "refs/remotes/"
        if ref.startswith(prefix):
            ref = ref[len(prefix):]
        return ref or None
