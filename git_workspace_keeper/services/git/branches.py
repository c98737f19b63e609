"""Branch and ref queries for git-workspace-keeper."""

from typing import Optional

from git_workspace_keeper.exceptions import CommandError
from git_workspace_keeper.logging_config import get_logger
from git_workspace_keeper.services.command_runner import CommandRunner
from git_workspace_keeper.services.error_classifier import classify_command_error

logger = get_logger(__name__)


def _is_missing_ref(error: CommandError) -> bool:
    """True when a failed probe only means "no such ref"."""
    if error.spawn_failed:
        return False
    return "not a git repository" not in error.stderr


class BranchQueries:
    """Read-only probes against a repository's refs.

    Expected "not found" outcomes are returned as False/None; anything else
    (git missing, not a repository) is raised as a ClassifiedError.
    """

    def __init__(self, runner: CommandRunner, remote_name: str = "origin"):
        self.runner = runner
        self.remote_name = remote_name

    async def ref_exists(self, repo_path: str, ref: str) -> bool:
        """Check whether a fully-qualified ref (e.g. ``refs/heads/main``) exists."""
        try:
            await self.runner.git(["rev-parse", "--verify", ref], repo_path)
            return True
        except CommandError as e:
            if _is_missing_ref(e):
                return False
            raise classify_command_error(e, f"Failed to verify {ref}") from e

    async def local_branch_exists(self, repo_path: str, branch: str) -> bool:
        return await self.ref_exists(repo_path, f"refs/heads/{branch}")

    async def remote_branch_exists(self, repo_path: str, branch: str) -> bool:
        """Check for ``<remote>/<branch>`` among remote-tracking refs."""
        return await self.ref_exists(repo_path, f"refs/remotes/{self.remote_name}/{branch}")

    async def has_remote(self, repo_path: str, name: Optional[str] = None) -> bool:
        """Check whether a remote is configured (``git remote get-url``)."""
        name = name or self.remote_name
        try:
            await self.runner.git(["remote", "get-url", name], repo_path)
            return True
        except CommandError as e:
            logger.debug(f"No remote '{name}' in {repo_path}: {e.stderr.strip()}")
            return False

    async def current_branch(self, repo_path: str) -> Optional[str]:
        """Name of the checked-out branch, or None when HEAD is detached or unborn."""
        try:
            branch = await self.runner.git(["rev-parse", "--abbrev-ref", "HEAD"], repo_path)
        except CommandError as e:
            if _is_missing_ref(e):
                return None
            raise classify_command_error(e, "Failed to read current branch") from e
        if not branch or branch == "HEAD":
            return None
        return branch

    async def list_branches(self, repo_path: str) -> list[str]:
        """List local branches, then remote branches with the remote prefix stripped.

        Remote ``HEAD`` pointers are skipped and names are de-duplicated.
        """
        try:
            local_out = await self.runner.git(
                ["branch", "--list", "--format=%(refname:short)"], repo_path
            )
        except CommandError as e:
            raise classify_command_error(e, "Failed to list branches") from e
        try:
            remote_out = await self.runner.git(
                ["branch", "-r", "--format=%(refname:short)"], repo_path
            )
        except CommandError as e:
            logger.debug(f"Could not list remote branches: {e}")
            remote_out = ""

        seen: set[str] = set()
        branches: list[str] = []
        for name in filter(None, local_out.split("\n")):
            if name not in seen:
                seen.add(name)
                branches.append(name)

        for raw in filter(None, remote_out.split("\n")):
            # "origin/feat/sub" -> "feat/sub"; bare "origin" is the short form of origin/HEAD
            if raw.endswith("/HEAD") or "/" not in raw:
                continue
            name = raw.split("/", 1)[1]
            if name not in seen:
                seen.add(name)
                branches.append(name)
        return branches
