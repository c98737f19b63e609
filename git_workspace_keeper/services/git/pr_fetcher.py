"""Materializes fork/PR head branches that a normal fetch does not bring in."""

import asyncio
from typing import Optional

from git_workspace_keeper.exceptions import CommandError
from git_workspace_keeper.logging_config import get_logger
from git_workspace_keeper.services.command_runner import CommandRunner
from git_workspace_keeper.services.git.naming import sanitize_branch_name
from git_workspace_keeper.services.github_service import GitHubService

logger = get_logger(__name__)


def build_head_candidates(requested: str, branch: str) -> list[str]:
    """PR head names worth asking ``gh`` about, most specific first."""
    candidates = [requested.strip()]
    if ":" in requested:
        candidates.append(requested.split(":", 1)[1].strip())
    candidates.append(sanitize_branch_name(branch))

    unique: list[str] = []
    for candidate in candidates:
        if candidate and candidate not in unique:
            unique.append(candidate)
    return unique


class PrBranchFetcher:
    """Best-effort lookup of a branch that only exists as a PR head."""

    def __init__(self, runner: CommandRunner, github: GitHubService, remote_name: str = "origin"):
        self.runner = runner
        self.github = github
        self.remote_name = remote_name

    async def fetch(self, repo_path: str, requested: str, branch: str) -> bool:
        """Try to create local ``branch`` from the PR whose head matches ``requested``.

        Returns:
            True if the branch was fetched; False on any failure
        """
        try:
            if not await self.github.is_gh_available():
                logger.debug("gh CLI unavailable; skipping PR branch lookup")
                return False

            number = await self._find_pr_number(repo_path, build_head_candidates(requested, branch))
            if number is None:
                logger.debug(f"No PR found for '{requested}'")
                return False

            await self.fetch_pr(repo_path, number, branch)
            logger.info(f"Fetched PR #{number} into local branch '{branch}'")
            return True
        except CommandError as e:
            logger.debug(f"PR branch fetch for '{requested}' failed: {e}")
            return False

    async def fetch_pr(self, repo_path: str, number: int, branch: str) -> None:
        """Run ``git fetch <remote> pull/<n>/head:<branch>``.

        Raises:
            CommandError: If git fails
        """
        await self.runner.git(
            ["fetch", self.remote_name, f"pull/{number}/head:{branch}"], repo_path
        )

    async def _find_pr_number(self, repo_path: str, candidates: list[str]) -> Optional[int]:
        results = await asyncio.gather(
            *(self.github.find_pr_number(repo_path, candidate) for candidate in candidates),
            return_exceptions=True,
        )
        for candidate, result in zip(candidates, results):
            if isinstance(result, CommandError):
                logger.debug(f"gh pr list --head {candidate} failed: {result}")
                continue
            if isinstance(result, BaseException):
                raise result
            if result is not None:
                return result
        return None
