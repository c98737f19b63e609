"""Core functionality for git-workspace-keeper"""

from typing import Iterable, Optional, Union

from git_workspace_keeper.config import Config
from git_workspace_keeper.logging_config import get_logger
from git_workspace_keeper.models.worktree import WorktreeInfo, WorktreeStatus
from git_workspace_keeper.services.command_runner import CommandRunner
from git_workspace_keeper.services.env_copier import EnvFileCopier
from git_workspace_keeper.services.git import (
    BranchQueries,
    DefaultBranchResolver,
    PrBranchFetcher,
    WorktreeProvisioner,
    WorktreeService,
)
from git_workspace_keeper.services.git.provisioner import ProgressCallback
from git_workspace_keeper.services.github_service import GitHubCache, GitHubService, PullRequestSummary

logger = get_logger(__name__)


class WorkspaceKeeper:
    """Entry point for provisioning and removing workspace worktrees.

    Builds every service once and shares a single GitHubCache between them,
    so one instance should live for the whole process.
    """

    def __init__(
        self,
        config: Union[Config, dict, None] = None,
        runner: Optional[CommandRunner] = None,
        github_cache: Optional[GitHubCache] = None,
    ):
        """Initialize WorkspaceKeeper.

        Args:
            config: Configuration dict or Config object
            runner: Command runner; built from config when omitted
            github_cache: Shared GitHub lookup cache; built from config when omitted
        """
        if isinstance(config, dict):
            self.config = Config.from_dict(config)
        else:
            self.config = config or Config()

        self.runner = runner or CommandRunner(
            output_limit=self.config.output_limit_bytes,
            git_executable=self.config.git_executable,
        )
        self.github_cache = github_cache or GitHubCache(ttl=self.config.pr_cache_ttl)
        self.github_service = GitHubService(self.runner, self.github_cache, self.config)
        self.branches = BranchQueries(self.runner, remote_name=self.config.remote_name)
        self.default_branch_resolver = DefaultBranchResolver(self.runner, self.branches)
        self.worktree_service = WorktreeService(self.runner)
        self.pr_fetcher = PrBranchFetcher(self.runner, self.github_service, remote_name=self.config.remote_name)
        self.provisioner = WorktreeProvisioner(
            self.runner,
            branches=self.branches,
            default_branch_resolver=self.default_branch_resolver,
            worktrees=self.worktree_service,
            pr_fetcher=self.pr_fetcher,
            env_copier=EnvFileCopier(self.config.env_skip_dirs),
        )
        logger.debug("WorkspaceKeeper initialized")

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
        """Provision a worktree and return its path. See WorktreeProvisioner."""
        return await self.provisioner.create_worktree(
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
        """Provision a worktree for a pull request; returns (path, branch)."""
        return await self.provisioner.create_worktree_from_pr(
            repo_path, name, pr_number, local_branch, force, on_progress
        )

    async def remove_worktree(self, repo_path: str, worktree_path: str) -> None:
        await self.worktree_service.remove_worktree(repo_path, worktree_path)

    async def list_worktrees(self, repo_path: str) -> list[WorktreeInfo]:
        return await self.worktree_service.list_worktrees(repo_path)

    async def get_worktree_statuses(self, worktree_paths: Iterable[str]) -> list[WorktreeStatus]:
        return await self.worktree_service.get_worktree_statuses(worktree_paths)

    async def get_default_branch(self, repo_path: str) -> str:
        return await self.default_branch_resolver.resolve(repo_path)

    async def list_branches(self, repo_path: str) -> list[str]:
        return await self.branches.list_branches(repo_path)

    async def get_pr_summary(self, repo_path: str, pr_number: int) -> Optional[PullRequestSummary]:
        if not await self.github_service.is_gh_available():
            return None
        return await self.github_service.get_pr_summary(repo_path, pr_number)
