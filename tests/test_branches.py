"""Tests for branch and ref queries"""
import pytest

from conftest import command_error, git_responder
from git_workspace_keeper.exceptions import ClassifiedError
from git_workspace_keeper.services.git.branches import BranchQueries


class TestBranchQueriesRealRepo:
    """Branch queries against real repositories."""

    @pytest.mark.asyncio
    async def test_local_branch_exists(self, keeper, git_repo):
        assert await keeper.branches.local_branch_exists(git_repo.working_dir, "main")
        assert not await keeper.branches.local_branch_exists(git_repo.working_dir, "nope")

    @pytest.mark.asyncio
    async def test_remote_branch_exists(self, keeper, git_repo_with_origin):
        repo_path = git_repo_with_origin.working_dir
        assert await keeper.branches.remote_branch_exists(repo_path, "remote-feature")
        assert not await keeper.branches.local_branch_exists(repo_path, "remote-feature")

    @pytest.mark.asyncio
    async def test_has_remote(self, keeper, git_repo_with_origin):
        assert await keeper.branches.has_remote(git_repo_with_origin.working_dir)
        assert not await keeper.branches.has_remote(git_repo_with_origin.working_dir, "upstream")

    @pytest.mark.asyncio
    async def test_current_branch(self, keeper, git_repo):
        assert await keeper.branches.current_branch(git_repo.working_dir) == "main"
        git_repo.git.checkout("--detach")
        assert await keeper.branches.current_branch(git_repo.working_dir) is None

    @pytest.mark.asyncio
    async def test_list_branches_local_then_remote(self, keeper, git_repo_with_origin):
        git_repo_with_origin.git.branch("zeta")
        branches = await keeper.list_branches(git_repo_with_origin.working_dir)

        assert branches[:2] == ["main", "zeta"]
        assert "remote-feature" in branches
        assert branches.count("main") == 1
        assert "HEAD" not in branches
        assert "origin" not in branches

    @pytest.mark.asyncio
    async def test_ref_probe_outside_repository(self, keeper, temp_dir):
        with pytest.raises(ClassifiedError) as exc_info:
            await keeper.branches.local_branch_exists(str(temp_dir), "main")
        assert exc_info.value.message == "Not a git repository"


class TestListBranchesParsing:
    """Parsing of branch listings with a scripted runner."""

    @pytest.mark.asyncio
    async def test_strips_remote_prefix_and_skips_head(self, mock_runner):
        mock_runner.git.side_effect = git_responder({
            "branch --list": "main\nfeature/a",
            "branch -r": "origin/HEAD\norigin\norigin/main\norigin/feature/b\nupstream/feature/a",
        })
        branches = await BranchQueries(mock_runner).list_branches("/repo")
        assert branches == ["main", "feature/a", "feature/b"]

    @pytest.mark.asyncio
    async def test_remote_listing_failure_is_tolerated(self, mock_runner):
        mock_runner.git.side_effect = git_responder({
            "branch --list": "main",
            "branch -r": command_error("fatal: something odd"),
        })
        assert await BranchQueries(mock_runner).list_branches("/repo") == ["main"]

    @pytest.mark.asyncio
    async def test_spawn_failure_is_raised(self, mock_runner):
        mock_runner.git.side_effect = command_error("", status=None)
        with pytest.raises(ClassifiedError):
            await BranchQueries(mock_runner).ref_exists("/repo", "refs/heads/main")
