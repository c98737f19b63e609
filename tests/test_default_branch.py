"""Tests for default branch resolution"""
import pytest

from conftest import command_error, git_responder
from git_workspace_keeper.exceptions import ClassifiedError
from git_workspace_keeper.services.git.default_branch import DefaultBranchResolver

MISSING_REF = command_error("fatal: Needed a single revision")
NO_REMOTE = command_error("error: No such remote 'origin'", status=2)


class TestDefaultBranchRealRepos:
    """Resolution against real repositories."""

    @pytest.mark.asyncio
    async def test_origin_head(self, keeper, git_repo_with_origin):
        result = await keeper.get_default_branch(git_repo_with_origin.working_dir)
        assert result == "origin/main"

    @pytest.mark.asyncio
    async def test_no_remote_uses_checked_out_branch(self, keeper, git_repo):
        git_repo.git.checkout("-b", "develop")
        result = await keeper.get_default_branch(git_repo.working_dir)
        assert result == "develop"

    @pytest.mark.asyncio
    async def test_no_remote_on_main(self, keeper, git_repo):
        assert await keeper.get_default_branch(git_repo.working_dir) == "main"

    @pytest.mark.asyncio
    async def test_detached_head_falls_back_to_local_main(self, keeper, git_repo):
        git_repo.git.checkout("--detach")
        assert await keeper.get_default_branch(git_repo.working_dir) == "main"


class TestDefaultBranchFallbacks:
    """Resolution order with a scripted runner."""

    @pytest.mark.asyncio
    async def test_remote_head_strips_prefix(self, mock_runner):
        mock_runner.git.side_effect = git_responder({
            "symbolic-ref": "refs/remotes/origin/trunk",
        })
        resolver = DefaultBranchResolver(mock_runner)
        assert await resolver.resolve("/repo") == "origin/trunk"

    @pytest.mark.asyncio
    async def test_set_head_failure_is_ignored(self, mock_runner):
        mock_runner.git.side_effect = git_responder({
            "remote set-head": command_error("error: Cannot determine remote HEAD"),
            "symbolic-ref": "refs/remotes/origin/main",
        })
        resolver = DefaultBranchResolver(mock_runner)
        assert await resolver.resolve("/repo") == "origin/main"

    @pytest.mark.asyncio
    async def test_remote_probe_prefers_main_over_master(self, mock_runner):
        responder = git_responder({
            "symbolic-ref": command_error("fatal: ref refs/remotes/origin/HEAD is not a symbolic ref"),
            "rev-parse --verify refs/remotes/origin/main": MISSING_REF,
            "rev-parse --verify refs/remotes/origin/master": "abc123",
        })
        mock_runner.git.side_effect = responder
        resolver = DefaultBranchResolver(mock_runner)

        assert await resolver.resolve("/repo") == "origin/master"
        assert responder.calls.index("rev-parse --verify refs/remotes/origin/main") < responder.calls.index(
            "rev-parse --verify refs/remotes/origin/master"
        )

    @pytest.mark.asyncio
    async def test_detached_head_probes_local_master(self, mock_runner):
        mock_runner.git.side_effect = git_responder({
            "remote get-url": NO_REMOTE,
            "rev-parse --abbrev-ref HEAD": "HEAD",
            "rev-parse --verify refs/heads/main": MISSING_REF,
            "rev-parse --verify refs/heads/master": "abc123",
        })
        resolver = DefaultBranchResolver(mock_runner)
        assert await resolver.resolve("/repo") == "master"

    @pytest.mark.asyncio
    async def test_final_fallback_is_main(self, mock_runner):
        mock_runner.git.side_effect = git_responder({
            "remote get-url": NO_REMOTE,
            "rev-parse --abbrev-ref HEAD": command_error("fatal: ambiguous argument 'HEAD'"),
            "rev-parse --verify": MISSING_REF,
        })
        resolver = DefaultBranchResolver(mock_runner)
        assert await resolver.resolve("/repo") == "main"

    @pytest.mark.asyncio
    async def test_not_a_repository_propagates(self, mock_runner):
        mock_runner.git.side_effect = git_responder({
            "remote get-url": command_error("fatal: not a git repository (or any of the parent directories): .git"),
            "rev-parse": command_error("fatal: not a git repository (or any of the parent directories): .git"),
        })
        resolver = DefaultBranchResolver(mock_runner)

        with pytest.raises(ClassifiedError) as exc_info:
            await resolver.resolve("/not-a-repo")
        assert exc_info.value.message == "Not a git repository"
