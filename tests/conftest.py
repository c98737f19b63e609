"""Pytest fixtures for git-workspace-keeper tests"""
import tempfile
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import git
import pytest

from git_workspace_keeper.config import Config
from git_workspace_keeper.core import WorkspaceKeeper
from git_workspace_keeper.exceptions import CommandError
from git_workspace_keeper.services.command_runner import CommandRunner


def init_repo(repo_path: Path) -> git.Repo:
    """Initialize a repository with one commit on ``main``."""
    repo_path.mkdir(parents=True)
    repo = git.Repo.init(repo_path)

    with repo.config_writer() as writer:
        writer.set_value("user", "name", "Test User")
        writer.set_value("user", "email", "test@example.com")

    readme = repo_path / "README.md"
    readme.write_text("# Test Repository\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")

    repo.git.branch("-M", "main")
    return repo


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository with no remotes."""
    repo = init_repo(temp_dir / "test_repo")
    yield repo
    repo.close()


@pytest.fixture
def git_repo_with_origin(temp_dir):
    """Create a repository whose ``origin`` is a local bare clone.

    ``origin`` has ``main`` (its HEAD) and ``remote-feature``, which does
    not exist as a local branch.
    """
    repo = init_repo(temp_dir / "test_repo")

    origin = git.Repo.init(temp_dir / "origin.git", bare=True)
    origin.git.symbolic_ref("HEAD", "refs/heads/main")

    repo.create_remote("origin", str(temp_dir / "origin.git"))
    repo.git.push("-u", "origin", "main")

    repo.git.checkout("-b", "remote-feature")
    (Path(repo.working_dir) / "remote.txt").write_text("remote\n")
    repo.index.add(["remote.txt"])
    repo.index.commit("Remote feature")
    repo.git.push("origin", "remote-feature")
    repo.git.checkout("main")
    repo.git.branch("-D", "remote-feature")

    yield repo
    repo.close()
    origin.close()


@pytest.fixture
def config():
    """Non-interactive configuration."""
    return Config(interactive=False)


@pytest.fixture
def keeper(config):
    """WorkspaceKeeper that treats the gh CLI as unavailable."""
    keeper = WorkspaceKeeper(config)
    keeper.github_cache.gh_available = False
    return keeper


@pytest.fixture
def mock_runner():
    """CommandRunner whose ``git``/``run`` coroutines are mocks."""
    runner = Mock(spec=CommandRunner)
    runner.git = AsyncMock(return_value="")
    runner.run = AsyncMock(return_value="")
    return runner


def command_error(stderr: str, args=("git",), status: int = 128) -> CommandError:
    """Build a CommandError as the runner would raise it."""
    return CommandError("git", list(args), "/repo", status=status, stderr=stderr)


def git_responder(responses: dict):
    """Side effect for ``runner.git`` keyed by the joined argument string.

    Values may be strings (returned) or exceptions (raised). Unknown
    commands succeed with empty output.
    """
    calls = []

    async def respond(args, cwd=None):
        key = " ".join(args)
        calls.append(key)
        for prefix, value in responses.items():
            if key.startswith(prefix):
                if isinstance(value, BaseException):
                    raise value
                return value
        return ""

    respond.calls = calls
    return respond
