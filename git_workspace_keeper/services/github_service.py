"""GitHub CLI integration service"""

import json
import re
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple
from urllib.parse import urlparse

from git_workspace_keeper.config import Config
from git_workspace_keeper.exceptions import CommandError
from git_workspace_keeper.logging_config import get_logger
from git_workspace_keeper.services.command_runner import CommandRunner

logger = get_logger(__name__)

_SSH_REMOTE_RE = re.compile(r"^[^@]+@github\.com:([^/\s:]+)/([^/\s]+?)(?:\.git)?$", re.IGNORECASE)
_PLAIN_REMOTE_RE = re.compile(r"^github\.com[:/]([^/\s:]+)/([^/\s]+?)(?:\.git)?$", re.IGNORECASE)
_GITHUB_PR_URL_RE = re.compile(r"^https?://github\.com/([^/]+)/([^/]+)/pull/(\d+)")
_GRAPHITE_PR_URL_RE = re.compile(r"^https?://app\.graphite\.(?:dev|com)/github/pr/([^/]+)/([^/]+)/(\d+)")
_PR_NUMBER_RE = re.compile(r"^#(\d+)$")


@dataclass(frozen=True)
class GitHubRepoInfo:
    """Owner and name of a GitHub repository."""

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True)
class PullRequestRef:
    """A pull request reference parsed from user input."""

    number: int
    owner: Optional[str] = None
    repo: Optional[str] = None


@dataclass(frozen=True)
class PullRequestSummary:
    """Minimal pull request metadata from ``gh pr view``."""

    number: int
    title: str
    head_ref_name: str
    state: str


def parse_github_remote(remote: str) -> Optional[GitHubRepoInfo]:
    """Parse a git remote URL into GitHub owner/name, or None if not GitHub."""
    trimmed = (remote or "").strip()
    if not trimmed:
        return None

    if trimmed.startswith(("http://", "https://", "ssh://")):
        parsed = urlparse(trimmed)
        if (parsed.hostname or "").lower() != "github.com":
            return None
        parts = parsed.path.strip("/").split("/")
        if len(parts) < 2:
            return None
        owner = parts[0]
        name = re.sub(r"\.git$", "", parts[1], flags=re.IGNORECASE)
        if not owner or not name:
            return None
        return GitHubRepoInfo(owner, name)

    for pattern in (_SSH_REMOTE_RE, _PLAIN_REMOTE_RE):
        match = pattern.match(trimmed)
        if match:
            return GitHubRepoInfo(match.group(1), match.group(2))
    return None


def parse_pr_url(url: str) -> Optional[PullRequestRef]:
    """Parse a GitHub or Graphite pull request URL."""
    trimmed = (url or "").strip()
    for pattern in (_GITHUB_PR_URL_RE, _GRAPHITE_PR_URL_RE):
        match = pattern.match(trimmed)
        if match:
            return PullRequestRef(number=int(match.group(3)), owner=match.group(1), repo=match.group(2))
    return None


def parse_pr_number(text: str) -> Optional[int]:
    """Parse ``#123`` shorthand into a PR number."""
    match = _PR_NUMBER_RE.match((text or "").strip())
    return int(match.group(1)) if match else None


def parse_pr_reference(text: str) -> Optional[PullRequestRef]:
    """Accept a PR URL, ``#123`` or a bare number."""
    ref = parse_pr_url(text)
    if ref:
        return ref
    number = parse_pr_number(text)
    if number is None and (text or "").strip().isdigit():
        number = int(text.strip())
    return PullRequestRef(number=number) if number is not None else None


class GitHubCache:
    """Process-lifetime cache for GitHub CLI lookups.

    Holds the ``gh`` availability flag, a per-repo memo of the origin's
    GitHub identity, and PR numbers keyed by (repo, head) that expire after
    ``ttl`` seconds. Construct one and pass it to every consumer.
    """

    def __init__(self, ttl: float = 30.0, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self.clock = clock
        self.gh_available: Optional[bool] = None
        self._repo_info: Dict[str, Optional[GitHubRepoInfo]] = {}
        self._pr_numbers: Dict[Tuple[str, str], Tuple[Optional[int], float]] = {}

    def has_repo_info(self, repo_path: str) -> bool:
        return repo_path in self._repo_info

    def get_repo_info(self, repo_path: str) -> Optional[GitHubRepoInfo]:
        return self._repo_info.get(repo_path)

    def set_repo_info(self, repo_path: str, info: Optional[GitHubRepoInfo]) -> None:
        self._repo_info[repo_path] = info

    def get_pr_number(self, repo_path: str, head: str) -> Tuple[bool, Optional[int]]:
        """Return (hit, number). Expired entries are dropped."""
        key = (repo_path, head)
        entry = self._pr_numbers.get(key)
        if entry is None:
            return False, None
        number, stored_at = entry
        if self.clock() - stored_at >= self.ttl:
            del self._pr_numbers[key]
            return False, None
        return True, number

    def set_pr_number(self, repo_path: str, head: str, number: Optional[int]) -> None:
        self._pr_numbers[(repo_path, head)] = (number, self.clock())

    def clear(self) -> None:
        """Forget everything, including gh availability."""
        self.gh_available = None
        self._repo_info.clear()
        self._pr_numbers.clear()


class GitHubService:
    """Queries GitHub through the ``gh`` command-line tool."""

    def __init__(self, runner: CommandRunner, cache: GitHubCache, config: Optional[Config] = None):
        self.runner = runner
        self.cache = cache
        self.config = config or Config()

    async def is_gh_available(self) -> bool:
        """Check once per cache lifetime whether ``gh`` runs."""
        if self.cache.gh_available is not None:
            return self.cache.gh_available
        try:
            await self.runner.run(
                self.config.gh_executable, ["--version"], timeout=self.config.probe_timeout
            )
            self.cache.gh_available = True
        except CommandError as e:
            logger.debug(f"[GitHub] gh CLI not available: {e}")
            self.cache.gh_available = False
        return self.cache.gh_available

    async def get_repo_info(self, repo_path: str) -> Optional[GitHubRepoInfo]:
        """GitHub identity of the repo's origin remote, memoized per repo."""
        if self.cache.has_repo_info(repo_path):
            return self.cache.get_repo_info(repo_path)
        try:
            remote_url = await self.runner.git(
                ["remote", "get-url", self.config.remote_name], repo_path
            )
            info = parse_github_remote(remote_url)
        except CommandError as e:
            logger.debug(f"[GitHub] No {self.config.remote_name} remote for {repo_path}: {e}")
            info = None
        self.cache.set_repo_info(repo_path, info)
        return info

    async def is_github_repo(self, repo_path: str) -> bool:
        return await self.get_repo_info(repo_path) is not None

    async def find_pr_number(self, repo_path: str, head: str) -> Optional[int]:
        """Number of the most recent PR (any state) whose head is ``head``.

        Raises:
            CommandError: If ``gh`` fails
        """
        hit, cached = self.cache.get_pr_number(repo_path, head)
        if hit:
            return cached

        output = await self.runner.run(
            self.config.gh_executable,
            ["pr", "list", "--head", head, "--state", "all", "--json", "number", "--jq", ".[0].number"],
            repo_path,
        )
        number = int(output) if output.isdigit() else None
        logger.debug(f"[GitHub] PR for head '{head}': {number}")
        self.cache.set_pr_number(repo_path, head, number)
        return number

    async def get_pr_summary(self, repo_path: str, number: int) -> Optional[PullRequestSummary]:
        """Title, head branch and state of a PR, or None if it cannot be read."""
        try:
            output = await self.runner.run(
                self.config.gh_executable,
                ["pr", "view", str(number), "--json", "number,title,headRefName,state"],
                repo_path,
            )
            data = json.loads(output)
        except CommandError as e:
            logger.debug(f"[GitHub] Could not view PR #{number}: {e}")
            return None
        except json.JSONDecodeError as e:
            logger.debug(f"[GitHub] Invalid JSON for PR #{number}: {e}")
            return None

        return PullRequestSummary(
            number=int(data.get("number", number)),
            title=data.get("title") or "",
            head_ref_name=data.get("headRefName") or "",
            state=(data.get("state") or "").lower(),
        )
