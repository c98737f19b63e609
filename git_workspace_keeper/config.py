"""Configuration handling for git-workspace-keeper"""

from dataclasses import dataclass, field
from typing import List

MIN_OUTPUT_LIMIT_BYTES = 10 * 1024 * 1024

DEFAULT_ENV_SKIP_DIRS = [
    "node_modules",
    ".git",
    "dist",
    "build",
    "out",
    ".next",
    ".nuxt",
    ".turbo",
    ".cache",
    "coverage",
    "target",
    ".venv",
    "venv",
    "__pycache__",
]


@dataclass
class Config:
    """Configuration for git-workspace-keeper with validation."""

    # External programs
    git_executable: str = "git"
    gh_executable: str = "gh"
    remote_name: str = "origin"

    # Command execution
    output_limit_bytes: int = MIN_OUTPUT_LIMIT_BYTES
    probe_timeout: float = 5.0  # Only applied to availability probes such as `gh --version`

    # GitHub lookups
    pr_cache_ttl: float = 30.0

    # .env copying
    env_skip_dirs: List[str] = field(default_factory=lambda: list(DEFAULT_ENV_SKIP_DIRS))

    # Execution modes
    interactive: bool = True
    verbose: bool = False
    debug: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_executables()
        self._validate_remote_name()
        self._validate_output_limit()
        self._validate_probe_timeout()
        self._validate_pr_cache_ttl()
        self._validate_env_skip_dirs()

    def _validate_executables(self):
        """Validate executables are non-empty."""
        for name in ("git_executable", "gh_executable"):
            value = getattr(self, name)
            if not value or not value.strip():
                raise ValueError(f"{name} cannot be empty")
            setattr(self, name, value.strip())

    def _validate_remote_name(self):
        """Validate remote_name is not empty."""
        if not self.remote_name or not self.remote_name.strip():
            raise ValueError("remote_name cannot be empty")
        self.remote_name = self.remote_name.strip()

    def _validate_output_limit(self):
        """Validate the output cap is at least 10 MB."""
        if self.output_limit_bytes < MIN_OUTPUT_LIMIT_BYTES:
            raise ValueError(
                f"output_limit_bytes must be at least {MIN_OUTPUT_LIMIT_BYTES}, "
                f"got {self.output_limit_bytes}"
            )

    def _validate_probe_timeout(self):
        """Validate probe_timeout is positive."""
        if self.probe_timeout <= 0:
            raise ValueError(f"probe_timeout must be positive, got {self.probe_timeout}")

    def _validate_pr_cache_ttl(self):
        """Validate pr_cache_ttl is not negative."""
        if self.pr_cache_ttl < 0:
            raise ValueError(f"pr_cache_ttl cannot be negative, got {self.pr_cache_ttl}")

    def _validate_env_skip_dirs(self):
        """Validate env_skip_dirs list."""
        if not isinstance(self.env_skip_dirs, list):
            raise ValueError("env_skip_dirs must be a list")

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "git_executable": self.git_executable,
            "gh_executable": self.gh_executable,
            "remote_name": self.remote_name,
            "output_limit_bytes": self.output_limit_bytes,
            "probe_timeout": self.probe_timeout,
            "pr_cache_ttl": self.pr_cache_ttl,
            "env_skip_dirs": self.env_skip_dirs,
            "interactive": self.interactive,
            "verbose": self.verbose,
            "debug": self.debug,
        }

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary, ignoring unknown keys."""
        known_fields = set(cls.__dataclass_fields__)
        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)
