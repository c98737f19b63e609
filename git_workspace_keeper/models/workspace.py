"""Project and workspace records."""

import hashlib
import uuid
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Project:
    """The primary clone that workspaces are provisioned from."""

    repo_path: str

    @property
    def id(self) -> str:
        """Stable identifier derived from the resolved repository path."""
        return hashlib.md5(str(Path(self.repo_path).resolve()).encode()).hexdigest()

    @property
    def name(self) -> str:
        return Path(self.repo_path).resolve().name


@dataclass(frozen=True)
class Workspace:
    """Logical record of a provisioned worktree.

    Only created once provisioning has returned a worktree path.
    """

    id: str
    name: str
    branch: str
    worktree_path: str
    project_id: str

    @classmethod
    def create(cls, project: Project, name: str, branch: str, worktree_path: str) -> "Workspace":
        """Build a record for a successfully provisioned worktree.

        Raises:
            ValueError: If the worktree path is not strictly inside the
                project's parent directory.
        """
        parent = Path(project.repo_path).resolve().parent
        path = Path(worktree_path).resolve()
        if path == parent or parent not in path.parents:
            raise ValueError(f"Worktree path {worktree_path} is outside {parent}")
        return cls(
            id=uuid.uuid4().hex,
            name=name,
            branch=branch,
            worktree_path=str(path),
            project_id=project.id,
        )
