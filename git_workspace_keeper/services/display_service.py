"""Display and formatting service for workspace information"""
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from rich.console import Console
from rich.table import Table

from git_workspace_keeper.logging_config import get_logger
from git_workspace_keeper.models.progress import ProvisioningStage
from git_workspace_keeper.models.workspace import Workspace
from git_workspace_keeper.models.worktree import WorktreeInfo, WorktreeStatus
from git_workspace_keeper.services.git.provisioner import ProgressCallback

console = Console()
logger = get_logger(__name__)


def format_status_flags(worktree: WorktreeInfo, status: Optional[WorktreeStatus]) -> str:
    """Compact flags: M = modified, U = untracked, S = staged."""
    if worktree.is_orphaned:
        return "[ORPHANED]"
    if status is None:
        return ""
    flags = ""
    if status.modified:
        flags += "M"
    if status.untracked:
        flags += "U"
    if status.staged:
        flags += "S"
    return flags or "clean"


class DisplayService:
    def __init__(self, verbose: bool = False, debug: bool = False):
        self.verbose = verbose
        self.debug_mode = debug

    @contextmanager
    def provisioning_progress(self, title: str) -> Iterator[ProgressCallback]:
        """Show a spinner while provisioning; yields the progress callback."""
        with console.status(f"[bold blue]{title}", spinner="dots") as status:
            def on_progress(stage: ProvisioningStage, message: str) -> None:
                status.update(f"[bold blue]{message}")
                if self.verbose:
                    console.print(f"[dim]{stage.value}[/dim] {message}")

            yield on_progress

    def display_workspace(self, workspace: Workspace) -> None:
        """Print a freshly created workspace record."""
        console.print(f"[green]Workspace '{workspace.name}' ready[/green]")
        console.print(f"  Path:    {workspace.worktree_path}")
        console.print(f"  Branch:  {workspace.branch}")
        if self.verbose:
            console.print(f"  ID:      {workspace.id}")
            console.print(f"  Project: {workspace.project_id}")

    def display_worktree_table(
        self,
        worktrees: List[WorktreeInfo],
        statuses: Dict[str, WorktreeStatus],
    ) -> None:
        """Display a table of registered worktrees."""
        table = Table()
        table.add_column("Path")
        table.add_column("Branch")
        table.add_column("HEAD")
        table.add_column("State")

        for wt in worktrees:
            branch = wt.branch or "(detached)"
            if wt.is_main:
                branch += " *"
            row_style = "yellow" if wt.is_orphaned else None
            table.add_row(
                wt.path,
                branch,
                wt.head[:8],
                "bare" if wt.is_bare else format_status_flags(wt, statuses.get(wt.path)),
                style=row_style,
            )

        console.print(table)
        logger.debug(f"Displayed {len(worktrees)} worktrees")

    def confirm(self, message: str) -> bool:
        response = console.input(f"\n{message} [y/N] ")
        return response.strip().lower() in ("y", "yes")

    def error(self, message: str) -> None:
        console.print(f"[red]Error: {message}[/red]")
