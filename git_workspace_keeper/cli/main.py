"""Command-line interface for git-workspace-keeper"""

import asyncio
import os
import sys
from typing import Awaitable, Callable, Optional, Sequence, TypeVar

from rich.console import Console

from git_workspace_keeper.cli.args import parse_args
from git_workspace_keeper.config import Config
from git_workspace_keeper.core import WorkspaceKeeper
from git_workspace_keeper.exceptions import ClassifiedError, WorkspaceKeeperError
from git_workspace_keeper.logging_config import get_logger, setup_logging
from git_workspace_keeper.models.workspace import Project, Workspace
from git_workspace_keeper.services.display_service import DisplayService
from git_workspace_keeper.services.git.naming import (
    build_pr_local_branch,
    build_pr_workspace_name,
    sanitize_branch_name,
    unique_workspace_name,
)
from git_workspace_keeper.services.git.provisioner import WORKTREE_DIR_INFIX
from git_workspace_keeper.services.github_service import parse_pr_reference

console = Console()
logger = get_logger(__name__)

T = TypeVar("T")


async def with_force_retry(
    attempt: Callable[[bool], Awaitable[T]],
    force: bool,
    display: DisplayService,
    interactive: bool,
) -> T:
    """Run ``attempt(force)``; on a collision offer to retry with force."""
    try:
        return await attempt(force)
    except ClassifiedError as e:
        if force or not e.is_collision or not interactive:
            raise
        if not display.confirm(f"{e.message}. Replace it?"):
            raise
        return await attempt(True)


async def existing_workspace_names(keeper: WorkspaceKeeper, repo_path: str) -> list[str]:
    """Names of workspaces already provisioned next to ``repo_path``."""
    prefix = f"{os.path.basename(repo_path)}{WORKTREE_DIR_INFIX}"
    names = []
    for wt in await keeper.list_worktrees(repo_path):
        base = os.path.basename(wt.path)
        if base.startswith(prefix):
            names.append(base[len(prefix):])
    return names


async def run_command(args, keeper: WorkspaceKeeper, display: DisplayService) -> int:
    repo_path = os.path.abspath(args.repo)
    interactive = keeper.config.interactive
    project = Project(repo_path)

    if args.command == "create":
        branch = args.branch or args.name

        async def attempt(force: bool) -> str:
            with display.provisioning_progress(f"Creating workspace '{args.name}'...") as on_progress:
                return await keeper.create_worktree(
                    repo_path, args.name, branch, not args.existing, args.base, force, on_progress
                )

        path = await with_force_retry(attempt, args.force, display, interactive)
        display.display_workspace(
            Workspace.create(project, args.name, sanitize_branch_name(branch), path)
        )
        return 0

    if args.command == "from-pr":
        ref = parse_pr_reference(args.pr)
        if ref is None:
            display.error(f"Not a pull request reference: {args.pr}")
            return 1

        summary = await keeper.get_pr_summary(repo_path, ref.number)
        local_branch = args.branch or build_pr_local_branch(
            ref.number, summary.head_ref_name if summary else ""
        )
        name = args.name or unique_workspace_name(
            build_pr_workspace_name(ref.number, summary.title if summary else ""),
            await existing_workspace_names(keeper, repo_path),
        )

        async def attempt_pr(force: bool) -> tuple[str, str]:
            with display.provisioning_progress(f"Fetching PR #{ref.number}...") as on_progress:
                return await keeper.create_worktree_from_pr(
                    repo_path, name, ref.number, local_branch, force, on_progress
                )

        path, branch = await with_force_retry(attempt_pr, args.force, display, interactive)
        display.display_workspace(Workspace.create(project, name, branch, path))
        return 0

    if args.command == "remove":
        await keeper.remove_worktree(repo_path, os.path.abspath(args.path))
        console.print(f"[green]Removed {args.path}[/green]")
        return 0

    if args.command == "list":
        worktrees = await keeper.list_worktrees(repo_path)
        statuses = await keeper.get_worktree_statuses(
            [wt.path for wt in worktrees if not wt.is_bare]
        )
        display.display_worktree_table(worktrees, {s.path: s for s in statuses})
        return 0

    if args.command == "default-branch":
        console.print(await keeper.get_default_branch(repo_path))
        return 0

    if args.command == "branches":
        for branch in await keeper.list_branches(repo_path):
            console.print(branch)
        return 0

    display.error(f"Unknown command: {args.command}")
    return 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the application."""
    parsed_args = parse_args(argv)
    setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

    config = Config(
        interactive=sys.stdin.isatty() and not parsed_args.no_input,
        verbose=parsed_args.verbose,
        debug=parsed_args.debug,
    )
    if parsed_args.debug:
        console.print("[yellow]Debug mode enabled[/yellow]")
        console.print("[yellow]Configuration:[/yellow]")
        for key, value in config.to_dict().items():
            console.print(f"  {key}: {value}")

    keeper = WorkspaceKeeper(config)
    display = DisplayService(verbose=parsed_args.verbose, debug=parsed_args.debug)

    try:
        return asyncio.run(run_command(parsed_args, keeper, display))
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except WorkspaceKeeperError as e:
        display.error(str(e))
        if parsed_args.debug:
            console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
