"""Command-line argument parsing for git-workspace-keeper."""

import argparse
from typing import Optional, Sequence

from git_workspace_keeper.__version__ import __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git-workspace-keeper",
        description="Provision isolated git worktrees for concurrent agent sessions",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )
    parser.add_argument(
        "--version", action="version", version=f"git-workspace-keeper {__version__}"
    )
    parser.add_argument(
        "--repo", default=".", help="Path to the primary repository (default: current directory)"
    )
    parser.add_argument(
        "--no-input",
        action="store_true",
        help="Never prompt; collisions fail instead of offering to replace",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    create = subparsers.add_parser("create", help="Create a workspace worktree")
    create.add_argument("name", help="Workspace name")
    create.add_argument("-b", "--branch", help="Branch name (default: the workspace name)")
    create.add_argument(
        "--existing",
        action="store_true",
        help="Check out an existing branch instead of creating a new one",
    )
    create.add_argument("--base", help="Start point for a new branch (default: default branch)")
    create.add_argument("--force", action="store_true", help="Replace an existing worktree path")

    from_pr = subparsers.add_parser("from-pr", help="Create a workspace from a pull request")
    from_pr.add_argument("pr", help="PR URL, #123 or 123")
    from_pr.add_argument("--name", help="Workspace name (default: derived from the PR title)")
    from_pr.add_argument("-b", "--branch", help="Local branch name (default: pr/<n>-<head>)")
    from_pr.add_argument("--force", action="store_true", help="Replace an existing worktree path")

    remove = subparsers.add_parser("remove", help="Remove a workspace worktree")
    remove.add_argument("path", help="Worktree path")

    subparsers.add_parser("list", help="List worktrees")
    subparsers.add_parser("default-branch", help="Print the repository's default branch")
    subparsers.add_parser("branches", help="List local and remote branches")

    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)
