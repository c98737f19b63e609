"""Services for git-workspace-keeper.

This package provides:
- command_runner: async execution of git/gh with bounded output
- error_classifier: stderr to caller-facing error codes
- env_copier: .env propagation into new worktrees
- github_service: GitHub CLI access and its lookup cache
- git: worktree provisioning, removal and branch queries
"""
