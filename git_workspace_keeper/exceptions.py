"""Custom exceptions for git-workspace-keeper"""

from typing import Optional, Sequence

# Error codes surfaced to callers. Callers compare against these strings to
# decide whether to offer a force-replace retry.
WORKTREE_PATH_EXISTS = "WORKTREE_PATH_EXISTS"
BRANCH_CHECKED_OUT = "BRANCH_CHECKED_OUT"
BRANCH_ALREADY_EXISTS = "BRANCH_ALREADY_EXISTS"

ERROR_MESSAGES = {
    WORKTREE_PATH_EXISTS: "Worktree path already exists",
    BRANCH_CHECKED_OUT: "Branch is already checked out in another worktree",
    BRANCH_ALREADY_EXISTS: "A branch with this name already exists",
}


class WorkspaceKeeperError(Exception):
    """Base exception for all git-workspace-keeper errors."""
    pass


class CommandError(WorkspaceKeeperError):
    """Exception raised when an external command fails or cannot be spawned."""

    def __init__(
        self,
        program: str,
        args: Sequence[str],
        cwd: Optional[str],
        status: Optional[int] = None,
        stderr: str = "",
        stdout: str = "",
    ):
        self.program = program
        self.args_list = list(args)
        self.cwd = cwd
        self.status = status  # None means the program never ran
        self.stderr = stderr or ""
        self.stdout = stdout or ""

        command = " ".join([program, *self.args_list])
        if status is None:
            error_msg = f"Could not run '{command}'"
        else:
            error_msg = f"Command '{command}' failed (exit {status})"
        if self.stderr.strip():
            error_msg += f": {self.stderr.strip()}"

        super().__init__(error_msg)

    @property
    def spawn_failed(self) -> bool:
        return self.status is None


class OutputLimitExceededError(CommandError):
    """Exception raised when a command writes more stdout than allowed."""

    def __init__(self, program: str, args: Sequence[str], cwd: Optional[str], limit: int):
        self.limit = limit
        super().__init__(
            program,
            args,
            cwd,
            status=None,
            stderr=f"output exceeded {limit} bytes",
        )


class ClassifiedError(WorkspaceKeeperError):
    """Caller-facing error derived from a failed git/gh command or invalid input.

    ``code`` is one of the module-level error codes, or None when ``message``
    is a free-text description (e.g. a verbatim ``fatal:`` line).
    """

    def __init__(self, code: Optional[str] = None, message: Optional[str] = None):
        self.code = code
        if message is None:
            message = ERROR_MESSAGES.get(code, code) if code else "Unknown error"
        self.message = message
        super().__init__(message)

    @property
    def is_collision(self) -> bool:
        """True when a force-replace retry could resolve the error."""
        return self.code in (WORKTREE_PATH_EXISTS, BRANCH_CHECKED_OUT)

    def __repr__(self) -> str:
        return f"ClassifiedError(code={self.code!r}, message={self.message!r})"
