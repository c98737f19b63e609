"""Classification of git/gh stderr into caller-facing errors.

Pure text analysis over captured stderr; nothing here runs git. Patterns are
checked in order and the first match wins.
"""

import re
from typing import Optional

from git_workspace_keeper.exceptions import (
    BRANCH_ALREADY_EXISTS,
    BRANCH_CHECKED_OUT,
    WORKTREE_PATH_EXISTS,
    ClassifiedError,
    CommandError,
)

_CHECKED_OUT_RE = re.compile(r"'([^']+)' is already (?:checked out|used by worktree) at '([^']+)'")
_INVALID_REFERENCE_RE = re.compile(r"invalid reference: (.+)")
_FATAL_RE = re.compile(r"fatal: (.+)")


def classify_error(stderr: Optional[str], fallback: str) -> ClassifiedError:
    """Map raw stderr text to a ClassifiedError.

    Args:
        stderr: Raw stderr captured from the failed command
        fallback: Message used when nothing in stderr is recognised

    Returns:
        ClassifiedError with a stable code, or a free-text message
    """
    if not stderr:
        return ClassifiedError(message=fallback)

    if _CHECKED_OUT_RE.search(stderr):
        return ClassifiedError(BRANCH_CHECKED_OUT)

    if "invalid reference" in stderr:
        match = _INVALID_REFERENCE_RE.search(stderr)
        ref = match.group(1).strip() if match else ""
        return ClassifiedError(message=f'Branch "{ref}" not found' if ref else "Branch not found")

    if "a branch named" in stderr:
        return ClassifiedError(BRANCH_ALREADY_EXISTS)

    if "already exists" in stderr:
        return ClassifiedError(WORKTREE_PATH_EXISTS)

    if "not a git repository" in stderr:
        return ClassifiedError(message="Not a git repository")

    fatal = _FATAL_RE.search(stderr)
    if fatal and fatal.group(1).strip():
        return ClassifiedError(message=fatal.group(1).strip())

    return ClassifiedError(message=fallback)


def classify_command_error(error: CommandError, fallback: str) -> ClassifiedError:
    """Classify a CommandError by its stderr."""
    return classify_error(error.stderr, fallback)
