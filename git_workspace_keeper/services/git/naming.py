"""Sanitization of user text into worktree directory and branch names."""

import re
from typing import Iterable

WORKTREE_NAME_FALLBACK = "workspace"
MAX_WORKTREE_NAME_LENGTH = 80
MAX_SLUG_LENGTH = 48

_INVALID_WORKTREE_CHARS_RE = re.compile(r"[^a-z0-9_-]+")

_WHITESPACE_RE = re.compile(r"\s+")
_DOT_RUN_RE = re.compile(r"\.{2,}")
_ILLEGAL_BRANCH_CHARS_RE = re.compile(r"[\x00-\x1f\x7f~^:?*\[\]\\]")
_SLASH_RUN_RE = re.compile(r"/{2,}")
_LOCK_COMPONENT_RE = re.compile(r"\.lock(/|$)")
_LEADING_RE = re.compile(r"^[.\-/]+")
_TRAILING_RE = re.compile(r"[.\-/]+$")


def sanitize_worktree_name(name: str) -> str:
    """Turn arbitrary text into a safe worktree directory-name fragment.

    Never raises; an input with nothing usable yields ``"workspace"``.

    >>> sanitize_worktree_name("My Cool Feature!!")
    'my-cool-feature'
    """
    cleaned = _INVALID_WORKTREE_CHARS_RE.sub("-", (name or "").strip().lower())
    cleaned = cleaned.strip("-_")[:MAX_WORKTREE_NAME_LENGTH].strip("-_")
    return cleaned or WORKTREE_NAME_FALLBACK


def _sanitize_branch_once(name: str) -> str:
    name = name.strip()
    name = _WHITESPACE_RE.sub("-", name)
    name = _DOT_RUN_RE.sub("-", name)
    name = _ILLEGAL_BRANCH_CHARS_RE.sub("-", name)
    name = _SLASH_RUN_RE.sub("/", name)
    name = name.replace("/.", "/-")
    name = name.replace("@{", "-")
    name = _LOCK_COMPONENT_RE.sub(r"-lock\1", name)
    name = _LEADING_RE.sub("", name)
    name = _TRAILING_RE.sub("", name)
    return name


def sanitize_branch_name(name: str) -> str:
    """Turn arbitrary text into a valid git branch name.

    May return an empty string; callers must treat that as an error rather
    than substituting a default.
    """
    # A single pass can expose a new violation (e.g. stripping a trailing
    # "." leaves a ".lock" suffix), so rewrite until nothing changes.
    # Every rewrite shortens the string or turns a special char into "-".
    current = name or ""
    while True:
        cleaned = _sanitize_branch_once(current)
        if cleaned == current:
            return cleaned
        current = cleaned


def slugify_workspace_name(text: str) -> str:
    """Lowercase slug of a PR title, suitable as a workspace name."""
    slug = re.sub(r"[^a-z0-9]+", "-", (text or "").strip().lower())
    return slug.strip("-")[:MAX_SLUG_LENGTH].strip("-")


def build_pr_workspace_name(number: int, title: str) -> str:
    """Workspace name for a pull request checkout."""
    return slugify_workspace_name(title) or f"pr-{number}"


def build_pr_local_branch(number: int, head_ref_name: str) -> str:
    """Local branch name used when checking out a pull request."""
    head = sanitize_branch_name(head_ref_name) or f"pr-{number}"
    return sanitize_branch_name(f"pr/{number}-{head}") or f"pr/{number}"


def unique_workspace_name(base_name: str, existing_names: Iterable[str]) -> str:
    """Return ``base_name``, suffixed ``-2``, ``-3``... until it is unused.

    Comparison is case-insensitive.
    """
    normalized = (base_name or "").strip() or WORKTREE_NAME_FALLBACK
    used = {name.lower() for name in existing_names}
    if normalized.lower() not in used:
        return normalized

    suffix = 2
    while f"{normalized}-{suffix}".lower() in used:
        suffix += 1
    return f"{normalized}-{suffix}"
