"""Tests for stderr classification, using captured git output"""
from git_workspace_keeper.exceptions import (
    BRANCH_ALREADY_EXISTS,
    BRANCH_CHECKED_OUT,
    WORKTREE_PATH_EXISTS,
    CommandError,
)
from git_workspace_keeper.services.error_classifier import classify_command_error, classify_error

FALLBACK = "Failed to create worktree"


class TestClassifyError:
    """Test each classification rule against literal stderr."""

    def test_checked_out_modern_git(self):
        stderr = "fatal: 'main' is already used by worktree at '/home/u/repo'\n"
        error = classify_error(stderr, FALLBACK)
        assert error.code == BRANCH_CHECKED_OUT
        assert error.is_collision

    def test_checked_out_older_git(self):
        stderr = "fatal: 'feature' is already checked out at '/tmp/repo-ws-one'"
        assert classify_error(stderr, FALLBACK).code == BRANCH_CHECKED_OUT

    def test_checked_out_with_preparing_line(self):
        stderr = (
            "Preparing worktree (checking out 'main')\n"
            "fatal: 'main' is already checked out at '/repo'\n"
        )
        assert classify_error(stderr, FALLBACK).code == BRANCH_CHECKED_OUT

    def test_invalid_reference(self):
        stderr = "fatal: invalid reference: does-not-exist\n"
        error = classify_error(stderr, FALLBACK)
        assert error.code is None
        assert error.message == 'Branch "does-not-exist" not found'
        assert str(error) == 'Branch "does-not-exist" not found'

    def test_branch_already_exists(self):
        stderr = "fatal: a branch named 'feature' already exists"
        error = classify_error(stderr, FALLBACK)
        assert error.code == BRANCH_ALREADY_EXISTS
        assert not error.is_collision

    def test_path_already_exists(self):
        stderr = "fatal: '/tmp/repo-ws-one' already exists"
        error = classify_error(stderr, FALLBACK)
        assert error.code == WORKTREE_PATH_EXISTS
        assert error.is_collision

    def test_not_a_git_repository(self):
        stderr = "fatal: not a git repository (or any of the parent directories): .git"
        error = classify_error(stderr, FALLBACK)
        assert error.code is None
        assert error.message == "Not a git repository"

    def test_generic_fatal_line(self):
        stderr = "warning: something\nfatal: '/tmp/x' is a missing but locked worktree;\n"
        error = classify_error(stderr, FALLBACK)
        assert error.code is None
        assert error.message == "'/tmp/x' is a missing but locked worktree;"

    def test_fallback_without_fatal(self):
        error = classify_error("error: something odd happened", FALLBACK)
        assert error.message == FALLBACK

    def test_fallback_for_empty_stderr(self):
        assert classify_error("", FALLBACK).message == FALLBACK
        assert classify_error(None, FALLBACK).message == FALLBACK

    def test_first_match_wins(self):
        # Both "invalid reference" and "already exists" appear; the earlier rule wins
        stderr = "fatal: invalid reference: x\nfatal: '/p' already exists"
        error = classify_error(stderr, FALLBACK)
        assert error.message == 'Branch "x" not found'
        assert error.code is None

    def test_branch_named_before_path_exists(self):
        stderr = "fatal: a branch named 'ws' already exists"
        assert classify_error(stderr, FALLBACK).code == BRANCH_ALREADY_EXISTS


class TestClassifyCommandError:
    """Test classification of runner failures."""

    def test_uses_stderr(self):
        error = CommandError(
            "git", ["worktree", "add"], "/repo", status=128,
            stderr="fatal: invalid reference: nope",
        )
        assert classify_command_error(error, FALLBACK).message == 'Branch "nope" not found'

    def test_spawn_failure_without_recognised_text(self):
        error = CommandError("git", ["status"], "/repo", status=None, stderr="")
        assert classify_command_error(error, FALLBACK).message == FALLBACK
