"""Copies local .env files from a repository into a new worktree."""

import os
import shutil
from typing import Iterable, Optional

from git_workspace_keeper.config import DEFAULT_ENV_SKIP_DIRS
from git_workspace_keeper.logging_config import get_logger

logger = get_logger(__name__)

ENV_FILE_PREFIX = ".env"


class EnvFileCopier:
    """Propagates gitignored ``.env*`` files without overwriting anything."""

    def __init__(self, skip_dirs: Optional[Iterable[str]] = None):
        self.skip_dirs = frozenset(DEFAULT_ENV_SKIP_DIRS if skip_dirs is None else skip_dirs)

    def copy_env_files(self, source_root: str, dest_root: str) -> list[str]:
        """Copy every ``.env*`` file under ``source_root`` to the same relative path.

        Files already present at the destination are left untouched. Failures
        on individual files are logged and skipped.

        Returns:
            Relative paths of the files that were copied
        """
        copied: list[str] = []
        for dirpath, dirnames, filenames in os.walk(source_root, onerror=self._log_walk_error):
            dirnames[:] = [d for d in dirnames if d not in self.skip_dirs]

            for filename in filenames:
                if not filename.startswith(ENV_FILE_PREFIX):
                    continue
                source = os.path.join(dirpath, filename)
                relative = os.path.relpath(source, source_root)
                destination = os.path.join(dest_root, relative)
                if os.path.lexists(destination):
                    logger.debug(f"Keeping existing {relative}")
                    continue
                try:
                    os.makedirs(os.path.dirname(destination), exist_ok=True)
                    shutil.copy2(source, destination)
                    copied.append(relative)
                except OSError as e:
                    logger.debug(f"Could not copy {relative}: {e}")

        if copied:
            logger.info(f"Copied {len(copied)} .env file(s) into {dest_root}")
        return copied

    @staticmethod
    def _log_walk_error(error: OSError) -> None:
        logger.debug(f"Skipping unreadable directory: {error}")
