"""Logging configuration for git-workspace-keeper"""
import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

LOG_FILE_NAME = 'git-workspace-keeper.log'


def get_log_dir() -> Path:
    """Directory holding the debug log file."""
    return Path.home() / '.git-workspace-keeper'


def _level_for(verbose: bool, debug: bool) -> int:
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    return logging.WARNING


def setup_logging(verbose: bool = False, debug: bool = False, log_to_file: bool = False) -> None:
    """
    Configure logging for the application.

    Console records go through rich on stderr so they interleave cleanly
    with the CLI's spinner and tables on stdout.

    Args:
        verbose: If True, show INFO level messages
        debug: If True, show DEBUG level messages with timestamps and source paths
        log_to_file: If True, also write every record to a log file
    """
    level = _level_for(verbose, debug)
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if (log_to_file or debug) else level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if log_to_file or debug:
        log_dir = get_log_dir()
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / LOG_FILE_NAME, mode='w')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        root_logger.addHandler(file_handler)

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_time=debug,
        show_path=debug,
        markup=False,
        rich_tracebacks=debug,
    )
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(fmt='[%(name)s] %(message)s'))
    root_logger.addHandler(console_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for the specified module.

    Args:
        name: Name of the module (typically __name__)

    Returns:
        Logger instance
    """
    # "git_workspace_keeper.services.git.provisioner" -> "git.provisioner"
    if name.startswith('git_workspace_keeper.'):
        name = name.replace('git_workspace_keeper.', '', 1)
    if name.startswith('services.'):
        name = name.replace('services.', '', 1)

    return logging.getLogger(name)
