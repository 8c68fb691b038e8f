"""Utilities package for gitboard."""

from .git import (
    run_git,
    GitCommandError,
    GitTimeoutError,
    GitCancelledError,
)
from .progress import ProgressTracker

__all__ = [
    'run_git',
    'GitCommandError',
    'GitTimeoutError',
    'GitCancelledError',
    'ProgressTracker',
]
