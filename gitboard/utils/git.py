"""Git command runner used by the repository handle."""

import os
import signal
import subprocess
import threading
import time
import logging
from typing import Dict, List, Optional

logger = logging.getLogger('gitboard')

# How often a running git process checks for timeout or cancellation
POLL_INTERVAL = 0.1

# Never prompt, never rewrite the index, stable output
BASE_ENV = {
    'GIT_TERMINAL_PROMPT': '0',
    'GIT_OPTIONAL_LOCKS': '0',
    'LC_ALL': 'C',
}


class GitCommandError(Exception):
    """A git command exited with a non-zero status."""

    def __init__(self, args: List[str], returncode: int, stderr: str = ""):
        self.args_list = args
        self.returncode = returncode
        self.stderr = stderr.strip()
        detail = self.stderr.splitlines()[-1] if self.stderr else f"exit status {returncode}"
        super().__init__(f"git {' '.join(args)}: {detail}")


class GitTimeoutError(GitCommandError):
    """A git command ran longer than its timeout and was killed."""

    def __init__(self, args: List[str], timeout: float):
        self.timeout = timeout
        super().__init__(args, -1, f"timed out after {timeout:g}s")


class GitCancelledError(Exception):
    """A git command was killed because the run was cancelled."""


def run_git(
    repo_path: str,
    *args: str,
    env: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None,
    cancel_event: Optional[threading.Event] = None
) -> str:
    """Run a git command inside a repository and return its stdout.

    Args:
        repo_path: Working directory for the command
        *args: Arguments passed to git
        env: Extra environment variables (e.g. credential settings)
        timeout: Seconds before the process is killed (None = no limit)
        cancel_event: Event that, once set, kills the process

    Returns:
        Standard output decoded as UTF-8

    Raises:
        GitCommandError: If git exits with a non-zero status or is missing
        GitTimeoutError: If the timeout elapses
        GitCancelledError: If cancel_event is set while the command runs
    """
    arg_list = list(args)
    if cancel_event is not None and cancel_event.is_set():
        raise GitCancelledError(f"git {' '.join(arg_list)}: cancelled")

    logger.debug(f"git {' '.join(arg_list)} (in {repo_path})")
    full_env = dict(os.environ)
    full_env.update(BASE_ENV)
    if env:
        full_env.update(env)

    try:
        proc = subprocess.Popen(
            ["git", *arg_list],
            cwd=repo_path,
            env=full_env,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            # Own process group, so a kill also reaches ssh and other helpers
            start_new_session=(os.name == "posix")
        )
    except (FileNotFoundError, NotADirectoryError) as e:
        raise GitCommandError(arg_list, 127, str(e)) from e

    started = time.monotonic()
    while True:
        try:
            stdout, stderr = proc.communicate(timeout=POLL_INTERVAL)
            break
        except subprocess.TimeoutExpired:
            if cancel_event is not None and cancel_event.is_set():
                _kill(proc)
                raise GitCancelledError(f"git {' '.join(arg_list)}: cancelled")
            if timeout is not None and time.monotonic() - started > timeout:
                _kill(proc)
                raise GitTimeoutError(arg_list, timeout)

    if proc.returncode != 0:
        raise GitCommandError(
            arg_list,
            proc.returncode,
            stderr.decode('utf-8', errors='replace')
        )
    return stdout.decode('utf-8', errors='replace')


def _kill(proc: subprocess.Popen) -> None:
    """Kill a git process, its helpers, and reap it."""
    if os.name == "posix":
        try:
            os.killpg(proc.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
    else:
        proc.kill()
    proc.communicate()


def get_current_branch(repo_path: str, **kwargs) -> Optional[str]:
    """Get the short name of the checked-out branch.

    Args:
        repo_path: Path to the repository

    Returns:
        Branch name, or None if HEAD is detached or unresolvable
    """
    try:
        return run_git(repo_path, "symbolic-ref", "--quiet", "--short", "HEAD", **kwargs).strip() or None
    except GitCommandError:
        return None


def get_remote_tracking_branch(repo_path: str, **kwargs) -> Optional[str]:
    """Get the remote tracking branch for the current branch.

    Args:
        repo_path: Path to the repository

    Returns:
        Remote tracking branch name (e.g., 'origin/main') or None if no tracking branch exists
    """
    try:
        return run_git(
            repo_path, "rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{upstream}", **kwargs
        ).strip() or None
    except GitCommandError:
        return None


def resolve_commit(repo_path: str, rev: str, **kwargs) -> Optional[str]:
    """Resolve a revision to a full commit id.

    Args:
        repo_path: Path to the repository
        rev: Revision expression (e.g. 'HEAD', '@{upstream}')

    Returns:
        Commit id, or None if the revision does not name a commit
    """
    try:
        return run_git(repo_path, "rev-parse", "--verify", "--quiet", f"{rev}^{{commit}}", **kwargs).strip() or None
    except GitCommandError:
        return None


def get_config_value(repo_path: str, key: str, **kwargs) -> Optional[str]:
    """Read a single git config value, or None if unset."""
    try:
        return run_git(repo_path, "config", "--get", key, **kwargs).strip() or None
    except GitCommandError:
        return None
