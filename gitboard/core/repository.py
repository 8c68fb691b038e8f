"""Read-only handle on one local git working copy."""

import os
import threading
import logging
from typing import Optional, Tuple

from .credentials import AmbientCredentials, CredentialProvider
from .errors import FetchError, FetchTimeout, OpenError
from .status import compute_status, parse_ahead_behind
from .types import StatusFlags
from ..utils.git import (
    GitCommandError,
    GitTimeoutError,
    get_config_value,
    get_current_branch,
    get_remote_tracking_branch,
    resolve_commit,
    run_git,
)

logger = logging.getLogger('gitboard')

DEFAULT_FETCH_TIMEOUT = 30.0


class RepositoryHandle:
    """A named repository on disk.

    A handle is owned by exactly one job at a time and is not safe to
    share between threads. Its status is computed at most once.
    """

    def __init__(self, name: str, path: str, cancel_event: Optional[threading.Event] = None):
        self.name = name
        self.path = path
        self.cancel_event = cancel_event
        self._status: Optional[StatusFlags] = None
        self._status_computed = False

    @classmethod
    def open(cls, name: str, path: str) -> 'RepositoryHandle':
        """Open a repository by name and working copy path.

        Args:
            name: Unique display name
            path: Root of the working copy

        Returns:
            RepositoryHandle for the path

        Raises:
            OpenError: If path is not the root of a git working copy
        """
        path = os.path.abspath(os.path.expanduser(str(path)))
        if not os.path.exists(path):
            raise OpenError(name, path, "path does not exist")
        if not os.path.isdir(path):
            raise OpenError(name, path, "path is not a directory")

        try:
            toplevel = run_git(path, "rev-parse", "--show-toplevel").strip()
        except GitCommandError as e:
            raise OpenError(name, path, f"not a git working copy ({e})") from e

        if os.path.realpath(toplevel) != os.path.realpath(path):
            raise OpenError(name, path, f"not a repository root (root is {toplevel})")

        return cls(name, path)

    def _git(self, *args: str, **kwargs) -> str:
        return run_git(self.path, *args, cancel_event=self.cancel_event, **kwargs)

    def fetch(
        self,
        credentials: Optional[CredentialProvider] = None,
        timeout: Optional[float] = DEFAULT_FETCH_TIMEOUT
    ) -> bool:
        """Fetch the current branch's upstream ref from its remote.

        Only the single upstream ref is transferred; the working tree is
        never touched.

        Args:
            credentials: Provider for authentication settings
            timeout: Seconds before the fetch is abandoned

        Returns:
            True if a fetch ran, False if there is no remote upstream to fetch

        Raises:
            FetchTimeout: If the fetch exceeded the timeout
            FetchError: If the fetch failed
        """
        branch = get_current_branch(self.path, cancel_event=self.cancel_event)
        if branch is None:
            logger.debug(f"{self.name}: detached HEAD, nothing to fetch")
            return False

        remote = get_config_value(self.path, f"branch.{branch}.remote", cancel_event=self.cancel_event)
        merge_ref = get_config_value(self.path, f"branch.{branch}.merge", cancel_event=self.cancel_event)
        if remote is None or merge_ref is None or remote == ".":
            logger.debug(f"{self.name}: no remote upstream for {branch}, nothing to fetch")
            return False

        credentials = credentials or AmbientCredentials()
        logger.info(f"{self.name}: fetching {merge_ref} from {remote}")
        try:
            self._git(
                "fetch", "--quiet", "--no-tags", remote, merge_ref,
                env=credentials.environment(),
                timeout=timeout
            )
        except GitTimeoutError as e:
            raise FetchTimeout(f"Fetch from {remote} timed out after {e.timeout:g}s") from e
        except GitCommandError as e:
            raise FetchError(f"Fetch from {remote} failed: {e}") from e
        return True

    def status(self) -> StatusFlags:
        """Get the working copy status, computing it on first use.

        Raises:
            StatusComputeError: If the status cannot be read
        """
        if not self._status_computed:
            self._status = compute_status(self)
            self._status_computed = True
        return self._status

    @property
    def status_known(self) -> bool:
        """Check if status has already been computed."""
        return self._status_computed

    def status_porcelain(self) -> str:
        """Raw machine-readable status output (ignored paths excluded)."""
        return self._git(
            "status", "--porcelain=v2", "-z",
            "--untracked-files=all", "--ignored=no"
        )

    def branch_name(self) -> Optional[str]:
        """Short name of the checked-out branch, or None if detached."""
        return get_current_branch(self.path, cancel_event=self.cancel_event)

    def remote_name(self) -> Optional[str]:
        """Short name of the upstream tracking ref (e.g. 'origin/main'), or None."""
        return get_remote_tracking_branch(self.path, cancel_event=self.cancel_event)

    def commit_summary(self) -> Optional[str]:
        """First line of the HEAD commit message, or None if HEAD is unborn."""
        try:
            summary = self._git("log", "-1", "--format=%s", "HEAD").rstrip("\n")
        except GitCommandError:
            return None
        return summary or None

    def head_commit_id(self) -> Optional[str]:
        """Commit id of the checked-out branch, or None if detached or unborn."""
        if self.branch_name() is None:
            return None
        return resolve_commit(self.path, "HEAD", cancel_event=self.cancel_event)

    def upstream_commit_id(self) -> Optional[str]:
        """Commit id of the upstream tracking ref, or None if unresolvable."""
        return resolve_commit(self.path, "@{upstream}", cancel_event=self.cancel_event)

    def ahead_behind(self, head: str, upstream: str) -> Tuple[int, int]:
        """Count commits reachable only from head and only from upstream."""
        output = self._git("rev-list", "--left-right", "--count", f"{head}...{upstream}")
        return parse_ahead_behind(output)

    def __repr__(self) -> str:
        return f"RepositoryHandle(name={self.name!r}, path={self.path!r})"
