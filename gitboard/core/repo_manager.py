"""Repository manager for dispatching status jobs across a worker pool."""

import threading
import logging
from typing import Callable, Iterable, Iterator, List, Optional, Sequence, Tuple
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait

from .credentials import AmbientCredentials, CredentialProvider
from .errors import FetchError, OpenError, StatusComputeError
from .repository import DEFAULT_FETCH_TIMEOUT, RepositoryHandle
from .status import compute_distance
from .types import JobState, RepoResult
from ..utils.git import GitCancelledError

logger = logging.getLogger('gitboard')

DEFAULT_WORKERS = 4
CANCELLED = "cancelled"

ProgressCallback = Callable[[int, int, str], None]
OpenErrorCallback = Callable[[OpenError], None]


def open_repositories(
    sources: Iterable[Tuple[str, str]],
    on_error: Optional[OpenErrorCallback] = None
) -> List[RepositoryHandle]:
    """Open every (name, path) pair, leaving out the ones that fail.

    Failed opens are never dispatched; they are handed to on_error so the
    caller can report them.

    Args:
        sources: Ordered (name, path) pairs with unique names
        on_error: Called once per path that could not be opened

    Returns:
        Handles for the repositories that opened
    """
    handles = []
    for name, path in sources:
        try:
            handles.append(RepositoryHandle.open(name, path))
        except OpenError as e:
            logger.info(f"Could not open '{name}': {e}")
            if on_error:
                on_error(e)
    return handles


class RepoManager:
    """Bounded worker pool that produces one result per repository."""

    def __init__(
        self,
        max_workers: int = DEFAULT_WORKERS,
        fetch: bool = True,
        fetch_timeout: Optional[float] = DEFAULT_FETCH_TIMEOUT,
        credentials: Optional[CredentialProvider] = None,
        cancel_event: Optional[threading.Event] = None
    ):
        """Initialize repository manager.

        Args:
            max_workers: Number of parallel workers (at least 1)
            fetch: Whether to fetch each repository's upstream first
            fetch_timeout: Seconds before a single fetch is abandoned
            credentials: Authentication provider for fetches
            cancel_event: Event that aborts outstanding work once set
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self.max_workers = max_workers
        self.fetch = fetch
        self.fetch_timeout = fetch_timeout
        self.credentials = credentials or AmbientCredentials()
        self.cancel_event = cancel_event or threading.Event()

    def cancel(self) -> None:
        """Abort outstanding fetches and jobs.

        Results already emitted stay valid; jobs in flight finish as failed.
        """
        if not self.cancel_event.is_set():
            logger.warning("Cancelling outstanding repository jobs")
        self.cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    def dispatch(
        self,
        handles: Sequence[RepositoryHandle],
        progress: Optional[ProgressCallback] = None
    ) -> Iterator[RepoResult]:
        """Run one job per handle and yield results as they complete.

        Exactly one result is yielded per handle, in completion order.
        Each handle is used only by its own job. A KeyboardInterrupt while
        waiting or in the progress callback cancels outstanding work; the
        remaining jobs still report. Closing the generator early also cancels.

        Args:
            handles: Opened repositories with unique names
            progress: Called as progress(completed, total, name) once per job

        Yields:
            RepoResult for each handle
        """
        total = len(handles)
        logger.info(f"Dispatching {total} repositories to {self.max_workers} workers (fetch: {self.fetch})")
        if total == 0:
            return

        completed = 0
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_name = {}
            for handle in handles:
                handle.cancel_event = self.cancel_event
                future_to_name[executor.submit(self._process_repo, handle)] = handle.name

            pending = set(future_to_name)
            try:
                while pending:
                    try:
                        done, pending = wait(pending, return_when=FIRST_COMPLETED)
                    except KeyboardInterrupt:
                        self.cancel()
                        continue

                    for future in done:
                        result = self._future_result(future, future_to_name[future])
                        completed += 1
                        if progress:
                            try:
                                progress(completed, total, result.name)
                            except KeyboardInterrupt:
                                self.cancel()
                        yield result
            except BaseException:
                if completed < total:
                    # Abandoned mid-drain: stop queued jobs before the pool joins them
                    self.cancel()
                raise

    def _future_result(self, future: Future, name: str) -> RepoResult:
        """Unwrap a finished job, turning an escaped exception into a failed result."""
        error = future.exception()
        if error is None:
            return future.result()
        logger.error(f"Unexpected error processing {name}: {error}")
        result = RepoResult(name=name)
        result.fail(f"Unexpected error: {error}")
        return result

    def _process_repo(self, handle: RepositoryHandle) -> RepoResult:
        """Process a single repository.

        Args:
            handle: Repository owned by this job

        Returns:
            Result, failed if status could not be computed or the run was cancelled
        """
        result = RepoResult(name=handle.name)

        if self.cancelled:
            result.fail(CANCELLED)
            return result

        try:
            if self.fetch:
                result.advance(JobState.FETCHING)
                try:
                    result.fetched = handle.fetch(self.credentials, timeout=self.fetch_timeout)
                except FetchError as e:
                    # Continue against the last known remote state
                    logger.info(f"{handle.name}: {e}")
                    result.fetch_error = str(e)

            result.advance(JobState.COMPUTING_STATUS)
            result.branch_name = handle.branch_name()
            result.remote_name = handle.remote_name()
            result.commit_summary = handle.commit_summary()
            result.status = handle.status()
            result.distance = compute_distance(handle)
            result.advance(JobState.COMPLETED)
        except GitCancelledError:
            logger.info(f"{handle.name}: abandoned after cancellation")
            result.fail(CANCELLED)
        except StatusComputeError as e:
            logger.info(f"{handle.name}: {e}")
            result.fail(str(e))
        except Exception as e:
            logger.error(f"Unexpected error processing {handle.name}: {e}")
            result.fail(f"Unexpected error: {e}")

        logger.debug(f"{handle.name}: {result.state.value}")
        return result
