"""Collect per-repository results into a name-ordered report."""

import logging
from typing import Dict, Iterable, List

from .types import RepoResult

logger = logging.getLogger('gitboard')


class ResultAggregator:
    """Buffers results until every dispatched job has reported.

    Arrival order does not matter; the output is always sorted by name.
    """

    def __init__(self):
        self._results: Dict[str, RepoResult] = {}

    def collect(self, expected_count: int, results: Iterable[RepoResult]) -> List[RepoResult]:
        """Consume exactly expected_count results and return them sorted by name.

        Args:
            expected_count: Number of jobs that were dispatched
            results: Stream of results, in completion order

        Returns:
            Results ordered by ascending repository name

        Raises:
            RuntimeError: If the stream ends early or repeats a name
        """
        self._results = {}
        if expected_count > 0:
            for result in results:
                self.add(result)
                if len(self._results) == expected_count:
                    break

        if len(self._results) != expected_count:
            raise RuntimeError(
                f"Expected {expected_count} results, stream ended after {len(self._results)}"
            )
        return self.ordered()

    def add(self, result: RepoResult) -> None:
        """Insert one result.

        Raises:
            RuntimeError: If a result for the same name was already collected
        """
        if result.name in self._results:
            raise RuntimeError(f"Duplicate result for repository '{result.name}'")
        self._results[result.name] = result
        logger.debug(f"Collected result {len(self._results)}: {result.name} ({result.state.value})")

    def ordered(self) -> List[RepoResult]:
        """Return collected results sorted by name."""
        return [self._results[name] for name in sorted(self._results)]
