"""Tests for ResultAggregator."""

from collections.abc import Iterator

import pytest

from gitboard.core.aggregator import ResultAggregator
from gitboard.core.types import RepoResult


def results_named(*names: str) -> list[RepoResult]:
    return [RepoResult(name=name) for name in names]


class TestCollect:
    """Tests for ResultAggregator.collect."""

    def test_sorted_by_name(self) -> None:
        """Arrival order does not affect output order."""
        ordered = ResultAggregator().collect(3, iter(results_named("c", "a", "b")))
        assert [r.name for r in ordered] == ["a", "b", "c"]

    def test_same_output_for_any_arrival_order(self) -> None:
        """Every permutation of arrivals gives the same sequence."""
        first = ResultAggregator().collect(3, iter(results_named("b", "c", "a")))
        second = ResultAggregator().collect(3, iter(results_named("a", "b", "c")))
        assert first == second

    def test_zero_expected(self) -> None:
        """Nothing is consumed when nothing was dispatched."""

        def never() -> Iterator[RepoResult]:
            raise AssertionError("stream should not be read")
            yield  # pragma: no cover

        assert ResultAggregator().collect(0, never()) == []

    def test_stops_at_expected_count(self) -> None:
        """The aggregator does not wait for more than expected results."""

        def stream() -> Iterator[RepoResult]:
            yield RepoResult(name="b")
            yield RepoResult(name="a")
            raise AssertionError("read past the expected count")

        assert [r.name for r in ResultAggregator().collect(2, stream())] == ["a", "b"]

    def test_short_stream_is_an_error(self) -> None:
        """A stream that ends early is an integration bug."""
        with pytest.raises(RuntimeError, match="Expected 3 results"):
            ResultAggregator().collect(3, iter(results_named("a", "b")))

    def test_duplicate_name_is_an_error(self) -> None:
        """Two results for one name are an integration bug."""
        with pytest.raises(RuntimeError, match="Duplicate"):
            ResultAggregator().collect(2, iter(results_named("a", "a")))
