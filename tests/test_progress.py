"""Tests for the progress tracker."""

import io

from gitboard.utils.progress import ProgressTracker


class TestProgressTracker:
    """Tests for ProgressTracker rendering."""

    def test_render_partial(self) -> None:
        tracker = ProgressTracker(stream=io.StringIO(), bar_width=10)
        tracker.update(5, 10, "website")
        assert tracker.render() == "Processing... [====>     ] 5/10: website"

    def test_render_complete(self) -> None:
        tracker = ProgressTracker(stream=io.StringIO(), bar_width=4)
        tracker.update(2, 2, "dotfiles")
        assert tracker.render() == "Processing... [====] 2/2: dotfiles"

    def test_finish_clears_line(self) -> None:
        stream = io.StringIO()
        tracker = ProgressTracker(stream=stream, bar_width=4)
        tracker.update(1, 2, "a")
        tracker.finish()
        assert stream.getvalue().endswith("\r")
