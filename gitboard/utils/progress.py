"""Progress tracking utilities."""

import sys
from typing import Optional, TextIO


class ProgressTracker:
    """Draw a single-line progress bar for repository jobs.

    Only observes (completed, total, label) updates; it has no knowledge
    of how the jobs run.
    """

    def __init__(self, stream: Optional[TextIO] = None, prefix: str = "Processing...", bar_width: int = 40):
        """Initialize progress tracker.

        Args:
            stream: Where to draw (default: stderr)
            prefix: Text shown before the bar
            bar_width: Width of the bar in characters
        """
        self.stream = stream or sys.stderr
        self.prefix = prefix
        self.bar_width = bar_width
        self.completed = 0
        self.total = 0
        self.current_repo: Optional[str] = None
        self._last_width = 0

    def update(self, completed: int, total: int, label: str) -> None:
        """Record one finished job and redraw.

        Args:
            completed: Jobs finished so far
            total: Jobs dispatched
            label: Name of the repository that just finished
        """
        self.completed = completed
        self.total = total
        self.current_repo = label
        self.display()

    def render(self) -> str:
        """Build the progress line."""
        filled = int(self.bar_width * self.completed / self.total) if self.total > 0 else 0
        if 0 < filled < self.bar_width:
            bar = '=' * (filled - 1) + '>' + ' ' * (self.bar_width - filled)
        else:
            bar = '=' * filled + ' ' * (self.bar_width - filled)
        status = f"{self.prefix} [{bar}] {self.completed}/{self.total}"
        if self.current_repo:
            status += f": {self.current_repo}"
        return status

    def display(self) -> None:
        """Display current progress."""
        line = self.render()
        padding = ' ' * max(0, self._last_width - len(line))
        self._last_width = len(line)
        self.stream.write(f"\r{line}{padding}")
        self.stream.flush()

    def finish(self) -> None:
        """Clear the progress line."""
        if self._last_width:
            self.stream.write("\r" + ' ' * self._last_width + "\r")
            self.stream.flush()
        self._last_width = 0
