"""Report rendering: table rows, diagnostics and distance distribution."""

import sys
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, TextIO

from .core.errors import OpenError
from .core.types import Distance, RepoResult

SUMMARY_WIDTH = 50
TRUNCATION_MARKER = "..."
COLUMN_GAP = "   "


def truncate_summary(summary: Optional[str], width: int = SUMMARY_WIDTH) -> str:
    """Cap a commit summary at width characters, marking truncation.

    Args:
        summary: Commit summary or None
        width: Maximum number of characters kept

    Returns:
        The summary unchanged if short enough, otherwise its first
        width characters followed by the truncation marker
    """
    if not summary:
        return ""
    if len(summary) <= width:
        return summary
    return summary[:width] + TRUNCATION_MARKER


@dataclass
class ReportRow:
    """One printable line of the report."""
    name: str
    status_symbol: str
    branch_name: str
    distance_symbol: str
    remote_name: str
    summary: str

    @classmethod
    def from_result(cls, result: RepoResult) -> 'ReportRow':
        return cls(
            name=result.name,
            status_symbol=result.status.symbol if result.status else "",
            branch_name=result.branch_name or "",
            distance_symbol=result.distance.symbol if result.distance else "",
            remote_name=result.remote_name or "",
            summary=truncate_summary(result.commit_summary),
        )

    def cells(self) -> List[str]:
        return [
            self.name,
            self.status_symbol,
            self.branch_name,
            self.distance_symbol,
            self.remote_name,
            self.summary,
        ]


def build_rows(results: Sequence[RepoResult]) -> List[ReportRow]:
    """Convert ordered results into rows, keeping their order."""
    return [ReportRow.from_result(result) for result in results]


def render_table(rows: Sequence[ReportRow]) -> str:
    """Lay rows out as left-aligned columns.

    Returns:
        Table text, one line per row, without trailing whitespace
    """
    if not rows:
        return ""
    table = [row.cells() for row in rows]
    widths = [max(len(cells[i]) for cells in table) for i in range(len(table[0]))]
    lines = []
    for cells in table:
        line = COLUMN_GAP.join(cell.ljust(width) for cell, width in zip(cells, widths))
        lines.append(line.rstrip())
    return "\n".join(lines)


def print_report(results: Sequence[RepoResult], stream: Optional[TextIO] = None) -> None:
    """Print the status table.

    Args:
        results: Results ordered by name
        stream: Output stream (default: stdout)
    """
    stream = stream or sys.stdout
    table = render_table(build_rows(results))
    if table:
        print(table, file=stream)


def print_diagnostics(
    results: Sequence[RepoResult],
    open_errors: Sequence[OpenError] = (),
    stream: Optional[TextIO] = None
) -> None:
    """Print one line per repository problem.

    Args:
        results: Results ordered by name
        open_errors: Repositories that could not be opened
        stream: Output stream (default: stderr)
    """
    stream = stream or sys.stderr
    for error in open_errors:
        print(f"Could not open '{error.name}': {error}", file=stream)
    for result in results:
        if result.fetch_error:
            print(f"Could not fetch '{result.name}': {result.fetch_error}", file=stream)
        if result.failed:
            print(f"Could not read '{result.name}': {result.error}", file=stream)


CATEGORY_ORDER = [
    "In sync",
    "Ahead",
    "Behind",
    "Diverged",
    "No upstream",
    "Failed",
]

_DISTANCE_CATEGORIES = {
    Distance.SAME: "In sync",
    Distance.AHEAD: "Ahead",
    Distance.BEHIND: "Behind",
    Distance.BOTH: "Diverged",
    Distance.UNAVAILABLE: "No upstream",
}


def categorize(results: Sequence[RepoResult]) -> Dict[str, List[str]]:
    """Group repository names by their distance category."""
    categories = defaultdict(list)
    for result in results:
        if result.failed or result.distance is None:
            categories["Failed"].append(result.name)
        else:
            categories[_DISTANCE_CATEGORIES[result.distance]].append(result.name)
    return categories


def print_distribution(results: Sequence[RepoResult], stream: Optional[TextIO] = None) -> None:
    """Print how many repositories fall in each distance category.

    Args:
        results: Results ordered by name
        stream: Output stream (default: stdout)
    """
    stream = stream or sys.stdout
    categories = categorize(results)
    if not categories:
        return

    print("\n" + "=" * 60, file=stream)
    print("STATUS DISTRIBUTION", file=stream)
    print("=" * 60, file=stream)

    for category in CATEGORY_ORDER:
        if category not in categories:
            continue
        names = categories[category]
        count = len(names)
        print(f"\n{category}: {count} {'repository' if count == 1 else 'repositories'}", file=stream)
        for name in names:
            print(f"  - {name}", file=stream)

    print("=" * 60, file=stream)
