"""Status classification and ahead/behind distance for a repository."""

import logging
from typing import List, Tuple, TYPE_CHECKING

from .errors import StatusComputeError
from .types import Distance, StatusFlags
from ..utils.git import GitCommandError

if TYPE_CHECKING:
    from .repository import RepositoryHandle

logger = logging.getLogger('gitboard')

# Index-side change codes (added, modified, deleted, renamed, copied, type change)
STAGED_CODES = frozenset("AMDRCT")
# Worktree-side change codes (modified, deleted, renamed, type change)
UNSTAGED_CODES = frozenset("MDRT")

STAGED = StatusFlags(staged=True)
UNSTAGED = StatusFlags(unstaged=True)
UNTRACKED = StatusFlags(untracked=True)
CLEAN = StatusFlags()


def parse_porcelain_v2(output: str) -> List[Tuple[str, str]]:
    """Split `git status --porcelain=v2 -z` output into entries.

    Args:
        output: Raw NUL-separated status output

    Returns:
        List of (kind, xy) tuples, where kind is the record type
        ('1', '2', 'u', '?', '!') and xy is the two-letter change code
        ('' for untracked and ignored records)
    """
    entries = []
    records = output.split('\0')
    i = 0
    while i < len(records):
        record = records[i]
        i += 1
        if not record or record.startswith('#'):
            continue
        kind = record[0]
        if kind in ('1', '2', 'u'):
            entries.append((kind, record[2:4]))
            if kind == '2':
                # Renamed/copied records carry the original path as a separate field
                i += 1
        elif kind in ('?', '!'):
            entries.append((kind, ''))
        else:
            logger.debug(f"Ignoring unknown status record: {record!r}")
    return entries


def classify_entry(kind: str, xy: str) -> StatusFlags:
    """Classify one status entry into facets.

    A single entry can be both staged and unstaged (e.g. staged, then
    modified again in the working tree). Unmerged and ignored entries
    contribute nothing.
    """
    if kind == '?':
        return UNTRACKED
    if kind not in ('1', '2'):
        return CLEAN

    index_code, worktree_code = xy[0], xy[1]
    flags = CLEAN
    if index_code in STAGED_CODES:
        flags = flags | STAGED
    if worktree_code in UNSTAGED_CODES:
        flags = flags | UNSTAGED
    elif worktree_code == 'A':
        # Intent-to-add: path is known to the index but its content is not
        flags = flags | UNTRACKED
    return flags


def flags_from_porcelain(output: str) -> StatusFlags:
    """Fold every status entry into a single StatusFlags value."""
    flags = CLEAN
    for kind, xy in parse_porcelain_v2(output):
        flags = flags | classify_entry(kind, xy)
    return flags


def compute_status(handle: 'RepositoryHandle') -> StatusFlags:
    """Compute staged/unstaged/untracked facets for a repository.

    Enumerates index and working-tree differences against HEAD, excluding
    ignored paths and including untracked ones. The result is a snapshot.

    Args:
        handle: Repository to inspect

    Returns:
        Union of the facets of every change entry

    Raises:
        StatusComputeError: If git cannot enumerate the status
    """
    try:
        output = handle.status_porcelain()
    except GitCommandError as e:
        raise StatusComputeError(f"Failed to read status: {e}") from e
    return flags_from_porcelain(output)


def parse_ahead_behind(output: str) -> Tuple[int, int]:
    """Parse `git rev-list --left-right --count` output into (ahead, behind)."""
    parts = output.split()
    if len(parts) != 2:
        raise ValueError(f"Unexpected ahead/behind output: {output!r}")
    return int(parts[0]), int(parts[1])


def compute_distance(handle: 'RepositoryHandle') -> Distance:
    """Compute the local branch's distance to its upstream.

    Args:
        handle: Repository to inspect

    Returns:
        UNAVAILABLE when the head or upstream commit cannot be resolved,
        otherwise the mapping of the graph ahead/behind counts

    Raises:
        StatusComputeError: If the commit graph traversal itself fails
    """
    head = handle.head_commit_id()
    upstream = handle.upstream_commit_id()
    if head is None or upstream is None:
        return Distance.UNAVAILABLE

    try:
        ahead, behind = handle.ahead_behind(head, upstream)
    except (GitCommandError, ValueError) as e:
        raise StatusComputeError(f"Failed to count ahead/behind: {e}") from e
    return Distance.from_counts(ahead, behind)
