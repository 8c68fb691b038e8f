"""Core types for repository status reporting."""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional
from enum import Enum


@dataclass(frozen=True)
class StatusFlags:
    """Which kinds of local changes a working copy has.

    Facets are independent and combine as a set union; only presence
    matters, not how many entries contributed.
    """
    staged: bool = False
    unstaged: bool = False
    untracked: bool = False

    def __or__(self, other: 'StatusFlags') -> 'StatusFlags':
        return StatusFlags(
            staged=self.staged or other.staged,
            unstaged=self.unstaged or other.unstaged,
            untracked=self.untracked or other.untracked,
        )

    @property
    def clean(self) -> bool:
        """Check if no facet is set."""
        return not (self.staged or self.unstaged or self.untracked)

    @property
    def symbol(self) -> str:
        """Render as '+' (staged), '*' (unstaged), '_' (untracked), in that order."""
        symbol = ""
        if self.staged:
            symbol += "+"
        if self.unstaged:
            symbol += "*"
        if self.untracked:
            symbol += "_"
        return symbol


class Distance(Enum):
    """Position of the local branch relative to its upstream."""
    SAME = "same"
    AHEAD = "ahead"
    BEHIND = "behind"
    BOTH = "both"
    UNAVAILABLE = "unavailable"

    @classmethod
    def from_counts(cls, ahead: int, behind: int) -> 'Distance':
        """Map ahead/behind commit counts to a distance.

        Args:
            ahead: Commits reachable from the local head only
            behind: Commits reachable from the upstream only

        Returns:
            SAME, AHEAD, BEHIND or BOTH
        """
        if ahead < 0 or behind < 0:
            raise ValueError(f"Commit counts must be non-negative: ({ahead}, {behind})")
        if ahead == 0 and behind == 0:
            return cls.SAME
        if behind == 0:
            return cls.AHEAD
        if ahead == 0:
            return cls.BEHIND
        return cls.BOTH

    @property
    def symbol(self) -> str:
        """Two-character marker shown in the report."""
        return _DISTANCE_SYMBOLS[self]


_DISTANCE_SYMBOLS: Dict[Distance, str] = {
    Distance.SAME: "==",
    Distance.AHEAD: ">>",
    Distance.BEHIND: "<<",
    Distance.BOTH: "<>",
    Distance.UNAVAILABLE: "",
}


class JobState(Enum):
    """Lifecycle of one repository job."""
    PENDING = "pending"
    FETCHING = "fetching"
    COMPUTING_STATUS = "computing_status"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (JobState.COMPLETED, JobState.FAILED)

    def can_advance_to(self, target: 'JobState') -> bool:
        """Check if moving from this state to target is a legal transition."""
        return target in _TRANSITIONS[self]


_TRANSITIONS: Dict[JobState, FrozenSet[JobState]] = {
    JobState.PENDING: frozenset({JobState.FETCHING, JobState.COMPUTING_STATUS, JobState.FAILED}),
    JobState.FETCHING: frozenset({JobState.COMPUTING_STATUS, JobState.FAILED}),
    JobState.COMPUTING_STATUS: frozenset({JobState.COMPLETED, JobState.FAILED}),
    JobState.COMPLETED: frozenset(),
    JobState.FAILED: frozenset(),
}


@dataclass
class RepoResult:
    """Outcome of processing one repository.

    Fields stay None when they could not be determined; a failed job keeps
    whatever it managed to compute before the failure.
    """
    name: str
    state: JobState = JobState.PENDING
    status: Optional[StatusFlags] = None
    distance: Optional[Distance] = None
    branch_name: Optional[str] = None
    remote_name: Optional[str] = None
    commit_summary: Optional[str] = None
    fetched: bool = False
    fetch_error: Optional[str] = None
    error: Optional[str] = None

    def advance(self, target: JobState) -> None:
        """Move the job to a new state.

        Raises:
            ValueError: If the transition is not allowed
        """
        if not self.state.can_advance_to(target):
            raise ValueError(
                f"Illegal job transition for {self.name}: {self.state.value} -> {target.value}"
            )
        self.state = target

    def fail(self, error: str) -> None:
        """Mark the job failed with a reason."""
        self.error = error
        self.advance(JobState.FAILED)

    @property
    def failed(self) -> bool:
        """Check if the job failed."""
        return self.state == JobState.FAILED

    @property
    def completed(self) -> bool:
        """Check if the job completed successfully."""
        return self.state == JobState.COMPLETED
