"""Branch model"""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class LogEntry:
    """Head commit details returned by a per-branch log query."""
    commit_hash: str
    epoch: int
    parent_tree: Optional[str]
    short_desc: str
    full_text: str


@dataclass
class BranchRecord:
    """A local branch and what is known about its head commit."""
    name: str
    is_current: bool
    head_text: str
    review_id: Optional[int] = None  # Set by the correlator
    commit_hash: Optional[str] = None
    epoch: Optional[int] = None
    parent_tree: Optional[str] = None  # First parent of the head commit
    short_desc: Optional[str] = None
    full_text: Optional[str] = None

    @property
    def message(self) -> str:
        """Commit message to search for a revision field."""
        return self.full_text if self.full_text is not None else self.head_text

    def apply_log(self, entry: LogEntry) -> None:
        """Attach the result of a log query to this branch."""
        self.commit_hash = entry.commit_hash
        self.epoch = entry.epoch
        self.parent_tree = entry.parent_tree
        self.short_desc = entry.short_desc
        self.full_text = entry.full_text
