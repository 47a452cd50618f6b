"""Backend interfaces"""
from abc import ABC, abstractmethod
from typing import List

from phab_build_status.models.branch import BranchRecord, LogEntry


class VCSBackend(ABC):
    """A working copy whose branch listing is already complete."""

    # Whether branches need a per-branch log query after listing
    requires_enrichment = False

    def __init__(self, repo_path: str):
        self.repo_path = repo_path

    @abstractmethod
    def list_branches(self) -> List[BranchRecord]:
        """Return every local branch with its head commit text."""


class EnrichingBackend(VCSBackend):
    """A working copy that only lists branch heads cheaply.

    Commit hash, date and parent are loaded per branch with log_one(),
    which must be safe to call from several threads at once.
    """

    requires_enrichment = True

    @abstractmethod
    def log_one(self, branch_name: str) -> LogEntry:
        """Return head commit details for one branch."""
