"""Report row model"""
from dataclasses import dataclass

from phab_build_status.models.branch import BranchRecord
from phab_build_status.models.review import BuildableStatusRecord, ReviewRecord


@dataclass(frozen=True)
class ReportRow:
    """One line of the report: a branch joined with its revision and buildable."""
    branch: BranchRecord
    review: ReviewRecord
    buildable: BuildableStatusRecord

    @property
    def review_id(self) -> int:
        return self.review.id

    @property
    def epoch(self) -> int:
        return self.branch.epoch or 0

    @property
    def description(self) -> str:
        return f"D{self.review.id}: {self.review.title}"
