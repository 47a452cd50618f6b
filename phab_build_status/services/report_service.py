"""Joining branches, revisions and buildables into report rows"""
from typing import Dict, List

from phab_build_status.logging_config import get_logger
from phab_build_status.models.branch import BranchRecord
from phab_build_status.models.report import ReportRow
from phab_build_status.models.review import BuildableStatusRecord, ReviewRecord

logger = get_logger(__name__)


def assemble(
    branch_map: Dict[int, BranchRecord],
    review_map: Dict[int, ReviewRecord],
    buildable_map: Dict[str, BuildableStatusRecord],
) -> List[ReportRow]:
    """Build one row per revision that has a local branch and a buildable.

    Rows are ordered by the branch's head commit time, oldest first. Rows with
    the same time keep the order of review_map.
    """
    rows = []
    for review_id, review in review_map.items():
        branch = branch_map.get(review_id)
        if branch is None:
            logger.debug(f"D{review_id} has no local branch")
            continue

        if review.diff_phid is None:
            logger.debug(f"D{review_id} has no diff PHID")
            continue

        buildable = buildable_map.get(review.diff_phid)
        if buildable is None:
            logger.debug(f"No buildable for D{review_id} ({review.diff_phid})")
            continue

        rows.append(ReportRow(branch=branch, review=review, buildable=buildable))

    return sorted(rows, key=lambda row: row.epoch)
