"""Branch enumeration, log enrichment and revision correlation"""
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Dict, List, Optional, Sequence

from phab_build_status.constants import MAX_CONCURRENT_LOG_QUERIES
from phab_build_status.exceptions import (
    BranchEnrichmentError,
    CommitMessageParseError,
    NoBranchesError,
)
from phab_build_status.logging_config import get_logger
from phab_build_status.models.branch import BranchRecord
from phab_build_status.services.commit_message import parse_revision_id
from phab_build_status.services.vcs.base import VCSBackend

logger = get_logger(__name__)

RevisionParser = Callable[[str], Optional[int]]


class BranchService:
    """Lists local branches and, where the backend needs it, loads their head commits."""

    def __init__(self, backend: VCSBackend, max_workers: int = MAX_CONCURRENT_LOG_QUERIES):
        self.backend = backend
        self.max_workers = min(max_workers, MAX_CONCURRENT_LOG_QUERIES)

    def list_branches(self) -> List[BranchRecord]:
        """Return all local branches with complete head commit details.

        Raises:
            NoBranchesError: The working copy has no branches
            BranchEnrichmentError: A per-branch log query failed
        """
        branches = self.backend.list_branches()
        if not branches:
            raise NoBranchesError()

        if self.backend.requires_enrichment:
            self._enrich(branches)

        return branches

    def _enrich(self, branches: List[BranchRecord]) -> None:
        """Run one log query per branch, at most max_workers at a time.

        Results are merged on this thread as they complete, keyed by branch name.
        The first failure cancels whatever has not started yet and is raised.
        """
        by_name = {branch.name: branch for branch in branches}
        logger.debug(
            f"Loading commit info for {len(by_name)} branches using {self.max_workers} workers"
        )

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_branch = {
                executor.submit(self.backend.log_one, name): name for name in by_name
            }

            for future in as_completed(future_to_branch):
                branch_name = future_to_branch[future]
                try:
                    entry = future.result()
                except Exception as e:
                    for pending in future_to_branch:
                        pending.cancel()
                    logger.error(f"Log query failed for branch {branch_name}: {e}")
                    raise BranchEnrichmentError(branch_name, str(e)) from e

                by_name[branch_name].apply_log(entry)

        logger.debug(f"Loaded commit info for {len(by_name)} branches")


def correlate(
    branches: Sequence[BranchRecord], parser: RevisionParser = parse_revision_id
) -> Dict[int, BranchRecord]:
    """Map revision IDs to the branches whose head commit names them.

    Branches whose message has no revision field, or a malformed one, are left
    out. When two branches name the same revision, the later one wins.
    """
    revision_to_branch: Dict[int, BranchRecord] = {}
    for branch in branches:
        try:
            revision_id = parser(branch.message)
        except CommitMessageParseError as e:
            logger.debug(f"Ignoring commit message of branch {branch.name}: {e}")
            revision_id = None

        branch.review_id = revision_id
        if revision_id:
            if revision_id in revision_to_branch:
                logger.debug(
                    f"D{revision_id} is named by both {revision_to_branch[revision_id].name} "
                    f"and {branch.name}; using {branch.name}"
                )
            revision_to_branch[revision_id] = branch

    logger.info(f"{len(revision_to_branch)} of {len(branches)} branches name a revision")
    return revision_to_branch
