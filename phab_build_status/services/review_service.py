"""Open revisions and their Harbormaster buildables"""
from typing import Dict, Iterable, Optional

from rich.console import Console

from phab_build_status.constants import (
    ACTIVE_REVIEW_STATUSES,
    METHOD_BUILDABLE_SEARCH,
    METHOD_REVISION_SEARCH,
    NO_ACTIVE_REVISIONS_MESSAGE,
    NO_BUILDABLES_MESSAGE,
    REVIEW_QUERY_KEY,
)
from phab_build_status.logging_config import get_logger
from phab_build_status.models.review import BuildableStatusRecord, ReviewRecord
from phab_build_status.services.conduit_service import ConduitClient

console = Console()
logger = get_logger(__name__)


class ReviewService:
    """Looks up revisions and buildables through Conduit."""

    def __init__(self, conduit: ConduitClient, output: Optional[Console] = None):
        self.conduit = conduit
        self.console = output or console

    def fetch_active_reviews(self) -> Dict[int, ReviewRecord]:
        """Get the open revisions authored by the current user, keyed by ID.

        Order follows the server's result order.
        """
        records = self.conduit.search(
            METHOD_REVISION_SEARCH,
            constraints={"statuses": list(ACTIVE_REVIEW_STATUSES)},
            query_key=REVIEW_QUERY_KEY,
        )
        if not records:
            self.console.print(NO_ACTIVE_REVISIONS_MESSAGE)
            return {}

        reviews: Dict[int, ReviewRecord] = {}
        for data in records:
            review = ReviewRecord.from_conduit(data)
            reviews[review.id] = review

        logger.info(f"Found {len(reviews)} open revisions")
        return reviews

    def fetch_buildable_statuses(self, diff_phids: Iterable[str]) -> Dict[str, BuildableStatusRecord]:
        """Get buildables for the given diffs, keyed by diff PHID."""
        phids = sorted(set(diff_phids))
        if not phids:
            logger.debug("No diff PHIDs to look up")
            self.console.print(NO_BUILDABLES_MESSAGE)
            return {}

        records = self.conduit.search(
            METHOD_BUILDABLE_SEARCH,
            constraints={"objectPHIDs": phids},
        )
        if not records:
            self.console.print(NO_BUILDABLES_MESSAGE)
            return {}

        buildables: Dict[str, BuildableStatusRecord] = {}
        for data in records:
            try:
                buildable = BuildableStatusRecord.from_conduit(data)
            except KeyError:
                logger.debug(f"Skipping buildable without objectPHID: {data.get('phid')}")
                continue
            buildables[buildable.object_phid] = buildable

        logger.info(f"Found buildables for {len(buildables)} of {len(phids)} diffs")
        return buildables


def get_diff_phids(reviews: Dict[int, ReviewRecord]) -> Dict[int, Optional[str]]:
    """Map each revision ID to the PHID of its latest diff."""
    return {review_id: review.diff_phid for review_id, review in reviews.items()}
