"""Core functionality for phab-build-status"""

from typing import List, Optional, Union

from rich.console import Console

from phab_build_status.config import Config
from phab_build_status.logging_config import get_logger
from phab_build_status.models.report import ReportRow
from phab_build_status.services.branch_service import BranchService, correlate
from phab_build_status.services.conduit_service import ConduitClient
from phab_build_status.services.display_service import DisplayService
from phab_build_status.services.report_service import assemble
from phab_build_status.services.review_service import ReviewService, get_diff_phids
from phab_build_status.services.vcs import VCSBackend, detect_backend

console = Console()
logger = get_logger(__name__)


class BuildStatusReport:
    """Lists open revisions for local branches together with their build status.

    Each stage finishes before the next one starts: enumerate branches, map
    them to revisions, fetch open revisions, fetch buildables, then join,
    sort and print.
    """

    def __init__(
        self,
        repo_path: str,
        config: Union[Config, dict],
        backend: Optional[VCSBackend] = None,
        conduit: Optional[ConduitClient] = None,
        output: Optional[Console] = None,
    ):
        """Initialize the report.

        Args:
            repo_path: Path inside a Git or Mercurial working copy
            config: Configuration dict or Config object
            backend: Version-control backend (detected from repo_path if omitted)
            conduit: Conduit client (built from config if omitted)
            output: Console for the table and informational messages
        """
        self.repo_path = repo_path
        if isinstance(config, dict):
            self.config = Config.from_dict(config)
        else:
            self.config = config

        self.backend = backend or detect_backend(repo_path, timeout=self.config.timeout)

        if conduit is None:
            self.config.require_conduit()
            conduit = ConduitClient(
                self.config.conduit_uri,
                self.config.conduit_token,
                timeout=self.config.timeout,
            )
        self.conduit = conduit

        self.console = output or console
        self.branch_service = BranchService(self.backend, max_workers=self.config.max_workers)
        self.review_service = ReviewService(self.conduit, output=self.console)
        self.display_service = DisplayService(output=self.console)

    def collect(self) -> List[ReportRow]:
        """Run every stage except printing and return the sorted rows."""
        branches = self.branch_service.list_branches()
        branch_map = correlate(branches)

        reviews = self.review_service.fetch_active_reviews()
        if not reviews:
            return []

        diff_phids = get_diff_phids(reviews)
        missing = [review_id for review_id, phid in diff_phids.items() if phid is None]
        if missing:
            logger.warning(
                "Revisions without a diff: " + ", ".join(f"D{review_id}" for review_id in missing)
            )

        buildables = self.review_service.fetch_buildable_statuses(
            phid for phid in diff_phids.values() if phid is not None
        )

        rows = assemble(branch_map, reviews, buildables)
        logger.info(f"{len(rows)} revisions have a local branch and a buildable")
        return rows

    def run(self) -> List[ReportRow]:
        """Build the report and print it."""
        rows = self.collect()
        self.display_service.display_report(rows)
        return rows

    def close(self) -> None:
        """Close the Conduit session."""
        try:
            self.conduit.close()
        except Exception as e:
            logger.debug(f"Error closing Conduit session: {e}")
