"""Display service for the build status report"""
from typing import List, Mapping, Optional

from rich.console import Console
from rich.measure import Measurement
from rich.table import Table

from phab_build_status.constants import BUILD_STATUS_COLORS, COLUMNS
from phab_build_status.formatters import (
    format_branch_name,
    format_build_status,
    format_current_marker,
    format_description,
    format_review_status,
)
from phab_build_status.logging_config import get_logger
from phab_build_status.models.report import ReportRow

console = Console()
logger = get_logger(__name__)

# Upper bound used when measuring the table at its natural width
UNBOUNDED_WIDTH = 100_000


class DisplayService:
    """Renders report rows as a console table."""

    def __init__(
        self,
        build_status_colors: Optional[Mapping[str, str]] = None,
        output: Optional[Console] = None,
    ):
        self.build_status_colors = (
            build_status_colors if build_status_colors is not None else BUILD_STATUS_COLORS
        )
        self.console = output or console

    def build_table(self, rows: List[ReportRow]) -> Table:
        """Build a headerless table with one line per row, in the given order."""
        table = Table(show_header=False, box=None, pad_edge=False)

        for col in COLUMNS:
            table.add_column(col.label, no_wrap=True, overflow="ignore")

        # Match COLUMNS order: current, name, status, build status, description
        for row in rows:
            table.add_row(
                format_current_marker(row.branch.is_current),
                format_branch_name(row.branch.name),
                format_review_status(row.review.status_name, row.review.status_color),
                format_build_status(row.buildable.build_status, self.build_status_colors),
                format_description(row),
            )

        return table

    def display_report(self, rows: List[ReportRow]) -> None:
        """Print the report table; print nothing at all when there are no rows."""
        if not rows:
            logger.debug("No rows to display")
            return

        table = self.build_table(rows)
        # Rows are never wrapped or cut to fit the terminal
        options = self.console.options.update_width(UNBOUNDED_WIDTH)
        table.width = Measurement.get(self.console, options, table).maximum
        self.console.print(table, crop=False)
