"""Shared constants for phab-build-status."""

from dataclasses import dataclass
from typing import Dict, List, Tuple


@dataclass
class ColumnDefinition:
    """Definition of a table column."""

    key: str
    label: str


# Report columns, in display order. Labels are kept for debug output;
# the table itself is drawn without a header row.
COLUMNS: List[ColumnDefinition] = [
    ColumnDefinition("current", ""),
    ColumnDefinition("name", "Name"),
    ColumnDefinition("status", "Status"),
    ColumnDefinition("build_status", "Build Status"),
    ColumnDefinition("description", "Description"),
]


SYMBOL_CURRENT_BRANCH = "*"

# Revision statuses that count as "open"
ACTIVE_REVIEW_STATUSES: Tuple[str, ...] = (
    "needs-review",
    "accepted",
    "changes-planned",
    "needs-revision",
)

REVIEW_QUERY_KEY = "authored"

# Conduit methods
METHOD_REVISION_SEARCH = "differential.revision.search"
METHOD_BUILDABLE_SEARCH = "harbormaster.buildable.search"
METHOD_WHOAMI = "user.whoami"

DEFAULT_COLOR = "default"

# Background colors for buildable statuses (Rich color names)
BUILD_STATUS_COLORS: Dict[str, str] = {
    "preparing": "yellow",
    "building": "blue",
    "passed": "green",
    "failed": "red",
}

# Upper bound on concurrent per-branch log queries
MAX_CONCURRENT_LOG_QUERIES = 16

DEFAULT_TIMEOUT = 30.0

NO_ACTIVE_REVISIONS_MESSAGE = "You have no open Differential revisions."
NO_BUILDABLES_MESSAGE = "Unable to find corresponding diff buildables."
