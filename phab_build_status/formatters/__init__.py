"""Formatting utilities for phab-build-status.

- branch: current-branch marker, branch name and description cells
- status: review status and build status cells
"""

from .branch import format_current_marker, format_branch_name, format_description
from .status import format_review_status, format_build_status, resolve_color

__all__ = [
    "format_current_marker",
    "format_branch_name",
    "format_description",
    "format_review_status",
    "format_build_status",
    "resolve_color",
]
