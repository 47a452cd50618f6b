"""Branch cell formatting utilities."""

from rich.text import Text

from phab_build_status.constants import SYMBOL_CURRENT_BRANCH
from phab_build_status.models.report import ReportRow


def format_current_marker(is_current: bool) -> str:
    """'*' for the checked-out branch, empty otherwise."""
    return SYMBOL_CURRENT_BRANCH if is_current else ""


def format_branch_name(name: str) -> Text:
    """
    Format a branch name for display.

    Args:
        name: Branch name

    Returns:
        Bold Rich Text (branch names are never parsed as markup)
    """
    return Text(name, style="bold")


def format_description(row: ReportRow) -> Text:
    return Text(row.description)
