"""Review and build status formatting utilities."""

from typing import Mapping

from rich.color import Color, ColorParseError
from rich.text import Text

from phab_build_status.constants import DEFAULT_COLOR


def resolve_color(name: str) -> str:
    """
    Return name if Rich understands it as a color, else the terminal default.

    Args:
        name: Color name, e.g. from a revision's 'color.ansi' field

    Returns:
        A color name safe to use in a Rich style
    """
    if not name:
        return DEFAULT_COLOR
    try:
        Color.parse(name)
    except ColorParseError:
        return DEFAULT_COLOR
    return name


def format_review_status(status_name: str, status_color: str) -> Text:
    """Review status in the color the server assigns to it."""
    return Text(status_name, style=resolve_color(status_color))


def format_build_status(build_status: str, colors: Mapping[str, str]) -> Text:
    """
    Format a buildable status as a bold label on a colored background.

    Args:
        build_status: Buildable status value, e.g. "passed"
        colors: Status to background color table; unknown statuses use the default

    Returns:
        Rich Text such as '   passed ' with the label highlighted
    """
    color = resolve_color(colors.get(build_status, DEFAULT_COLOR))
    text = Text("  ")
    text.append(f" {build_status} ", style=f"bold on {color}")
    return text
