"""Extraction of the Differential revision ID from a commit message"""
import re
from typing import Optional
from urllib.parse import urlparse

from phab_build_status.exceptions import CommitMessageParseError

_FIELD_RE = re.compile(r"^Differential Revision:[ \t]*(.*?)[ \t]*$", re.MULTILINE)
_BARE_ID_RE = re.compile(r"^D?(\d+)$")
_URI_PATH_RE = re.compile(r"^/D(\d+)/?$")


def parse_revision_id(text: str) -> Optional[int]:
    """Return the revision ID named by the 'Differential Revision' field.

    Args:
        text: Raw commit message

    Returns:
        Revision ID, or None if the message has no (or an empty) field

    Raises:
        CommitMessageParseError: The field is present but names no revision
    """
    match = _FIELD_RE.search(text or "")
    if not match:
        return None

    value = match.group(1)
    if not value:
        return None

    bare = _BARE_ID_RE.match(value)
    if bare:
        return int(bare.group(1))

    parsed = urlparse(value)
    if parsed.scheme and parsed.netloc:
        path_match = _URI_PATH_RE.match(parsed.path)
        if path_match:
            return int(path_match.group(1))

    raise CommitMessageParseError(value)
