"""Revision and buildable models built from Conduit search results"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from phab_build_status.constants import DEFAULT_COLOR


@dataclass(frozen=True)
class ReviewRecord:
    """An open Differential revision."""
    id: int
    phid: Optional[str]
    title: str
    status_value: str  # e.g. "needs-review"
    status_name: str  # e.g. "Needs Review"
    status_color: str  # ANSI color name supplied by the server
    diff_phid: Optional[str]  # Latest diff; buildables are keyed by it

    @classmethod
    def from_conduit(cls, data: Dict[str, Any]) -> "ReviewRecord":
        fields = data.get("fields") or {}
        status = fields.get("status") or {}
        return cls(
            id=int(data["id"]),
            phid=data.get("phid"),
            title=fields.get("title") or "",
            status_value=status.get("value") or "unknown",
            status_name=status.get("name") or status.get("value") or "Unknown",
            status_color=status.get("color.ansi") or DEFAULT_COLOR,
            diff_phid=fields.get("diffPHID") or None,
        )


@dataclass(frozen=True)
class BuildableStatusRecord:
    """Latest Harbormaster outcome for one diff."""
    id: Optional[int]
    phid: Optional[str]
    object_phid: str
    build_status: str  # preparing, building, passed, failed, ...

    @classmethod
    def from_conduit(cls, data: Dict[str, Any]) -> "BuildableStatusRecord":
        fields = data.get("fields") or {}
        status = fields.get("buildableStatus") or {}
        return cls(
            id=data.get("id"),
            phid=data.get("phid"),
            object_phid=fields["objectPHID"],
            build_status=status.get("value") or "unknown",
        )
