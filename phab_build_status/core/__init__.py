"""Core pipeline for phab-build-status."""

from .build_status import BuildStatusReport

__all__ = ["BuildStatusReport"]
