"""Version-control backends for phab-build-status."""

from .base import VCSBackend, EnrichingBackend
from .detect import detect_backend
from .git_backend import GitBackend
from .mercurial_backend import MercurialBackend

__all__ = [
    "VCSBackend",
    "EnrichingBackend",
    "GitBackend",
    "MercurialBackend",
    "detect_backend",
]
