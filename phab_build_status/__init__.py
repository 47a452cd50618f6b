"""
phab-build-status - Review and build status of your local branches
"""

from .__version__ import __version__
from .core import BuildStatusReport
from .cli.main import main

__all__ = ["BuildStatusReport", "main", "__version__"]
