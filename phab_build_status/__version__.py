"""Version information for phab-build-status."""

__version__ = "0.1.0"
