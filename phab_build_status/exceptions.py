"""Custom exceptions for phab-build-status"""

from typing import Optional


class BuildStatusError(Exception):
    """Base exception for all phab-build-status errors."""
    pass


class NoBranchesError(BuildStatusError):
    """Raised when the working copy has no branches at all."""

    def __init__(self):
        super().__init__("No branches in this working copy.")


class RepositoryNotFoundError(BuildStatusError):
    """Raised when no Git or Mercurial working copy can be found."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"No Git or Mercurial working copy found at '{path}'")


class ConfigurationError(BuildStatusError):
    """Raised when Conduit settings are missing or unusable."""
    pass


class VCSCommandError(BuildStatusError):
    """Exception raised for errors in version-control commands."""

    def __init__(self, command: str, message: Optional[str] = None):
        self.command = command
        self.message = message

        error_msg = f"Command '{command}' failed"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class BranchEnrichmentError(BuildStatusError):
    """Exception raised when the log query for a branch fails."""

    def __init__(self, branch: str, message: Optional[str] = None):
        self.branch = branch
        self.message = message

        error_msg = f"Could not load commit information for branch '{branch}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class ConduitError(BuildStatusError):
    """Exception raised for errors in Conduit API calls."""

    def __init__(self, method: str, message: Optional[str] = None):
        self.method = method
        self.message = message

        error_msg = f"Conduit call '{method}' failed"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class CommitMessageParseError(BuildStatusError):
    """Raised when a commit message has a malformed revision field."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(
            f"Invalid 'Differential Revision' field '{value}'. The field should have a "
            "Revision ID, like 'D123', or a Revision URI, like "
            "'https://phabricator.example.com/D123'."
        )
