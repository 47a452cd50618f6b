"""Configuration handling for phab-build-status"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Dict, Any

from phab_build_status.constants import DEFAULT_TIMEOUT, MAX_CONCURRENT_LOG_QUERIES
from phab_build_status.exceptions import ConfigurationError
from phab_build_status.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class Config:
    """Configuration for phab-build-status with validation."""

    # Conduit access
    conduit_uri: Optional[str] = None
    conduit_token: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT  # Seconds per Conduit request / hg command

    # Branch log enrichment
    max_workers: int = MAX_CONCURRENT_LOG_QUERIES

    # Output
    verbose: bool = False
    debug: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_timeout()
        self._validate_max_workers()
        self._normalize_uri()

    def _validate_timeout(self):
        """Validate timeout is positive."""
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

    def _validate_max_workers(self):
        """Validate max_workers is within the concurrency cap."""
        if not 1 <= self.max_workers <= MAX_CONCURRENT_LOG_QUERIES:
            raise ValueError(
                f"max_workers must be between 1 and {MAX_CONCURRENT_LOG_QUERIES}, "
                f"got {self.max_workers}"
            )

    def _normalize_uri(self):
        if self.conduit_uri:
            self.conduit_uri = normalize_conduit_uri(self.conduit_uri)

    def require_conduit(self) -> None:
        """Raise ConfigurationError unless both URI and token are known."""
        if not self.conduit_uri:
            raise ConfigurationError(
                "No Phabricator URI configured. Use --conduit-uri, set CONDUIT_URI, "
                "or add 'phabricator.uri' to .arcconfig"
            )
        if not self.conduit_token:
            raise ConfigurationError(
                f"No Conduit API token found for {self.conduit_uri}. Use --conduit-token, "
                "set CONDUIT_TOKEN, or run 'arc install-certificate'"
            )

    def to_dict(self) -> dict:
        """Convert config to dictionary (token is masked)."""
        return {
            "conduit_uri": self.conduit_uri,
            "conduit_token": "***" if self.conduit_token else None,
            "timeout": self.timeout,
            "max_workers": self.max_workers,
            "verbose": self.verbose,
            "debug": self.debug,
        }

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary."""
        known_fields = {
            "conduit_uri",
            "conduit_token",
            "timeout",
            "max_workers",
            "verbose",
            "debug",
        }

        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)


def normalize_conduit_uri(uri: str) -> str:
    """Reduce a Phabricator URI to its base, e.g. 'https://host/api/' -> 'https://host'."""
    uri = uri.strip().rstrip("/")
    if uri.endswith("/api"):
        uri = uri[: -len("/api")]
    return uri


def _read_json(path: Path) -> Dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as e:
        logger.warning(f"Ignoring unreadable settings file {path}: {e}")
        return {}
    return data if isinstance(data, dict) else {}


def _find_arcconfig(path: Path) -> Optional[Path]:
    for candidate in [path, *path.parents]:
        if (candidate / ".arcconfig").is_file():
            return candidate / ".arcconfig"
    return None


def load_arc_settings(
    repo_path: str, home: Optional[str] = None, uri: Optional[str] = None
) -> Dict[str, Optional[str]]:
    """Read the Phabricator URI and token from Arcanist's own files.

    Args:
        repo_path: Path inside the working copy; the nearest .arcconfig at or
            above it supplies the URI
        home: Directory holding .arcrc (defaults to the user's home)
        uri: Known URI; when given, only its token is looked up

    Returns:
        dict with keys conduit_uri and conduit_token (either may be None)
    """
    if not uri:
        arcconfig_path = _find_arcconfig(Path(repo_path).resolve())
        arcconfig = _read_json(arcconfig_path) if arcconfig_path else {}
        uri = arcconfig.get("phabricator.uri") or arcconfig.get("conduit_uri")

    arcrc_dir = Path(home) if home else Path.home()
    hosts = _read_json(arcrc_dir / ".arcrc").get("hosts") or {}

    token = None
    if uri:
        wanted = normalize_conduit_uri(uri)
        for host_uri, host_settings in hosts.items():
            if normalize_conduit_uri(host_uri) == wanted and isinstance(host_settings, dict):
                token = host_settings.get("token")
                break
    elif len(hosts) == 1:
        # Single configured host and no .arcconfig: use that host
        uri, host_settings = next(iter(hosts.items()))
        if isinstance(host_settings, dict):
            token = host_settings.get("token")

    return {
        "conduit_uri": normalize_conduit_uri(uri) if uri else None,
        "conduit_token": token,
    }


def resolve_conduit_settings(
    repo_path: str,
    uri: Optional[str] = None,
    token: Optional[str] = None,
    home: Optional[str] = None,
) -> Dict[str, Optional[str]]:
    """Resolve URI and token: explicit value, then environment, then Arcanist files."""
    uri = uri or os.environ.get("CONDUIT_URI")
    token = token or os.environ.get("CONDUIT_TOKEN")

    if not uri or not token:
        arc = load_arc_settings(repo_path, home=home, uri=uri)
        uri = uri or arc["conduit_uri"]
        token = token or arc["conduit_token"]

    return {"conduit_uri": uri, "conduit_token": token}
