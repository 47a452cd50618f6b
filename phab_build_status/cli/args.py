"""Command-line argument parsing for phab-build-status."""

import argparse
import os

from phab_build_status.__version__ import __version__
from phab_build_status.constants import DEFAULT_TIMEOUT, MAX_CONCURRENT_LOG_QUERIES


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="phab-build-status",
        description="List open Differential revisions for your local branches "
        "together with their Harbormaster build status. Supports Git and Mercurial.",
        epilog="Setup: Requires a Phabricator URI and Conduit API token, from the options "
        "below, the CONDUIT_URI / CONDUIT_TOKEN environment variables, or .arcconfig "
        "and ~/.arcrc as written by 'arc install-certificate'.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument("--version", action="version", version=f"phab-build-status {__version__}")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )
    parser.add_argument("--conduit-uri", metavar="URI", help="Phabricator base URI")
    parser.add_argument("--conduit-token", metavar="TOKEN", help="Conduit API token")
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        metavar="SECONDS",
        help=f"Timeout for each Conduit request and hg command (default: {DEFAULT_TIMEOUT:g})",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=MAX_CONCURRENT_LOG_QUERIES,
        metavar="N",
        help="Number of concurrent per-branch log queries for Mercurial "
        f"(1-{MAX_CONCURRENT_LOG_QUERIES}, default: {MAX_CONCURRENT_LOG_QUERIES})",
    )
    parser.add_argument(
        "--repo",
        default=os.getcwd(),
        metavar="PATH",
        help="Path inside the working copy (default: current directory)",
    )

    return parser.parse_args(argv)
