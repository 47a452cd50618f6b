"""Services used by the build status report."""
