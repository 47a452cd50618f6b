"""Working-copy detection"""
from pathlib import Path
from typing import Optional

import git

from phab_build_status.exceptions import RepositoryNotFoundError
from phab_build_status.logging_config import get_logger
from phab_build_status.services.vcs.base import VCSBackend
from phab_build_status.services.vcs.git_backend import GitBackend
from phab_build_status.services.vcs.mercurial_backend import MercurialBackend

logger = get_logger(__name__)


def _find_hg_root(path: Path) -> Optional[Path]:
    for candidate in [path, *path.parents]:
        if (candidate / ".hg").is_dir():
            return candidate
    return None


def detect_backend(repo_path: str, timeout: Optional[float] = None) -> VCSBackend:
    """Pick the backend for the working copy containing repo_path.

    Git is tried first, searching parent directories; then the nearest
    directory with a .hg subdirectory.
    """
    try:
        repo = git.Repo(repo_path, search_parent_directories=True)
    except (git.InvalidGitRepositoryError, git.NoSuchPathError):
        repo = None

    if repo is not None:
        root = repo.working_tree_dir
        repo.close()
        if root:
            logger.debug(f"Detected Git working copy at {root}")
            return GitBackend(str(root))

    hg_root = _find_hg_root(Path(repo_path).resolve())
    if hg_root is not None:
        logger.debug(f"Detected Mercurial working copy at {hg_root}")
        return MercurialBackend(str(hg_root), timeout=timeout)

    raise RepositoryNotFoundError(repo_path)
