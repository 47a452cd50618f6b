"""Git backend"""
from typing import List, Optional

import git

from phab_build_status.exceptions import VCSCommandError
from phab_build_status.logging_config import get_logger
from phab_build_status.models.branch import BranchRecord
from phab_build_status.services.vcs.base import VCSBackend

logger = get_logger(__name__)


class GitBackend(VCSBackend):
    """Lists branches straight from the refs; no per-branch queries needed."""

    def _get_repo(self) -> git.Repo:
        return git.Repo(self.repo_path)

    def list_branches(self) -> List[BranchRecord]:
        try:
            repo = self._get_repo()
        except (git.InvalidGitRepositoryError, git.NoSuchPathError) as e:
            raise VCSCommandError("git for-each-ref", str(e)) from e

        try:
            current = self._current_branch_name(repo)
            branches = []
            for head in repo.heads:
                try:
                    commit = head.commit
                except ValueError:
                    # Unborn branch or dangling ref
                    logger.debug(f"Skipping branch {head.name} without a valid commit")
                    continue
                branches.append(
                    BranchRecord(
                        name=head.name,
                        is_current=head.name == current,
                        head_text=commit.message,
                        commit_hash=commit.hexsha,
                        epoch=int(commit.committed_date),
                        parent_tree=commit.parents[0].hexsha if commit.parents else None,
                        short_desc=commit.summary,
                        full_text=commit.message,
                    )
                )
            logger.debug(f"Found {len(branches)} Git branches")
            return branches
        except git.GitCommandError as e:
            raise VCSCommandError("git for-each-ref", str(e)) from e
        finally:
            repo.close()

    @staticmethod
    def _current_branch_name(repo: git.Repo) -> Optional[str]:
        try:
            return repo.active_branch.name
        except TypeError:
            # Detached HEAD
            return None
