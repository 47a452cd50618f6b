"""Mercurial backend"""
import os
import subprocess
from typing import Callable, List, Optional, Sequence

from phab_build_status.exceptions import VCSCommandError
from phab_build_status.logging_config import get_logger
from phab_build_status.models.branch import BranchRecord, LogEntry
from phab_build_status.services.vcs.base import EnrichingBackend

logger = get_logger(__name__)

FIELD_SEP = "\x01"
RECORD_SEP = "\x02"

BRANCHES_TEMPLATE = f"{{branch}}{FIELD_SEP}{{node}}{RECORD_SEP}"
LOG_TEMPLATE = FIELD_SEP.join(
    ["{node}", "{date|hgdate}", "{p1node}", "{desc|firstline}", "{desc}"]
)

CommandRunner = Callable[[Sequence[str], str, Optional[float]], subprocess.CompletedProcess]


def _default_runner(
    args: Sequence[str], cwd: str, timeout: Optional[float]
) -> subprocess.CompletedProcess:
    env = dict(os.environ, HGPLAIN="1", HGENCODING="utf-8")
    return subprocess.run(
        ["hg", *args],
        cwd=cwd,
        env=env,
        capture_output=True,
        check=False,
        timeout=timeout,
    )


def quote_revset(value: str) -> str:
    """Quote a name as a revset string literal."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


class MercurialBackend(EnrichingBackend):
    """Lists named branches with `hg branches`, then logs each head separately.

    Closed branches are not listed.
    """

    def __init__(
        self,
        repo_path: str,
        runner: Optional[CommandRunner] = None,
        timeout: Optional[float] = None,
    ):
        super().__init__(repo_path)
        self._runner = runner or _default_runner
        self.timeout = timeout

    def _run(self, *args: str) -> str:
        command = "hg " + " ".join(args[:2])
        try:
            result = self._runner(list(args), self.repo_path, self.timeout)
        except subprocess.TimeoutExpired as e:
            raise VCSCommandError(command, f"timed out after {e.timeout}s") from e
        except OSError as e:
            raise VCSCommandError(command, str(e)) from e

        stdout = _decode(result.stdout)
        if result.returncode != 0:
            message = _decode(result.stderr).strip() or f"exit status {result.returncode}"
            raise VCSCommandError(command, message)
        return stdout

    def list_branches(self) -> List[BranchRecord]:
        current = self._run("branch").strip()
        output = self._run("branches", "--template", BRANCHES_TEMPLATE)

        branches = []
        for record in output.split(RECORD_SEP):
            if not record.strip():
                continue
            name, _, node = record.partition(FIELD_SEP)
            name = name.strip()
            # The head description arrives with the log query
            branches.append(
                BranchRecord(
                    name=name,
                    is_current=name == current,
                    head_text="",
                    commit_hash=node.strip() or None,
                )
            )

        logger.debug(f"Found {len(branches)} Mercurial branches (current: {current or 'none'})")
        return branches

    def log_one(self, branch_name: str) -> LogEntry:
        output = self._run(
            "log", "-l", "1", "--template", LOG_TEMPLATE, "-r", quote_revset(branch_name)
        )
        fields = output.strip().split(FIELD_SEP, 4)
        if len(fields) != 5:
            raise VCSCommandError("hg log", f"unexpected output for branch '{branch_name}'")

        commit_hash, hgdate, p1node, short_desc, full_text = fields
        try:
            epoch = int(hgdate.split()[0])
        except (IndexError, ValueError) as e:
            raise VCSCommandError("hg log", f"bad date '{hgdate}' for branch '{branch_name}'") from e

        # The null revision stands in for "no parent"
        parent = None if not p1node or set(p1node) == {"0"} else p1node

        return LogEntry(
            commit_hash=commit_hash,
            epoch=epoch,
            parent_tree=parent,
            short_desc=short_desc,
            full_text=full_text,
        )


def _decode(value) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return value.decode("utf-8", errors="replace")
