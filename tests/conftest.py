"""Pytest fixtures for phab-build-status tests"""
import io
import tempfile
import threading
import time
from pathlib import Path
from typing import Dict, List, Optional
from unittest.mock import Mock

import git
import pytest
from rich.console import Console

from phab_build_status.exceptions import VCSCommandError
from phab_build_status.models.branch import BranchRecord, LogEntry
from phab_build_status.services.conduit_service import ConduitClient
from phab_build_status.services.vcs.base import EnrichingBackend, VCSBackend

PHAB_URI = "https://phab.example.com"

_AUTO = object()


def revision_payload(
    revision_id: int,
    title: str = "Some change",
    status: str = "needs-review",
    name: str = "Needs Review",
    color: str = "magenta",
    diff_phid=_AUTO,
) -> dict:
    """Build a differential.revision.search record."""
    if diff_phid is _AUTO:
        diff_phid = f"PHID-DIFF-{revision_id}"
    return {
        "id": revision_id,
        "type": "DREV",
        "phid": f"PHID-DREV-{revision_id}",
        "fields": {
            "title": title,
            "status": {"value": status, "name": name, "closed": False, "color.ansi": color},
            "diffPHID": diff_phid,
        },
    }


def buildable_payload(object_phid: str, status: str = "passed", buildable_id: int = 1) -> dict:
    """Build a harbormaster.buildable.search record."""
    return {
        "id": buildable_id,
        "type": "HMBB",
        "phid": f"PHID-HMBB-{buildable_id}",
        "fields": {
            "objectPHID": object_phid,
            "containerPHID": None,
            "buildableStatus": {"value": status},
            "isManual": False,
        },
    }


def make_branch(name: str, message: str, epoch: int = 1700000000, is_current: bool = False):
    return BranchRecord(
        name=name,
        is_current=is_current,
        head_text=message,
        commit_hash=f"hash-{name}",
        epoch=epoch,
        short_desc=message.splitlines()[0] if message else "",
        full_text=message,
    )


class StaticBackend(VCSBackend):
    """Backend returning a fixed list of complete branches."""

    def __init__(self, branches: List[BranchRecord]):
        super().__init__("/fake/repo")
        self.branches = branches

    def list_branches(self) -> List[BranchRecord]:
        return list(self.branches)


class FakeEnrichingBackend(EnrichingBackend):
    """Backend that needs a log query per branch; tracks peak concurrency."""

    def __init__(
        self,
        names: List[str],
        messages: Optional[Dict[str, str]] = None,
        epochs: Optional[Dict[str, int]] = None,
        delays: Optional[Dict[str, float]] = None,
        failing: Optional[set] = None,
        default_delay: float = 0.0,
    ):
        super().__init__("/fake/repo")
        self.names = names
        self.messages = messages or {}
        self.epochs = epochs or {}
        self.delays = delays or {}
        self.failing = failing or set()
        self.default_delay = default_delay
        self.calls: List[str] = []
        self.in_flight = 0
        self.peak = 0
        self._lock = threading.Lock()

    def list_branches(self) -> List[BranchRecord]:
        return [
            BranchRecord(name=name, is_current=index == 0, head_text="")
            for index, name in enumerate(self.names)
        ]

    def log_one(self, branch_name: str) -> LogEntry:
        with self._lock:
            self.calls.append(branch_name)
            self.in_flight += 1
            self.peak = max(self.peak, self.in_flight)
        try:
            time.sleep(self.delays.get(branch_name, self.default_delay))
            if branch_name in self.failing:
                raise VCSCommandError("hg log", f"unknown revision '{branch_name}'")
            message = self.messages.get(branch_name, f"Work on {branch_name}")
            return LogEntry(
                commit_hash=f"hash-{branch_name}",
                epoch=self.epochs.get(branch_name, 1700000000),
                parent_tree=f"parent-{branch_name}",
                short_desc=message.splitlines()[0],
                full_text=message,
            )
        finally:
            with self._lock:
                self.in_flight -= 1


def make_conduit(revisions: List[dict], buildables: List[dict]) -> Mock:
    """Mock ConduitClient answering the two search methods."""
    conduit = Mock(spec=ConduitClient)

    def search(method, constraints=None, query_key=None):
        if method == "differential.revision.search":
            return revisions
        if method == "harbormaster.buildable.search":
            wanted = set(constraints["objectPHIDs"])
            return [b for b in buildables if b["fields"]["objectPHID"] in wanted]
        raise AssertionError(f"unexpected method {method}")

    conduit.search.side_effect = search
    return conduit


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_config():
    """Create a configuration dictionary."""
    return {
        "conduit_uri": PHAB_URI,
        "conduit_token": "api-testtoken",
        "timeout": 5.0,
        "max_workers": 16,
        "verbose": False,
        "debug": False,
    }


@pytest.fixture
def output():
    """A Rich console writing plain text to a buffer."""
    return Console(file=io.StringIO(), width=200, color_system=None, force_terminal=False)


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository for testing."""
    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()

    repo = git.Repo.init(repo_path)

    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    test_file = repo_path / "README.md"
    test_file.write_text("# Test Repository\n")
    repo.index.add(["README.md"])
    repo.index.commit(
        "Initial commit", author_date="1600000000 +0000", commit_date="1600000000 +0000"
    )

    try:
        repo.git.branch("-M", "main")
    except Exception:
        pass

    yield repo

    repo.close()


def _commit_on_branch(repo: git.Repo, branch: str, filename: str, message: str, epoch: int):
    repo.git.checkout("main")
    repo.git.checkout("-b", branch)
    path = Path(repo.working_dir) / filename
    path.write_text(f"{branch}\n")
    repo.index.add([filename])
    date = f"{epoch} +0000"
    repo.index.commit(message, author_date=date, commit_date=date)


@pytest.fixture
def git_repo_with_revisions(git_repo):
    """Git repository with branches whose head commits name revisions.

    feature/login  -> D101 (epoch 1700000200, checked out)
    fix/timeouts   -> D102 (epoch 1700000100)
    wip/broken     -> malformed revision field
    """
    repo = git_repo
    _commit_on_branch(
        repo,
        "feature/login",
        "login.txt",
        "Add login form\n\nSummary: adds a form\n\n"
        f"Differential Revision: {PHAB_URI}/D101\n",
        1700000200,
    )
    _commit_on_branch(
        repo,
        "fix/timeouts",
        "timeouts.txt",
        "Retry on timeouts\n\nDifferential Revision: D102\n",
        1700000100,
    )
    _commit_on_branch(
        repo,
        "wip/broken",
        "broken.txt",
        "Half done\n\nDifferential Revision: see the other one\n",
        1700000300,
    )
    repo.git.checkout("feature/login")

    yield repo
