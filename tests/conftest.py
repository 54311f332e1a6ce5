"""Common test fixtures for notegit."""

import os
import shutil
import subprocess
from pathlib import Path

import pytest

from notegit.config import SyncConfig
from notegit.observability import metrics
from notegit.services.notifier import Notifier
from tests.fakes import FakeNoteStore, RecordingDisplay

GIT = shutil.which("git")

requires_git = pytest.mark.skipif(GIT is None, reason="git executable not available")


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, tmp_path_factory):
    """Keep the developer's NOTEGIT_* settings and .env files out of the tests."""
    missing = tmp_path_factory.mktemp("no-env") / ".env"
    monkeypatch.setattr("notegit.config._PROJECT_ENV", missing)
    monkeypatch.setattr("notegit.config._USER_ENV", missing)
    for key in list(os.environ):
        if key.startswith("NOTEGIT_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _reset_metrics():
    metrics.reset()
    yield
    metrics.reset()


@pytest.fixture
def export_dir(tmp_path):
    """Export directory that does not exist yet."""
    return tmp_path / "export"


@pytest.fixture
def sync_config(export_dir):
    """Fully configured settings for a local-only repository."""
    return SyncConfig(
        branch_name="main",
        local_path_dir=str(export_dir),
        git_repo_url="",
        clone_settle_seconds=0,
        git_user_name="notegit tests",
        git_user_email="tests@notegit.invalid",
    )


@pytest.fixture
def sample_store():
    """Two top-level notebooks, one nested notebook and one orphaned note."""
    return FakeNoteStore(
        notebooks=[
            {"id": "nb-work", "title": "Work", "parent_id": ""},
            {"id": "nb-home", "title": "Home", "parent_id": ""},
            {"id": "nb-proj", "title": "Projects 🚀", "parent_id": "nb-work"},
        ],
        notes=[
            {"id": "n1", "title": "Todo", "body": "- x", "parent_id": "nb-work"},
            {"id": "n2", "title": "Café list", "body": "beans", "parent_id": "nb-home"},
            {"id": "n3", "title": "Roadmap", "body": "# Q3", "parent_id": "nb-proj"},
            {"id": "n4", "title": "Lost", "body": "?", "parent_id": "nb-gone"},
        ],
        page_size=3,
    )


@pytest.fixture
def display():
    return RecordingDisplay()


@pytest.fixture
def notifier(display):
    return Notifier(enabled=True, display=display)


def git(*args: str, cwd: Path) -> str:
    """Run the real git executable and return stdout."""
    return subprocess.run(
        [GIT, *args], cwd=cwd, check=True, capture_output=True, text=True
    ).stdout


@pytest.fixture
def bare_remote(tmp_path):
    """An empty bare repository usable as ``origin``."""
    remote = tmp_path / "remote.git"
    remote.mkdir()
    git("init", "--bare", cwd=remote)
    return remote
