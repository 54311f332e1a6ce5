"""Tests for the repository bootstrapper."""

from unittest.mock import MagicMock

import pytest

from notegit.config import SyncConfig
from notegit.exceptions import ErrorCode, GitError
from notegit.models.schema import BootstrapAction, BootstrapStatus
from notegit.services.bootstrapper import RepositoryBootstrapper
from notegit.storage.git_wrapper import GitWrapper
from tests.conftest import git, requires_git

REMOTE = "git@example.com:me/notes.git"


@pytest.fixture
def fake_git(export_dir):
    mock = MagicMock(spec=GitWrapper)
    mock.repo_path = export_dir
    mock.is_repository.return_value = False
    return mock


def _config(export_dir, **overrides):
    values = dict(
        branch_name="notes",
        local_path_dir=str(export_dir),
        clone_settle_seconds=10,
    )
    values.update(overrides)
    return SyncConfig(**values)


class TestRepositoryBootstrapper:
    def test_existing_repository_is_a_no_op(self, fake_git, export_dir):
        fake_git.is_repository.return_value = True
        result = RepositoryBootstrapper(fake_git, _config(export_dir)).ensure_repository()

        assert result.status is BootstrapStatus.READY
        assert result.action is BootstrapAction.EXISTING
        fake_git.init.assert_not_called()
        fake_git.clone.assert_not_called()

    def test_init_without_remote(self, fake_git, export_dir):
        result = RepositoryBootstrapper(fake_git, _config(export_dir)).ensure_repository()

        assert result.status is BootstrapStatus.READY
        assert result.action is BootstrapAction.INIT
        fake_git.init.assert_called_once_with()
        fake_git.clone.assert_not_called()

    def test_init_failure_is_fatal(self, fake_git, export_dir):
        fake_git.init.side_effect = GitError(
            "Git executable not found: git", code=ErrorCode.GIT_NOT_FOUND
        )
        result = RepositoryBootstrapper(fake_git, _config(export_dir)).ensure_repository()

        assert result.status is BootstrapStatus.FATAL
        assert result.can_continue is False
        assert "not found" in result.error

    def test_clone_sequence(self, fake_git, export_dir):
        sleeps = []
        bootstrapper = RepositoryBootstrapper(
            fake_git, _config(export_dir, git_repo_url=REMOTE), sleep=sleeps.append
        )
        result = bootstrapper.ensure_repository()

        assert result.status is BootstrapStatus.READY
        assert result.action is BootstrapAction.CLONE
        assert [c[0] for c in fake_git.method_calls if c[0] != "is_repository"] == [
            "clone",
            "checkout_or_create",
            "pull",
        ]
        fake_git.clone.assert_called_once_with(REMOTE)
        fake_git.checkout_or_create.assert_called_once_with("notes")
        fake_git.pull.assert_called_once_with("notes")
        assert sleeps == [10]

    def test_zero_settle_delay_skips_sleep(self, fake_git, export_dir):
        sleeps = []
        RepositoryBootstrapper(
            fake_git,
            _config(export_dir, git_repo_url=REMOTE, clone_settle_seconds=0),
            sleep=sleeps.append,
        ).ensure_repository()
        assert sleeps == []

    def test_clone_failure_is_fatal(self, fake_git, export_dir):
        fake_git.clone.side_effect = GitError("Git command failed: clone", stderr="denied")
        result = RepositoryBootstrapper(
            fake_git, _config(export_dir, git_repo_url=REMOTE), sleep=lambda s: None
        ).ensure_repository()

        assert result.status is BootstrapStatus.FATAL
        assert result.action is BootstrapAction.CLONE
        fake_git.pull.assert_not_called()

    def test_pull_failure_degrades(self, fake_git, export_dir):
        fake_git.pull.side_effect = GitError(
            "Git command failed: pull origin notes",
            stderr="fatal: couldn't find remote ref notes",
        )
        result = RepositoryBootstrapper(
            fake_git, _config(export_dir, git_repo_url=REMOTE), sleep=lambda s: None
        ).ensure_repository()

        assert result.status is BootstrapStatus.DEGRADED_CONTINUE
        assert result.can_continue is True
        assert "pull" in result.error


@requires_git
class TestBootstrapRealGit:
    def test_init_then_idempotent(self, export_dir):
        export_dir.mkdir()
        wrapper = GitWrapper(export_dir)
        config = _config(export_dir)

        first = RepositoryBootstrapper(wrapper, config).ensure_repository()
        second = RepositoryBootstrapper(wrapper, config).ensure_repository()

        assert first.action is BootstrapAction.INIT
        assert second.action is BootstrapAction.EXISTING
        assert (export_dir / ".git").is_dir()

    def test_clone_of_empty_remote_degrades(self, export_dir, bare_remote):
        export_dir.mkdir()
        wrapper = GitWrapper(export_dir)
        config = _config(export_dir, git_repo_url=str(bare_remote), clone_settle_seconds=0)

        result = RepositoryBootstrapper(wrapper, config).ensure_repository()

        # The branch does not exist on the remote yet, so the pull fails
        assert result.status is BootstrapStatus.DEGRADED_CONTINUE
        assert (export_dir / ".git").is_dir()
        assert "origin" in git("remote", cwd=export_dir)
