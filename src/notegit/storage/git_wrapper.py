"""Git wrapper for the export directory.

Runs the configured git executable through subprocess with an argument
vector (never a shell string), so repository URLs, branch names and the
executable path are passed through untouched.
"""

import logging
import os
import subprocess
import time
from pathlib import Path
from typing import List, Optional, Union

from notegit.exceptions import ErrorCode, GitError

logger = logging.getLogger(__name__)

class GitWrapper:
    """Wrapper for the git operations of one export directory.

    Every command runs with ``cwd`` set to ``repo_path`` except
    :meth:`clone`, which receives the directory as an argument.

    Args:
        repo_path: The export directory (working copy root).
        executable: Path or name of the git binary.
        timeout: Seconds before a command is abandoned. ``None`` waits forever.
        user_name: Commit author name passed as ``-c user.name``.
        user_email: Commit author email passed as ``-c user.email``.
    """

    def __init__(
        self,
        repo_path: Union[str, Path],
        executable: str = "git",
        timeout: Optional[float] = None,
        user_name: Optional[str] = None,
        user_email: Optional[str] = None,
    ):
        self.repo_path = Path(repo_path)
        self.executable = executable or "git"
        self.timeout = timeout
        self.user_name = user_name
        self.user_email = user_email

    def _run_git(
        self,
        args: List[str],
        cwd: Optional[Path] = None,
        check: bool = True,
        retries: int = 3,
        retry_delay: float = 0.1,
    ) -> subprocess.CompletedProcess:
        """Run a git command via subprocess with retry for lock contention.

        Args:
            args: Git command arguments (without the executable)
            cwd: Working directory. Defaults to ``repo_path``.
            check: If True, raise GitError on non-zero exit
            retries: Number of retries for index.lock contention
            retry_delay: Seconds to wait between retries (multiplied by attempt)

        Returns:
            CompletedProcess with command results

        Raises:
            GitError: If check=True and command fails after all retries, the
                command times out, or the executable cannot be found
        """
        cmd = [self.executable] + args
        work_dir = str(cwd or self.repo_path)
        env = {**os.environ, "GIT_TERMINAL_PROMPT": "0"}
        if not os.path.isdir(work_dir):
            raise GitError(
                message=f"Working directory does not exist: {work_dir}", command=cmd
            )

        for attempt in range(retries + 1):
            try:
                result = subprocess.run(
                    cmd,
                    cwd=work_dir,
                    check=False,
                    capture_output=True,
                    text=True,
                    timeout=self.timeout,
                    env=env,
                )
            except subprocess.TimeoutExpired as e:
                raise GitError(
                    message=f"Git command timed out: {' '.join(args)}",
                    command=cmd,
                    code=ErrorCode.GIT_TIMEOUT,
                ) from e
            except FileNotFoundError as e:
                raise GitError(
                    message=f"Git executable not found: {self.executable}",
                    command=cmd,
                    code=ErrorCode.GIT_NOT_FOUND,
                ) from e

            if result.returncode != 0 and result.stderr:
                if "index.lock" in result.stderr and attempt < retries:
                    logger.debug(
                        f"Git index.lock contention, retry {attempt + 1}/{retries}: {args}"
                    )
                    time.sleep(retry_delay * (attempt + 1))
                    continue

            if check and result.returncode != 0:
                raise GitError(
                    message=f"Git command failed: {' '.join(args)}",
                    command=cmd,
                    returncode=result.returncode,
                    stderr=result.stderr.strip() if result.stderr else None,
                )
            return result

        raise GitError(f"Git command failed after {retries} retries: {args}", command=cmd)

    # ------------------------------------------------------------------
    # Repository state
    # ------------------------------------------------------------------

    @property
    def git_dir(self) -> Path:
        return self.repo_path / ".git"

    def is_repository(self) -> bool:
        """True when the export directory already holds git metadata."""
        return self.git_dir.exists()

    def init(self) -> None:
        self.repo_path.mkdir(parents=True, exist_ok=True)
        self._run_git(["init"])
        logger.info(f"Initialized git repository at {self.repo_path}")

    def clone(self, url: str) -> None:
        """Clone ``url`` into the export directory.

        Runs from the parent directory so the target does not need to be a
        repository yet.
        """
        parent = self.repo_path.parent
        parent.mkdir(parents=True, exist_ok=True)
        self._run_git(["clone", url, str(self.repo_path)], cwd=parent)
        logger.info(f"Cloned {url} into {self.repo_path}")

    # ------------------------------------------------------------------
    # Branches and remotes
    # ------------------------------------------------------------------

    def checkout_or_create(self, branch: str) -> bool:
        """Switch to ``branch``, creating it when it does not exist.

        Returns:
            True if the branch was created.
        """
        result = self._run_git(["checkout", branch], check=False)
        if result.returncode == 0:
            return False
        logger.debug(f"Checkout of {branch} failed, creating it: {result.stderr.strip()}")
        self._run_git(["checkout", "-b", branch])
        return True

    def pull(self, branch: str, remote: str = "origin") -> None:
        self._run_git(["pull", remote, branch])

    def list_remotes(self) -> List[str]:
        """Names of the configured remotes, parsed from ``git remote -v``."""
        result = self._run_git(["remote", "-v"])
        names: List[str] = []
        for line in result.stdout.splitlines():
            parts = line.split()
            if parts and parts[0] not in names:
                names.append(parts[0])
        return names

    def has_remote(self, name: str = "origin") -> bool:
        return name in self.list_remotes()

    def add_remote(self, url: str, name: str = "origin") -> None:
        self._run_git(["remote", "add", name, url])

    def push_force(self, branch: str, remote: str = "origin") -> None:
        """Force-push ``branch`` and make ``remote`` its upstream."""
        self._run_git(["push", remote, branch, "--set-upstream", "--force"])

    # ------------------------------------------------------------------
    # Staging and committing
    # ------------------------------------------------------------------

    def add_all(self) -> None:
        self._run_git(["add", "."])

    def status(self) -> str:
        """Porcelain status of the working copy (empty when clean)."""
        return self._run_git(["status", "--porcelain"]).stdout

    def has_changes(self) -> bool:
        status = self.status()
        return bool(status.strip())

    def commit(self, message: str) -> None:
        identity: List[str] = []
        if self.user_name:
            identity += ["-c", f"user.name={self.user_name}"]
        if self.user_email:
            identity += ["-c", f"user.email={self.user_email}"]
        self._run_git(identity + ["commit", "-m", message])
