"""Thin adapter over the git executable.

Every call runs a fixed argv through :func:`subprocess.run` with captured
output. Non-zero exits become :class:`GitCommandError` and timeouts become
:class:`GitTimeoutError`, so callers branch on exception types instead of exit
codes. The one exception is :meth:`GitClient.status`, which folds the probe
into a :class:`CloneHealth` value.
"""

from __future__ import annotations

import dataclasses
import enum
import os
import shutil
import subprocess
import typing as typ

from appshelf.sync.errors import GitCommandError, GitNotFoundError, GitTimeoutError

if typ.TYPE_CHECKING:
    from pathlib import Path

# git exits 128 for fatal repository errors such as a missing or broken .git.
CORRUPT_EXIT_CODE = 128
WIDE_FETCH_REFSPEC = "+refs/heads/*:refs/remotes/origin/*"


class CloneHealth(enum.StrEnum):
    """Outcome of probing an existing clone directory."""

    HEALTHY = "healthy"
    UNREACHABLE = "unreachable"
    CORRUPT = "corrupt"


@dataclasses.dataclass(slots=True)
class GitClient:
    """Run git commands with a bounded timeout for network operations.

    Attributes
    ----------
    timeout
        Seconds allowed for clone, fetch and pull.
    local_timeout
        Seconds allowed for purely local commands (status, config, checkout).

    """

    timeout: float = 30.0
    local_timeout: float = 30.0
    _executable: str | None = dataclasses.field(default=None, repr=False)

    @property
    def executable(self) -> str:
        """Resolve and cache the git binary."""
        if self._executable is None:
            found = shutil.which("git")
            if found is None:
                message = "git executable not found on PATH"
                raise GitNotFoundError(message)
            self._executable = found
        return self._executable

    def _env(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        env = dict(os.environ)
        env["GIT_TERMINAL_PROMPT"] = "0"
        if extra:
            env.update(extra)
        return env

    def run(
        self,
        *args: str,
        timeout: float | None = None,
        env: dict[str, str] | None = None,
    ) -> subprocess.CompletedProcess[str]:
        """Run ``git *args`` and return the completed process.

        Raises
        ------
        GitCommandError
            If git exits non-zero.
        GitTimeoutError
            If git runs longer than ``timeout`` (default ``local_timeout``).

        """
        limit = self.local_timeout if timeout is None else timeout
        try:
            result = subprocess.run(  # noqa: S603  # fixed git argv, no shell
                [self.executable, *args],
                capture_output=True,
                text=True,
                timeout=limit,
                env=self._env(env),
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise GitTimeoutError(args, limit) from exc
        if result.returncode != 0:
            raise GitCommandError(args, result.returncode, result.stderr)
        return result

    def run_in(
        self, path: Path, *args: str, timeout: float | None = None
    ) -> subprocess.CompletedProcess[str]:
        """Run ``git -C path *args`` without discovering repositories above it.

        ``GIT_CEILING_DIRECTORIES`` stops at the parent directory, so a clone
        that lost its ``.git`` fails with exit 128 instead of resolving to an
        enclosing checkout.
        """
        return self.run(
            "-C",
            str(path),
            *args,
            timeout=timeout,
            env={"GIT_CEILING_DIRECTORIES": str(path.parent)},
        )

    # -- trust ------------------------------------------------------------

    def safe_directories(self) -> list[str]:
        """Return the global ``safe.directory`` entries."""
        try:
            result = self.run("config", "--global", "--get-all", "safe.directory")
        except GitCommandError as exc:
            # Exit 1 means the key is unset.
            if exc.returncode == 1:
                return []
            raise
        return [line for line in result.stdout.splitlines() if line]

    def ensure_safe_directory(self, path: Path) -> bool:
        """Trust ``path`` globally; return True when an entry was added."""
        if str(path) in self.safe_directories():
            return False
        self.run("config", "--global", "--add", "safe.directory", str(path))
        return True

    # -- clone health -----------------------------------------------------

    def status(self, path: Path) -> CloneHealth:
        """Probe ``path`` with ``git status``."""
        try:
            self.run_in(path, "status", "--porcelain")
        except GitCommandError as exc:
            if exc.returncode == CORRUPT_EXIT_CODE:
                return CloneHealth.CORRUPT
            return CloneHealth.UNREACHABLE
        except GitTimeoutError:
            return CloneHealth.UNREACHABLE
        return CloneHealth.HEALTHY

    # -- network operations -----------------------------------------------

    def clone(self, url: str, path: Path) -> None:
        """Clone ``url`` into ``path``."""
        self.run("clone", "--quiet", url, str(path), timeout=self.timeout)

    def pull(self, path: Path, branch: str, remote: str = "origin") -> None:
        """Fast-forward ``branch`` from ``remote``."""
        self.run_in(
            path, "pull", "--quiet", "--ff-only", remote, branch, timeout=self.timeout
        )

    def fetch(self, path: Path, remote: str = "origin", *refspecs: str) -> None:
        """Fetch ``refspecs`` (or the configured refspec) from ``remote``."""
        self.run_in(path, "fetch", "--quiet", remote, *refspecs, timeout=self.timeout)

    # -- local state ------------------------------------------------------

    def current_branch(self, path: Path) -> str:
        """Return the checked-out branch, or ``HEAD`` when detached."""
        result = self.run_in(path, "rev-parse", "--abbrev-ref", "HEAD")
        return result.stdout.strip()

    def get_config(self, path: Path, key: str) -> list[str]:
        """Return every value of a repository config key."""
        try:
            result = self.run_in(path, "config", "--get-all", key)
        except GitCommandError as exc:
            if exc.returncode == 1:
                return []
            raise
        return [line for line in result.stdout.splitlines() if line]

    def replace_config(self, path: Path, key: str, value: str) -> None:
        """Set ``key`` to the single value ``value``."""
        self.run_in(path, "config", "--replace-all", key, value)

    def remotes(self, path: Path) -> list[str]:
        """Return the names of the configured remotes."""
        result = self.run_in(path, "remote")
        return result.stdout.split()

    def add_remote(self, path: Path, name: str, url: str) -> None:
        """Add a remote, or point an existing one at ``url``."""
        if name in self.remotes(path):
            self.run_in(path, "remote", "set-url", name, url)
        else:
            self.run_in(path, "remote", "add", name, url)

    def checkout(self, path: Path, ref: str, *, detach: bool = False) -> None:
        """Check out ``ref``; ``detach`` leaves HEAD detached at it."""
        args = ["checkout", "--quiet"]
        if detach:
            args.append("--detach")
        self.run_in(path, *args, ref)
