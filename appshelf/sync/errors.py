"""Errors raised while synchronizing local clones."""

from __future__ import annotations

import typing as typ

from appshelf.errors import AppShelfError

if typ.TYPE_CHECKING:
    from pathlib import Path


class GitError(AppShelfError):
    """Base class for failures talking to git."""


class GitNotFoundError(GitError):
    """The git executable is not on PATH."""


class GitCommandError(GitError):
    """A git invocation exited non-zero."""

    def __init__(self, args: typ.Sequence[str], returncode: int, stderr: str) -> None:
        """Initialise with the argv, exit status and git's diagnostic."""
        self.argv = tuple(args)
        self.returncode = returncode
        self.stderr = stderr.strip()
        super().__init__(
            f"git {' '.join(self.argv)} exited {returncode}: {self.stderr}"
        )


class GitTimeoutError(GitError):
    """A git invocation exceeded its wall-clock limit."""

    def __init__(self, args: typ.Sequence[str], timeout: float) -> None:
        """Initialise with the argv and the limit that was hit."""
        self.argv = tuple(args)
        self.timeout = timeout
        super().__init__(f"git {' '.join(self.argv)} timed out after {timeout:g}s")


class NotClonedError(GitError):
    """The repository has no local clone yet."""

    def __init__(self, url: str, path: Path) -> None:
        """Initialise with the URL and the clone path that is missing."""
        self.url = url
        self.path = path
        super().__init__(
            f"Repository {url} is not cloned at {path}; run 'appshelf update' first"
        )


class CheckoutFailedError(GitError):
    """git refused to check out the requested ref."""

    def __init__(self, url: str, ref: str, detail: str) -> None:
        """Initialise with the URL, the requested ref and git's output."""
        self.url = url
        self.ref = ref
        self.detail = detail
        super().__init__(detail or f"Checkout of {ref} failed for {url}")


class ManifestError(AppShelfError):
    """Base class for app-store manifest problems."""


class MissingManifestError(ManifestError):
    """The clone has no readable manifest or the manifest lacks an ``id``."""

    def __init__(self, url: str, path: Path) -> None:
        """Initialise with the URL and the manifest path that was checked."""
        self.url = url
        self.path = path
        super().__init__(f"Repository {url} has no app store id in {path}")


class IdentityConflictError(ManifestError):
    """Another registered repository already declares the same id."""

    def __init__(self, url: str, identity: str) -> None:
        """Initialise with the URL and the duplicated identity."""
        self.url = url
        self.identity = identity
        super().__init__(
            f"Repository {url} declares app store id {identity!r}, "
            "which is already used by another repository"
        )


class ManifestLoadError(ManifestError):
    """A manifest exists but cannot be read or validated."""
