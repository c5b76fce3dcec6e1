"""Durable registry of app-store repository URLs.

The registry lives in the ``repos`` field of the platform's user document, a
JSON file shared with unrelated platform settings. Reads are lock-free and
may observe a slightly stale list. Every mutation is a whole-document
read-modify-write performed under a create-exclusive lock file next to the
document, and the document is replaced atomically with ``os.replace``.
"""

from __future__ import annotations

import contextlib
import os
import shutil
import typing as typ

import msgspec
from filelock import SoftFileLock

from appshelf.logging import get_logger, log_info
from appshelf.registry.errors import (
    RegistryDocumentError,
    RepositoryAlreadyRegisteredError,
    RepositoryNotRegisteredError,
)

if typ.TYPE_CHECKING:
    from pathlib import Path

    from appshelf.registry.paths import PathResolver

    type RepoTransform = typ.Callable[[list[str]], list[str]]

logger = get_logger(__name__)

REPOS_FIELD = "repos"


def _unique(urls: typ.Iterable[str]) -> list[str]:
    """Drop duplicate URLs while keeping first-seen order."""
    return list(dict.fromkeys(urls))


def _valid_repo_list(value: object) -> list[str] | None:
    """Return the usable URLs in ``value``, or ``None`` when there are none.

    Entries that are not non-empty strings are dropped individually.
    """
    if not isinstance(value, list):
        return None
    urls = [url for url in value if isinstance(url, str) and url.strip()]
    return _unique(urls) or None


class RegistryStore:
    """Registered repository URLs backed by the user document.

    Parameters
    ----------
    document_path:
        JSON document holding the ``repos`` field.
    paths:
        Resolver used to find the clone to delete on removal.
    default_repo_url:
        URL reported when the registry is absent, malformed or empty.
    poll_interval:
        Seconds between attempts to take the lock. Acquisition never times
        out; the holder always releases on exit.

    """

    def __init__(
        self,
        document_path: Path,
        paths: PathResolver,
        default_repo_url: str,
        *,
        poll_interval: float = 1.0,
    ) -> None:
        """Configure the store with its document location and fallbacks."""
        self.document_path = document_path
        self.paths = paths
        self.default_repo_url = default_repo_url
        self._poll_interval = poll_interval

    @property
    def lock_path(self) -> Path:
        """Lock file co-located with the user document."""
        return self.document_path.with_name(f"{self.document_path.name}.lock")

    def list(self) -> list[str]:
        """Return the registered URLs, or just the default when unset."""
        try:
            document = msgspec.json.decode(self.document_path.read_bytes())
        except (OSError, msgspec.DecodeError):
            return [self.default_repo_url]

        repos = None
        if isinstance(document, dict):
            repos = _valid_repo_list(document.get(REPOS_FIELD))
        return repos or [self.default_repo_url]

    def contains(self, url: str) -> bool:
        """Return True when ``url`` is registered (exact match)."""
        return url in self.list()

    def add(self, url: str) -> list[str]:
        """Register ``url`` and return the new list.

        Raises
        ------
        RepositoryAlreadyRegisteredError
            If the URL is already registered. Callers treat this as a soft
            success.

        """
        if self.contains(url):
            raise RepositoryAlreadyRegisteredError(url)

        repos = self.update(lambda current: [*current, url])
        log_info(logger, "Registered repository %s", url)
        return repos

    def remove(self, url: str) -> list[str]:
        """Unregister ``url``, delete its clone and return the new list.

        Raises
        ------
        RepositoryNotRegisteredError
            If the URL is not registered.

        """
        if not self.contains(url):
            raise RepositoryNotRegisteredError(url)

        repos = self.update(
            lambda current: [existing for existing in current if existing != url]
        )
        log_info(logger, "Unregistered repository %s", url)

        clone_path = self.paths.path_for(url)
        if clone_path.exists():
            shutil.rmtree(clone_path)
            log_info(logger, "Deleted clone %s", clone_path)
        return repos

    def update(self, transform: RepoTransform) -> list[str]:
        """Apply ``transform`` to the registered URLs under the lock.

        The transform receives the effective list (including the default
        fallback) and returns the list to persist. Every other field of the
        user document is written back untouched.

        Raises
        ------
        RegistryDocumentError
            If an existing document cannot be decoded as a JSON object.

        """
        with self._locked():
            document = self._load_document()
            current = _valid_repo_list(document.get(REPOS_FIELD)) or [
                self.default_repo_url
            ]
            repos = _unique(transform(list(current)))
            document[REPOS_FIELD] = repos
            self._write_document(document)
        return repos

    @contextlib.contextmanager
    def _locked(self) -> typ.Iterator[None]:
        """Hold the registry lock for the duration of the block."""
        self.document_path.parent.mkdir(parents=True, exist_ok=True)
        lock = SoftFileLock(self.lock_path, timeout=-1)
        with lock.acquire(poll_interval=self._poll_interval):
            # Record the holder unless filelock already did.
            if not self.lock_path.read_text(encoding="utf-8").strip():
                self.lock_path.write_text(f"{os.getpid()}\n", encoding="utf-8")
            yield

    def _load_document(self) -> dict[str, typ.Any]:
        if not self.document_path.exists():
            return {}
        try:
            document = msgspec.json.decode(self.document_path.read_bytes())
        except (OSError, msgspec.DecodeError) as exc:
            raise RegistryDocumentError(str(self.document_path), str(exc)) from exc
        if not isinstance(document, dict):
            raise RegistryDocumentError(
                str(self.document_path), "document is not a JSON object"
            )
        return document

    def _write_document(self, document: dict[str, typ.Any]) -> None:
        payload = msgspec.json.format(msgspec.json.encode(document), indent=2)
        tmp = self.document_path.with_name(f"{self.document_path.name}.tmp")
        tmp.write_bytes(payload + b"\n")
        os.replace(tmp, self.document_path)
