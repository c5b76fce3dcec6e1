"""Reconcile local clones with their remotes.

Each URL moves through a small state machine on every pass::

    Unregistered -> Cloning -> Healthy | CorruptPendingRepair | IdentityConflictRemoved

Healthy clones are fast-forwarded. Corrupt clones are deleted and cloned
again in the same pass. A non-default repository whose manifest is missing
or duplicates another store's identity is unregistered. Unreachable remotes
are logged and retried on the next pass; one repository never aborts the
others.
"""

from __future__ import annotations

import shutil
import typing as typ

from appshelf.errors import AppShelfError
from appshelf.logging import (
    get_logger,
    log_error,
    log_exception,
    log_info,
    log_warning,
)
from appshelf.registry.errors import RepositoryNotRegisteredError
from appshelf.sync.errors import (
    GitCommandError,
    GitTimeoutError,
    IdentityConflictError,
    ManifestError,
    MissingManifestError,
)
from appshelf.sync.git import CloneHealth
from appshelf.sync.manifest import load_manifest, manifest_path
from appshelf.sync.models import SyncOutcome, SyncReport
from appshelf.sync.ownership import chown_tree

if typ.TYPE_CHECKING:
    from pathlib import Path

    from appshelf.registry.paths import PathResolver
    from appshelf.registry.store import RegistryStore
    from appshelf.sync.git import GitClient
    from appshelf.sync.identity import IdentityIndex

logger = get_logger(__name__)

DETACHED_HEAD = "HEAD"


class SyncEngine:
    """Clone, repair and fast-forward registered app-store repositories.

    Parameters
    ----------
    store:
        Registry used to unregister repositories that fail identity checks.
    paths:
        Resolver mapping URLs to clone directories.
    git:
        Adapter used for every git invocation.
    identities:
        Index consulted for identity collisions after a clone.
    default_repo_url:
        The platform's own store, exempt from identity checks.
    owner:
        ``(uid, gid)`` given to every clone after the pass, or ``None``.

    """

    def __init__(  # noqa: PLR0913 - collaborators are injected explicitly
        self,
        store: RegistryStore,
        paths: PathResolver,
        git: GitClient,
        identities: IdentityIndex,
        *,
        default_repo_url: str,
        owner: tuple[int, int] | None = None,
    ) -> None:
        """Wire the engine to its collaborators."""
        self._store = store
        self._paths = paths
        self._git = git
        self._identities = identities
        self._default_repo_url = default_repo_url
        self._owner = owner

    def synchronize(self, urls: typ.Iterable[str]) -> SyncReport:
        """Bring every URL's clone up to date, isolating failures per URL."""
        report = SyncReport()
        for url in urls:
            try:
                outcome = self._sync_one(url)
            except (AppShelfError, OSError) as exc:
                log_exception(logger, f"Failed to synchronize {url}", exc)
                outcome = SyncOutcome.FAILED
            report.record(url, outcome)
            self._normalize_ownership(url)
        return report

    def _sync_one(self, url: str) -> SyncOutcome:
        path = self._paths.path_for(url)
        self._git.ensure_safe_directory(path)

        repaired = False
        if path.exists():
            health = self._git.status(path)
            if health is CloneHealth.UNREACHABLE:
                log_warning(logger, "Skipping %s: git status failed at %s", url, path)
                return SyncOutcome.UNREACHABLE
            if health is CloneHealth.CORRUPT:
                log_warning(logger, "Clone of %s at %s is corrupt, recloning", url, path)
                shutil.rmtree(path)
                repaired = True

        if not path.exists():
            return self._clone(url, path, repaired=repaired)
        return self._pull(url, path)

    def _clone(self, url: str, path: Path, *, repaired: bool) -> SyncOutcome:
        log_info(logger, "Cloning %s into %s", url, path)
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._git.clone(url, path)
        except (GitCommandError, GitTimeoutError) as exc:
            log_warning(logger, "Could not clone %s: %s", url, exc)
            if path.exists():
                shutil.rmtree(path)
            return SyncOutcome.UNREACHABLE

        if url != self._default_repo_url:
            try:
                self._verify_identity(url, path)
            except ManifestError as exc:
                log_error(logger, "%s; removing repository", exc)
                self._drop(url, path)
                return SyncOutcome.REMOVED

        return SyncOutcome.REPAIRED if repaired else SyncOutcome.CLONED

    def _verify_identity(self, url: str, path: Path) -> None:
        manifest = load_manifest(path)
        if manifest is None:
            raise MissingManifestError(url, manifest_path(path))
        if manifest.id in self._identities.identities_excluding(url):
            raise IdentityConflictError(url, manifest.id)

    def _drop(self, url: str, path: Path) -> None:
        try:
            self._store.remove(url)
        except RepositoryNotRegisteredError:
            # Explicit updates may name URLs that were never registered.
            if path.exists():
                shutil.rmtree(path)

    def _pull(self, url: str, path: Path) -> SyncOutcome:
        try:
            branch = self._git.current_branch(path)
            if branch == DETACHED_HEAD:
                log_info(logger, "Leaving %s at its detached checkout", url)
                return SyncOutcome.SKIPPED
            log_info(logger, "Updating %s (%s)", url, branch)
            self._git.pull(path, branch)
        except (GitCommandError, GitTimeoutError) as exc:
            log_warning(logger, "Could not update %s: %s", url, exc)
            return SyncOutcome.UNREACHABLE
        return SyncOutcome.UPDATED

    def _normalize_ownership(self, url: str) -> None:
        path = self._paths.path_for(url)
        if self._owner is None or not path.exists():
            return
        uid, gid = self._owner
        try:
            chown_tree(path, uid, gid)
        except OSError as exc:
            log_warning(
                logger, "Could not give %s to %d:%d: %s", path, uid, gid, exc
            )
