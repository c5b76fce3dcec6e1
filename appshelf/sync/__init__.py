"""Synchronization of local clones with their remotes.

- ``SyncEngine``: clone, repair, identity-check and fast-forward clones
- ``BranchSwitcher``: change the tracked branch or try an alternate source
- ``IdentityIndex``: app-store identities declared by registered clones
- ``GitClient``: timeout-bounded git adapter
"""

from __future__ import annotations

from appshelf.sync.branch import BranchSwitcher
from appshelf.sync.engine import SyncEngine
from appshelf.sync.errors import (
    CheckoutFailedError,
    GitCommandError,
    GitError,
    GitNotFoundError,
    GitTimeoutError,
    IdentityConflictError,
    ManifestError,
    ManifestLoadError,
    MissingManifestError,
    NotClonedError,
)
from appshelf.sync.git import CloneHealth, GitClient
from appshelf.sync.identity import IdentityIndex
from appshelf.sync.manifest import AppStoreManifest, load_manifest
from appshelf.sync.models import SyncOutcome, SyncReport

__all__ = [
    "AppStoreManifest",
    "BranchSwitcher",
    "CheckoutFailedError",
    "CloneHealth",
    "GitClient",
    "GitCommandError",
    "GitError",
    "GitNotFoundError",
    "GitTimeoutError",
    "IdentityConflictError",
    "IdentityIndex",
    "ManifestError",
    "ManifestLoadError",
    "MissingManifestError",
    "NotClonedError",
    "SyncEngine",
    "SyncOutcome",
    "SyncReport",
    "load_manifest",
]
