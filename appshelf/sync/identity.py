"""Read-only queries over the app-store identities of local clones."""

from __future__ import annotations

import typing as typ

from appshelf.logging import get_logger, log_debug
from appshelf.sync.errors import ManifestLoadError
from appshelf.sync.manifest import load_manifest

if typ.TYPE_CHECKING:
    from appshelf.registry.paths import PathResolver
    from appshelf.registry.store import RegistryStore

logger = get_logger(__name__)


class IdentityIndex:
    """Derive app-store identities from the manifests of registered clones.

    Missing clones, missing manifests and unreadable manifests contribute
    nothing; deciding whether that is an error belongs to the caller.
    """

    def __init__(self, store: RegistryStore, paths: PathResolver) -> None:
        """Bind the index to a registry and its path resolver."""
        self._store = store
        self._paths = paths

    def identity_for(self, url: str) -> str | None:
        """Return the identity declared by ``url``'s clone, if any."""
        try:
            manifest = load_manifest(self._paths.path_for(url))
        except ManifestLoadError as exc:
            log_debug(logger, "Ignoring unreadable manifest for %s: %s", url, exc)
            return None
        return None if manifest is None else manifest.id

    def identities_excluding(self, url: str) -> list[str]:
        """Return the identities of every registered repository but ``url``."""
        identities: list[str] = []
        for other in self._store.list():
            if other == url:
                continue
            identity = self.identity_for(other)
            if identity is not None:
                identities.append(identity)
        return identities

    def locate(self, app_id: str) -> str | None:
        """Return the first registered URL whose clone has an ``app_id`` dir."""
        if not app_id or "/" in app_id or app_id in {".", ".."}:
            return None
        for url in self._store.list():
            if (self._paths.path_for(url) / app_id).is_dir():
                return url
        return None
