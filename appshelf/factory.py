"""Assemble the registry, sync engine and branch switcher from configuration.

Usage
-----
Build everything from the environment::

    from appshelf.factory import build_appshelf

    shelf = build_appshelf()
    shelf.engine.synchronize(shelf.store.list())

"""

from __future__ import annotations

import dataclasses

from appshelf.config import AppShelfConfig
from appshelf.registry.paths import PathResolver
from appshelf.registry.store import RegistryStore
from appshelf.sync.branch import BranchSwitcher
from appshelf.sync.engine import SyncEngine
from appshelf.sync.git import GitClient
from appshelf.sync.identity import IdentityIndex

__all__ = ["AppShelf", "build_appshelf"]


@dataclasses.dataclass(frozen=True, slots=True)
class AppShelf:
    """Wired collaborators sharing one configuration."""

    config: AppShelfConfig
    paths: PathResolver
    store: RegistryStore
    identities: IdentityIndex
    engine: SyncEngine
    switcher: BranchSwitcher


def build_appshelf(
    config: AppShelfConfig | None = None,
    *,
    git: GitClient | None = None,
) -> AppShelf:
    """Build an :class:`AppShelf`, reading the environment when no config is given."""
    config = config or AppShelfConfig.from_env()
    git = git or GitClient(timeout=config.git_timeout)

    paths = PathResolver(config.repos_root)
    store = RegistryStore(
        config.user_document,
        paths,
        config.default_repo_url,
        poll_interval=config.lock_poll_interval,
    )
    identities = IdentityIndex(store, paths)
    engine = SyncEngine(
        store,
        paths,
        git,
        identities,
        default_repo_url=config.default_repo_url,
        owner=config.owner,
    )
    switcher = BranchSwitcher(
        paths, git, engine, default_repo_url=config.default_repo_url
    )
    return AppShelf(
        config=config,
        paths=paths,
        store=store,
        identities=identities,
        engine=engine,
        switcher=switcher,
    )
