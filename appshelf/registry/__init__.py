"""Registry of app-store repository URLs.

The registry maps user-supplied descriptors to canonical URLs, persists the
set of registered URLs in the platform's user document, and resolves each URL
to the directory holding its clone.

Usage
-----
Register a store from shorthand::

    from appshelf.registry import PathResolver, RegistryStore, parse_descriptor

    paths = PathResolver(Path("/umbrel/repos"))
    store = RegistryStore(Path("/umbrel/db/user.json"), paths, DEFAULT_REPO_URL)
    store.add(parse_descriptor("coolapp/umbrel-apps#staging").url)

Transform the list atomically::

    store.update(lambda repos: sorted(repos))

"""

from appshelf.registry.descriptor import parse_descriptor
from appshelf.registry.errors import (
    RegistryDocumentError,
    RegistryError,
    RepositoryAlreadyRegisteredError,
    RepositoryNotRegisteredError,
)
from appshelf.registry.models import RepoDescriptor
from appshelf.registry.paths import PathResolver
from appshelf.registry.store import RegistryStore

__all__ = [
    "PathResolver",
    "RegistryDocumentError",
    "RegistryError",
    "RegistryStore",
    "RepoDescriptor",
    "RepositoryAlreadyRegisteredError",
    "RepositoryNotRegisteredError",
    "parse_descriptor",
]
