"""Command-line interface for managing app-store repositories.

Usage:
    appshelf add getumbrel/umbrel-apps           # register a store
    appshelf remove <url>                        # unregister and delete clone
    appshelf update [url]                        # clone or fast-forward stores
    appshelf branch <url> <branch>               # track another branch
    appshelf checkout owner/repo#branch          # try a source in the default clone
    appshelf path <url>                          # print the clone directory
    appshelf locate <app-id>                     # print the store providing an app
    appshelf list                                # print registered stores
    appshelf id <url>                            # print a store's app-store id

Environment variables:
    APPSHELF_ROOT        - Platform root (default: /umbrel)
    APPSHELF_LOG_LEVEL   - Log level (default: INFO)
    APPSHELF_OWNER       - uid:gid applied to clones (default: 1000:1000)
"""

from __future__ import annotations

import os
import signal
import sys
import typing as typ

from cyclopts import App

from appshelf.errors import ValidationError
from appshelf.factory import build_appshelf
from appshelf.logging import configure_logging, get_logger, log_warning
from appshelf.registry.descriptor import parse_descriptor
from appshelf.registry.errors import (
    RegistryDocumentError,
    RepositoryAlreadyRegisteredError,
    RepositoryNotRegisteredError,
)
from appshelf.sync.errors import CheckoutFailedError, NotClonedError
from appshelf.sync.models import SyncOutcome

if typ.TYPE_CHECKING:
    import types

    from appshelf.registry.models import RepoDescriptor

app = App(
    name="appshelf",
    help="Manage the app-store repositories of a home server",
    version="0.1.0",
)

logger = get_logger(__name__)


def _require(value: str | None, argument: str) -> str:
    """Return ``value`` or raise when it is missing or blank."""
    if value is None or not value.strip():
        raise ValidationError(argument)
    return value.strip()


def _require_descriptor(value: str | None) -> RepoDescriptor:
    """Parse ``value``, rejecting descriptors with nothing before ``#``."""
    text = _require(value, "descriptor")
    if not text.partition("#")[0].strip():
        raise ValidationError("descriptor")
    return parse_descriptor(text)


def _fail(message: str) -> int:
    print(message, file=sys.stderr)
    return 1


@app.command
def add(descriptor: str | None = None, /) -> int:
    """Register an app-store repository.

    Args:
        descriptor: ``owner/name``, a full git URL, optionally ``#branch``.

    Returns:
        Exit code (0 when registered or already present, 1 on bad input).

    """
    try:
        url = _require_descriptor(descriptor).url
    except ValidationError as exc:
        return _fail(f"{exc}. Usage: appshelf add <owner/name|url>[#branch]")

    shelf = build_appshelf()
    try:
        shelf.store.add(url)
    except RepositoryAlreadyRegisteredError:
        print(f"{url} is already registered")
        return 0
    except RegistryDocumentError as exc:
        return _fail(str(exc))

    print(f"Added {url}")
    return 0


@app.command
def remove(url: str | None = None, /) -> int:
    """Unregister a repository and delete its clone.

    Args:
        url: The registered repository URL.

    Returns:
        Exit code (0 when removed or not present, 1 on bad input).

    """
    try:
        target = _require(url, "url")
    except ValidationError as exc:
        return _fail(f"{exc}. Usage: appshelf remove <url>")

    shelf = build_appshelf()
    try:
        shelf.store.remove(target)
    except RepositoryNotRegisteredError:
        print(f"{target} is not registered")
        return 0
    except RegistryDocumentError as exc:
        return _fail(str(exc))

    print(f"Removed {target}")
    return 0


@app.command
def update(url: str | None = None, /) -> int:
    """Clone or fast-forward one repository, or every registered one.

    Per-repository failures are logged and never change the exit code.

    Args:
        url: Optional repository URL; defaults to all registered repositories.

    Returns:
        Exit code (always 0).

    """
    shelf = build_appshelf()
    urls = [url.strip()] if url and url.strip() else shelf.store.list()
    report = shelf.engine.synchronize(urls)

    for skipped in report.urls_with(SyncOutcome.UNREACHABLE):
        log_warning(logger, "%s was not synchronized this time", skipped)
    for removed in report.urls_with(SyncOutcome.REMOVED):
        print(f"Removed {removed}: invalid or duplicate app store id")
    return 0


@app.command
def branch(repo: str | None = None, branch: str | None = None, /) -> int:
    """Switch a cloned repository to another branch, then update it.

    Args:
        repo: The registered repository URL.
        branch: Branch that exists on the repository's remote.

    Returns:
        Exit code (0 on success, 1 on bad input, missing clone or failed checkout).

    """
    try:
        target = _require(repo, "repo")
        wanted = _require(branch, "branch")
    except ValidationError as exc:
        return _fail(f"{exc}. Usage: appshelf branch <url> <branch>")

    shelf = build_appshelf()
    try:
        shelf.switcher.switch_branch(target, wanted)
    except NotClonedError as exc:
        return _fail(str(exc))
    except CheckoutFailedError as exc:
        return _fail(exc.detail or str(exc))

    print(f"{target} now tracks {wanted}")
    return 0


@app.command
def checkout(descriptor: str | None = None, /) -> int:
    """Check out a branch of another source inside the default repository.

    Args:
        descriptor: ``owner/name#branch`` or ``url#branch`` of the source.

    Returns:
        Exit code (0 on success, 1 when the default clone is missing or the
        checkout fails).

    """
    try:
        parsed = _require_descriptor(descriptor)
    except ValidationError as exc:
        return _fail(f"{exc}. Usage: appshelf checkout <owner/name|url>[#branch]")

    shelf = build_appshelf()
    try:
        ref = shelf.switcher.checkout_source(parsed)
    except NotClonedError as exc:
        return _fail(str(exc))
    except CheckoutFailedError as exc:
        return _fail(exc.detail or str(exc))

    print(f"Checked out {ref}")
    return 0


@app.command
def path(url: str = "", /) -> int:
    """Print the local clone directory for a repository URL."""
    print(build_appshelf().paths.path_for(url.strip()))
    return 0


@app.command
def locate(app_id: str = "", /) -> int:
    """Print the first registered repository that provides ``app_id``."""
    found = build_appshelf().identities.locate(app_id.strip())
    if found is not None:
        print(found)
    return 0


@app.command(name="list")
def list_repos() -> int:
    """Print every registered repository URL."""
    for url in build_appshelf().store.list():
        print(url)
    return 0


@app.command(name="id")
def repo_id(url: str = "", /) -> int:
    """Print the app-store id declared by a repository's clone."""
    identity = build_appshelf().identities.identity_for(url.strip())
    if identity is not None:
        print(identity)
    return 0


def _terminate(signum: int, frame: types.FrameType | None) -> None:
    """Turn SIGTERM into SystemExit so held locks are released."""
    del frame
    raise SystemExit(128 + signum)


def main() -> int:
    """Entry point for the ``appshelf`` console script."""
    signal.signal(signal.SIGTERM, _terminate)

    log_level = os.environ.get("APPSHELF_LOG_LEVEL", "INFO")
    normalized, invalid = configure_logging(log_level)
    if invalid:
        log_warning(
            logger,
            "Invalid APPSHELF_LOG_LEVEL %r, falling back to %s",
            log_level,
            normalized,
        )
    return app()


if __name__ == "__main__":
    sys.exit(main())
