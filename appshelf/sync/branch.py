"""Branch switching and alternate-source checkouts for existing clones."""

from __future__ import annotations

import typing as typ

from appshelf.common.slug import url_slug
from appshelf.logging import get_logger, log_info
from appshelf.sync.errors import (
    CheckoutFailedError,
    GitCommandError,
    GitTimeoutError,
    NotClonedError,
)
from appshelf.sync.git import WIDE_FETCH_REFSPEC, CloneHealth

if typ.TYPE_CHECKING:
    from pathlib import Path

    from appshelf.registry.models import RepoDescriptor
    from appshelf.registry.paths import PathResolver
    from appshelf.sync.engine import SyncEngine
    from appshelf.sync.git import GitClient
    from appshelf.sync.models import SyncReport

logger = get_logger(__name__)

FETCH_CONFIG_KEY = "remote.origin.fetch"


class BranchSwitcher:
    """Move a clone to another branch, or onto a ref from another source."""

    def __init__(
        self,
        paths: PathResolver,
        git: GitClient,
        engine: SyncEngine,
        *,
        default_repo_url: str,
    ) -> None:
        """Wire the switcher to the engine that fast-forwards afterwards."""
        self._paths = paths
        self._git = git
        self._engine = engine
        self._default_repo_url = default_repo_url

    def _require_clone(self, url: str) -> Path:
        path = self._paths.path_for(url)
        if not path.exists() or self._git.status(path) is not CloneHealth.HEALTHY:
            raise NotClonedError(url, path)
        return path

    def switch_branch(self, url: str, branch: str) -> SyncReport:
        """Track ``branch`` in ``url``'s clone and fast-forward it.

        Single-branch clones are widened to fetch every branch first.

        Raises
        ------
        NotClonedError
            If the repository has no healthy clone yet.
        CheckoutFailedError
            If the branch cannot be fetched or does not exist on the remote.

        """
        path = self._require_clone(url)

        try:
            if self._git.get_config(path, FETCH_CONFIG_KEY) != [WIDE_FETCH_REFSPEC]:
                log_info(logger, "Widening fetch refspec for %s", url)
                self._git.replace_config(path, FETCH_CONFIG_KEY, WIDE_FETCH_REFSPEC)
            self._git.fetch(path, "origin")
            self._git.checkout(path, branch)
        except (GitCommandError, GitTimeoutError) as exc:
            detail = exc.stderr if isinstance(exc, GitCommandError) else str(exc)
            raise CheckoutFailedError(url, branch, detail) from exc

        log_info(logger, "Switched %s to branch %s", url, branch)
        return self._engine.synchronize([url])

    def checkout_source(self, descriptor: RepoDescriptor) -> str:
        """Check out ``descriptor``'s branch inside the default clone.

        The descriptor URL is added to the default clone as a remote named
        after its slug, and HEAD is detached at ``<remote>/<branch>``. This
        lets an alternate store be tried in place without registering it.

        Returns
        -------
        str
            The ref that was checked out.

        Raises
        ------
        NotClonedError
            If the default repository has no healthy clone yet.
        CheckoutFailedError
            If the remote or branch cannot be fetched or checked out.

        """
        path = self._require_clone(self._default_repo_url)

        remote = url_slug(descriptor.url)
        ref = f"{remote}/{descriptor.branch}"
        try:
            self._git.add_remote(path, remote, descriptor.url)
            self._git.fetch(
                path,
                remote,
                f"+refs/heads/{descriptor.branch}:refs/remotes/{ref}",
            )
            self._git.checkout(path, ref, detach=True)
        except (GitCommandError, GitTimeoutError) as exc:
            detail = exc.stderr if isinstance(exc, GitCommandError) else str(exc)
            raise CheckoutFailedError(descriptor.url, descriptor.branch, detail) from exc

        log_info(logger, "Checked out %s in %s", ref, path)
        return ref
