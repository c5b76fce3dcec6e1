"""Deterministic mapping from repository URLs to clone directories."""

from __future__ import annotations

import dataclasses
import typing as typ

from appshelf.common.slug import url_slug

if typ.TYPE_CHECKING:
    from pathlib import Path


@dataclasses.dataclass(slots=True, frozen=True)
class PathResolver:
    """Resolve the local clone path for a repository URL.

    The mapping is a pure function of the URL: no filesystem access happens
    here. Two URLs whose slugs collide share a directory.
    """

    repos_root: Path

    def path_for(self, url: str) -> Path:
        """Return ``{repos_root}/{slug(url)}``."""
        return self.repos_root / url_slug(url)
