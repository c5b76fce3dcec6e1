"""Runtime configuration for appshelf.

All locations derive from a single platform root so tests and alternative
installs can relocate the whole tree with one variable.

Usage
-----
Create a configuration with defaults:

>>> config = AppShelfConfig()
>>> str(config.repos_root)
'/umbrel/repos'

Or load from environment variables:

>>> import os
>>> os.environ["APPSHELF_ROOT"] = "/srv/umbrel"
>>> AppShelfConfig.from_env().user_document
PosixPath('/srv/umbrel/db/user.json')

"""

from __future__ import annotations

import dataclasses as dc
import os
from pathlib import Path

DEFAULT_ROOT = Path("/umbrel")
DEFAULT_REPO_URL = "https://github.com/getumbrel/umbrel-apps.git"
DEFAULT_OWNER = (1000, 1000)
DEFAULT_GIT_TIMEOUT = 30.0
DEFAULT_LOCK_POLL_INTERVAL = 1.0


@dc.dataclass(frozen=True, slots=True)
class AppShelfConfig:
    """Locations and limits shared by the registry and the sync engine.

    Attributes
    ----------
    root
        Platform root directory. Clones live under ``{root}/repos`` and the
        user document under ``{root}/db/user.json``.
    default_repo_url
        The platform's own app store. Used as the registry fallback and
        exempt from identity collision checks.
    owner
        ``(uid, gid)`` applied recursively to every clone after a sync pass,
        or ``None`` to leave ownership untouched.
    git_timeout
        Wall-clock limit in seconds for each clone, pull or fetch.
    lock_poll_interval
        Seconds between attempts to take the registry lock.

    """

    root: Path = DEFAULT_ROOT
    default_repo_url: str = DEFAULT_REPO_URL
    owner: tuple[int, int] | None = DEFAULT_OWNER
    git_timeout: float = DEFAULT_GIT_TIMEOUT
    lock_poll_interval: float = DEFAULT_LOCK_POLL_INTERVAL

    @property
    def repos_root(self) -> Path:
        """Directory holding one clone per registered URL."""
        return self.root / "repos"

    @property
    def user_document(self) -> Path:
        """JSON document whose ``repos`` field is the registry."""
        return self.root / "db" / "user.json"

    @staticmethod
    def _parse_positive_float(env_var: str, default: float) -> float:
        """Read a positive number env var, falling back to a default."""
        raw = os.environ.get(env_var, "")
        if not raw.strip():
            return default
        try:
            value = float(raw)
        except ValueError as exc:
            msg = f"{env_var} must be a number, got: {raw!r}"
            raise ValueError(msg) from exc
        if value <= 0:
            msg = f"{env_var} must be positive, got: {value}"
            raise ValueError(msg)
        return value

    @staticmethod
    def _parse_owner(raw: str | None) -> tuple[int, int] | None:
        """Parse ``uid:gid``; an explicitly empty value disables chown."""
        if raw is None:
            return DEFAULT_OWNER
        if not raw.strip():
            return None
        uid, sep, gid = raw.strip().partition(":")
        try:
            if not sep:
                raise ValueError(raw)  # noqa: TRY301 - unify format and int errors
            return (int(uid), int(gid))
        except ValueError as exc:
            msg = f"APPSHELF_OWNER must be 'uid:gid', got: {raw!r}"
            raise ValueError(msg) from exc

    @classmethod
    def from_env(cls) -> AppShelfConfig:
        """Create configuration from environment variables.

        Reads ``APPSHELF_ROOT``, ``APPSHELF_DEFAULT_REPO``, ``APPSHELF_OWNER``,
        ``APPSHELF_GIT_TIMEOUT`` and ``APPSHELF_LOCK_POLL_INTERVAL``. Unset or
        blank variables keep their defaults, except ``APPSHELF_OWNER`` where
        an empty value turns ownership normalization off.

        Raises
        ------
        ValueError
            If a numeric variable or the owner is malformed.

        """
        raw_root = os.environ.get("APPSHELF_ROOT", "").strip()
        default_repo = os.environ.get("APPSHELF_DEFAULT_REPO", "").strip()
        return cls(
            root=Path(raw_root) if raw_root else DEFAULT_ROOT,
            default_repo_url=default_repo or DEFAULT_REPO_URL,
            owner=cls._parse_owner(os.environ.get("APPSHELF_OWNER")),
            git_timeout=cls._parse_positive_float(
                "APPSHELF_GIT_TIMEOUT", DEFAULT_GIT_TIMEOUT
            ),
            lock_poll_interval=cls._parse_positive_float(
                "APPSHELF_LOCK_POLL_INTERVAL", DEFAULT_LOCK_POLL_INTERVAL
            ),
        )
