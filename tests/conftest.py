"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import os
import typing as typ

import pytest

from appshelf.config import AppShelfConfig
from appshelf.factory import AppShelf, build_appshelf
from tests.helpers.git_repos import DEFAULT_STORE_ID, Upstream, create_upstream

if typ.TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture(autouse=True)
def isolated_git(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point git's global config at a scratch file and fix the identity."""
    gitconfig = tmp_path / "gitconfig"
    gitconfig.touch()
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(gitconfig))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "appshelf")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "appshelf@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "appshelf")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "appshelf@example.com")
    return gitconfig


@pytest.fixture
def remotes_dir(tmp_path: Path) -> Path:
    """Directory holding upstream repositories for a test."""
    path = tmp_path / "remotes"
    path.mkdir()
    return path


@pytest.fixture
def default_upstream(remotes_dir: Path) -> Upstream:
    """The platform's official store, with a couple of apps."""
    return create_upstream(
        remotes_dir / "umbrel-apps",
        store_id=DEFAULT_STORE_ID,
        apps=("bitcoin", "lightning"),
    )


@pytest.fixture
def config(tmp_path: Path, default_upstream: Upstream) -> AppShelfConfig:
    """Configuration rooted in ``tmp_path`` and owned by the current user."""
    return AppShelfConfig(
        root=tmp_path / "umbrel",
        default_repo_url=default_upstream.url,
        owner=(os.getuid(), os.getgid()),
        git_timeout=30.0,
        lock_poll_interval=0.05,
    )


@pytest.fixture
def shelf(config: AppShelfConfig) -> AppShelf:
    """Fully wired registry, engine and switcher."""
    return build_appshelf(config)


@pytest.fixture
def cli_env(
    monkeypatch: pytest.MonkeyPatch, config: AppShelfConfig
) -> AppShelfConfig:
    """Export ``config`` through the environment read by the CLI."""
    monkeypatch.setenv("APPSHELF_ROOT", str(config.root))
    monkeypatch.setenv("APPSHELF_DEFAULT_REPO", config.default_repo_url)
    monkeypatch.setenv("APPSHELF_OWNER", "")
    monkeypatch.setenv("APPSHELF_LOCK_POLL_INTERVAL", "0.05")
    return config
