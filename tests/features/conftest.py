"""Shared fixtures and steps for appshelf feature tests."""

from __future__ import annotations

import typing as typ

import pytest
from pytest_bdd import given, parsers, then

from tests.helpers.git_repos import create_upstream, run_git

if typ.TYPE_CHECKING:
    from pathlib import Path

    from appshelf.factory import AppShelf
    from appshelf.sync import SyncReport
    from tests.helpers.git_repos import Upstream


class ShelfContext(typ.TypedDict, total=False):
    """Shared mutable scenario state."""

    shelf: AppShelf
    default: Upstream
    community: Upstream
    report: SyncReport


@pytest.fixture
def shelf_context(shelf: AppShelf, default_upstream: Upstream) -> ShelfContext:
    """Provision a wired appshelf rooted in a scratch directory."""
    return {"shelf": shelf, "default": default_upstream}


@given(
    parsers.parse('a registered community store "{store_id}" providing "{app_id}"'),
)
def given_registered_community(
    shelf_context: ShelfContext, remotes_dir: Path, store_id: str, app_id: str
) -> None:
    """Create a community upstream and register it."""
    community = create_upstream(
        remotes_dir / "community", store_id=store_id, apps=(app_id,)
    )
    shelf_context["shelf"].store.add(community.url)
    shelf_context["community"] = community


@then("the community store is not registered")
def then_community_not_registered(shelf_context: ShelfContext) -> None:
    """Assert the community URL is absent from the registry."""
    url = shelf_context["community"].url
    registered = shelf_context["shelf"].store.list()
    assert url not in registered, f"{url} should not be in {registered}"


@then(parsers.parse('the default store is cloned on "{branch}"'))
def then_default_on_branch(shelf_context: ShelfContext, branch: str) -> None:
    """Assert the default clone has ``branch`` checked out."""
    shelf = shelf_context["shelf"]
    clone = shelf.paths.path_for(shelf_context["default"].url)
    head = run_git("-C", str(clone), "rev-parse", "--abbrev-ref", "HEAD")
    assert head == branch, f"expected {branch}, got {head}"
