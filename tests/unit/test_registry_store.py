"""Unit tests for the registry store."""

from __future__ import annotations

import json
import os
import typing as typ

import pytest

from appshelf.registry import (
    PathResolver,
    RegistryDocumentError,
    RegistryStore,
    RepositoryAlreadyRegisteredError,
    RepositoryNotRegisteredError,
)

if typ.TYPE_CHECKING:
    from pathlib import Path

DEFAULT_URL = "https://github.com/getumbrel/umbrel-apps.git"
COOL_URL = "https://github.com/coolapp/umbrel-apps.git"
OTHER_URL = "https://gitlab.com/me/store.git"


@pytest.fixture
def document(tmp_path: Path) -> Path:
    """Location of the user document (not created)."""
    return tmp_path / "db" / "user.json"


@pytest.fixture
def store(tmp_path: Path, document: Path) -> RegistryStore:
    """Registry store with a fast lock poll."""
    return RegistryStore(
        document,
        PathResolver(tmp_path / "repos"),
        DEFAULT_URL,
        poll_interval=0.01,
    )


def _write(document: Path, payload: str) -> None:
    document.parent.mkdir(parents=True, exist_ok=True)
    document.write_text(payload, encoding="utf-8")


class TestList:
    """Reading the registry falls back to the default repository."""

    def test_absent_document(self, store: RegistryStore) -> None:
        """A missing document yields only the default URL."""
        assert store.list() == [DEFAULT_URL]

    @pytest.mark.parametrize(
        "payload",
        [
            "not json",
            "[]",
            "{}",
            '{"repos": []}',
            '{"repos": "nope"}',
            '{"repos": [1, 2]}',
        ],
    )
    def test_malformed_or_missing_field(
        self, store: RegistryStore, document: Path, payload: str
    ) -> None:
        """Malformed documents and missing fields are not errors."""
        _write(document, payload)
        assert store.list() == [DEFAULT_URL]

    def test_invalid_entries_are_dropped_individually(
        self, store: RegistryStore, document: Path
    ) -> None:
        """Non-string entries are skipped without losing the valid URLs."""
        _write(document, json.dumps({"repos": [COOL_URL, 7, "", None, OTHER_URL]}))
        assert store.list() == [COOL_URL, OTHER_URL]

    def test_explicit_list_is_deduplicated_in_order(
        self, store: RegistryStore, document: Path
    ) -> None:
        """Duplicates in the stored list are collapsed, order kept."""
        _write(document, json.dumps({"repos": [COOL_URL, DEFAULT_URL, COOL_URL]}))
        assert store.list() == [COOL_URL, DEFAULT_URL]

    def test_contains_is_case_sensitive(
        self, store: RegistryStore, document: Path
    ) -> None:
        """Membership uses exact string comparison."""
        _write(document, json.dumps({"repos": [COOL_URL]}))
        assert store.contains(COOL_URL)
        assert not store.contains(COOL_URL.upper())


class TestAdd:
    """Registering repositories."""

    def test_add_creates_document(self, store: RegistryStore, document: Path) -> None:
        """The first write creates the document with the default kept."""
        store.add(COOL_URL)

        assert store.list() == [DEFAULT_URL, COOL_URL]
        assert json.loads(document.read_text())["repos"] == [DEFAULT_URL, COOL_URL]

    def test_add_is_idempotent(self, store: RegistryStore) -> None:
        """Adding twice leaves exactly one entry and reports the duplicate."""
        store.add(COOL_URL)
        with pytest.raises(RepositoryAlreadyRegisteredError):
            store.add(COOL_URL)

        assert store.list().count(COOL_URL) == 1

    def test_add_preserves_unrelated_fields(
        self, store: RegistryStore, document: Path
    ) -> None:
        """Other platform settings survive a registry write."""
        _write(
            document,
            json.dumps({"name": "satoshi", "remoteTorAccess": True, "repos": [OTHER_URL]}),
        )

        store.add(COOL_URL)

        saved = json.loads(document.read_text())
        assert saved["name"] == "satoshi"
        assert saved["remoteTorAccess"] is True
        assert saved["repos"] == [OTHER_URL, COOL_URL]

    def test_add_refuses_to_clobber_unparseable_document(
        self, store: RegistryStore, document: Path
    ) -> None:
        """A corrupt document is reported instead of overwritten."""
        _write(document, "{ not json")

        with pytest.raises(RegistryDocumentError):
            store.add(COOL_URL)

        assert document.read_text() == "{ not json"
        assert not store.lock_path.exists()


class TestRemove:
    """Unregistering repositories."""

    def test_remove_deletes_entry_and_clone(
        self, store: RegistryStore, tmp_path: Path
    ) -> None:
        """Removal drops the URL and deletes the clone tree."""
        store.add(COOL_URL)
        clone = store.paths.path_for(COOL_URL)
        (clone / "app").mkdir(parents=True)
        (clone / "app" / "file.txt").write_text("x")

        store.remove(COOL_URL)

        assert COOL_URL not in store.list()
        assert not clone.exists()
        assert (tmp_path / "repos").exists()

    def test_remove_without_clone(self, store: RegistryStore) -> None:
        """A missing clone directory is not an error."""
        store.add(COOL_URL)
        store.remove(COOL_URL)
        assert store.list() == [DEFAULT_URL]

    def test_remove_unknown_url(self, store: RegistryStore) -> None:
        """Removing an unregistered URL reports NotFound."""
        with pytest.raises(RepositoryNotRegisteredError):
            store.remove(OTHER_URL)

    def test_removing_last_entry_falls_back_to_default(
        self, store: RegistryStore, document: Path
    ) -> None:
        """An emptied registry reads back as the default repository."""
        _write(document, json.dumps({"repos": [COOL_URL]}))

        store.remove(COOL_URL)

        assert json.loads(document.read_text())["repos"] == []
        assert store.list() == [DEFAULT_URL]


class TestUpdate:
    """The transactional read-modify-write primitive."""

    def test_update_applies_transform(self, store: RegistryStore) -> None:
        """The transform sees the effective list and its result is persisted."""
        seen: list[list[str]] = []

        def transform(repos: list[str]) -> list[str]:
            seen.append(list(repos))
            return [*repos, OTHER_URL, OTHER_URL]

        result = store.update(transform)

        assert seen == [[DEFAULT_URL]]
        assert result == [DEFAULT_URL, OTHER_URL]
        assert store.list() == [DEFAULT_URL, OTHER_URL]

    def test_update_keeps_valid_entries_beside_invalid_ones(
        self, store: RegistryStore, document: Path
    ) -> None:
        """A write cleans out bad entries and keeps the user's URLs."""
        _write(document, json.dumps({"repos": [COOL_URL, {"url": "x"}]}))

        store.add(OTHER_URL)

        assert json.loads(document.read_text())["repos"] == [COOL_URL, OTHER_URL]

    def test_update_holds_lock_with_pid(self, store: RegistryStore) -> None:
        """The lock file exists during the transform and names this process."""
        observed: list[str] = []

        def transform(repos: list[str]) -> list[str]:
            observed.append(store.lock_path.read_text(encoding="utf-8"))
            return repos

        store.update(transform)

        assert len(observed) == 1
        assert str(os.getpid()) in observed[0]
        assert not store.lock_path.exists(), "lock must be released afterwards"

    def test_update_releases_lock_on_failure(self, store: RegistryStore) -> None:
        """An exception inside the transform still releases the lock."""

        def transform(repos: list[str]) -> list[str]:
            message = "boom"
            raise RuntimeError(message)

        with pytest.raises(RuntimeError, match="boom"):
            store.update(transform)

        assert not store.lock_path.exists()
        store.add(COOL_URL)
        assert COOL_URL in store.list()
