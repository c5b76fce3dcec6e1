"""Loader for the app-store manifest at the root of each clone."""

from __future__ import annotations

import typing as typ

import msgspec
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from appshelf.sync.errors import ManifestLoadError

if typ.TYPE_CHECKING:
    from pathlib import Path

MANIFEST_FILENAME = "umbrel-app-store.yml"
YAML_VERSION = (1, 2)


class AppStoreManifest(msgspec.Struct, kw_only=True):
    """Identity metadata declared by an app-store repository.

    Attributes
    ----------
    id : str
        Identity that must be unique across registered app stores.
    name : str, optional
        Human-readable store name.

    """

    id: str
    name: str | None = None


def manifest_path(clone_path: Path) -> Path:
    """Return the manifest location inside a clone."""
    return clone_path / MANIFEST_FILENAME


def load_manifest(clone_path: Path) -> AppStoreManifest | None:
    """Parse the clone's manifest; ``None`` when the file does not exist.

    Raises
    ------
    ManifestLoadError
        If the file is unreadable, is not UTF-8 YAML, or has no usable ``id``.

    """
    path = manifest_path(clone_path)
    if not path.is_file():
        return None

    try:
        loaded = _yaml().load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, YAMLError) as exc:
        message = f"failed to parse {path}: {exc}"
        raise ManifestLoadError(message) from exc

    try:
        manifest = msgspec.convert(loaded, type=AppStoreManifest)
    except msgspec.ValidationError as exc:
        message = f"invalid manifest {path}: {exc}"
        raise ManifestLoadError(message) from exc

    if not manifest.id.strip():
        message = f"manifest {path} declares an empty id"
        raise ManifestLoadError(message)
    return manifest


def _yaml() -> YAML:
    yaml = YAML(typ="safe")
    yaml.version = YAML_VERSION
    yaml.allow_duplicate_keys = False
    return yaml
