"""Errors specific to the repository registry."""

from __future__ import annotations

from appshelf.errors import AppShelfError


class RegistryError(AppShelfError):
    """Base class for registry errors."""


class RepositoryAlreadyRegisteredError(RegistryError):
    """Raised when adding a URL that is already registered."""

    def __init__(self, url: str) -> None:
        """Initialise with the duplicate URL."""
        self.url = url
        super().__init__(f"Repository already registered: {url}")


class RepositoryNotRegisteredError(RegistryError):
    """Raised when removing a URL that is not registered."""

    def __init__(self, url: str) -> None:
        """Initialise with the missing URL."""
        self.url = url
        super().__init__(f"Repository not registered: {url}")


class RegistryDocumentError(RegistryError):
    """Raised when the user document cannot be parsed for a write."""

    def __init__(self, path: str, reason: str) -> None:
        """Initialise with the document path and failure reason."""
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot update registry document {path}: {reason}")
