"""Exception hierarchy shared by the registry and the sync engine."""

from __future__ import annotations


class AppShelfError(Exception):
    """Base class for appshelf errors."""


class ValidationError(AppShelfError):
    """Raised when a required argument is missing or empty."""

    def __init__(self, argument: str) -> None:
        """Initialise with the name of the missing argument."""
        self.argument = argument
        super().__init__(f"Missing required argument: {argument}")
