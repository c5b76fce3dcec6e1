"""Result types reported by the sync engine."""

from __future__ import annotations

import dataclasses
import enum


class SyncOutcome(enum.StrEnum):
    """What a sync pass did to one repository."""

    CLONED = "cloned"
    UPDATED = "updated"
    REPAIRED = "repaired"
    UNREACHABLE = "unreachable"
    REMOVED = "removed"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclasses.dataclass(slots=True)
class SyncReport:
    """Summary of a synchronization pass.

    Outcomes are keyed by URL in the order the repositories were visited, so
    operators can see which mirrors were skipped without the pass failing.
    """

    outcomes: dict[str, SyncOutcome] = dataclasses.field(default_factory=dict)

    def record(self, url: str, outcome: SyncOutcome) -> None:
        """Store the outcome for ``url``."""
        self.outcomes[url] = outcome

    def urls_with(self, outcome: SyncOutcome) -> list[str]:
        """Return the URLs that ended with ``outcome``."""
        return [url for url, result in self.outcomes.items() if result is outcome]
