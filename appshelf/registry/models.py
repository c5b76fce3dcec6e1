"""Value objects for the repository registry."""

from __future__ import annotations

import dataclasses

DEFAULT_BRANCH = "master"


@dataclasses.dataclass(slots=True, frozen=True)
class RepoDescriptor:
    """A canonical repository reference parsed from user input.

    ``url`` always carries a scheme (or is an scp-style ``user@host:path``).
    The branch never becomes part of the registered URL; it is only used by
    commands that check out a specific ref.
    """

    url: str
    branch: str = DEFAULT_BRANCH
