"""Parsing of user-supplied repository descriptors.

Accepted forms::

    getumbrel/umbrel-apps                      -> https://github.com/getumbrel/umbrel-apps.git
    coolapp/umbrel-apps#staging                -> same URL shape, branch "staging"
    https://gitlab.com/me/store.git#dev        -> URL kept verbatim, branch "dev"
    git@github.com:me/store.git                -> URL kept verbatim, branch "master"

"""

from __future__ import annotations

from appshelf.registry.models import DEFAULT_BRANCH, RepoDescriptor

DEFAULT_FORGE = "https://github.com/"
_GIT_SUFFIX = ".git"


def _is_absolute(candidate: str) -> bool:
    return "://" in candidate or "@" in candidate


def expand_shorthand(candidate: str) -> str:
    """Expand ``owner/name`` into a clone URL on the default forge."""
    name = candidate.strip("/")
    if not name.endswith(_GIT_SUFFIX):
        name += _GIT_SUFFIX
    return f"{DEFAULT_FORGE}{name}"


def parse_descriptor(text: str) -> RepoDescriptor:
    """Normalize a descriptor into a :class:`RepoDescriptor`.

    The text is split on the first ``#``; everything after it is the branch.
    Anything that already looks like a URL is kept as-is. The function never
    fails: an unreachable result is reported later by git.
    """
    candidate, _, branch = text.strip().partition("#")
    candidate = candidate.strip()
    branch = branch.strip()

    url = candidate if _is_absolute(candidate) else expand_shorthand(candidate)
    return RepoDescriptor(url=url, branch=branch or DEFAULT_BRANCH)
