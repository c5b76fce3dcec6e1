"""URL slug utilities.

A slug is the filesystem-safe form of a repository URL. It is the join key
between registry entries and clone directories, so it must never change for
a given URL across releases.
"""

from __future__ import annotations

import re

_UNSAFE = re.compile(r"[^A-Za-z0-9]")


def url_slug(url: str) -> str:
    """Replace every character outside ``[A-Za-z0-9]`` with ``-``.

    Parameters
    ----------
    url:
        Repository URL exactly as stored in the registry.

    Returns
    -------
    str
        Slug of the same length as ``url``.

    Examples
    --------
    >>> url_slug("https://github.com/getumbrel/umbrel-apps.git")
    'https---github-com-getumbrel-umbrel-apps-git'

    """
    return _UNSAFE.sub("-", url)
