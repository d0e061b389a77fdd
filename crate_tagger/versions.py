"""Version parsing utilities.

Handles conversion between version strings and semver objects, with
special handling for incomplete version strings (e.g., "1.0" → "1.0.0").
Used only to warn when a crate's version moved backwards; versions are
never bumped or rewritten here.
"""

from __future__ import annotations

import semver


def parse_version(version_str: str) -> semver.Version | None:
    """Parse a version string into a semver.Version object.

    Handles incomplete versions by padding with zeros:
    - "1" → "1.0.0"
    - "1.2" → "1.2.0"
    - "1.2.3-rc.1" → "1.2.3-rc.1"

    Returns None for anything semver cannot read.
    """
    # Build metadata may itself contain "-", so split it off first
    rest, plus, build = version_str.partition("+")
    core, dash, prerelease = rest.partition("-")
    parts = core.split(".")
    # Pad with zeros to ensure we have at least 3 parts
    while len(parts) < 3:
        parts.append("0")
    text = ".".join(parts) + dash + prerelease + plus + build
    try:
        return semver.Version.parse(text)
    except ValueError:
        return None


def is_regression(current: str, previous: str) -> bool:
    """True if ``current`` is a lower version than ``previous``.

    Unparseable versions never count as a regression.
    """
    cur, prev = parse_version(current), parse_version(previous)
    if cur is None or prev is None:
        return False
    return cur < prev
