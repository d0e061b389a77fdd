"""Translation between crate versions and git tag names.

The two directions use different pattern languages and are not exact
inverses of each other:

- version_to_tag fills a template: ``$1`` (or ``$01``, ``$&``) is the
  whole version, ``$$`` is a literal dollar sign. ``"v$1"`` over ``"2.3.0"``
  gives ``"v2.3.0"``.
- tag_to_version searches the tag with a regular expression and keeps
  its first capture group. ``"v(.*)"`` over ``"foo-v1.9.0"`` gives
  ``"1.9.0"``. A tag the pattern does not match is returned unchanged.

Round trips only need to hold for pattern pairs written to agree, e.g.
``("v$1", "v(.*)")`` or ``("foo-v$1", "^foo-v(.*)$")``.
"""

from __future__ import annotations

import re

_PLACEHOLDER = re.compile(r"\$(\$|&|0?1)")


def version_to_tag(version: str, pattern: str) -> str:
    """Render ``pattern`` with ``version`` substituted for its placeholders.

    Any other ``$`` sequence is kept literally, so ``$2`` stays ``$2`` and
    ``$10`` is the version followed by ``0``.
    """

    def replace(match: re.Match[str]) -> str:
        return "$" if match.group(1) == "$" else version

    return _PLACEHOLDER.sub(replace, pattern)


def tag_to_version(tag: str, pattern: str) -> str:
    """Recover a version from ``tag`` using the regex ``pattern``.

    Returns the first capture group, the whole match when the pattern has
    no groups, or the raw tag when the pattern does not match at all.

    Raises:
        re.error: If ``pattern`` is not a valid regular expression.
    """
    match = re.search(pattern, tag)
    if match is None:
        return tag
    if match.re.groups == 0:
        return match.group(0)
    return match.group(1) or ""
