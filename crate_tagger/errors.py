"""Errors raised by the tagging pipeline.

Every class here is fatal: the CLI turns it into an ``::error::``
annotation and a non-zero exit. Non-fatal conditions are reported as
notices or warnings and never raised.
"""

from __future__ import annotations


class TaggerError(Exception):
    """Base class for fatal tagging failures."""


class ManifestError(TaggerError):
    """Crate metadata is missing, unreadable or malformed."""


class CrateNotFound(TaggerError):
    """No crate matched the requested name, or it lacks a name or version."""


class TagCreateFailed(TaggerError):
    """``git tag`` failed."""


class TagPushFailed(TaggerError):
    """``git push --tags`` failed for a reason other than an existing tag."""
