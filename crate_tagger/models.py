"""Data models for crate-tagger.

These Pydantic models represent the core data structures passed between
the metadata providers, the crate selector and the tagging pipeline.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class Package(BaseModel):
    """Name and version of a single crate, read once per run.

    Attributes:
        name: Crate name from [package].name.
        version: Resolved version string (workspace inheritance applied).
    """

    model_config = ConfigDict(frozen=True)

    name: str
    version: str


class ResolutionContext(BaseModel):
    """Inputs of a tagging run. Built once by the CLI, never mutated.

    Attributes:
        crate: Workspace member to tag, or None for the root package.
        pwd: Directory holding the Cargo.toml and the git checkout.
        tag_to_version: Regex whose first group recovers a version from a tag.
        version_to_tag: Template turning a version into a tag (``$1``).
        dry_run: Create the local tag only, never push.
        token: Credential for the push, if any.
    """

    model_config = ConfigDict(frozen=True)

    crate: str | None = None
    pwd: Path
    tag_to_version: str = "v(.*)"
    version_to_tag: str = "v$1"
    dry_run: bool = False
    token: str | None = Field(default=None, repr=False)


class PublishOutcome(str, Enum):
    """Non-fatal ways a publish can end."""

    PUSHED = "pushed"
    DRY_RUN = "dry-run"
    ALREADY_EXISTS = "already-exists"


class RunResult(BaseModel):
    """Outputs of a run, filled in step by step by the pipeline.

    Attributes:
        crate_name: Name of the resolved crate.
        current_version: Version declared in its manifest.
        derived_tag: Tag computed from current_version.
        previous_version: Version recovered from the last tag, if any.
        outcome: How the publish ended, or None if nothing was published.
    """

    crate_name: str | None = None
    current_version: str | None = None
    derived_tag: str | None = None
    previous_version: str | None = None
    outcome: PublishOutcome | None = None

    @property
    def published(self) -> bool:
        return self.outcome in (PublishOutcome.PUSHED, PublishOutcome.DRY_RUN)
