"""Tagging pipeline: resolve crate → derive tag → find last tag → publish.

This module orchestrates a crate-tagger run:
1. Probe for cargo and bind a metadata provider
2. Resolve the target crate (root package or named workspace member)
3. Derive the new tag from the crate's version
4. Find the most recent existing tag with ``git describe``
5. If the version recovered from that tag differs (or there is no tag),
   create the new tag and push it

Re-running on an already tagged version is a no-op, and pushing a tag
the remote already has is reported as a notice rather than a failure.
"""

from __future__ import annotations

import base64
import subprocess
from pathlib import Path

from . import actions
from .errors import TagCreateFailed, TagPushFailed
from .metadata import MetadataProvider, select_provider
from .models import PublishOutcome, ResolutionContext, RunResult
from .selector import select_crate
from .shell import error_text, git, step
from .tags import tag_to_version, version_to_tag
from .versions import is_regression

# Push failures whose message contains this mean the remote already has the tag.
ALREADY_EXISTS = "already exists"


def _fetch_tags(pwd: Path) -> None:
    """Bring remote tags in so describe sees them. Failure is only logged."""
    try:
        git("fetch", "--tags", "--prune-tags", cwd=pwd)
    except (OSError, subprocess.CalledProcessError) as exc:
        print(f"  Could not fetch tags: {error_text(exc)}")


def _describe(pwd: Path, *extra: str) -> str | None:
    try:
        return git("describe", "--abbrev=0", *extra, cwd=pwd) or None
    except (OSError, subprocess.CalledProcessError) as exc:
        actions.notice(error_text(exc))
        return None


def find_last_tag(pwd: Path) -> str | None:
    """Find the tag nearest to HEAD.

    Tries ``git describe --tags`` first, so lightweight tags count, then
    plain ``git describe`` (annotated tags only). Returns None when the
    repository has no reachable tag; every failure along the way is a notice.
    """
    step("Finding last tag")
    _fetch_tags(pwd)
    tag = _describe(pwd, "--tags") or _describe(pwd)
    print(f"  {tag or '<none>'}")
    return tag


def _auth_config(token: str | None) -> dict[str, str]:
    if not token:
        return {}
    basic = base64.b64encode(f"x-access-token:{token}".encode()).decode()
    return {"http.extraheader": f"AUTHORIZATION: basic {basic}"}


def publish_tag(
    pwd: Path, tag: str, dry_run: bool, token: str | None = None
) -> PublishOutcome:
    """Create ``tag`` locally, then push all tags unless ``dry_run``.

    The local tag is created even in dry-run mode; only the push is skipped.

    Raises:
        TagCreateFailed: If ``git tag`` fails.
        TagPushFailed: If the push fails for any reason other than the tag
            already existing on the remote.
    """
    step(f"Publishing tag {tag}")
    try:
        git("tag", tag, cwd=pwd)
    except (OSError, subprocess.CalledProcessError) as exc:
        message = error_text(exc)
        raise TagCreateFailed(f"Unable to create tag {tag}: {message}") from exc
    print(f"  Created {tag}")

    if dry_run:
        actions.warning("Input `dry-run` is set, so the tag was not pushed to git.")
        return PublishOutcome.DRY_RUN

    try:
        git("push", "--tags", cwd=pwd, config=_auth_config(token))
    except (OSError, subprocess.CalledProcessError) as exc:
        message = error_text(exc)
        if ALREADY_EXISTS in message.lower():
            actions.notice(message)
            return PublishOutcome.ALREADY_EXISTS
        raise TagPushFailed(f"Unable to push tag {tag}: {message}") from exc
    print(f"  Pushed {tag}")
    return PublishOutcome.PUSHED


def _publish(
    ctx: ResolutionContext, result: RunResult, outputs: actions.Outputs
) -> None:
    result.outcome = publish_tag(ctx.pwd, result.derived_tag, ctx.dry_run, ctx.token)
    if result.published:
        outputs.set("success", True)


def run_tagging(
    ctx: ResolutionContext,
    outputs: actions.Outputs,
    result: RunResult | None = None,
    provider: MetadataProvider | None = None,
) -> RunResult:
    """Execute a full tagging run.

    Outputs are written as soon as each value is known, so a run that
    fails part way still reports what it resolved. Fatal errors propagate
    as TaggerError subclasses.

    Args:
        ctx: Run inputs.
        outputs: Where step outputs go.
        result: Result to fill in; a fresh one is created if omitted.
        provider: Metadata provider; probed for if omitted.
    """
    result = result if result is not None else RunResult()

    step("Resolving crate")
    provider = provider or select_provider()
    crate = select_crate(ctx.crate, ctx.pwd, provider)
    print(f"  {crate.name} {crate.version}")

    result.crate_name = crate.name
    result.current_version = crate.version
    result.derived_tag = version_to_tag(crate.version, ctx.version_to_tag)
    outputs.set("crate", result.crate_name)
    outputs.set("current", result.current_version)
    outputs.set("tag", result.derived_tag)

    last_tag = find_last_tag(ctx.pwd)
    print(f"  tags: {last_tag or '<none>'} => {result.derived_tag}")

    if last_tag is None:
        actions.notice(
            "Can't determine latest tag via `git describe`, "
            "so just trying to push new tag anyway"
        )
        _publish(ctx, result, outputs)
        return result

    result.previous_version = tag_to_version(last_tag, ctx.tag_to_version)
    outputs.set("previous", result.previous_version)

    if result.previous_version == crate.version:
        print(f"\n{crate.name} {crate.version} is already tagged, nothing to do.")
        return result

    if is_regression(crate.version, result.previous_version):
        actions.warning(
            f"{crate.name} version {crate.version} is lower than "
            f"the last tagged version {result.previous_version}"
        )
    _publish(ctx, result, outputs)
    return result
