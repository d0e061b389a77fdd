"""Shell and git utilities.

Provides simple wrappers around subprocess calls for running cargo and
git, plus output formatting helpers.
"""

from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path


def git(
    *args: str,
    cwd: Path | None = None,
    config: dict[str, str] | None = None,
    check: bool = True,
) -> str:
    """Run a git command and return stdout.

    Args:
        *args: Arguments to pass to git (e.g., "describe", "--tags").
        cwd: Repository directory; defaults to the process cwd.
        config: One-off settings for this invocation. They are passed through
                GIT_CONFIG_COUNT/KEY/VALUE environment variables, so
                secrets never appear on the command line.
        check: If True (default), raise CalledProcessError on non-zero exit.
               The error carries git's stderr for the caller to inspect.

    Returns:
        Stripped stdout from the git command.
    """
    env = None
    if config:
        env = dict(os.environ, GIT_CONFIG_COUNT=str(len(config)))
        for i, (key, value) in enumerate(config.items()):
            env[f"GIT_CONFIG_KEY_{i}"] = key
            env[f"GIT_CONFIG_VALUE_{i}"] = value
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        env=env,
        capture_output=True,
        text=True,
        check=check,
    )
    return result.stdout.strip()


def run(
    *args: str, cwd: Path | None = None, check: bool = True
) -> subprocess.CompletedProcess[str]:
    """Run an arbitrary command, capturing its output as text.

    Args:
        *args: Command and arguments (e.g., "cargo", "metadata").
        cwd: Working directory for the command.
        check: If True (default), raise on non-zero exit.
    """
    return subprocess.run(args, cwd=cwd, capture_output=True, text=True, check=check)


def which(binary: str) -> str | None:
    """Return the full path of ``binary`` on PATH, or None."""
    return shutil.which(binary)


def error_text(exc: Exception) -> str:
    """Best human-readable message for a failed process call.

    Prefers the process's stderr, then its stdout, then the exception itself.
    """
    if isinstance(exc, subprocess.CalledProcessError):
        for stream in (exc.stderr, exc.stdout):
            if stream and str(stream).strip():
                return str(stream).strip()
    return str(exc)


def step(msg: str) -> None:
    """Print a visually distinct step header.

    Used to separate the phases of a tagging run in the job log.
    """
    print(f"\n{'─' * 60}\n{msg}\n{'─' * 60}")
