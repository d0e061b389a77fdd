"""GitHub Actions reporting helpers.

Annotations are GitHub workflow commands printed to stdout; step outputs
are appended as ``name=value`` lines to the file named by GITHUB_OUTPUT.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import NoReturn


def _escape(message: str) -> str:
    # Workflow command data must not contain raw newlines or percent signs.
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def notice(message: str) -> None:
    print(f"::notice::{_escape(message)}")


def warning(message: str) -> None:
    print(f"::warning::{_escape(message)}")


def error(message: str) -> None:
    print(f"::error::{_escape(message)}")


def fatal(message: str) -> NoReturn:
    """Report an error annotation and exit with code 1.

    Use for unrecoverable errors that should fail the workflow step.
    """
    error(message)
    sys.exit(1)


class Outputs:
    """Writes step outputs as soon as they are known.

    Args:
        github_output: Path of the GITHUB_OUTPUT file. When None (a local
            run), outputs are printed instead.
    """

    def __init__(self, github_output: Path | None = None) -> None:
        self.github_output = github_output

    def set(self, name: str, value: str | bool) -> None:
        if isinstance(value, bool):
            value = "true" if value else "false"
        if self.github_output is None:
            print(f"  {name}={value}")
            return
        with open(self.github_output, "a") as fh:
            fh.write(f"{name}={value}\n")
