"""Shared test fixtures."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from crate_tagger.metadata import MetadataProvider
from crate_tagger.models import Package


def _write_crate(directory: Path, body: str) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "Cargo.toml").write_text(body)


@pytest.fixture
def cargo_workspace(tmp_path: Path) -> Path:
    """A workspace whose root is also a package.

    Members, in declaration order: root-crate 1.2.0, bar 0.4.1,
    foo 2.0.0 (inherited), foo-cli 2.0.0 (inherited). crates/experimental
    is excluded and crates/notes has no manifest.
    """
    _write_crate(
        tmp_path,
        """\
[package]
name = "root-crate"
version = "1.2.0"

[workspace]
members = ["crates/*", "tools/cli"]
exclude = ["crates/experimental"]

[workspace.package]
version = "2.0.0"
""",
    )
    _write_crate(
        tmp_path / "crates" / "foo",
        '[package]\nname = "foo"\nversion.workspace = true\n',
    )
    _write_crate(
        tmp_path / "crates" / "bar",
        '[package]\nname = "bar"\nversion = "0.4.1"\n',
    )
    _write_crate(
        tmp_path / "crates" / "experimental",
        '[package]\nname = "experimental"\nversion = "0.0.1"\n',
    )
    (tmp_path / "crates" / "notes").mkdir()
    (tmp_path / "crates" / "notes" / "README.md").write_text("not a crate\n")
    _write_crate(
        tmp_path / "tools" / "cli",
        '[package]\nname = "foo-cli"\nversion = { workspace = true }\n',
    )
    return tmp_path


@pytest.fixture
def virtual_workspace(tmp_path: Path) -> Path:
    """A workspace root without a [package] of its own."""
    _write_crate(tmp_path, '[workspace]\nmembers = ["alpha", "beta"]\n')
    _write_crate(tmp_path / "alpha", '[package]\nname = "alpha"\nversion = "0.1.0"\n')
    _write_crate(tmp_path / "beta", '[package]\nname = "beta"\nversion = "3.0.0"\n')
    return tmp_path


@pytest.fixture
def single_crate(tmp_path: Path) -> Path:
    """A lone crate, no workspace."""
    _write_crate(tmp_path, '[package]\nname = "solo"\nversion = "1.2.0"\n')
    return tmp_path


@pytest.fixture
def cargo_metadata_json(cargo_workspace: Path) -> str:
    """What ``cargo metadata --no-deps`` reports for cargo_workspace."""

    def entry(name: str, version: str, rel: str) -> dict[str, str]:
        directory = cargo_workspace / rel
        return {
            "name": name,
            "version": version,
            "id": f"path+file://{directory}#{name}@{version}",
            "manifest_path": str(directory / "Cargo.toml"),
        }

    packages = [
        entry("bar", "0.4.1", "crates/bar"),
        entry("foo", "2.0.0", "crates/foo"),
        entry("root-crate", "1.2.0", "."),
        entry("foo-cli", "2.0.0", "tools/cli"),
    ]
    return json.dumps(
        {
            "packages": packages,
            "workspace_members": [p["id"] for p in packages],
            "workspace_root": str(cargo_workspace),
            "version": 1,
        }
    )


class StaticProvider(MetadataProvider):
    """In-memory provider for selector and pipeline tests."""

    name = "static"

    def __init__(self, root: Package | None, members: list[Package]) -> None:
        self.root = root
        self.members = members
        self.calls: list[str] = []

    def get_root(self, path: Path) -> Package:
        self.calls.append("get_root")
        assert self.root is not None
        return self.root

    def get_workspace_members(self, path: Path) -> list[Package]:
        self.calls.append("get_workspace_members")
        return list(self.members)


@pytest.fixture
def static_provider() -> StaticProvider:
    return StaticProvider(
        root=Package(name="root-crate", version="1.2.0"),
        members=[
            Package(name="root-crate", version="1.2.0"),
            Package(name="foo", version="2.0.0"),
            Package(name="Foo", version="9.9.9"),
            Package(name="foo", version="3.0.0"),
        ],
    )


@pytest.fixture
def provider_factory() -> type[StaticProvider]:
    return StaticProvider
