"""Tests for crate_tagger.toml."""

from __future__ import annotations

from pathlib import Path

import pytest
import tomlkit

from crate_tagger.errors import ManifestError
from crate_tagger.toml import (
    get_package_name,
    get_package_version,
    get_workspace_excludes,
    get_workspace_members,
    has_package,
    has_workspace,
    load_manifest,
)

MANIFEST = Path("Cargo.toml")


class TestLoadManifest:
    def test_load(self, cargo_workspace: Path) -> None:
        doc = load_manifest(cargo_workspace / "Cargo.toml")
        assert get_package_name(doc, MANIFEST) == "root-crate"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ManifestError):
            load_manifest(tmp_path / "Cargo.toml")

    def test_invalid_utf8(self, tmp_path: Path) -> None:
        (tmp_path / "Cargo.toml").write_bytes(b'[package]\nname = "\xff"\n')
        with pytest.raises(ManifestError, match="Unable to read"):
            load_manifest(tmp_path / "Cargo.toml")

    def test_reads_utf8_regardless_of_locale(self, tmp_path: Path) -> None:
        (tmp_path / "Cargo.toml").write_bytes(
            '[package]\nname = "caf\u00e9"\n'.encode("utf-8")
        )
        doc = load_manifest(tmp_path / "Cargo.toml")
        assert get_package_name(doc, MANIFEST) == "caf\u00e9"


class TestGetPackageName:
    def test_keeps_name_as_written(self) -> None:
        doc = tomlkit.parse('[package]\nname = "My_Crate"')
        assert get_package_name(doc, MANIFEST) == "My_Crate"

    def test_missing_name(self) -> None:
        doc = tomlkit.parse('[package]\nversion = "1.0.0"')
        with pytest.raises(ManifestError, match="name"):
            get_package_name(doc, MANIFEST)

    def test_package_not_a_table(self) -> None:
        doc = tomlkit.parse('package = "x"')
        with pytest.raises(ManifestError, match=r"\[package\] must be a table"):
            get_package_name(doc, MANIFEST)


class TestGetPackageVersion:
    @pytest.fixture
    def workspace_doc(self) -> tomlkit.TOMLDocument:
        return tomlkit.parse('[workspace]\n[workspace.package]\nversion = "4.5.6"\n')

    def test_returns_version(self) -> None:
        doc = tomlkit.parse('[package]\nname = "a"\nversion = "1.0.0"')
        assert get_package_version(doc, MANIFEST, None) == "1.0.0"

    def test_defaults_when_missing(self) -> None:
        doc = tomlkit.parse('[package]\nname = "a"')
        assert get_package_version(doc, MANIFEST, None) == "0.0.0"

    def test_inline_table_inherits(self, workspace_doc: tomlkit.TOMLDocument) -> None:
        doc = tomlkit.parse('[package]\nname = "a"\nversion = { workspace = true }')
        assert get_package_version(doc, MANIFEST, workspace_doc) == "4.5.6"

    def test_dotted_key_inherits(self, workspace_doc: tomlkit.TOMLDocument) -> None:
        doc = tomlkit.parse('[package]\nname = "a"\nversion.workspace = true')
        assert get_package_version(doc, MANIFEST, workspace_doc) == "4.5.6"

    def test_inherit_without_workspace(self) -> None:
        doc = tomlkit.parse('[package]\nname = "a"\nversion.workspace = true')
        with pytest.raises(ManifestError, match="inherits"):
            get_package_version(doc, MANIFEST, None)

    def test_unsupported_type(self) -> None:
        doc = tomlkit.parse('[package]\nname = "a"\nversion = 3')
        with pytest.raises(ManifestError, match="Unsupported"):
            get_package_version(doc, MANIFEST, None)

    def test_package_not_a_table(self) -> None:
        doc = tomlkit.parse("package = 1")
        with pytest.raises(ManifestError, match="must be a table"):
            get_package_version(doc, MANIFEST, None)

    def test_workspace_not_a_table(self) -> None:
        doc = tomlkit.parse('[package]\nname = "a"\nversion.workspace = true')
        workspace_doc = tomlkit.parse("workspace = 1")
        with pytest.raises(ManifestError, match=r"\[workspace\] must be a table"):
            get_package_version(doc, MANIFEST, workspace_doc)


class TestWorkspaceTables:
    def test_members_and_excludes(self, cargo_workspace: Path) -> None:
        doc = load_manifest(cargo_workspace / "Cargo.toml")
        assert has_workspace(doc)
        assert has_package(doc)
        assert get_workspace_members(doc) == ["crates/*", "tools/cli"]
        assert get_workspace_excludes(doc) == ["crates/experimental"]

    def test_no_workspace(self) -> None:
        doc = tomlkit.parse('[package]\nname = "a"')
        assert not has_workspace(doc)
        assert get_workspace_members(doc) == []
        assert get_workspace_excludes(doc) == []

    def test_workspace_not_a_table(self) -> None:
        doc = tomlkit.parse("workspace = 1")
        with pytest.raises(ManifestError, match=r"\[workspace\] must be a table"):
            get_workspace_members(doc, MANIFEST)

    def test_members_not_a_list(self) -> None:
        doc = tomlkit.parse('[workspace]\nmembers = "crates/*"')
        with pytest.raises(ManifestError, match="members must be a list"):
            get_workspace_members(doc, MANIFEST)

    def test_exclude_entries_must_be_strings(self) -> None:
        doc = tomlkit.parse("[workspace]\nexclude = [1]")
        with pytest.raises(ManifestError, match="exclude must be a list"):
            get_workspace_excludes(doc, MANIFEST)
