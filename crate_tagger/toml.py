"""Cargo.toml reading utilities.

Uses tomlkit so values come back with their TOML types intact (inline
tables for ``version = { workspace = true }``, arrays for workspace
members). Manifests are only ever read here, never rewritten.
"""

from __future__ import annotations

from pathlib import Path

import tomlkit
from tomlkit.exceptions import TOMLKitError

from .errors import ManifestError

MANIFEST = "Cargo.toml"
DEFAULT_VERSION = "0.0.0"


def load_manifest(path: Path) -> tomlkit.TOMLDocument:
    """Load and parse a Cargo.toml file.

    Cargo manifests are always UTF-8, whatever the runner's locale.

    Raises:
        ManifestError: If the file is missing, unreadable or not valid TOML.
    """
    try:
        return tomlkit.parse(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestError(f"Unable to read {path}: {exc}") from exc
    except TOMLKitError as exc:
        raise ManifestError(f"Malformed manifest {path}: {exc}") from exc


def _table(doc: dict, key: str, path: Path | None) -> dict:
    """Return the ``[key]`` table, or an empty one when it is absent.

    Raises:
        ManifestError: If ``key`` is present but is not a table.
    """
    value = doc.get(key, {})
    if not isinstance(value, dict):
        where = f" in {path}" if path is not None else ""
        raise ManifestError(f"[{key}] must be a table{where}, got {value!r}")
    return value


def _string_list(table: dict, key: str, section: str, path: Path | None) -> list[str]:
    value = table.get(key, [])
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        where = f" in {path}" if path is not None else ""
        raise ManifestError(f"[{section}].{key} must be a list of paths{where}")
    return [str(v) for v in value]


def has_workspace(doc: tomlkit.TOMLDocument) -> bool:
    return "workspace" in doc


def has_package(doc: tomlkit.TOMLDocument) -> bool:
    return "package" in doc


def get_package_name(doc: tomlkit.TOMLDocument, path: Path) -> str:
    """Extract [package].name. Crate names are kept exactly as written.

    Raises:
        ManifestError: If the manifest declares no package name.
    """
    name = _table(doc, "package", path).get("name")
    if not isinstance(name, str) or not name:
        raise ManifestError(f"No [package].name in {path}")
    return str(name)


def get_package_version(
    doc: tomlkit.TOMLDocument, path: Path, workspace_doc: tomlkit.TOMLDocument | None
) -> str:
    """Extract [package].version, resolving ``version.workspace = true``.

    An absent version defaults to '0.0.0', as cargo itself does.

    Args:
        doc: Parsed member manifest.
        path: Member manifest path, for error messages.
        workspace_doc: Parsed workspace root manifest, or None outside a
            workspace.

    Raises:
        ManifestError: If the version is inherited but the workspace does
            not define [workspace.package].version, or has an unexpected type.
    """
    version = _table(doc, "package", path).get("version", DEFAULT_VERSION)
    if isinstance(version, str):
        return str(version)
    if isinstance(version, dict) and version.get("workspace") is True:
        inherited = None
        if workspace_doc is not None:
            workspace = _table(workspace_doc, "workspace", None)
            inherited = _table(workspace, "package", None).get("version")
        if not isinstance(inherited, str):
            raise ManifestError(
                f"{path} inherits its version from the workspace, "
                "but no [workspace.package].version is defined"
            )
        return str(inherited)
    raise ManifestError(f"Unsupported [package].version in {path}: {version!r}")


def get_workspace_members(
    doc: tomlkit.TOMLDocument, path: Path | None = None
) -> list[str]:
    """Extract member paths and globs from [workspace].members."""
    workspace = _table(doc, "workspace", path)
    return _string_list(workspace, "members", "workspace", path)


def get_workspace_excludes(
    doc: tomlkit.TOMLDocument, path: Path | None = None
) -> list[str]:
    """Extract paths listed in [workspace].exclude."""
    workspace = _table(doc, "workspace", path)
    return _string_list(workspace, "exclude", "workspace", path)
