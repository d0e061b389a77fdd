"""Crate metadata providers.

Two interchangeable ways to read crate names and versions:

- CargoMetadataProvider asks ``cargo metadata``, which is authoritative
  (workspace inheritance, path members, globs all resolved by cargo).
- ManifestMetadataProvider parses the Cargo.toml tree itself, for runners
  where cargo is not installed.

select_provider() probes for cargo once and binds one of them for the run.
"""

from __future__ import annotations

import glob
import json
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

import tomlkit

from .errors import ManifestError
from .models import Package
from .shell import error_text, run, which
from .toml import (
    MANIFEST,
    get_package_name,
    get_package_version,
    get_workspace_excludes,
    get_workspace_members,
    has_package,
    has_workspace,
    load_manifest,
)


class MetadataProvider(ABC):
    """Reads crate metadata from a directory holding a Cargo.toml."""

    name: str

    @abstractmethod
    def get_root(self, path: Path) -> Package:
        """Return the package declared by ``path``/Cargo.toml.

        Raises:
            ManifestError: If the manifest is unreadable or declares no package.
        """

    @abstractmethod
    def get_workspace_members(self, path: Path) -> list[Package]:
        """Return every member of the workspace containing ``path``, in order.

        Raises:
            ManifestError: If any manifest in the workspace is unreadable.
        """


class CargoMetadataProvider(MetadataProvider):
    """Metadata from ``cargo metadata --no-deps``."""

    name = "cargo metadata"

    def _metadata(self, path: Path) -> dict:
        try:
            result = run(
                "cargo",
                "metadata",
                "--format-version",
                "1",
                "--no-deps",
                "--manifest-path",
                str(path / MANIFEST),
                cwd=path,
            )
        except (OSError, subprocess.CalledProcessError) as exc:
            raise ManifestError(f"cargo metadata failed: {error_text(exc)}") from exc
        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError as exc:
            raise ManifestError(f"cargo metadata returned invalid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ManifestError("cargo metadata returned an unexpected document")
        return data

    @staticmethod
    def _package(raw: dict) -> Package:
        try:
            return Package(name=raw["name"], version=raw["version"])
        except (KeyError, TypeError) as exc:
            raise ManifestError(
                f"cargo metadata package entry is malformed: {raw!r}"
            ) from exc

    def get_root(self, path: Path) -> Package:
        data = self._metadata(path)
        manifest = (path / MANIFEST).resolve()
        for raw in data.get("packages", []):
            if Path(raw.get("manifest_path", "")).resolve() == manifest:
                return self._package(raw)
        raise ManifestError(f"{manifest} declares no [package] (virtual manifest?)")

    def get_workspace_members(self, path: Path) -> list[Package]:
        data = self._metadata(path)
        by_id = {raw.get("id"): raw for raw in data.get("packages", [])}
        try:
            members = data["workspace_members"]
            return [self._package(by_id[pkg_id]) for pkg_id in members]
        except KeyError as exc:
            raise ManifestError(f"cargo metadata is missing {exc}") from exc


class ManifestMetadataProvider(MetadataProvider):
    """Metadata parsed straight from Cargo.toml files, without cargo."""

    name = "Cargo.toml parsing"

    @staticmethod
    def find_workspace_root(path: Path) -> Path | None:
        """Walk up from ``path`` to the first manifest with a [workspace] table."""
        for candidate in [path.resolve(), *path.resolve().parents]:
            manifest = candidate / MANIFEST
            if manifest.is_file() and has_workspace(load_manifest(manifest)):
                return candidate
        return None

    def _workspace_doc(self, path: Path) -> tomlkit.TOMLDocument | None:
        root = self.find_workspace_root(path)
        return load_manifest(root / MANIFEST) if root is not None else None

    @staticmethod
    def _read_package(
        manifest: Path, workspace_doc: tomlkit.TOMLDocument | None
    ) -> Package:
        doc = load_manifest(manifest)
        return Package(
            name=get_package_name(doc, manifest),
            version=get_package_version(doc, manifest, workspace_doc),
        )

    def get_root(self, path: Path) -> Package:
        manifest = path / MANIFEST
        doc = load_manifest(manifest)
        if not has_package(doc):
            raise ManifestError(f"{manifest} declares no [package] (virtual manifest?)")
        return self._read_package(manifest, self._workspace_doc(path))

    def member_dirs(self, root: Path, doc: tomlkit.TOMLDocument) -> list[Path]:
        """Expand [workspace].members into member directories, in declaration order.

        The root itself comes first when it is also a package. Glob matches
        without a Cargo.toml are skipped; a literal member without one is an
        error, as it is for cargo.
        """
        manifest = root / MANIFEST
        excluded = {(root / e).resolve() for e in get_workspace_excludes(doc, manifest)}
        dirs: list[Path] = [root] if has_package(doc) else []

        for entry in get_workspace_members(doc, manifest):
            if glob.has_magic(entry):
                matches = [Path(m) for m in sorted(glob.glob(str(root / entry)))]
                matches = [m for m in matches if (m / MANIFEST).is_file()]
            else:
                member = root / entry
                if not (member / MANIFEST).is_file():
                    raise ManifestError(f"Workspace member {entry} has no {MANIFEST}")
                matches = [member]

            for m in matches:
                m = m.resolve()
                if m not in excluded and m not in dirs:
                    dirs.append(m)
        return dirs

    def get_workspace_members(self, path: Path) -> list[Package]:
        root = self.find_workspace_root(path)
        if root is None:
            # Not in a workspace: the crate is its own single member
            return [self.get_root(path)]

        doc = load_manifest(root / MANIFEST)
        return [
            self._read_package(d / MANIFEST, doc) for d in self.member_dirs(root, doc)
        ]


def cargo_available() -> bool:
    """Probe for a working cargo binary. Never raises."""
    if which("cargo") is None:
        return False
    try:
        run("cargo", "--version")
    except (OSError, subprocess.CalledProcessError):
        return False
    return True


def select_provider() -> MetadataProvider:
    """Bind the metadata provider for this run based on cargo availability."""
    if cargo_available():
        provider: MetadataProvider = CargoMetadataProvider()
    else:
        provider = ManifestMetadataProvider()
    print(f"  Reading crate metadata via {provider.name}")
    return provider
