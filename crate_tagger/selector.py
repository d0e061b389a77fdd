"""Resolve the one crate a run is about."""

from __future__ import annotations

from pathlib import Path

from .errors import CrateNotFound
from .metadata import MetadataProvider
from .models import Package


def select_crate(name: str | None, path: Path, provider: MetadataProvider) -> Package:
    """Pick the target crate.

    With no name, the package declared by ``path``/Cargo.toml is used.
    Otherwise the workspace members are scanned in order and the first
    whose name matches exactly (case-sensitive) wins.

    Raises:
        CrateNotFound: If no member matches, or the crate has an empty
            name or version.
        ManifestError: If the provider cannot read the metadata.
    """
    crate: Package | None = None
    if name and name.strip():
        for member in provider.get_workspace_members(path):
            if member.name == name:
                crate = member
                break
    else:
        crate = provider.get_root(path)

    if crate is None or not crate.name or not crate.version:
        target = f"'{name}'" if name and name.strip() else "root crate"
        raise CrateNotFound(f"Crate not found: {target} in {path}")
    return crate
