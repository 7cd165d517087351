"""Resolution of package manifests into an ordered workspace."""

import logging
import tomllib
from collections.abc import Sequence
from pathlib import Path
from typing import Literal

from pydantic import Field, ValidationError

from circuit_test_runner.errors import ManifestNotFoundError, WorkspaceResolutionError
from circuit_test_runner.models.base import Model

log = logging.getLogger(__name__)

MANIFEST_FILENAME = "Nargo.toml"


class Package(Model):
    """A single package of a workspace."""

    name: str = Field(..., description="Package name from the manifest")
    root_dir: Path = Field(..., description="Directory holding the package manifest")
    type: Literal["bin", "lib", "contract"] = Field(
        default="bin", description="Kind of package"
    )


class PackageSection(Model):
    """The [package] table of a manifest."""

    name: str
    type: Literal["bin", "lib", "contract"] = "bin"


class WorkspaceSection(Model):
    """The [workspace] table of a manifest."""

    members: Sequence[str] = Field(default_factory=list)


class Manifest(Model):
    """A parsed package manifest."""

    package: PackageSection | None = None
    workspace: WorkspaceSection | None = None


class Workspace(Model):
    """Ordered set of packages selected for a run."""

    root_dir: Path
    members: Sequence[Package] = Field(default_factory=list)


def find_package_manifest(program_dir: Path) -> Path:
    """Find the nearest manifest at or above the given directory.

    Raises:
        ManifestNotFoundError: If no directory up to the filesystem root
            holds a manifest

    """
    start = program_dir.resolve()
    for directory in (start, *start.parents):
        candidate = directory / MANIFEST_FILENAME
        if candidate.is_file():
            return candidate

    raise ManifestNotFoundError(
        f"Could not find {MANIFEST_FILENAME} in {start} or any parent directory"
    )


def load_manifest(toml_path: Path) -> Manifest:
    """Parse and validate a manifest file."""
    try:
        with toml_path.open("rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise WorkspaceResolutionError(f"Cannot read {toml_path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise WorkspaceResolutionError(f"Invalid TOML in {toml_path}: {e}") from e

    try:
        manifest = Manifest(**data)
    except ValidationError as e:
        raise WorkspaceResolutionError(f"Invalid manifest {toml_path}: {e}") from e

    if manifest.package is None and manifest.workspace is None:
        raise WorkspaceResolutionError(
            f"{toml_path} must declare either [package] or [workspace]"
        )
    return manifest


def resolve_workspace_from_toml(
    toml_path: Path, package_name: str | None = None
) -> Workspace:
    """Resolve a manifest into the packages to run, in member order.

    Args:
        toml_path: Path to the root manifest
        package_name: If given, restrict the workspace to this package

    Raises:
        WorkspaceResolutionError: If a manifest is invalid or the requested
            package is not part of the workspace

    """
    root_dir = toml_path.parent
    manifest = load_manifest(toml_path)

    members: list[Package] = []
    if manifest.workspace is not None:
        for member in manifest.workspace.members:
            member_toml = root_dir / member / MANIFEST_FILENAME
            if not member_toml.is_file():
                raise WorkspaceResolutionError(
                    f"Workspace member '{member}' has no {MANIFEST_FILENAME}"
                )
            member_manifest = load_manifest(member_toml)
            if member_manifest.package is None:
                raise WorkspaceResolutionError(
                    f"Workspace member '{member}' is not a package"
                )
            members.append(_package(member_manifest.package, member_toml.parent))
    elif manifest.package is not None:
        members.append(_package(manifest.package, root_dir))

    if package_name is not None:
        selected = [package for package in members if package.name == package_name]
        if not selected:
            available = [package.name for package in members]
            raise WorkspaceResolutionError(
                f"Package '{package_name}' not found. Available packages: {available}"
            )
        members = selected

    log.debug(
        "Resolved workspace %s: %s", root_dir, ", ".join(p.name for p in members)
    )
    return Workspace(root_dir=root_dir, members=members)


def _package(section: PackageSection, root_dir: Path) -> Package:
    return Package(name=section.name, root_dir=root_dir, type=section.type)
