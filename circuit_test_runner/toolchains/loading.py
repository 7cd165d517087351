"""Lookup of toolchain manifests registered as entry points."""

import logging
from importlib.metadata import entry_points
from typing import Any

from pydantic import BaseModel, ValidationError

from circuit_test_runner.errors import ToolchainConfigError, ToolchainNotFoundError
from circuit_test_runner.toolchains.manifest import ToolchainManifest

log = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "circuit_test_runner.toolchains"


def load_toolchain_manifest(key: str) -> ToolchainManifest[Any, Any]:
    """Resolve a toolchain key to the manifest its entry point exports.

    Raises:
        ToolchainNotFoundError: If no entry point is registered under key, it
            cannot be imported, or it does not export a ToolchainManifest

    """
    group = entry_points(group=ENTRY_POINT_GROUP)
    if key not in group.names:
        raise ToolchainNotFoundError(
            key, f"not found. Available toolchains: {sorted(group.names)}"
        )

    entry = group[key]
    try:
        manifest = entry.load()
    except (ImportError, AttributeError) as e:
        raise ToolchainNotFoundError(
            key, f"cannot be loaded from {entry.value}: {e}"
        ) from e

    if not isinstance(manifest, ToolchainManifest):
        raise ToolchainNotFoundError(
            key, f"entry point {entry.value} is not a ToolchainManifest"
        )

    log.debug("Loaded toolchain %s from %s", key, entry.value)
    return manifest


def parse_toolchain_config[ConfigT: BaseModel](
    manifest: ToolchainManifest[ConfigT, Any], config_json: str
) -> ConfigT:
    """Validate a JSON object against the manifest's configuration class.

    Raises:
        ToolchainConfigError: If the JSON is malformed or fails validation

    """
    try:
        return manifest.config_cls.model_validate_json(config_json)
    except ValidationError as e:
        raise ToolchainConfigError(str(e)) from e
