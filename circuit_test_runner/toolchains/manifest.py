"""Toolchain manifest definition for the plugin system."""

from collections.abc import Callable
from dataclasses import dataclass

from pydantic import BaseModel

from circuit_test_runner.toolchains.base import Backend, Frontend


@dataclass(frozen=True, kw_only=True)
class ToolchainManifest[ConfigT: BaseModel, C]:
    """Manifest describing a toolchain plugin.

    A toolchain pairs a front-end with a backend that agree on the circuit
    representation C. The manifest holds the configuration class and the
    factories so toolchains can be loaded lazily by key.
    """

    config_cls: type[ConfigT]
    backend_factory: Callable[[ConfigT], Backend[C]]
    frontend_factory: Callable[[ConfigT], Frontend[C]]
