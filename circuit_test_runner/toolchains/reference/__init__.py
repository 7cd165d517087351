"""Reference toolchain module."""

from circuit_test_runner.toolchains.reference.backend import ReferenceBackend
from circuit_test_runner.toolchains.reference.config import ReferenceToolchainConfig
from circuit_test_runner.toolchains.reference.frontend import ReferenceFrontend
from circuit_test_runner.toolchains.reference.manifest import reference_manifest

__all__ = [
    "ReferenceBackend",
    "ReferenceFrontend",
    "ReferenceToolchainConfig",
    "reference_manifest",
]
