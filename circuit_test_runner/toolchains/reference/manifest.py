"""Reference toolchain manifest."""

from circuit_test_runner.toolchains.manifest import ToolchainManifest
from circuit_test_runner.toolchains.reference.backend import ReferenceBackend
from circuit_test_runner.toolchains.reference.config import ReferenceToolchainConfig
from circuit_test_runner.toolchains.reference.frontend import ReferenceFrontend

reference_manifest = ToolchainManifest(
    config_cls=ReferenceToolchainConfig,
    backend_factory=ReferenceBackend.from_config,
    frontend_factory=ReferenceFrontend.from_config,
)
