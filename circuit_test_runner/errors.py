"""Errors raised while running circuit tests."""

from collections.abc import Sequence

from circuit_test_runner.models.program import Diagnostic
from circuit_test_runner.models.result import PackageReport


class RunError(Exception):
    """Raised when a test run cannot continue."""


class WorkspaceResolutionError(RunError):
    """Raised when the workspace or its packages cannot be resolved."""


class ManifestNotFoundError(WorkspaceResolutionError):
    """Raised when no package manifest is found."""


class ToolchainNotFoundError(RunError):
    """Raised when a toolchain key does not resolve to a usable manifest."""

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        super().__init__(f"Toolchain '{key}' {reason}")


class ToolchainConfigError(RunError):
    """Raised when the toolchain configuration does not validate."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Invalid toolchain configuration: {detail}")


class StaticCheckError(RunError):
    """Raised when a package fails the front-end's static checks."""

    def __init__(self, package_name: str, diagnostics: Sequence[Diagnostic]) -> None:
        self.package_name = package_name
        self.diagnostics = tuple(diagnostics)
        count = len(self.diagnostics)
        plural = "" if count == 1 else "s"
        super().__init__(
            f"[{package_name}] aborting due to {count} previous diagnostic{plural}"
        )


class ToolingError(RunError):
    """Raised when the optimizer or backend fails on a test's circuit."""

    def __init__(self, package_name: str, test_name: str, message: str) -> None:
        self.package_name = package_name
        self.test_name = test_name
        super().__init__(
            f"[{package_name}] backend failure in test '{test_name}': {message}"
        )


class TestsFailedError(RunError):
    """Raised when one or more tests of a package fail."""

    __test__ = False

    def __init__(
        self,
        package_name: str,
        failing: int,
        report: PackageReport | None = None,
    ) -> None:
        self.package_name = package_name
        self.failing = failing
        self.report = report
        plural = "" if failing == 1 else "s"
        super().__init__(f"[{package_name}] {failing} test{plural} failed")


class CompileError(Exception):
    """Raised by a front-end when a function cannot be compiled to a circuit."""


class OptimizeError(Exception):
    """Raised by a backend when a circuit cannot be optimized."""
