"""Test orchestrator driving compilation and execution of circuit tests."""

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass, field

from circuit_test_runner.discovery import find_tests
from circuit_test_runner.errors import (
    CompileError,
    OptimizeError,
    StaticCheckError,
    TestsFailedError,
    ToolingError,
)
from circuit_test_runner.models.options import CompileOptions
from circuit_test_runner.models.program import (
    CrateId,
    Diagnostic,
    ProgramUnit,
    TestFunction,
)
from circuit_test_runner.models.result import (
    CompileFailed,
    ExecutionFailed,
    PackageReport,
    Passed,
    Satisfied,
    TestOutcome,
    TestResult,
    ToolingFault,
    Unsatisfied,
)
from circuit_test_runner.status import StatusSink
from circuit_test_runner.toolchains.base import Backend, Frontend
from circuit_test_runner.workspace import Package, Workspace

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class TestOrchestrator[C]:
    """Runs the tests of a workspace sequentially against one backend.

    Generic type C is the circuit representation shared by the front-end and
    the backend. The backend is reused across tests but never called
    concurrently.
    """

    __test__ = False

    backend: Backend[C]
    frontend: Frontend[C]
    sink: StatusSink = field(default_factory=StatusSink)

    def run(
        self,
        workspace: Workspace,
        name_filter: str = "",
        show_output: bool = False,
        options: CompileOptions | None = None,
    ) -> Sequence[PackageReport]:
        """Run the tests of every package in workspace order.

        The first package that raises a RunError stops the run; later
        packages are not tested.
        """
        options = options or CompileOptions()
        return [
            self.run_package_tests(package, name_filter, show_output, options)
            for package in workspace.members
        ]

    def run_package_tests(
        self,
        package: Package,
        name_filter: str = "",
        show_output: bool = False,
        options: CompileOptions | None = None,
    ) -> PackageReport:
        """Run every matching test of a package, one at a time.

        Args:
            package: Package to test
            name_filter: Only tests whose name contains this string are run
            show_output: Surface print output captured during compilation
            options: Options forwarded to the compile capability

        Returns:
            Report holding one result per discovered test

        Raises:
            StaticCheckError: If the package fails static checks
            ToolingError: If the optimizer fails on a test's circuit
            TestsFailedError: If one or more tests failed

        """
        options = options or CompileOptions()
        log.info("Preparing package %s", package.name)
        program, crate_id = self.frontend.prepare_package(package)
        warnings = self._check_crate(package, program, crate_id, options.deny_warnings)

        tests = find_tests(program, crate_id, name_filter)
        self.sink.running(package.name, len(tests))

        results: list[TestResult] = []
        for test in tests:
            with self.sink.test_line(package.name, test.name):
                started = time.perf_counter()
                outcome = self.run_test(test, program, show_output, options)
                duration = time.perf_counter() - started

                match outcome:
                    case Passed(output=output):
                        self.sink.ok()
                        self.sink.output(output)
                        result = TestResult(
                            name=test.name,
                            status="passed",
                            duration=duration,
                            output=output,
                        )
                    case CompileFailed(message=message):
                        result = TestResult(
                            name=test.name,
                            status="compile_failed",
                            duration=duration,
                            message=message,
                        )
                    case ExecutionFailed(reason=reason, output=output):
                        self.sink.output(output)
                        result = TestResult(
                            name=test.name,
                            status="execution_failed",
                            duration=duration,
                            message=reason,
                            output=output,
                        )
                    case ToolingFault(message=message):
                        log.error(
                            "Backend failed on test %s of %s: %s",
                            test.name,
                            package.name,
                            message,
                        )
                        raise ToolingError(package.name, test.name, message)

            log.debug("Test %s: %s (%.3fs)", test.name, result.status, duration)
            results.append(result)

        report = PackageReport(
            package_name=package.name, results=results, diagnostics=warnings
        )
        log.info("Package %s: %s", package.name, report.summary())
        if report.failing:
            raise TestsFailedError(package.name, report.failing, report=report)

        self.sink.all_passed(package.name)
        return report

    def run_test(
        self,
        test: TestFunction,
        program: ProgramUnit,
        show_output: bool,
        options: CompileOptions,
    ) -> TestOutcome:
        """Compile, optimize and execute a single test function.

        Compile and execution failures are reported as outcomes and mark the
        current status line as failed. An optimizer failure is returned as a
        ToolingFault without touching the status line.
        """
        try:
            compiled = self.frontend.compile_function(
                program, test.func_id, show_output, options
            )
        except CompileError as e:
            message = f"Test '{test.name}' failed to compile: {e}"
            self.sink.failed(message)
            return CompileFailed(message=message)

        output = compiled.printed_output if show_output else ()

        # Unoptimized circuits may defer constraints (e.g. hash calls) that
        # only materialize once the backend optimizes them.
        try:
            compiled = compiled.with_circuit(self.backend.optimize(compiled.circuit))
        except OptimizeError as e:
            return ToolingFault(message=str(e))

        if options.print_circuit:
            self.sink.circuit(test.name, compiled.circuit)

        # Tests take no external inputs: every witness derives from the program.
        match outcome := self.backend.execute(compiled.circuit, {}):
            case Satisfied():
                return Passed(output=output)
            case Unsatisfied(reason=reason):
                self.sink.failed(reason)
                return ExecutionFailed(reason=reason, output=output)
        raise TypeError(f"Backend returned an unknown outcome: {outcome!r}")

    def _check_crate(
        self,
        package: Package,
        program: ProgramUnit,
        crate_id: CrateId,
        deny_warnings: bool,
    ) -> Sequence[Diagnostic]:
        diagnostics = self.frontend.check_crate(program, crate_id)
        errors = [d for d in diagnostics if d.severity == "error"]
        warnings = [d for d in diagnostics if d.severity == "warning"]

        for diagnostic in diagnostics:
            log.warning("[%s] %s", package.name, diagnostic)

        if errors or (deny_warnings and warnings):
            raise StaticCheckError(package.name, errors or warnings)
        return warnings
