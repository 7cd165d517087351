"""CLI entry point for running circuit tests."""

import argparse
import logging
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path

from circuit_test_runner.errors import RunError
from circuit_test_runner.models.options import CompileOptions
from circuit_test_runner.orchestrator import TestOrchestrator
from circuit_test_runner.status import StatusSink, make_console
from circuit_test_runner.toolchains.loading import (
    load_toolchain_manifest,
    parse_toolchain_config,
)
from circuit_test_runner.workspace import (
    find_package_manifest,
    resolve_workspace_from_toml,
)


def parse_backend_options(values: Sequence[str]) -> Mapping[str, str]:
    """Parse KEY=VALUE backend options."""
    options: dict[str, str] = {}
    for value in values:
        key, sep, option = value.partition("=")
        if not sep or not key.strip():
            raise argparse.ArgumentTypeError(
                f"Invalid backend option '{value}', expected KEY=VALUE"
            )
        options[key.strip()] = option.strip()
    return options


def run(
    toolchain_key: str,
    toolchain_config_json: str,
    program_dir: Path,
    package_name: str | None = None,
    test_name: str = "",
    show_output: bool = False,
    compile_options: CompileOptions | None = None,
    sink: StatusSink | None = None,
) -> int:
    """Run the tests of the workspace at program_dir and return exit code."""
    log = logging.getLogger("circuit_test_runner")

    try:
        log.info("Loading toolchain: %s", toolchain_key)
        manifest = load_toolchain_manifest(toolchain_key)
        config = parse_toolchain_config(manifest, toolchain_config_json)
        orchestrator = TestOrchestrator(
            backend=manifest.backend_factory(config),
            frontend=manifest.frontend_factory(config),
            sink=sink or StatusSink(),
        )

        toml_path = find_package_manifest(program_dir)
        workspace = resolve_workspace_from_toml(toml_path, package_name)
        log.info("Running tests for %d package(s)...", len(workspace.members))
        orchestrator.run(workspace, test_name, show_output, compile_options)
    except RunError as e:
        log.info("Test run stopped: %s", e)
        print(f"error: {e}", file=sys.stderr)
        return 1

    return 0


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Run the tests of a circuit program")
    parser.add_argument(
        "test_name",
        nargs="?",
        default="",
        help="If given, only tests with names containing this string will be run",
    )
    parser.add_argument(
        "--show-output",
        action="store_true",
        help="Display output of print statements",
    )
    parser.add_argument(
        "--package",
        default=None,
        help="The name of the package to test",
    )
    parser.add_argument(
        "--program-dir",
        type=Path,
        default=Path.cwd(),
        help="Directory of the program (defaults to the current directory)",
    )
    parser.add_argument(
        "--deny-warnings",
        action="store_true",
        help="Treat static-check warnings as errors",
    )
    parser.add_argument(
        "--print-circuit",
        action="store_true",
        help="Print each optimized circuit before it is executed",
    )
    parser.add_argument(
        "-O",
        "--backend-option",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Backend-specific option passed through to the toolchain",
    )
    parser.add_argument(
        "--toolchain",
        default="reference",
        help="Toolchain key (default: reference)",
    )
    parser.add_argument(
        "--toolchain-config",
        default="{}",
        help="JSON configuration for the toolchain",
    )
    parser.add_argument(
        "--color",
        choices=["always", "auto", "never"],
        default="always",
        help="When to color status lines (default: always)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        backend_options = parse_backend_options(args.backend_option)
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))

    exit_code = run(
        toolchain_key=args.toolchain,
        toolchain_config_json=args.toolchain_config,
        program_dir=args.program_dir,
        package_name=args.package,
        test_name=args.test_name,
        show_output=args.show_output,
        compile_options=CompileOptions(
            deny_warnings=args.deny_warnings,
            print_circuit=args.print_circuit,
            backend_options=backend_options,
        ),
        sink=StatusSink(console=make_console(args.color)),
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
