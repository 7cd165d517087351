"""Compilation options passed through to the front-end and backend."""

from collections.abc import Mapping

from pydantic import Field

from circuit_test_runner.models.base import Model


class CompileOptions(Model):
    """Options forwarded opaquely to the compile capability."""

    deny_warnings: bool = Field(
        default=False, description="Treat static-check warnings as errors"
    )
    print_circuit: bool = Field(
        default=False, description="Print each optimized circuit before execution"
    )
    backend_options: Mapping[str, str] = Field(
        default_factory=dict,
        description="Backend-specific knobs given as KEY=VALUE on the command line",
    )
