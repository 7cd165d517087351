"""Shared fixtures."""

import io

import pytest
from rich.console import Console

from circuit_test_runner.status import StatusSink


@pytest.fixture
def console_output() -> io.StringIO:
    """Buffer receiving everything written to the status sink."""
    return io.StringIO()


@pytest.fixture
def sink(console_output: io.StringIO) -> StatusSink:
    """Status sink writing plain text to console_output."""
    return StatusSink(
        console=Console(file=console_output, force_terminal=False, width=200)
    )
