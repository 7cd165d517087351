"""Tests for result models."""

import pytest

from circuit_test_runner.models.result import PackageReport
from circuit_test_runner.testing.factories import TestResultFactory


def test_report_without_failures_passes() -> None:
    """All passing results produce the success summary."""
    report = PackageReport(
        package_name="demo",
        results=TestResultFactory.batch(3),
    )

    assert report.failing == 0
    assert report.summary() == "All tests passed"


def test_empty_report_passes() -> None:
    """A report without results has nothing failing."""
    report = PackageReport(package_name="demo")

    assert report.failing == 0
    assert report.summary() == "All tests passed"


@pytest.mark.parametrize(
    ("failing", "expected"),
    [
        (1, "1 test failed"),
        (2, "2 tests failed"),
        (5, "5 tests failed"),
    ],
)
def test_summary_pluralizes_failures(failing: int, expected: str) -> None:
    """Singular for exactly one failure, plural otherwise."""
    results = [
        *TestResultFactory.batch(failing, status="execution_failed"),
        *TestResultFactory.batch(5 - failing),
    ]
    report = PackageReport(package_name="demo", results=results)

    assert report.failing == failing
    assert report.summary() == expected


def test_compile_failures_count_as_failing() -> None:
    """Both failure classifications are counted."""
    report = PackageReport(
        package_name="demo",
        results=[
            TestResultFactory.build(status="compile_failed"),
            TestResultFactory.build(status="execution_failed"),
            TestResultFactory.build(),
        ],
    )

    assert report.failing == 2
