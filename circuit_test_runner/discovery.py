"""Discovery of test functions inside a program unit."""

from collections.abc import Sequence

from circuit_test_runner.models.program import CrateId, ProgramUnit, TestFunction


def find_tests(
    program: ProgramUnit, crate_id: CrateId, name_filter: str = ""
) -> Sequence[TestFunction]:
    """Return the crate's test functions whose name contains name_filter.

    Tests are returned in declaration order. An empty filter matches every
    test.
    """
    return [
        TestFunction(name=function.name, func_id=func_id)
        for func_id, function in program.functions.items()
        if function.crate_id == crate_id
        and function.is_test
        and name_filter in function.name
    ]
