"""Models for reference toolchain source files."""

from collections.abc import Mapping, Sequence

from pydantic import ConfigDict, Field

from circuit_test_runner.models.base import Model


class SourceFunction(Model):
    """A function declared in a source file."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., description="Function name")
    test: bool = Field(default=False, description="Whether the function is a test")
    let: Mapping[str, str | int] = Field(
        default_factory=dict,
        description="Ordered bindings of names to integer expressions",
    )
    assertions: Sequence[str] = Field(
        default_factory=list,
        alias="assert",
        description="Equalities of the form '<expr> == <expr>'",
    )
    print: Sequence[str] = Field(
        default_factory=list, description="Names whose values are printed"
    )


class SourceFile(Model):
    """A parsed source file."""

    functions: Sequence[SourceFunction] = Field(default_factory=list)
