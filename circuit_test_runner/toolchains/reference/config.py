"""Configuration for the reference toolchain."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

BN254_SCALAR_MODULUS = (
    21888242871839275222246405745257275088548364400416034343698204186575808495617
)


class ReferenceToolchainConfig(BaseModel):
    """Configuration for the reference toolchain."""

    field_modulus: int = Field(default=BN254_SCALAR_MODULUS, gt=1)
    source_path: str = "src/main.yaml"


class ReferenceBackendOptions(BaseModel):
    """Knobs accepted through ``-O KEY=VALUE``; unknown keys are rejected."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    print_radix: Literal["10", "16"] = Field(
        default="10", description="Radix of values shown with --show-output"
    )
