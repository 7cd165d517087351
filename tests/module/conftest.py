"""Fixtures for end-to-end runs against the reference toolchain."""

from collections.abc import Callable
from pathlib import Path

import pytest


@pytest.fixture
def write_package() -> Callable[[Path, str, str], Path]:
    """Write a package manifest and source file into a directory."""

    def write(directory: Path, name: str, source: str) -> Path:
        (directory / "src").mkdir(parents=True, exist_ok=True)
        (directory / "Nargo.toml").write_text(f'[package]\nname = "{name}"\n')
        (directory / "src" / "main.yaml").write_text(source)
        return directory

    return write
