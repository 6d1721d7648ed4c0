"""Fixtures for tests that spawn real processes.

A small /bin/sh script stands in for the Terraform executable.
"""

from collections.abc import Callable
from pathlib import Path

import pytest

from tfdriver.core.executable import ToolHandle
from tfdriver.core.terraform.real import RealTerraform

ScriptFactory = Callable[[str], RealTerraform]


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "config"
    directory.mkdir()
    return directory


@pytest.fixture
def script_terraform(tmp_path: Path, config_dir: Path) -> ScriptFactory:
    """Factory: write a shell script as the Terraform executable and bind it."""

    def create(body: str) -> RealTerraform:
        executable = tmp_path / "bin" / "terraform"
        executable.parent.mkdir(exist_ok=True)
        executable.write_text("#!/bin/sh\n" + body, encoding="utf-8")
        executable.chmod(0o755)

        handle = ToolHandle(config_dir)
        handle.resolve(executable)
        return RealTerraform(handle)

    return create
