"""Tests for DriverContext construction."""

from pathlib import Path

import pytest

from tfdriver.core.config import DriverConfig, InMemoryConfigStore
from tfdriver.core.context import DriverContext, create_context
from tfdriver.core.errors import ExecutableNotFoundError
from tfdriver.core.terraform.fake import FakeTerraform
from tfdriver.core.terraform.real import RealTerraform


def _write_executable(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\n", encoding="utf-8")
    path.chmod(0o755)
    return path


def test_for_test_defaults() -> None:
    ctx = DriverContext.for_test()

    assert isinstance(ctx.terraform, FakeTerraform)
    assert ctx.cwd == Path("/test/default/cwd")
    assert ctx.config_dir == Path("/test/default/cwd")
    assert ctx.config == DriverConfig()


def test_config_dir_follows_terraform_working_directory(tmp_path: Path) -> None:
    ctx = DriverContext.for_test(terraform=FakeTerraform(tmp_path / "infra"), cwd=tmp_path)

    assert ctx.config_dir == tmp_path / "infra"


def test_create_context_with_explicit_executable(tmp_path: Path) -> None:
    executable = _write_executable(tmp_path / "bin" / "terraform")

    ctx = create_context(
        config_dir=tmp_path, terraform_path=executable, config_store=InMemoryConfigStore()
    )

    assert isinstance(ctx.terraform, RealTerraform)
    assert ctx.executable_path == executable
    assert ctx.config_dir == tmp_path.resolve()


def test_create_context_uses_config_executable(tmp_path: Path) -> None:
    executable = _write_executable(tmp_path / "opt" / "terraform")
    store = InMemoryConfigStore(DriverConfig(terraform_executable=executable))

    ctx = create_context(config_dir=tmp_path, terraform_path=None, config_store=store)

    assert ctx.executable_path == executable


def test_explicit_executable_overrides_config(tmp_path: Path) -> None:
    explicit = _write_executable(tmp_path / "bin" / "terraform")
    store = InMemoryConfigStore(DriverConfig(terraform_executable=tmp_path / "missing"))

    ctx = create_context(config_dir=tmp_path, terraform_path=explicit, config_store=store)

    assert ctx.executable_path == explicit


def test_create_context_searches_path(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    bin_dir = tmp_path / "bin"
    _write_executable(bin_dir / "terraform")
    monkeypatch.setenv("PATH", str(bin_dir))

    ctx = create_context(
        config_dir=tmp_path, terraform_path=None, config_store=InMemoryConfigStore()
    )

    assert ctx.executable_path == bin_dir / "terraform"


def test_create_context_missing_executable_raises(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("PATH", str(tmp_path / "empty"))

    with pytest.raises(ExecutableNotFoundError):
        create_context(
            config_dir=tmp_path, terraform_path=None, config_store=InMemoryConfigStore()
        )
