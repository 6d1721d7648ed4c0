"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

from tfdriver.core.config import ConfigStore, DriverConfig, FilesystemConfigStore, load_config
from tfdriver.core.executable import ToolHandle
from tfdriver.core.terraform.abc import Terraform
from tfdriver.core.terraform.fake import FakeTerraform
from tfdriver.core.terraform.real import RealTerraform


@dataclass(frozen=True)
class DriverContext:
    """Immutable context holding all dependencies for tfdriver operations.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.
    """

    terraform: Terraform
    config: DriverConfig
    cwd: Path  # Current working directory at CLI invocation
    executable_path: Path | None = None
    debug: bool = False

    @property
    def config_dir(self) -> Path:
        return self.terraform.working_directory

    @staticmethod
    def for_test(
        terraform: Terraform | None = None,
        config: DriverConfig | None = None,
        cwd: Path | None = None,
    ) -> "DriverContext":
        """Create a context with test defaults for anything not supplied.

        cwd defaults to a fixed fake path to prevent accidental use of the real
        Path.cwd() in tests.
        """
        test_cwd = cwd if cwd is not None else Path("/test/default/cwd")
        return DriverContext(
            terraform=terraform if terraform is not None else FakeTerraform(test_cwd),
            config=config if config is not None else DriverConfig(),
            cwd=test_cwd,
            executable_path=Path("/fake/bin/terraform"),
        )


def create_context(
    *,
    config_dir: Path | None,
    terraform_path: Path | None,
    config_store: ConfigStore | None = None,
    debug: bool = False,
) -> DriverContext:
    """Create production context with a resolved Terraform executable.

    An explicit terraform_path takes precedence over the config file, which
    takes precedence over a PATH search.

    Raises:
        ExecutableNotFoundError: If the Terraform executable cannot be found
        ValueError: If the config file is malformed
    """
    cwd = Path.cwd()
    config = load_config(config_store if config_store is not None else FilesystemConfigStore())

    handle = ToolHandle((config_dir or cwd).resolve())
    explicit = terraform_path if terraform_path is not None else config.terraform_executable
    executable_path = handle.resolve(explicit)

    return DriverContext(
        terraform=RealTerraform(handle),
        config=config,
        cwd=cwd,
        executable_path=executable_path,
        debug=debug,
    )
