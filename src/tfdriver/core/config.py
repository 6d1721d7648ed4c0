"""Driver configuration data structures and loading.

Provides immutable configuration loaded from ~/.tfdriver/config.toml (or an
explicit path). A missing file yields the defaults.

Example config.toml:

    terraform_executable = "/opt/terraform/bin/terraform"
    refresh_after_apply = true

    [variables]
    region = "eu-west-1"
    instance_count = 2
"""

import tomllib
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from tfdriver.core.variables import VariableValue


@dataclass(frozen=True)
class DriverConfig:
    """Immutable driver configuration.

    Loaded once at CLI entry point and stored in DriverContext.

    Attributes:
        terraform_executable: Explicit Terraform path; None searches PATH
        refresh_after_apply: Run 'terraform refresh' after a successful apply
        variables: Extra variables injected into every variables file
    """

    terraform_executable: Path | None = None
    refresh_after_apply: bool = False
    variables: dict[str, VariableValue] = field(default_factory=dict)


class ConfigStore(ABC):
    """Abstract interface for driver config access.

    Enables in-memory implementations for tests without touching the filesystem.
    """

    @abstractmethod
    def exists(self) -> bool:
        """Check if the config exists."""
        ...

    @abstractmethod
    def load(self) -> DriverConfig:
        """Load the config.

        Raises:
            FileNotFoundError: If config doesn't exist
            ValueError: If config is malformed
        """
        ...

    @abstractmethod
    def path(self) -> Path:
        """Get the path to the config file (for error messages and debugging)."""
        ...


class FilesystemConfigStore(ConfigStore):
    """Production implementation that reads a TOML config file."""

    def __init__(self, config_path: Path | None = None) -> None:
        self._config_path = config_path

    def exists(self) -> bool:
        return self.path().exists()

    def load(self) -> DriverConfig:
        config_path = self.path()

        if not config_path.exists():
            raise FileNotFoundError(f"Driver config not found at {config_path}")

        # TOML parsing requires exception handling
        try:
            data = tomllib.loads(config_path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Malformed config {config_path}: {e}") from e

        return parse_config(data, config_path)

    def path(self) -> Path:
        if self._config_path is not None:
            return self._config_path
        return Path.home() / ".tfdriver" / "config.toml"


class InMemoryConfigStore(ConfigStore):
    """Test implementation that stores config in memory without touching filesystem."""

    def __init__(self, config: DriverConfig | None = None) -> None:
        """Initialize in-memory config store.

        Args:
            config: Initial config state (None = config doesn't exist)
        """
        self._config = config

    def exists(self) -> bool:
        return self._config is not None

    def load(self) -> DriverConfig:
        if self._config is None:
            raise FileNotFoundError(f"Driver config not found at {self.path()}")
        return self._config

    def path(self) -> Path:
        return Path("/fake/tfdriver/config.toml")


def parse_config(data: dict, config_path: Path) -> DriverConfig:
    """Build a DriverConfig from decoded TOML.

    Raises:
        ValueError: If a field has the wrong type
    """
    executable = data.get("terraform_executable")
    if executable is not None and not isinstance(executable, str):
        raise ValueError(f"'terraform_executable' must be a string in {config_path}")

    variables = data.get("variables", {})
    if not isinstance(variables, dict):
        raise ValueError(f"'variables' must be a table in {config_path}")

    return DriverConfig(
        terraform_executable=Path(executable).expanduser() if executable else None,
        refresh_after_apply=bool(data.get("refresh_after_apply", False)),
        variables=variables,
    )


def load_config(store: ConfigStore) -> DriverConfig:
    """Load config from store, falling back to defaults when it doesn't exist."""
    if not store.exists():
        return DriverConfig()
    return store.load()
