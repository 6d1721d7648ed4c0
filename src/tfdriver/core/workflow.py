"""Machine provisioning workflow built on the Terraform operations.

The workflow runs, in order: get-modules, validate (optional), write
variables, apply, refresh (optional), output-query; and destroy on teardown.
Only one Terraform process runs at a time.

Variable precedence (highest first):
1. Context values assigned directly by the caller (e.g. dm_machine_name)
2. The primary variables.json shipped with the configuration (never written)
3. Inline name=value variables
4. The additional variables file
5. Variables from the driver config
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path

from tfdriver.core import commands
from tfdriver.core.drain import LineHandler
from tfdriver.core.errors import MissingOutputError
from tfdriver.core.outputs import OutputRecord
from tfdriver.core.terraform.abc import Terraform
from tfdriver.core.variables import PRIMARY_VARIABLES_FILE_NAME, VariableStore, VariableValue

logger = logging.getLogger(__name__)

MACHINE_IP_OUTPUT = "dm_machine_ip"
SSH_USER_OUTPUT = "dm_ssh_user"
DOCKER_DAEMON_PORT = 2376


@dataclass(frozen=True)
class MachineInfo:
    """Connection details reported by an applied configuration."""

    ip_address: str
    ssh_user: str | None

    @property
    def url(self) -> str:
        host = f"[{self.ip_address}]" if ":" in self.ip_address else self.ip_address
        return f"tcp://{host}:{DOCKER_DAEMON_PORT}"


def machine_info_from_outputs(outputs: Mapping[str, OutputRecord]) -> MachineInfo:
    """Extract connection details from Terraform outputs.

    Raises:
        MissingOutputError: If the configuration does not declare dm_machine_ip
    """
    ip_output = outputs.get(MACHINE_IP_OUTPUT)
    if ip_output is None:
        raise MissingOutputError(MACHINE_IP_OUTPUT)

    user_output = outputs.get(SSH_USER_OUTPUT)
    return MachineInfo(
        ip_address=str(ip_output.value),
        ssh_user=str(user_output.value) if user_output is not None else None,
    )


def resolve_against(path: Path, cwd: Path) -> Path:
    """Interpret a relative path against cwd."""
    if path.is_absolute():
        return path
    return cwd / path


class Provisioner:
    """Sequences Terraform operations to create and remove a machine.

    Example:
        provisioner = Provisioner(terraform)
        provisioner.prepare(context_values={"dm_machine_name": "web-1"})
        info = provisioner.create(refresh=False)
        ...
        provisioner.remove()
    """

    def __init__(self, terraform: Terraform, handler: LineHandler | None = None) -> None:
        self.terraform = terraform
        self.handler = handler

    @property
    def variables_file(self) -> Path:
        return commands.variables_file_for(self.terraform.working_directory)

    @property
    def primary_variables_file(self) -> Path:
        return self.terraform.working_directory / PRIMARY_VARIABLES_FILE_NAME

    def build_variables(
        self,
        *,
        cwd: Path,
        context_values: Mapping[str, VariableValue] | None = None,
        inline_variables: Iterable[str] = (),
        additional_variables_file: Path | None = None,
        config_variables: Mapping[str, VariableValue] | None = None,
    ) -> VariableStore:
        """Assemble the variables for the configuration in precedence order.

        Raises:
            InvalidVariablesFileError: If a variables file cannot be read
            InvalidVariableError: If an inline variable is malformed
        """
        store = VariableStore()

        primary = self.primary_variables_file
        if primary.exists():
            store.load_from(primary)

        for name, value in (context_values or {}).items():
            store[name] = value

        store.load_inline(inline_variables)

        if additional_variables_file is not None:
            store.load_from(resolve_against(additional_variables_file, cwd))

        store.merge(dict(config_variables or {}))
        return store

    def prepare(
        self,
        *,
        cwd: Path,
        context_values: Mapping[str, VariableValue] | None = None,
        inline_variables: Iterable[str] = (),
        additional_variables_file: Path | None = None,
        config_variables: Mapping[str, VariableValue] | None = None,
        validate: bool = True,
    ) -> VariableStore:
        """Fetch modules, validate, and write the variables file.

        Returns:
            The variables that were written
        """
        logger.debug("Fetching Terraform modules (if any)")
        commands.get_modules(self.terraform, self.handler)

        if validate:
            logger.debug("Validating Terraform configuration")
            commands.validate(self.terraform, self.handler)

        store = self.build_variables(
            cwd=cwd,
            context_values=context_values,
            inline_variables=inline_variables,
            additional_variables_file=additional_variables_file,
            config_variables=config_variables,
        )
        store.persist_to(self.variables_file)
        return store

    def _existing_variables_file(self) -> Path | None:
        variables_file = self.variables_file
        if variables_file.exists():
            return variables_file
        return None

    def create(self, *, refresh: bool = False) -> MachineInfo:
        """Apply the configuration and read back the machine's connection details.

        Raises:
            OperationFailedError: If a Terraform operation fails
            OutputParseFailedError: If the outputs cannot be parsed
            MissingOutputError: If dm_machine_ip is not declared
        """
        variables_file = self._existing_variables_file()
        commands.apply(self.terraform, variables_file, self.handler)

        if refresh:
            logger.debug("Refreshing Terraform configuration state")
            commands.refresh(self.terraform, variables_file, self.handler)

        info = machine_info_from_outputs(commands.output_query(self.terraform))
        logger.debug("Deployed host has IP '%s'", info.ip_address)
        return info

    def remove(self) -> None:
        """Destroy the configuration's resources."""
        commands.destroy(self.terraform, self._existing_variables_file(), self.handler)
