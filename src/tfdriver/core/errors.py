"""Error taxonomy for Terraform invocation.

Every failure raised by tfdriver derives from TerraformError so callers can
branch on the kind of failure instead of matching message text. Each error
carries the structured context (command, exit code, captured output) that was
available when it was raised.
"""

from collections.abc import Sequence
from pathlib import Path


def _format_command(command: Sequence[str]) -> str:
    return " ".join(str(arg) for arg in command)


def _append_output(message: str, output: str, *, streamed: bool = False) -> str:
    stripped = output.strip()
    if not stripped and streamed:
        return message + "\nTerraform output: (streamed above)"
    if not stripped:
        return message + "\nTerraform output: (none captured)"
    return message + f"\nTerraform output:\n{stripped}"


class TerraformError(Exception):
    """Base class for all tfdriver failures."""


class ExecutableNotFoundError(TerraformError):
    """The Terraform executable could not be located."""

    def __init__(self, *, path: Path | None = None, name: str | None = None) -> None:
        self.path = path
        self.name = name
        if path is not None:
            message = f"Terraform executable not found at '{path}'"
        else:
            message = f"Terraform executable '{name}' not found on PATH"
        super().__init__(message)


class AlreadyResolvedError(TerraformError):
    """The executable path was resolved a second time."""

    def __init__(self, resolved_path: Path) -> None:
        self.resolved_path = resolved_path
        super().__init__(
            f"Terraform executable has already been resolved to '{resolved_path}'"
        )


class NotResolvedError(TerraformError):
    """Terraform was invoked before its executable path was resolved."""

    def __init__(self) -> None:
        super().__init__("Terraform executable path has not been resolved")


class StartFailedError(TerraformError):
    """The operating system refused to start the Terraform process."""

    def __init__(self, command: Sequence[str], os_error: OSError) -> None:
        self.command = tuple(command)
        self.os_error = os_error
        super().__init__(
            f"Failed to start Terraform: {os_error}"
            f"\nCommand: {_format_command(command)}"
            "\nTerraform produced no output because it never started."
        )


class AbnormalExitError(TerraformError):
    """Terraform started but exited with a nonzero status or was killed."""

    def __init__(
        self,
        command: Sequence[str],
        output: str,
        *,
        exit_code: int | None = None,
        signal: int | None = None,
        streamed: bool = False,
    ) -> None:
        self.command = tuple(command)
        self.output = output
        self.exit_code = exit_code
        self.signal = signal
        self.streamed = streamed

        if signal is not None:
            message = f"Terraform did not exit cleanly (killed by signal {signal})"
        else:
            message = "Terraform exited with a nonzero status"
        message += f"\nCommand: {_format_command(command)}"
        if exit_code is not None:
            message += f"\nExit code: {exit_code}"
        super().__init__(_append_output(message, output, streamed=streamed))


class InvalidVariablesFileError(TerraformError):
    """A variables file was unreadable or did not contain a JSON object."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Unable to read variables from '{path}': {reason}")


class InvalidVariableError(TerraformError):
    """An inline variable was not in the form name=value."""

    def __init__(self, item: str) -> None:
        self.item = item
        super().__init__(f"Invalid format for variable '{item}' (expected name=value)")


class OutputParseFailedError(TerraformError):
    """The result of 'terraform output -json' could not be parsed."""

    def __init__(self, output: str, reason: str) -> None:
        self.output = output
        self.reason = reason
        super().__init__(
            _append_output(f"Failed to parse JSON from Terraform output: {reason}", output)
        )


class OperationFailedError(TerraformError):
    """A named Terraform operation failed.

    Wraps the underlying StartFailedError or AbnormalExitError and names the
    verb that was being executed.
    """

    def __init__(self, operation: str, cause: StartFailedError | AbnormalExitError) -> None:
        self.operation = operation
        self.cause = cause
        super().__init__(f"Failed to execute 'terraform {operation}'\n{cause}")

    @property
    def output(self) -> str | None:
        """Captured Terraform output, or None if the process never started."""
        if isinstance(self.cause, AbnormalExitError):
            return self.cause.output
        return None


class MissingOutputError(TerraformError):
    """The configuration does not declare an output the workflow requires."""

    def __init__(self, output_name: str) -> None:
        self.output_name = output_name
        super().__init__(f"Configuration does not declare required output '{output_name}'")
