"""Named Terraform operations.

Each operation is a fixed-argument specialization of Terraform.run() or
Terraform.run_streamed(). Failures raise OperationFailedError naming the verb
and wrapping the underlying StartFailedError or AbnormalExitError. Nothing is
retried.
"""

import logging
from collections.abc import Callable
from pathlib import Path

from tfdriver.core.drain import LineEvent, LineHandler
from tfdriver.core.errors import AbnormalExitError, OperationFailedError, StartFailedError
from tfdriver.core.outputs import OutputRecord, parse_outputs
from tfdriver.core.result import InvocationResult
from tfdriver.core.terraform.abc import Terraform
from tfdriver.core.variables import VARIABLES_FILE_NAME

terraform_logger = logging.getLogger("tfdriver.terraform")

NON_INTERACTIVE_FLAGS = ("-input=false", "-no-color")


def log_line(event: LineEvent) -> None:
    """Default line handler: log Terraform output at debug level."""
    terraform_logger.debug("[%s] %s", event.stream, event.line)


def variables_file_for(config_dir: Path) -> Path:
    return config_dir / VARIABLES_FILE_NAME


def _var_file_flags(variables_file: Path | None) -> tuple[str, ...]:
    if variables_file is None:
        return ()
    return (f"-var-file={variables_file}",)


def _checked(operation: str, invoke: Callable[[], InvocationResult]) -> InvocationResult:
    try:
        result = invoke()
    except StartFailedError as e:
        raise OperationFailedError(operation, e) from e

    try:
        result.raise_for_status()
    except AbnormalExitError as e:
        raise OperationFailedError(operation, e) from e
    return result


def _streamed(
    terraform: Terraform, verb: str, handler: LineHandler | None, *args: str
) -> None:
    line_handler = handler if handler is not None else log_line
    _checked(verb, lambda: terraform.run_streamed(verb, line_handler, *args))


def get_modules(terraform: Terraform, handler: LineHandler | None = None) -> None:
    """Fetch the configuration's modules ('terraform get')."""
    _streamed(terraform, "get", handler, "-no-color")


def validate(terraform: Terraform, handler: LineHandler | None = None) -> None:
    """Validate the configuration ('terraform validate')."""
    _streamed(terraform, "validate", handler)


def apply(
    terraform: Terraform,
    variables_file: Path | None = None,
    handler: LineHandler | None = None,
) -> None:
    """Apply the configuration ('terraform apply')."""
    _streamed(
        terraform, "apply", handler, *NON_INTERACTIVE_FLAGS, *_var_file_flags(variables_file)
    )


def refresh(
    terraform: Terraform,
    variables_file: Path | None = None,
    handler: LineHandler | None = None,
) -> None:
    """Refresh the configuration's state ('terraform refresh')."""
    _streamed(
        terraform, "refresh", handler, *NON_INTERACTIVE_FLAGS, *_var_file_flags(variables_file)
    )


def destroy(
    terraform: Terraform,
    variables_file: Path | None = None,
    handler: LineHandler | None = None,
) -> None:
    """Destroy the configuration's resources ('terraform destroy')."""
    _streamed(
        terraform,
        "destroy",
        handler,
        "-force",
        *NON_INTERACTIVE_FLAGS,
        *_var_file_flags(variables_file),
    )


def output_query(terraform: Terraform) -> dict[str, OutputRecord]:
    """Query the configuration's outputs ('terraform output -json').

    Runs fresh every time; Terraform's state may have changed since the last
    query.

    Returns:
        Output records keyed by name

    Raises:
        OperationFailedError: If Terraform failed to start or exited abnormally
        OutputParseFailedError: If the output is not a JSON object of outputs
    """
    result = _checked("output", lambda: terraform.run("output", "-json"))
    terraform_logger.debug("%s", result.captured_output)
    return parse_outputs(result.captured_output)
