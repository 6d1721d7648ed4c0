"""CLI error handling utilities with styled output.

All errors use a red "Error:" prefix for visual consistency and exit with
status 1.
"""

from collections.abc import Iterator
from contextlib import contextmanager

import click

from tfdriver.cli.output import user_output
from tfdriver.core.errors import TerraformError


class Ensure:
    """Helper class for asserting invariants with consistent error handling."""

    @staticmethod
    def invariant(condition: bool, error_message: str) -> None:
        """Ensure condition is true, otherwise output styled error and exit.

        Raises:
            SystemExit: If condition is false (with exit code 1)
        """
        if not condition:
            user_output(click.style("Error: ", fg="red") + error_message)
            raise SystemExit(1)

    @staticmethod
    @contextmanager
    def terraform_succeeds() -> Iterator[None]:
        """Error boundary: report any TerraformError and exit.

        Raises:
            SystemExit: If the block raises TerraformError (with exit code 1)
        """
        try:
            yield
        except TerraformError as e:
            user_output(click.style("Error: ", fg="red") + str(e))
            raise SystemExit(1) from e
