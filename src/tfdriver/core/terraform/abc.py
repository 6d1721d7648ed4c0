"""Terraform process invocation interface.

Architecture:
- Terraform: Abstract base class defining the invocation surface
- RealTerraform: Production implementation using subprocess
- FakeTerraform: In-memory implementation for tests
"""

from abc import ABC, abstractmethod
from pathlib import Path

from tfdriver.core.drain import LineHandler
from tfdriver.core.result import InvocationResult


class Terraform(ABC):
    """Abstract interface for running Terraform verbs.

    Every invocation runs in the configuration directory with a flat argument
    vector (verb first, then flags). Nothing is interpreted by a shell.
    """

    @property
    @abstractmethod
    def working_directory(self) -> Path:
        """Directory containing the Terraform configuration."""
        ...

    @abstractmethod
    def run(self, verb: str, *args: str) -> InvocationResult:
        """Run Terraform and return after it exits, with combined output buffered.

        Args:
            verb: Terraform sub-command (e.g. "output")
            *args: Additional flags, passed literally

        Returns:
            InvocationResult whose captured_output holds stdout and stderr

        Raises:
            NotResolvedError: If the executable path has not been resolved
            StartFailedError: If the process could not be started
        """
        ...

    @abstractmethod
    def run_streamed(self, verb: str, handler: LineHandler, *args: str) -> InvocationResult:
        """Run Terraform, delivering each output line to handler as it arrives.

        Does not return until the process has exited and every line has been
        delivered.

        Args:
            verb: Terraform sub-command (e.g. "apply")
            handler: Called once per line of stdout or stderr
            *args: Additional flags, passed literally

        Returns:
            InvocationResult with empty captured_output

        Raises:
            NotResolvedError: If the executable path has not been resolved
            StartFailedError: If the process could not be started
        """
        ...
