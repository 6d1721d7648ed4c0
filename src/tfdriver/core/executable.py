"""Location of the Terraform executable.

A ToolHandle is created empty, resolved exactly once, and read-only afterwards.
Explicit configuration takes precedence over a search of the system PATH.
"""

import logging
import shutil
from pathlib import Path

from tfdriver.core.errors import AlreadyResolvedError, ExecutableNotFoundError, NotResolvedError

logger = logging.getLogger(__name__)

TERRAFORM_EXECUTABLE_NAME = "terraform"


class ToolHandle:
    """Identifies how to invoke Terraform: which executable, and where.

    Attributes:
        working_directory: Directory the subprocess runs in (holds the configuration)

    Example:
        >>> handle = ToolHandle(Path("/machines/web-1/terraform-config"))
        >>> handle.resolve(None)  # search PATH
        PosixPath('/usr/local/bin/terraform')
    """

    def __init__(self, working_directory: Path, executable_name: str = TERRAFORM_EXECUTABLE_NAME):
        self.working_directory = working_directory
        self.executable_name = executable_name
        self._executable_path: Path | None = None

    @property
    def executable_path(self) -> Path | None:
        """Resolved executable path, or None if resolve() has not succeeded."""
        return self._executable_path

    @property
    def is_resolved(self) -> bool:
        return self._executable_path is not None

    def resolve(self, explicit_path: Path | None) -> Path:
        """Resolve the executable path.

        Args:
            explicit_path: Configured path to the executable; when None the
                system PATH is searched for the canonical executable name

        Returns:
            The resolved executable path

        Raises:
            AlreadyResolvedError: If the handle has already been resolved
            ExecutableNotFoundError: If the executable cannot be found
        """
        if self._executable_path is not None:
            raise AlreadyResolvedError(self._executable_path)

        if explicit_path is None:
            logger.debug(
                "Terraform executable location has not been explicitly configured; "
                "searching for '%s' on PATH",
                self.executable_name,
            )
            found = shutil.which(self.executable_name)
            if found is None:
                raise ExecutableNotFoundError(name=self.executable_name)
            resolved = Path(found).absolute()
        else:
            logger.debug("Terraform executable location has been explicitly configured")
            # Existence only; a non-executable file surfaces later as a start failure
            if not explicit_path.exists():
                raise ExecutableNotFoundError(path=explicit_path)
            # The process runs in the configuration directory, not the current one
            resolved = explicit_path.absolute()

        self._executable_path = resolved
        logger.debug("Will use Terraform executable '%s'", resolved)
        return resolved

    def require_executable(self) -> Path:
        """Return the resolved executable path.

        Raises:
            NotResolvedError: If resolve() has not succeeded yet
        """
        if self._executable_path is None:
            raise NotResolvedError()
        return self._executable_path
