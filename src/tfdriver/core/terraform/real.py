"""Production Terraform invocation using subprocess."""

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

from tfdriver.core.drain import BufferedSink, LineHandler, drain_pipes
from tfdriver.core.errors import StartFailedError
from tfdriver.core.executable import ToolHandle
from tfdriver.core.result import InvocationResult, classify_exit
from tfdriver.core.terraform.abc import Terraform

logger = logging.getLogger(__name__)


class RealTerraform(Terraform):
    """Runs the resolved Terraform executable with subprocess.Popen().

    Both pipes are drained concurrently with process.wait(), so a verb that
    writes heavily to one stream cannot deadlock against the other. The
    environment is inherited from the parent process unmodified.

    Example:
        handle = ToolHandle(config_dir)
        handle.resolve(None)
        terraform = RealTerraform(handle)
        result = terraform.run("output", "-json")
    """

    def __init__(self, handle: ToolHandle) -> None:
        self._handle = handle

    @property
    def working_directory(self) -> Path:
        return self._handle.working_directory

    def run(self, verb: str, *args: str) -> InvocationResult:
        sink = BufferedSink()
        command, returncode = self._execute(verb, args, sink)
        return classify_exit(command, returncode, sink.text())

    def run_streamed(self, verb: str, handler: LineHandler, *args: str) -> InvocationResult:
        command, returncode = self._execute(verb, args, handler)
        return classify_exit(command, returncode, "", streamed=True)

    def _execute(
        self, verb: str, args: Sequence[str], handler: LineHandler
    ) -> tuple[list[str], int]:
        executable = self._handle.require_executable()
        command = [str(executable), verb, *args]
        command_line = " ".join(command)

        logger.debug('Executing "%s" in %s ...', command_line, self.working_directory)
        try:
            process = subprocess.Popen(
                command,
                cwd=self.working_directory,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            raise StartFailedError(command, e) from e

        # Both pipes are requested above, so Popen always provides them
        assert process.stdout is not None
        assert process.stderr is not None

        drainer = drain_pipes(process.stdout, process.stderr, handler)
        returncode = process.wait()
        drainer.join()

        if returncode == 0:
            logger.debug('Successfully executed "%s"', command_line)
        else:
            logger.debug('"%s" exited with status %d', command_line, returncode)
        return command, returncode
