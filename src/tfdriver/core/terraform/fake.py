"""Fake Terraform implementation for testing.

FakeTerraform is an in-memory implementation that returns scripted output
per verb and records every invocation, so facade, workflow and CLI code can be
tested without a Terraform binary.
"""

from dataclasses import dataclass
from pathlib import Path

from tfdriver.core.drain import LineEvent, LineHandler
from tfdriver.core.errors import NotResolvedError, StartFailedError
from tfdriver.core.result import InvocationResult, classify_exit
from tfdriver.core.terraform.abc import Terraform


@dataclass(frozen=True)
class ScriptedRun:
    """Scripted behaviour for one Terraform verb.

    Attributes:
        stdout: Lines written to stdout
        stderr: Lines written to stderr (delivered after stdout)
        exit_code: Process exit status (negative for death by signal)
        start_error: If set, the process fails to start with this error
    """

    stdout: tuple[str, ...] = ()
    stderr: tuple[str, ...] = ()
    exit_code: int = 0
    start_error: OSError | None = None


@dataclass(frozen=True)
class RecordedCall:
    verb: str
    args: tuple[str, ...]
    streamed: bool


class FakeTerraform(Terraform):
    """In-memory fake that tracks calls without spawning processes.

    This class has NO public setup methods. All state is provided via
    constructor or captured during execution. Verbs without a scripted run
    succeed with no output.
    """

    def __init__(
        self,
        working_directory: Path,
        runs: dict[str, ScriptedRun] | None = None,
        resolved: bool = True,
    ) -> None:
        self._working_directory = working_directory
        self._runs = runs or {}
        self._resolved = resolved
        self._calls: list[RecordedCall] = []

    @property
    def working_directory(self) -> Path:
        return self._working_directory

    @property
    def calls(self) -> list[RecordedCall]:
        """Invocations made so far, in order.

        This property is for test assertions only.
        """
        return self._calls

    @property
    def invoked_verbs(self) -> list[str]:
        """Verbs invoked so far, in order.

        This property is for test assertions only.
        """
        return [call.verb for call in self._calls]

    def run(self, verb: str, *args: str) -> InvocationResult:
        scripted, command = self._start(verb, args, streamed=False)
        lines = [*scripted.stdout, *scripted.stderr]
        text = "\n".join(lines) + "\n" if lines else ""
        return classify_exit(command, scripted.exit_code, text)

    def run_streamed(self, verb: str, handler: LineHandler, *args: str) -> InvocationResult:
        scripted, command = self._start(verb, args, streamed=True)
        for line in scripted.stdout:
            handler(LineEvent(line, "stdout"))
        for line in scripted.stderr:
            handler(LineEvent(line, "stderr"))
        return classify_exit(command, scripted.exit_code, "", streamed=True)

    def _start(
        self, verb: str, args: tuple[str, ...], streamed: bool
    ) -> tuple[ScriptedRun, list[str]]:
        if not self._resolved:
            raise NotResolvedError()

        self._calls.append(RecordedCall(verb=verb, args=args, streamed=streamed))
        command = ["terraform", verb, *args]
        scripted = self._runs.get(verb, ScriptedRun())
        if scripted.start_error is not None:
            raise StartFailedError(command, scripted.start_error)
        return scripted, command
