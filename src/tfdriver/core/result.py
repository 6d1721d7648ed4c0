"""Classification of Terraform process outcomes."""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from tfdriver.core.errors import AbnormalExitError, StartFailedError


class FailureReason(Enum):
    """Why an invocation did not succeed."""

    START_FAILED = "could not start"
    DID_NOT_EXIT_CLEANLY = "did not exit cleanly"
    EXITED_NONZERO = "exited non-zero"


@dataclass(frozen=True)
class InvocationResult:
    """Outcome of one Terraform subprocess run.

    Attributes:
        command: Full argument vector that was executed
        succeeded: True iff the process started, ran to completion and exited 0
        captured_output: Combined stdout/stderr text (buffered mode only;
            empty in streamed mode because the handler received every line)
        streamed: True if the output went to a line handler
        failure_reason: Present iff succeeded is False
        exit_code: Process exit status (negative when killed by a signal), or
            None if the process never started
        start_error: OS error that prevented the process from starting
    """

    command: tuple[str, ...]
    succeeded: bool
    captured_output: str
    failure_reason: FailureReason | None
    exit_code: int | None
    start_error: OSError | None = None
    streamed: bool = False

    @property
    def signal(self) -> int | None:
        """Signal number that killed the process, if any."""
        if self.exit_code is not None and self.exit_code < 0:
            return -self.exit_code
        return None

    def raise_for_status(self) -> None:
        """Raise AbnormalExitError if the invocation failed.

        Raises:
            StartFailedError: If the process never started
            AbnormalExitError: Carrying exit code or signal and the captured output
        """
        if self.succeeded:
            return
        if self.start_error is not None:
            raise StartFailedError(self.command, self.start_error)
        signal = self.signal
        raise AbnormalExitError(
            self.command,
            self.captured_output,
            exit_code=None if signal is not None else self.exit_code,
            signal=signal,
            streamed=self.streamed,
        )


def classify_exit(
    command: Sequence[str], returncode: int, captured_output: str, *, streamed: bool = False
) -> InvocationResult:
    """Map a process exit status onto an InvocationResult.

    Popen reports death-by-signal as a negative returncode. A streamed run
    captures nothing; its lines were already delivered to the handler.
    """
    if returncode == 0:
        reason = None
    elif returncode < 0:
        reason = FailureReason.DID_NOT_EXIT_CLEANLY
    else:
        reason = FailureReason.EXITED_NONZERO

    return InvocationResult(
        command=tuple(command),
        succeeded=reason is None,
        captured_output=captured_output,
        failure_reason=reason,
        exit_code=returncode,
        streamed=streamed,
    )


def classify_start_failure(error: StartFailedError) -> InvocationResult:
    """Represent a start failure as a result, for callers that collect outcomes."""
    return InvocationResult(
        command=error.command,
        succeeded=False,
        captured_output="",
        failure_reason=FailureReason.START_FAILED,
        exit_code=None,
        start_error=error.os_error,
    )
