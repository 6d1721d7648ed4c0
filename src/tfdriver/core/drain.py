"""Concurrent draining of a subprocess's stdout and stderr pipes.

A subprocess blocks once its pipe buffers fill, so both pipes are read on
their own threads while the caller waits for the process to exit. Each
complete line is delivered exactly once, without its trailing newline.
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import IO, Literal

logger = logging.getLogger(__name__)

StreamName = Literal["stdout", "stderr"]


@dataclass(frozen=True)
class LineEvent:
    """A single line of Terraform output.

    Attributes:
        line: Line text without its trailing newline
        stream: Originating stream ("stdout" or "stderr")
    """

    line: str
    stream: StreamName


LineHandler = Callable[[LineEvent], None]


class BufferedSink:
    """Line handler that collects lines from both streams into one buffer.

    Both drain threads write through the same sink, so appends are serialized
    with a lock to keep line boundaries intact.
    """

    def __init__(self) -> None:
        self._lines: list[str] = []
        self._lock = threading.Lock()

    def __call__(self, event: LineEvent) -> None:
        with self._lock:
            self._lines.append(event.line)

    @property
    def line_count(self) -> int:
        with self._lock:
            return len(self._lines)

    def text(self) -> str:
        """Render the collected lines, newline-terminated."""
        with self._lock:
            if not self._lines:
                return ""
            return "\n".join(self._lines) + "\n"


class OutputDrainer:
    """Drains a process's stdout and stderr pipes on two threads.

    Usage:
        drainer = OutputDrainer(process.stdout, process.stderr, handler)
        drainer.start()
        returncode = process.wait()
        drainer.join()

    Pipes are always closed when their drain loop ends. A read error on one
    pipe is logged and does not stop the other. If the handler raises, the
    remaining output is still drained (so the process cannot block on a full
    pipe) and the first handler exception is re-raised from join().
    """

    def __init__(self, stdout: IO[str], stderr: IO[str], handler: LineHandler) -> None:
        self._handler = handler
        self._handler_error: BaseException | None = None
        self._error_lock = threading.Lock()
        self._threads = [
            threading.Thread(
                target=self._scan_pipe, args=(stdout, "stdout"), name="drain-stdout", daemon=True
            ),
            threading.Thread(
                target=self._scan_pipe, args=(stderr, "stderr"), name="drain-stderr", daemon=True
            ),
        ]

    def start(self) -> None:
        for thread in self._threads:
            thread.start()

    def join(self) -> None:
        """Wait for both pipes to reach end-of-stream.

        Raises:
            Exception: The first exception raised by the line handler, if any
        """
        for thread in self._threads:
            thread.join()

        if self._handler_error is not None:
            raise self._handler_error

    def _deliver(self, event: LineEvent) -> None:
        if self._handler_error is not None:
            return
        try:
            self._handler(event)
        except Exception as e:
            with self._error_lock:
                if self._handler_error is None:
                    self._handler_error = e

    def _scan_pipe(self, pipe: IO[str], stream: StreamName) -> None:
        try:
            for raw_line in pipe:
                self._deliver(LineEvent(raw_line.removesuffix("\n"), stream))
        except (OSError, ValueError) as e:
            logger.error("Error scanning pipe %s: %s", stream, e)
        finally:
            pipe.close()


def drain_pipes(stdout: IO[str], stderr: IO[str], handler: LineHandler) -> OutputDrainer:
    """Start draining both pipes and return the running drainer.

    The caller is expected to wait for the process and then call join().
    """
    drainer = OutputDrainer(stdout, stderr, handler)
    drainer.start()
    return drainer
