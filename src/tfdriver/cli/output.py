"""Output utilities for CLI commands with clear intent.

- user_output: human-facing messages (stderr)
- machine_output: structured results meant for piping (stdout)
- stream_operation_with_feedback: live rendering of a streamed Terraform verb
"""

import time
from collections.abc import Callable
from typing import TypeVar

import click
from rich.console import Console

from tfdriver.core.drain import LineEvent, LineHandler
from tfdriver.core.errors import TerraformError

T = TypeVar("T")


def user_output(message: str) -> None:
    click.echo(message, err=True)


def machine_output(message: str) -> None:
    click.echo(message)


def format_duration(seconds: float) -> str:
    """Format a duration as e.g. "45s", "1m 23s" or "2h 5m"."""
    total = int(seconds)
    if total < 60:
        return f"{total}s"
    minutes, secs = divmod(total, 60)
    if minutes < 60:
        return f"{minutes}m {secs}s"
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h {minutes}m"


def console_line_handler(console: Console) -> LineHandler:
    """Line handler that prints Terraform output as it arrives.

    stderr lines are rendered dim red. Terraform output is printed verbatim,
    never interpreted as rich markup.
    """

    def handle(event: LineEvent) -> None:
        style = "dim red" if event.stream == "stderr" else None
        console.print(event.line, style=style, markup=False, highlight=False)

    return handle


def stream_operation_with_feedback(
    label: str,
    operation: Callable[[LineHandler], T],
    console: Console | None = None,
) -> T:
    """Run streamed Terraform operations with start/end markers.

    Visual output format:
    - Start: `--- terraform apply ---` (bold)
    - Output lines: as-is (stderr dim red)
    - End (success): `--- Done (1m 23s) ---` (green)
    - End (failure): `--- Failed (1m 23s) ---` (red)

    Args:
        label: Text shown in the start marker (e.g. "terraform apply")
        operation: Called with the line handler; runs the Terraform verb(s)
        console: Rich Console for output (if None, writes to stderr)

    Returns:
        Whatever operation returns
    """
    if console is None:
        console = Console(stderr=True)

    console.print(f"--- {label} ---", style="bold", markup=False)
    start_time = time.time()
    try:
        result = operation(console_line_handler(console))
    except TerraformError:
        duration_str = format_duration(time.time() - start_time)
        console.print(f"--- Failed ({duration_str}) ---", style="red", markup=False)
        raise

    duration_str = format_duration(time.time() - start_time)
    console.print(f"--- Done ({duration_str}) ---", style="green", markup=False)
    return result
