"""Tests for process outcome classification."""

import pytest

from tfdriver.core.errors import AbnormalExitError, StartFailedError
from tfdriver.core.result import FailureReason, classify_exit, classify_start_failure

COMMAND = ["terraform", "apply", "-no-color"]


def test_zero_exit_is_success() -> None:
    result = classify_exit(COMMAND, 0, "Apply complete!\n")

    assert result.succeeded is True
    assert result.failure_reason is None
    assert result.exit_code == 0
    assert result.captured_output == "Apply complete!\n"
    assert result.command == tuple(COMMAND)


def test_success_raise_for_status_is_noop() -> None:
    classify_exit(COMMAND, 0, "").raise_for_status()


def test_nonzero_exit_is_failure_with_output() -> None:
    result = classify_exit(COMMAND, 1, "Error: bad config\n")

    assert result.succeeded is False
    assert result.failure_reason is FailureReason.EXITED_NONZERO
    assert result.exit_code == 1
    assert result.signal is None
    assert result.captured_output == "Error: bad config\n"


def test_negative_returncode_means_killed_by_signal() -> None:
    result = classify_exit(COMMAND, -9, "")

    assert result.succeeded is False
    assert result.failure_reason is FailureReason.DID_NOT_EXIT_CLEANLY
    assert result.signal == 9


def test_raise_for_status_carries_exit_code_and_output() -> None:
    result = classify_exit(COMMAND, 2, "Error: something went wrong\n")

    with pytest.raises(AbnormalExitError) as exc_info:
        result.raise_for_status()

    error = exc_info.value
    assert error.exit_code == 2
    assert error.signal is None
    assert error.output == "Error: something went wrong\n"
    assert error.command == tuple(COMMAND)
    message = str(error)
    assert "Command: terraform apply -no-color" in message
    assert "Exit code: 2" in message
    assert "Error: something went wrong" in message


def test_raise_for_status_reports_signal() -> None:
    result = classify_exit(COMMAND, -15, "partial\n")

    with pytest.raises(AbnormalExitError) as exc_info:
        result.raise_for_status()

    assert exc_info.value.signal == 15
    assert exc_info.value.exit_code is None
    assert "killed by signal 15" in str(exc_info.value)
    assert "partial" in str(exc_info.value)


def test_start_failure_has_no_output_and_reraises() -> None:
    os_error = FileNotFoundError(2, "No such file or directory")
    result = classify_start_failure(StartFailedError(COMMAND, os_error))

    assert result.succeeded is False
    assert result.failure_reason is FailureReason.START_FAILED
    assert result.exit_code is None
    assert result.signal is None
    assert result.captured_output == ""

    with pytest.raises(StartFailedError) as exc_info:
        result.raise_for_status()

    assert exc_info.value.os_error is os_error
    assert "produced no output" in str(exc_info.value)


def test_streamed_failure_says_output_was_streamed() -> None:
    result = classify_exit(COMMAND, 1, "", streamed=True)

    with pytest.raises(AbnormalExitError) as exc_info:
        result.raise_for_status()

    assert exc_info.value.streamed is True
    assert "Terraform output: (streamed above)" in str(exc_info.value)
    assert "none captured" not in str(exc_info.value)


def test_buffered_failure_without_output_says_none_captured() -> None:
    result = classify_exit(COMMAND, 1, "")

    with pytest.raises(AbnormalExitError) as exc_info:
        result.raise_for_status()

    assert "Terraform output: (none captured)" in str(exc_info.value)
