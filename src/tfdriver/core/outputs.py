"""Parsing of 'terraform output -json' results."""

import json
from dataclasses import dataclass
from typing import Any

from tfdriver.core.errors import OutputParseFailedError


@dataclass(frozen=True)
class OutputRecord:
    """One named output reported by Terraform.

    Attributes:
        name: Output name (key in the output map)
        data_type: Terraform type tag (e.g. "string", "list")
        value: Output value as decoded JSON
        sensitive: Whether Terraform marks the output sensitive (informational)
    """

    name: str
    data_type: str
    value: Any
    sensitive: bool


def parse_outputs(text: str) -> dict[str, OutputRecord]:
    """Parse the JSON document printed by 'terraform output -json'.

    Args:
        text: Captured output of the output query

    Returns:
        Output records keyed by name

    Raises:
        OutputParseFailedError: If text is not a JSON object of output records
    """
    # JSON parsing requires exception handling
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise OutputParseFailedError(text, str(e)) from e

    if not isinstance(data, dict):
        raise OutputParseFailedError(text, f"expected a JSON object, got {type(data).__name__}")

    outputs: dict[str, OutputRecord] = {}
    for name, entry in data.items():
        if not isinstance(entry, dict):
            raise OutputParseFailedError(text, f"output '{name}' is not a JSON object")
        data_type = entry.get("type", "")
        outputs[name] = OutputRecord(
            name=name,
            data_type=data_type if isinstance(data_type, str) else json.dumps(data_type),
            value=entry.get("value"),
            sensitive=bool(entry.get("sensitive", False)),
        )
    return outputs
