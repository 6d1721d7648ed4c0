"""Terraform configuration variables.

The VariableStore builds the tfvars.json file that Terraform reads from the
variables the configuration ships in variables.json plus those supplied at
invocation time. tfvars.json is output only and is never loaded. Loading is
additive and never overwrites: the first source to supply a variable wins, so
load the primary source first and supplementary sources afterwards. Call
clear() before loading if merge semantics are not wanted.
"""

import json
import logging
from collections.abc import Iterable, Iterator, MutableMapping
from pathlib import Path
from typing import TypeAlias

from tfdriver.core.errors import InvalidVariableError, InvalidVariablesFileError

logger = logging.getLogger(__name__)

VARIABLES_FILE_NAME = "tfvars.json"
PRIMARY_VARIABLES_FILE_NAME = "variables.json"

VariableValue: TypeAlias = (
    str | int | float | bool | None | list["VariableValue"] | dict[str, "VariableValue"]
)


def normalize_value(value: VariableValue) -> VariableValue:
    """Render integers as their decimal string form; pass everything else through.

    bool is a subclass of int, so booleans are excluded explicitly. Floats are
    written as JSON numbers.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    return value


def parse_inline_variable(item: str) -> tuple[str, str]:
    """Split a "name=value" item on its first '='.

    Raises:
        InvalidVariableError: If item has no '=' or an empty name
    """
    name, separator, value = item.partition("=")
    if not separator or not name:
        raise InvalidVariableError(item)
    return name, value


class VariableStore(MutableMapping[str, VariableValue]):
    """Mapping of Terraform variable names to values.

    Direct assignment (store["name"] = value) always sets the value; the load
    operations only add names that are not already present.
    """

    def __init__(self, initial: dict[str, VariableValue] | None = None) -> None:
        self._values: dict[str, VariableValue] = dict(initial or {})

    def __getitem__(self, name: str) -> VariableValue:
        return self._values[name]

    def __setitem__(self, name: str, value: VariableValue) -> None:
        self._values[name] = value

    def __delitem__(self, name: str) -> None:
        del self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"VariableStore({self._values!r})"

    def clear(self) -> None:
        self._values.clear()

    def set_default(self, name: str, value: VariableValue) -> bool:
        """Add a variable unless it is already present.

        Returns:
            True if the value was added, False if an existing value was kept
        """
        if name in self._values:
            return False
        self._values[name] = value
        return True

    def merge(self, values: dict[str, VariableValue]) -> int:
        """Add every variable from values that is not already present.

        Returns:
            Number of variables added
        """
        added = 0
        for name, value in values.items():
            if self.set_default(name, value):
                added += 1
        return added

    def load_from(self, path: Path) -> int:
        """Additively load variables from a JSON object file.

        Existing values are never overwritten.

        Args:
            path: Path to a JSON file containing an object

        Returns:
            Number of variables added

        Raises:
            InvalidVariablesFileError: If the file is unreadable, not valid JSON,
                or does not contain a JSON object
        """
        logger.debug("Reading Terraform variables from '%s'", path)
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise InvalidVariablesFileError(path, e.strerror or str(e)) from e

        # JSON parsing requires exception handling
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise InvalidVariablesFileError(path, str(e)) from e

        if not isinstance(data, dict):
            raise InvalidVariablesFileError(
                path, f"expected a JSON object, got {type(data).__name__}"
            )

        added = self.merge(data)
        logger.debug("Added %d of %d variables from '%s'", added, len(data), path)
        return added

    def load_inline(self, items: Iterable[str]) -> int:
        """Additively load "name=value" items (values are always strings).

        Every item is validated before any is added.

        Raises:
            InvalidVariableError: If an item is not in the form name=value
        """
        parsed = [parse_inline_variable(item) for item in items]
        added = 0
        for name, value in parsed:
            if self.set_default(name, value):
                added += 1
        return added

    def normalized(self) -> dict[str, VariableValue]:
        """Copy of the variables as they are written to disk."""
        return {name: normalize_value(value) for name, value in self._values.items()}

    def persist_to(self, path: Path) -> None:
        """Write the normalized variables as a pretty-printed JSON object.

        The in-memory values are left untouched.
        """
        logger.debug("Writing %d Terraform variables to '%s'", len(self._values), path)
        content = json.dumps(self.normalized(), indent=2)
        path.write_text(content + "\n", encoding="utf-8")
