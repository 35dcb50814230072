"""Path descriptors: a key/index path plus the scalar kind expected at its end."""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from .error_handler import ErrorHandler
from .json_value import JsonValue
from .types import SCALAR_COLUMN_TYPES, ColumnType, ErrorType, JsonType, PathStep, ProcessingError


logger = logging.getLogger(__name__)
_error_handler = ErrorHandler(logger)


@dataclass(frozen=True)
class PathDescriptor:
    """
    Where to find a scalar inside a JSON value, and which kind it must be.

    String steps are object keys, integer steps are 1-based array indices.
    """
    kind: JsonType
    path: Tuple[PathStep, ...]

    def __post_init__(self):
        if not self.kind.is_scalar:
            raise ProcessingError(
                f"Path descriptors extract scalars, not {self.kind.value} values",
                ErrorType.PATH
            )
        object.__setattr__(self, "path", tuple(self.path))
        _error_handler.require(_error_handler.validate_path(self.path), {"path": list(self.path)})

    @property
    def column_type(self) -> ColumnType:
        return SCALAR_COLUMN_TYPES[self.kind]

    def locate(self, value: JsonValue) -> Optional[JsonValue]:
        """Walk the path from ``value``; None when any step fails."""
        return walk_path(value, self.path)

    def resolve(self, value: JsonValue) -> Optional[Any]:
        """
        Extract the scalar at the end of the path.

        Returns:
            The Python scalar, or None when the walk fails or the terminal
            value is not of this descriptor's kind
        """
        target = self.locate(value)
        if target is None or target.type is not self.kind:
            return None
        return target.value


def walk_path(value: JsonValue, path: Tuple[PathStep, ...]) -> Optional[JsonValue]:
    """Follow keys through objects and 1-based indices through arrays."""
    current = value
    for step in path:
        if current.is_object and isinstance(step, str):
            current = current.get(step)
        elif current.is_array and isinstance(step, int) and not isinstance(step, bool):
            current = current.element(step)
        else:
            return None
        if current is None:
            return None
    return current


def jstring(*path: PathStep) -> PathDescriptor:
    """Descriptor for a string at ``path``."""
    return PathDescriptor(JsonType.STRING, path)


def jnumber(*path: PathStep) -> PathDescriptor:
    """Descriptor for a number at ``path``."""
    return PathDescriptor(JsonType.NUMBER, path)


def jlogical(*path: PathStep) -> PathDescriptor:
    """Descriptor for a boolean at ``path``."""
    return PathDescriptor(JsonType.LOGICAL, path)
