"""Core type definitions for json-tidy."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


DOCUMENT_ID = "document.id"
DEFAULT_ARRAY_INDEX = "array.index"
DEFAULT_KEY = "key"
DEFAULT_TYPE = "type"
DEFAULT_LENGTH = "length"
DEFAULT_COMPLEXITY = "complexity"

# A path step is an object key or a 1-based array index.
PathStep = Union[str, int]


class JsonType(Enum):
    """Enumeration of JSON node kinds."""
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    LOGICAL = "logical"
    NULL = "null"

    @property
    def is_scalar(self) -> bool:
        return self in (JsonType.STRING, JsonType.NUMBER, JsonType.LOGICAL)


class ColumnType(Enum):
    """Enumeration of typed table column types."""
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    LOGICAL = "logical"


# Column type written for each scalar JSON kind.
SCALAR_COLUMN_TYPES = {
    JsonType.STRING: ColumnType.STRING,
    JsonType.NUMBER: ColumnType.NUMBER,
    JsonType.LOGICAL: ColumnType.LOGICAL,
}


class ErrorType(Enum):
    """Enumeration of error types."""
    SYNTAX = "syntax"
    INVARIANT = "invariant"
    RESERVED_COLUMN = "reserved_column"
    COLUMN_NAME = "column_name"
    COLUMN_TYPE = "column_type"
    PATH = "path"
    ARGUMENT = "argument"
    SOURCE = "source"


@dataclass
class ValidationError:
    """Validation error details."""
    type: ErrorType
    message: str
    location: Optional[str] = None


@dataclass
class ValidationResult:
    """Result of input validation."""
    is_valid: bool
    errors: List[ValidationError]
    warnings: List[str] = field(default_factory=list)


@dataclass
class ErrorResponse:
    """Response for error handling."""
    can_recover: bool
    suggested_action: str
    context: Optional[Dict[str, Any]] = None


class ProcessingError(Exception):
    """Raised for invalid calls: the pipeline cannot continue."""

    def __init__(self, message: str, error_type: ErrorType, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.error_type = error_type
        self.context = context

    @classmethod
    def from_validation(cls, result: ValidationResult,
                        context: Optional[Dict[str, Any]] = None) -> "ProcessingError":
        """Build an error from the first failure of a validation result."""
        first = result.errors[0]
        message = "; ".join(error.message for error in result.errors)
        return cls(message, first.type, context)
