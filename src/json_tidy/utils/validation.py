"""Validation utilities for documents, column names and paths."""

from typing import Any, Iterable, List, Sequence

from ..types import (
    DOCUMENT_ID,
    ColumnType,
    ErrorType,
    PathStep,
    ValidationError,
    ValidationResult,
)


class ValidationUtils:
    """Utility class for validating verb arguments and input documents."""

    @staticmethod
    def validate_json_string(json_string: Any) -> ValidationResult:
        """
        Check that a document is non-empty text before it is handed to the parser.

        Args:
            json_string: Candidate JSON document

        Returns:
            ValidationResult with validation details
        """
        errors = []

        if not isinstance(json_string, str):
            errors.append(ValidationError(
                type=ErrorType.SOURCE,
                message=f"JSON document must be text, got {type(json_string).__name__}",
                location="input"
            ))
        elif not json_string.strip():
            errors.append(ValidationError(
                type=ErrorType.SYNTAX,
                message="JSON string is empty",
                location="input"
            ))

        return ValidationResult(is_valid=len(errors) == 0, errors=errors)

    @staticmethod
    def validate_column_name(name: Any, allow_reserved: bool = False) -> ValidationResult:
        """
        Validate a column name a verb is about to write.

        Args:
            name: Column name
            allow_reserved: Whether ``document.id`` may be written

        Returns:
            ValidationResult with validation details
        """
        errors = []

        if not isinstance(name, str) or not name:
            errors.append(ValidationError(
                type=ErrorType.COLUMN_NAME,
                message=f"Column name must be a non-empty string, got {name!r}",
                location="column_name"
            ))
        elif name == DOCUMENT_ID and not allow_reserved:
            errors.append(ValidationError(
                type=ErrorType.RESERVED_COLUMN,
                message=f"Column '{DOCUMENT_ID}' is reserved and cannot be overwritten",
                location="column_name"
            ))

        return ValidationResult(is_valid=len(errors) == 0, errors=errors)

    @staticmethod
    def validate_path(path: Sequence[PathStep]) -> ValidationResult:
        """
        Validate a key/index path.

        Steps must be strings (object keys) or integers (1-based array indices).

        Args:
            path: Sequence of path steps

        Returns:
            ValidationResult with validation details
        """
        errors = []
        warnings = []

        if len(path) == 0:
            errors.append(ValidationError(
                type=ErrorType.PATH,
                message="Path must contain at least one step",
                location="path"
            ))
            return ValidationResult(is_valid=False, errors=errors, warnings=warnings)

        for position, step in enumerate(path, start=1):
            if isinstance(step, bool) or not isinstance(step, (str, int)):
                errors.append(ValidationError(
                    type=ErrorType.PATH,
                    message=f"Path step {position} must be a key or an integer index, "
                            f"got {type(step).__name__}",
                    location=f"path[{position}]"
                ))
            elif isinstance(step, int) and step < 1:
                # Still valid: the lookup simply never matches.
                warnings.append(f"Path step {position} is index {step}; array indices start at 1")

        return ValidationResult(is_valid=len(errors) == 0, errors=errors, warnings=warnings)

    @staticmethod
    def validate_column_values(dtype: ColumnType, values: Iterable[Any]) -> ValidationResult:
        """
        Check that every non-missing cell fits the declared column type.

        Args:
            dtype: Declared column type
            values: Column cells

        Returns:
            ValidationResult listing the first few offending rows
        """
        errors: List[ValidationError] = []

        for row, value in enumerate(values, start=1):
            if value is None or ValidationUtils.cell_matches(dtype, value):
                continue
            errors.append(ValidationError(
                type=ErrorType.COLUMN_TYPE,
                message=f"Row {row}: {value!r} is not a valid {dtype.value} cell",
                location=f"row {row}"
            ))
            if len(errors) >= 5:
                break

        return ValidationResult(is_valid=len(errors) == 0, errors=errors)

    @staticmethod
    def cell_matches(dtype: ColumnType, value: Any) -> bool:
        """Check a single non-missing cell against a column type."""
        if dtype is ColumnType.STRING:
            return isinstance(value, str)
        if dtype is ColumnType.LOGICAL:
            return isinstance(value, bool)
        if isinstance(value, bool):
            return False
        if dtype is ColumnType.INTEGER:
            return isinstance(value, int)
        return isinstance(value, (int, float))

    @staticmethod
    def calculate_max_depth(data: Any, current_depth: int = 0) -> int:
        """Calculate maximum nesting depth of decoded JSON data."""
        max_depth = current_depth
        stack = [(data, current_depth)]
        while stack:
            node, depth = stack.pop()
            max_depth = max(max_depth, depth)
            if isinstance(node, dict):
                stack.extend((child, depth + 1) for child in node.values())
            elif isinstance(node, list):
                stack.extend((child, depth + 1) for child in node)
        return max_depth
