"""Error handling implementation for json-tidy."""

import logging
from typing import Any, Dict, Optional, Sequence

from .types import (
    ErrorResponse,
    ErrorType,
    PathStep,
    ProcessingError,
    ValidationError,
    ValidationResult,
)
from .utils.validation import ValidationUtils


class ErrorHandler:
    """
    Error handler for json-tidy operations.

    Validates the arguments that verbs and the parser receive, turns failed
    validations into ``ProcessingError`` and suggests a fix for errors that
    reach the command line.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the error handler.

        Args:
            logger: Optional logger instance for error reporting
        """
        self.logger = logger or logging.getLogger(__name__)

    def validate_input(self, input_data: Any) -> ValidationResult:
        """
        Validate one input JSON document.

        Args:
            input_data: JSON text to validate

        Returns:
            ValidationResult with validation details
        """
        return ValidationUtils.validate_json_string(input_data)

    def validate_column_name(self, name: Any, allow_reserved: bool = False) -> ValidationResult:
        """Validate a column name a verb is going to write."""
        return ValidationUtils.validate_column_name(name, allow_reserved)

    def validate_path(self, path: Sequence[PathStep]) -> ValidationResult:
        """Validate a key/index path, logging any warnings."""
        result = ValidationUtils.validate_path(path)
        for warning in result.warnings:
            self.logger.warning(warning)
        return result

    def require(self, result: ValidationResult, context: Optional[Dict[str, Any]] = None) -> None:
        """
        Raise if a validation failed.

        Args:
            result: Validation outcome
            context: Extra details attached to the raised error

        Raises:
            ProcessingError: If ``result`` is not valid
        """
        if not result.is_valid:
            error = ProcessingError.from_validation(result, context)
            self.logger.error(f"Invalid call: {error.error_type.value} - {error}")
            raise error

    def handle_processing_error(self, error: ProcessingError) -> ErrorResponse:
        """
        Map a processing error to a suggested action.

        Args:
            error: ProcessingError to handle

        Returns:
            ErrorResponse with recovery information
        """
        self.logger.error(f"Processing error: {error.error_type.value} - {error}")

        if error.error_type == ErrorType.SYNTAX:
            document = (error.context or {}).get("document")
            where = f"document {document}" if document else "the input"
            return ErrorResponse(
                can_recover=True,
                suggested_action=f"Fix the JSON syntax of {where} and run again. "
                                 "Use --lines when the file holds one document per line.",
                context=error.context
            )
        elif error.error_type == ErrorType.RESERVED_COLUMN:
            return ErrorResponse(
                can_recover=True,
                suggested_action="Choose another column name; 'document.id' is reserved.",
                context=error.context
            )
        elif error.error_type in (ErrorType.PATH, ErrorType.COLUMN_NAME, ErrorType.ARGUMENT):
            return ErrorResponse(
                can_recover=True,
                suggested_action="Check the step arguments: paths need at least one key "
                                 "or index and column names must be non-empty.",
                context=error.context
            )
        elif error.error_type == ErrorType.SOURCE:
            return ErrorResponse(
                can_recover=True,
                suggested_action="Pass JSON text, a list of JSON texts, or a table together "
                                 "with the name of its JSON column.",
                context=error.context
            )
        else:
            return ErrorResponse(
                can_recover=False,
                suggested_action="Internal consistency check failed. Please check logs and report the issue.",
                context=error.context
            )

    @staticmethod
    def syntax_error(message: str, location: str) -> ValidationResult:
        """Build a failed validation result for a JSON syntax problem."""
        return ValidationResult(
            is_valid=False,
            errors=[ValidationError(type=ErrorType.SYNTAX, message=message, location=location)]
        )
