"""JSON parser adapter producing JsonValue trees."""

import json
import logging
from typing import Any, Iterable, List, Optional

from .error_handler import ErrorHandler
from .json_value import JsonValue
from .utils.validation import ValidationUtils


MAX_NESTING_DEPTH = 100


class JSONParser:
    """
    Parses JSON text into immutable ``JsonValue`` trees.

    Decoding itself is delegated to the standard ``json`` module; this class
    adds per-document validation and error reporting that names the failing
    document.
    """

    def __init__(self, error_handler: Optional[ErrorHandler] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the JSON parser.

        Args:
            error_handler: Optional ErrorHandler instance
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.error_handler = error_handler or ErrorHandler(self.logger)

    def parse(self, json_string: str, document: int = 1) -> JsonValue:
        """
        Parse one JSON document.

        Args:
            json_string: JSON text
            document: 1-based index of the document, used in error messages

        Returns:
            JsonValue for the document root

        Raises:
            ProcessingError: If the text is empty, not a string or not valid JSON
        """
        context = {"document": document}
        self.error_handler.require(self.error_handler.validate_input(json_string), context)

        def reject_constant(name: str) -> None:
            # NaN, Infinity and -Infinity are accepted by json.loads but are not JSON
            self.error_handler.require(
                ErrorHandler.syntax_error(
                    f"Invalid JSON syntax in document {document}: {name} is not a JSON value",
                    "input"
                ),
                {**context, "constant": name}
            )

        try:
            data = json.loads(json_string, parse_constant=reject_constant)
        except json.JSONDecodeError as e:
            context.update({"line": e.lineno, "column": e.colno})
            self.error_handler.require(
                ErrorHandler.syntax_error(
                    f"Invalid JSON syntax in document {document}: {e.msg}",
                    f"line {e.lineno}, column {e.colno}"
                ),
                context
            )

        depth = ValidationUtils.calculate_max_depth(data)
        if depth > MAX_NESTING_DEPTH:
            self.logger.warning(f"Deep nesting detected in document {document} (depth: {depth})")

        return JsonValue.from_python(data)

    def parse_many(self, json_strings: Iterable[Any]) -> List[JsonValue]:
        """
        Parse a sequence of JSON documents.

        ``None`` entries stand for absent documents and become JSON null.

        Args:
            json_strings: JSON texts in document order

        Returns:
            One JsonValue per input document
        """
        documents = []
        for document, json_string in enumerate(json_strings, start=1):
            if json_string is None:
                documents.append(JsonValue.null())
            else:
                documents.append(self.parse(json_string, document))

        self.logger.info(f"Parsed {len(documents)} JSON documents")
        return documents
