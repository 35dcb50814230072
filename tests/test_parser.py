"""Tests for JSON parser."""

import json
import logging

import pytest

from json_tidy.parser import JSONParser
from json_tidy.types import ErrorType, JsonType, ProcessingError


class TestJSONParser:
    """Tests for JSONParser class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.parser = JSONParser()

    def test_parse_object(self):
        """Test parsing an object document."""
        value = self.parser.parse('{"users": {"alice": {"age": 30}}, "count": 1}')

        assert value.type == JsonType.OBJECT
        assert value.keys() == ("users", "count")
        assert value.get("users").get("alice").get("age").value == 30

    def test_parse_scalar_root(self):
        """Test scalar documents are accepted."""
        assert self.parser.parse('"just a string"').value == "just a string"
        assert self.parser.parse('1.5').value == 1.5
        assert self.parser.parse('null').type == JsonType.NULL

    def test_parse_invalid_json_syntax(self):
        """Test parsing invalid JSON syntax."""
        with pytest.raises(ProcessingError, match="Invalid JSON syntax in document 3") as exc_info:
            self.parser.parse('{"users": {"alice": 1}', document=3)

        assert exc_info.value.error_type == ErrorType.SYNTAX
        assert exc_info.value.context["document"] == 3
        assert exc_info.value.context["line"] == 1

    def test_parse_empty_json(self):
        """Test parsing empty JSON string."""
        with pytest.raises(ProcessingError, match="empty") as exc_info:
            self.parser.parse("   ")

        assert exc_info.value.error_type == ErrorType.SYNTAX

    def test_parse_non_text(self):
        """Test non-string input is rejected."""
        with pytest.raises(ProcessingError) as exc_info:
            self.parser.parse(42)

        assert exc_info.value.error_type == ErrorType.SOURCE

    def test_parse_many(self):
        """Test parsing several documents in order."""
        values = self.parser.parse_many(['[1]', '{"a": 2}', None])

        assert [value.type for value in values] == [JsonType.ARRAY, JsonType.OBJECT, JsonType.NULL]

    def test_parse_many_names_failing_document(self):
        """Test the failing document index is reported."""
        with pytest.raises(ProcessingError, match="document 2"):
            self.parser.parse_many(['[1]', '[1,', '[2]'])

    def test_deep_nesting_warning(self, caplog):
        """Test a warning is logged for very deep documents."""
        data = current = {}
        for _ in range(120):
            current["next"] = {}
            current = current["next"]

        with caplog.at_level(logging.WARNING):
            self.parser.parse(json.dumps(data))

        assert "Deep nesting detected" in caplog.text

    def test_parse_very_deep_array(self):
        """Test documents nested far beyond the warning threshold still parse."""
        value = self.parser.parse("[" * 600 + "]" * 600)

        depth = 1
        while value.length() and value.element(1).is_array:
            value = value.element(1)
            depth += 1
        assert depth == 600

    @pytest.mark.parametrize("text", ["NaN", "[1, Infinity]", '{"a": -Infinity}'])
    def test_parse_non_json_constants(self, text):
        """Test NaN and infinities are syntax errors."""
        with pytest.raises(ProcessingError, match="Invalid JSON syntax in document 4") as exc_info:
            self.parser.parse(text, document=4)

        assert exc_info.value.error_type == ErrorType.SYNTAX
        assert exc_info.value.context["document"] == 4
