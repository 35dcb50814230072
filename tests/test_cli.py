"""Tests for the command-line interface."""

import click
import pytest
from click.testing import CliRunner

from json_tidy import __version__
from json_tidy.cli import main, parse_path, parse_step
from json_tidy.paths import PathDescriptor
from json_tidy.types import JsonType


class TestParseStep:
    """Tests for step parsing."""

    def test_named_steps(self):
        """Test steps with optional column names."""
        assert parse_step("gather_array").verb == "gather_array"
        assert parse_step("gather_array").args == ()
        assert parse_step("gather_keys=field").args == ("field",)
        assert parse_step("append_number=n").verb == "append_values_number"

    def test_enter_object(self):
        """Test dotted keys become separate arguments."""
        step = parse_step("enter_object=a.b")

        assert step.verb == "enter_object"
        assert step.args == ("a", "b")

    def test_types(self):
        """Test type filters."""
        step = parse_step("types=object,array")

        assert step.verb == "filter_json_types"
        assert step.args == ("object", "array")

    def test_spread(self):
        """Test spread steps build path descriptors."""
        step = parse_step("spread=price:number:items.1.price")
        descriptor = step.kwargs["price"]

        assert step.verb == "spread_values"
        assert isinstance(descriptor, PathDescriptor)
        assert descriptor.kind == JsonType.NUMBER
        assert descriptor.path == ("items", 1, "price")

    @pytest.mark.parametrize("text", [
        "explode",
        "enter_object",
        "types",
        "spread=price:float:items",
        "spread=price:number",
        "spread=:number:price",
    ])
    def test_malformed_steps(self, text):
        """Test malformed steps are rejected."""
        with pytest.raises(click.BadParameter):
            parse_step(text)

    def test_parse_path(self):
        """Test digit segments become indices."""
        assert parse_path("a.2.b") == ("a", 2, "b")
        assert parse_path("a.\u00b2") == ("a", "\u00b2")
        assert parse_path("10") == (10,)


class TestCLI:
    """Tests for the json-tidy commands."""

    def setup_method(self):
        """Set up test fixtures."""
        self.runner = CliRunner()

    def test_version(self):
        """Test --version."""
        result = self.runner.invoke(main, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_flatten_csv(self, json_file):
        """Test flattening to CSV."""
        result = self.runner.invoke(main, [
            "flatten", str(json_file),
            "-s", "gather_array",
            "-s", "spread=name:string:name",
            "-f", "csv",
        ])

        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines == [
            "document.id,array.index,name",
            "1,1,alice",
            "1,2,bob",
        ]

    def test_flatten_table(self, json_file):
        """Test the default table output."""
        result = self.runner.invoke(main, [
            "flatten", str(json_file),
            "--step", "gather_array=person",
            "--step", "spread=pet:string:pets.1",
        ])

        assert result.exit_code == 0
        header = result.output.splitlines()[0].split()
        assert header == ["document.id", "person", "pet"]
        assert "cat" in result.output

    def test_flatten_lines(self, json_lines_file):
        """Test one document per line, skipping blank lines."""
        result = self.runner.invoke(main, [
            "flatten", "--lines", str(json_lines_file),
            "-s", "json_types", "-f", "csv",
        ])

        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "document.id,type",
            "1,object",
            "2,array",
            "3,string",
        ]

    def test_flatten_profile(self, json_file):
        """Test profiling output."""
        result = self.runner.invoke(main, [
            "flatten", str(json_file), "-s", "gather_array", "--profile",
        ])

        assert result.exit_code == 0
        assert "Performance Summary" in result.output

    def test_flatten_bad_step(self, json_file):
        """Test malformed steps are usage errors."""
        result = self.runner.invoke(main, ["flatten", str(json_file), "-s", "explode"])

        assert result.exit_code == 2
        assert "explode" in result.output

    def test_flatten_malformed_json(self, tmp_path):
        """Test malformed documents exit with status 1."""
        path = tmp_path / "broken.json"
        path.write_text('{"a": ', encoding="utf-8")

        result = self.runner.invoke(main, ["flatten", str(path)])

        assert result.exit_code == 1
        assert "Error" in result.output
        assert "document 1" in result.output

    def test_flatten_missing_file(self, tmp_path):
        """Test missing files are rejected by click."""
        result = self.runner.invoke(main, ["flatten", str(tmp_path / "nope.json")])

        assert result.exit_code == 2

    def test_types_command(self, json_lines_file):
        """Test the types command."""
        result = self.runner.invoke(main, ["types", "-l", str(json_lines_file)])

        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[0].split() == ["document.id", "type", "length"]
        assert lines[2].split() == ["2", "array", "2"]
