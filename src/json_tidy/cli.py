"""Command-line interface for json-tidy."""

import logging
from pathlib import Path
from typing import List, Tuple

import click

from . import __version__
from .error_handler import ErrorHandler
from .paths import jlogical, jnumber, jstring
from .pipeline import Pipeline, PipelineStep
from .types import PathStep, ProcessingError


DESCRIPTORS = {"string": jstring, "number": jnumber, "logical": jlogical}

# Steps that take an optional column name after '='.
NAMED_STEPS = {
    "gather_array": "gather_array",
    "gather_keys": "gather_keys",
    "json_types": "json_types",
    "json_lengths": "json_lengths",
    "json_complexity": "json_complexity",
    "append_string": "append_values_string",
    "append_number": "append_values_number",
    "append_logical": "append_values_logical",
}


def parse_path(text: str) -> Tuple[PathStep, ...]:
    """Split a dotted path; segments of decimal digits are array indices."""
    return tuple(int(part) if part.isdecimal() else part for part in text.split("."))


def parse_step(text: str) -> PipelineStep:
    """
    Parse one --step option.

    Args:
        text: Step such as ``gather_array``, ``enter_object=a.b`` or
            ``spread=price:number:items.1.price``

    Returns:
        PipelineStep for the verb

    Raises:
        click.BadParameter: If the step is malformed
    """
    name, _, argument = text.partition("=")

    if name in NAMED_STEPS:
        return PipelineStep(NAMED_STEPS[name], (argument,) if argument else ())
    if name == "spread_all":
        return PipelineStep("spread_all", (argument,) if argument else ())
    if name == "enter_object":
        if not argument:
            raise click.BadParameter("enter_object needs a key, e.g. enter_object=purchases")
        return PipelineStep("enter_object", tuple(argument.split(".")))
    if name == "types":
        if not argument:
            raise click.BadParameter("types needs a list of JSON types, e.g. types=object,array")
        return PipelineStep("filter_json_types", tuple(argument.split(",")))
    if name == "spread":
        parts = argument.split(":", 2)
        if len(parts) != 3 or parts[1] not in DESCRIPTORS or not parts[0] or not parts[2]:
            raise click.BadParameter(
                f"spread expects NAME:KIND:PATH with KIND one of {', '.join(DESCRIPTORS)}, got {argument!r}"
            )
        column, kind, path = parts
        return PipelineStep("spread_values", kwargs={column: DESCRIPTORS[kind](*parse_path(path))})

    raise click.BadParameter(f"Unknown step {name!r}")


def read_documents(files: Tuple[Path, ...], lines: bool) -> List[str]:
    """Read whole files, or one document per non-blank line."""
    documents = []
    for path in files:
        content = path.read_text(encoding="utf-8")
        if lines:
            documents.extend(line for line in content.splitlines() if line.strip())
        else:
            documents.append(content)
    return documents


def _report_error(error: ProcessingError) -> None:
    response = ErrorHandler().handle_processing_error(error)
    click.echo(f"❌ Error: {error}", err=True)
    click.echo(f"   {response.suggested_action}", err=True)


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def main(verbose: bool):
    """json-tidy - Turn nested JSON documents into tidy tables."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )


@main.command()
@click.argument('files', nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--lines', '-l', is_flag=True, help='Treat each line as a separate JSON document')
@click.option('--step', '-s', 'steps', multiple=True, help='Verb to apply, in order (repeatable)')
@click.option('--format', '-f', 'output_format', type=click.Choice(['table', 'csv']), default='table',
              help='Output format (default: table)')
@click.option('--profile', is_flag=True, help='Print timing and memory per step')
def flatten(files: Tuple[Path, ...], lines: bool, steps: Tuple[str, ...], output_format: str, profile: bool):
    """Apply verbs to JSON documents and print the resulting table."""
    try:
        pipeline = Pipeline([parse_step(step) for step in steps], profile=profile)
    except click.BadParameter as e:
        raise click.BadParameter(str(e.message), param_hint="'--step'") from None
    except ProcessingError as e:
        _report_error(e)
        raise click.exceptions.Exit(1)

    try:
        result = pipeline.run(read_documents(files, lines))
    except ProcessingError as e:
        _report_error(e)
        raise click.exceptions.Exit(1)

    df = result.to_dataframe()
    if output_format == 'csv':
        click.echo(df.to_csv(index=False), nl=False)
    else:
        click.echo(df.to_string(index=False))

    if pipeline.profiler is not None:
        click.echo(pipeline.profiler.export_metrics("summary"), err=True)


@main.command()
@click.argument('files', nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--lines', '-l', is_flag=True, help='Treat each line as a separate JSON document')
def types(files: Tuple[Path, ...], lines: bool):
    """Print the JSON type and length of each document."""
    pipeline = Pipeline().then("json_types").then("json_lengths")
    try:
        result = pipeline.run(read_documents(files, lines))
    except ProcessingError as e:
        _report_error(e)
        raise click.exceptions.Exit(1)
    click.echo(result.to_dataframe().to_string(index=False))


if __name__ == '__main__':
    main()
