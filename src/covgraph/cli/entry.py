"""Definition of the command line interface."""

from __future__ import annotations

import dataclasses
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click

from covgraph import __version__, logger
from covgraph.cli.errors import (
    EXIT_CONFIG,
    EXIT_DATAERR,
    EXIT_GENERIC,
    EXIT_NOINPUT,
    EXIT_OK,
)
from covgraph.config import LOG_FORMAT, ParserSettings, load_settings
from covgraph.errors import CoverageXMLError, CoverageXMLNotFoundError
from covgraph.parser.cobertura import CoberturaParser
from covgraph.render.json import format_json
from covgraph.render.summary import render_summary

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Callable, Sequence

    from covgraph.model.analysis import ParserResult


@dataclasses.dataclass(slots=True)
class CovgraphOptions:
    """Global CLI options shared by all sub-commands."""

    debug: bool = False
    quiet: bool = False
    verbose: bool = False
    config: Path | None = None


def _configure_runtime(*, quiet: bool, verbose: bool, debug: bool) -> None:
    """Configure logging based on *quiet*/*verbose*."""
    level = logging.ERROR if quiet else (logging.DEBUG if verbose else logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    if debug:
        logger.debug("debug mode active")


def _resolve_settings(
    opts: CovgraphOptions,
    *,
    assembly_filters: Sequence[str],
    class_filters: Sequence[str],
    file_filters: Sequence[str],
    workers: int | None,
) -> ParserSettings:
    if opts.config is not None and not opts.config.is_file():
        click.echo(f"ERROR: configuration file not found: {opts.config}", err=True)
        sys.exit(EXIT_CONFIG)
    base = load_settings(opts.config)
    return dataclasses.replace(
        base,
        assembly_filters=(*base.assembly_filters, *assembly_filters),
        class_filters=(*base.class_filters, *class_filters),
        file_filters=(*base.file_filters, *file_filters),
        max_workers=workers if workers is not None else base.max_workers,
    )


def _parse(opts: CovgraphOptions, report: Path, settings: ParserSettings) -> ParserResult:
    parser = CoberturaParser.from_settings(settings)
    try:
        return parser.parse_file(report)
    except CoverageXMLNotFoundError as e:
        click.echo(f"ERROR: {e}", err=True)
        if opts.debug:
            raise
        sys.exit(EXIT_NOINPUT)
    except CoverageXMLError as e:
        click.echo(f"ERROR: failed to read coverage XML (invalid format): {e}", err=True)
        if opts.debug:
            raise
        sys.exit(EXIT_DATAERR)
    except OSError as e:
        click.echo(f"ERROR: failed to read coverage XML: {e}", err=True)
        if opts.debug:
            raise
        sys.exit(EXIT_GENERIC)


def _report_options(fn: Callable[..., None]) -> Callable[..., None]:
    """Options shared by every command that parses a report."""
    decorators = (
        click.argument("report", type=click.Path(path_type=Path)),
        click.option("--assembly-filter", "assembly_filters", multiple=True, help="+Include/-Exclude assemblies"),
        click.option("--class-filter", "class_filters", multiple=True, help="+Include/-Exclude classes"),
        click.option("--file-filter", "file_filters", multiple=True, help="+Include/-Exclude files"),
        click.option("--workers", type=click.IntRange(min=1), help="Threads used per assembly"),
    )
    for decorator in reversed(decorators):
        fn = decorator(fn)
    return fn


# --------------------------------------------------------------------------- #
# CLI - root command group                                                    #
# --------------------------------------------------------------------------- #
@click.group(
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
)
@click.option("--version", is_flag=True, is_eager=True, help="Show the version and exit")
@click.option("--debug", is_flag=True, help="Show full tracebacks for errors")
@click.option("-q", "--quiet", is_flag=True, help="Suppress INFO logs, emit only errors")
@click.option("-v", "--verbose", is_flag=True, help="Emit diagnostic logging")
@click.option(
    "--config",
    type=click.Path(path_type=Path, dir_okay=False),
    help="pyproject.toml to read [tool.covgraph] from",
)
@click.pass_context
def cli(
    ctx: click.Context,
    *,
    version: bool,
    debug: bool,
    quiet: bool,
    verbose: bool,
    config: Path | None,
) -> None:
    """Covgraph - build a coverage model from a Cobertura XML report."""
    ctx.obj = CovgraphOptions(debug=debug, quiet=quiet, verbose=verbose, config=config)
    _configure_runtime(quiet=quiet, verbose=verbose, debug=debug)

    if version:
        click.echo(__version__)
        ctx.exit(EXIT_OK)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# --------------------------------------------------------------------------- #
# Sub-command: summary                                                        #
# --------------------------------------------------------------------------- #
@cli.command()
@_report_options
@click.option("--color", "force_color", is_flag=True, help="Force ANSI color codes in output")
@click.option("--no-color", is_flag=True, help="Disable ANSI color codes in output")
@click.pass_obj
def summary(
    opts: CovgraphOptions,
    *,
    report: Path,
    assembly_filters: Sequence[str],
    class_filters: Sequence[str],
    file_filters: Sequence[str],
    workers: int | None,
    force_color: bool,
    no_color: bool,
) -> None:
    """Print line and branch coverage per class."""
    settings = _resolve_settings(
        opts,
        assembly_filters=assembly_filters,
        class_filters=class_filters,
        file_filters=file_filters,
        workers=workers,
    )
    if force_color and no_color:
        msg = "--color/--no-color"
        raise click.BadOptionUsage(msg, "Cannot combine --color and --no-color")
    result = _parse(opts, report, settings)
    use_color = force_color or (sys.stdout.isatty() and not no_color)
    click.echo(render_summary(result, color=use_color))


# --------------------------------------------------------------------------- #
# Sub-command: dump                                                           #
# --------------------------------------------------------------------------- #
@cli.command()
@_report_options
@click.option("--output", type=click.Path(path_type=Path, dir_okay=False), help="Write JSON to FILE")
@click.pass_obj
def dump(
    opts: CovgraphOptions,
    *,
    report: Path,
    assembly_filters: Sequence[str],
    class_filters: Sequence[str],
    file_filters: Sequence[str],
    workers: int | None,
    output: Path | None,
) -> None:
    """Dump the full coverage model as JSON."""
    settings = _resolve_settings(
        opts,
        assembly_filters=assembly_filters,
        class_filters=class_filters,
        file_filters=file_filters,
        workers=workers,
    )
    text = format_json(_parse(opts, report, settings))
    if output is None:
        click.echo(text)
        return
    output.write_text(text + "\n", encoding="utf-8")
    logger.info("Wrote %s", output)


def main() -> None:
    cli()


__all__ = ["cli", "main"]
