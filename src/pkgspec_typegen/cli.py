"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys

import click

from pkgspec_typegen.configuration import (
    DEFAULT_CONFIG_FILENAME,
    write_placeholder_configuration,
)
from pkgspec_typegen.run_execution import (
    GenerationRequest,
    GenerationRunError,
    execute_generation_run,
)


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="pkgspec-typegen")
def cli() -> None:
    """Package-spec JSON Schema type graph resolver."""


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML generator configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML generator configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="resolve")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to YAML/JSON generator configuration file",
)
@click.option(
    "--output",
    "output_path",
    required=False,
    type=click.Path(path_type=str),
    help="Optional path for a JSON description of the resolved type graph",
)
@click.option(
    "--verbose",
    is_flag=True,
    default=False,
    help="Log resolution details to stderr.",
)
def resolve(config_path: str, output_path: str | None, verbose: bool) -> None:
    """Resolve the configured schemas into an augmented, validated type graph."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    try:
        outcome = execute_generation_run(
            GenerationRequest(config_path=config_path, output_path=output_path)
        )
    except GenerationRunError as exc:
        raise CliError(str(exc)) from exc
    click.echo(f"resolved {len(outcome.nodes)} types (package-spec {outcome.spec_version})")
    if outcome.output_path is not None:
        click.echo(str(outcome.output_path))


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
