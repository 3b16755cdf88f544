"""Click CLI interface definitions.

Defines the command-line interface structure and routes commands
to their respective runners.
"""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import click
from dotenv import load_dotenv

from ConceptSearch.backends import supported_backend_names
from ConceptSearch.cli.runner import CommandRunner
from ConceptSearch.config import AppConfig, load_raw_config, parse_config_dict, with_backend, with_display_limit

DEFAULT_CONFIG_PATH = Path("config/default.yml")


@click.group(help="ConceptSearch: import concepts into a search backend and query them.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help="Path to YAML config file, merged over config/default.yml when that exists.",
)
@click.option(
    "--backend",
    "backend_name",
    type=click.Choice(supported_backend_names()),
    default=None,
    help="Override backend.name from the config.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path, backend_name: str | None) -> None:
    """CLI entry group.

    Loads environment variables from .env file. The config itself is parsed
    by each command once its arguments are known to be present.
    """
    load_dotenv()
    ctx.obj = (config_path, backend_name)


@cli.command("create")
@click.argument("source", required=False)
@click.option("--probe", default=None, help="Query to run once the import has finished.")
@click.pass_context
def create_cmd(ctx: click.Context, source: str | None, probe: str | None) -> None:
    """Import concepts from SOURCE (file path or URL), replacing the collection."""
    if not source:
        _usage_error(ctx, "Please provide file or URL to import.")
    runner = CommandRunner(_load_config(ctx))
    runner.run_create(action=ctx.command.name, source=source, probe=probe)


@cli.command("search")
@click.argument("query", required=False)
@click.option("--limit", type=click.IntRange(min=1), default=None, help="Number of hits to print.")
@click.pass_context
def search_cmd(ctx: click.Context, query: str | None, limit: int | None) -> None:
    """Search the collection for QUERY and print the best hits."""
    if not query:
        _usage_error(ctx, "Please provide a search query.")
    cfg = _load_config(ctx)
    if limit is not None:
        cfg = with_display_limit(cfg, limit)
    runner = CommandRunner(cfg)
    runner.run_search(action=ctx.command.name, query=query)


def _load_config(ctx: click.Context) -> AppConfig:
    config_path, backend_name = ctx.obj
    default_path = DEFAULT_CONFIG_PATH if DEFAULT_CONFIG_PATH.exists() else config_path
    try:
        raw = load_raw_config(config_path, default_path=default_path)
        if backend_name:
            raw = with_backend(raw, backend_name)
        return parse_config_dict(raw)
    except (OSError, TypeError, ValueError) as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e


def _usage_error(ctx: click.Context, message: str) -> NoReturn:
    click.echo(ctx.get_usage(), err=True)
    click.echo(f"Error: {message}", err=True)
    ctx.exit(1)
