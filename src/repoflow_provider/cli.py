"""repoflow-provider CLI.

Reads repoflow data sources from the command line and prints the resulting
state and diagnostics.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from . import __version__
from .client import RepoflowClient, check_connection
from .config import ProviderConfig
from .datasources import REPOSITORY_SCHEMA, WORKSPACE_SCHEMA, ReadResponse, Schema
from .diagnostics import Severity
from .errors import ConfigError, RepoflowAPIError
from .registry import DEFAULT_PROVIDER_TYPE_NAME, ReaderRegistry, build_registry
from .utils.errors import (
    classify_exception,
    error_not_configured,
    format_error,
    handle_exception,
    is_debug_mode,
    set_debug_mode,
)

console = Console()

SCHEMAS: dict[str, Schema] = {
    f"{DEFAULT_PROVIDER_TYPE_NAME}_workspace": WORKSPACE_SCHEMA,
    f"{DEFAULT_PROVIDER_TYPE_NAME}_repository": REPOSITORY_SCHEMA,
}


def _setup_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _get_registry() -> ReaderRegistry:
    """Build the reader registry from the loaded configuration.

    Exits with an error when repoflow is not configured.
    """
    try:
        config = ProviderConfig.load()
    except ConfigError as e:
        handle_exception(console, e, "loading configuration", exit_on_error=False)
        sys.exit(1)

    if config is None:
        format_error(error_not_configured(), console)
        sys.exit(1)

    return build_registry(RepoflowClient.from_config(config))


def _parse_settings(settings: tuple[str, ...]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for item in settings:
        if "=" not in item:
            raise click.BadParameter(f"expected key=value, got {item!r}", param_hint="--set")
        key, value = item.split("=", 1)
        values[key.strip()] = value
    return values


def _format_value(value: Any) -> str:
    if value is None:
        return "[dim]null[/dim]"
    if isinstance(value, list):
        return escape("[" + ", ".join(str(v) for v in value) + "]")
    if isinstance(value, bool):
        return "true" if value else "false"
    return escape(str(value))


def _print_response(type_name: str, response: ReadResponse[Any], as_json: bool) -> None:
    """Print a read response and exit non-zero if it carries errors."""
    state = response.state.to_dict() if response.state is not None else None

    if as_json:
        click.echo(
            json.dumps(
                {
                    "type": type_name,
                    "state": state,
                    "diagnostics": response.diagnostics.to_list(),
                },
                indent=2,
            )
        )
    else:
        if state is not None:
            console.print(f"[bold cyan]{type_name}[/bold cyan]")
            width = max(len(k) for k in state)
            for key, value in state.items():
                console.print(f"  {key.ljust(width)}  {_format_value(value)}")

        for diag in response.diagnostics:
            color = "red" if diag.severity is Severity.ERROR else "yellow"
            label = diag.severity.value.capitalize()
            console.print(f"[bold {color}]{label}:[/bold {color}] {escape(diag.summary)}")
            if diag.detail:
                console.print(f"  [dim]{escape(diag.detail)}[/dim]")
            if is_debug_mode() and diag.error is not None:
                format_error(classify_exception(diag.error, diag.summary), console)

    if response.diagnostics.has_error():
        sys.exit(1)


@click.group(invoke_without_command=True)
@click.option("--version", "-v", is_flag=True, help="Show version and exit")
@click.option("--debug", "-d", is_flag=True, help="Enable debug logging and stack traces")
@click.pass_context
def main(ctx: click.Context, version: bool, debug: bool) -> None:
    """repoflow-provider - read repoflow workspaces and repositories."""
    _setup_logging(debug)
    if debug:
        set_debug_mode(True)

    if version:
        console.print(f"repoflow-provider version {__version__}")
        return

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@main.command()
@click.argument("type_name")
@click.option("--config", "config_json", help="Configuration as a JSON object")
@click.option("--set", "settings", multiple=True, help="Configuration value as key=value")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def read(type_name: str, config_json: str | None, settings: tuple[str, ...], as_json: bool) -> None:
    """Read a data source.

    \\b
    Examples:
        repoflow-provider read repoflow_workspace --set name=acme
        repoflow-provider read repoflow_repository --config '{"workspace": "acme", "name": "libs"}'
    """
    config: dict[str, Any] = {}
    if config_json:
        try:
            config = json.loads(config_json)
        except json.JSONDecodeError as e:
            raise click.BadParameter(f"invalid JSON: {e}", param_hint="--config") from e
        if not isinstance(config, dict):
            raise click.BadParameter("expected a JSON object", param_hint="--config")
    config.update(_parse_settings(settings))

    registry = _get_registry()
    try:
        reader = registry.get(type_name)
    except KeyError as e:
        console.print(f"[red]{escape(e.args[0])}[/red]")
        sys.exit(1)

    _print_response(type_name, reader.read(config), as_json)


@main.command()
@click.argument("name")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def workspace(name: str, as_json: bool) -> None:
    """Resolve a workspace by name."""
    type_name = f"{DEFAULT_PROVIDER_TYPE_NAME}_workspace"
    registry = _get_registry()
    _print_response(type_name, registry.read(type_name, {"name": name}), as_json)


@main.command()
@click.argument("workspace_ref", metavar="WORKSPACE")
@click.argument("name")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def repository(workspace_ref: str, name: str, as_json: bool) -> None:
    """Resolve a repository of WORKSPACE (name or id) by name."""
    type_name = f"{DEFAULT_PROVIDER_TYPE_NAME}_repository"
    registry = _get_registry()
    response = registry.read(type_name, {"workspace": workspace_ref, "name": name})
    _print_response(type_name, response, as_json)


@main.command()
@click.argument("type_name", required=False)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def schema(type_name: str | None, as_json: bool) -> None:
    """Show data source schemas."""
    if type_name is not None and type_name not in SCHEMAS:
        console.print(f"[red]Unknown data source: {type_name}[/red]")
        console.print(f"[dim]Available: {', '.join(sorted(SCHEMAS))}[/dim]")
        sys.exit(1)

    selected = {type_name: SCHEMAS[type_name]} if type_name else SCHEMAS

    if as_json:
        click.echo(json.dumps({k: v.to_dict() for k, v in selected.items()}, indent=2))
        return

    for name, data_schema in selected.items():
        console.print(f"[bold cyan]{name}[/bold cyan] [dim]{data_schema.description}[/dim]")
        for attr in data_schema.attributes:
            mode = "required" if attr.required else "computed"
            console.print(
                f"  {attr.name:<40} {attr.type.value:<14} [dim]{mode}[/dim]  {attr.description}"
            )
        console.print()


@main.command()
def check() -> None:
    """Check the connection to the repoflow server."""
    try:
        config = ProviderConfig.load()
    except ConfigError as e:
        handle_exception(console, e, "loading configuration", exit_on_error=False)
        sys.exit(1)

    if config is None:
        format_error(error_not_configured(), console)
        sys.exit(1)

    try:
        check_connection(config)
    except RepoflowAPIError as e:
        handle_exception(console, e, "repoflow connection check", exit_on_error=False)
        sys.exit(1)

    console.print(f"[green]✓ Connected to {config.base_url}[/green]")


if __name__ == "__main__":
    main()
