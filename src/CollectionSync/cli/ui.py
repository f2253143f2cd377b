"""Click CLI interface definitions.

Defines the command-line interface structure and routes commands
to the runner.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import click
from dotenv import load_dotenv

from CollectionSync.cli.commands import SyncCommand, build_query
from CollectionSync.cli.runner import CommandRunner
from CollectionSync.config import load_config, load_config_with_defaults
from CollectionSync.config.app import DEFAULT_CONFIG_PATH

_WHERE_OPTION = click.option(
    "--where",
    "where",
    type=(str, str, str),
    multiple=True,
    metavar="KEY OP VALUE",
    help="Filter, e.g. --where age gt 30 or --where name not.like 'A*'.",
)


@click.group(help="CollectionSync: query and synchronize REST collections.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help="Path to YAML config file, merged over the default config.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path) -> None:
    """CLI entry group.

    Loads environment variables from .env file before processing config. The
    config file is merged over the default config when that file exists.
    """
    load_dotenv()
    if DEFAULT_CONFIG_PATH.exists():
        ctx.obj = load_config_with_defaults(config_path)
    else:
        ctx.obj = load_config(config_path)


def _echo_json(payload: Any) -> None:
    click.echo(json.dumps(payload, ensure_ascii=False, indent=2, default=str))


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


@cli.command("read")
@click.argument("model_name")
@_WHERE_OPTION
@click.option("--order", "order", multiple=True, help="Ordering token such as name.asc.")
@click.option("--limit", type=click.IntRange(min=0), default=None)
@click.option("--offset", type=click.IntRange(min=0), default=None)
@click.pass_context
def read_cmd(ctx: click.Context, model_name: str, where, order, limit, offset) -> None:
    """Read MODEL_NAME records and print the collection as JSON."""
    def operation(command: SyncCommand):
        query = build_query(command.service.model, where=where, order=order, limit=limit, offset=offset)
        return command.read(query)

    instances = CommandRunner(ctx.obj).run(ctx.command.name, model_name, operation)
    _echo_json(dict(instances))


@cli.command("create")
@click.argument("model_name")
@click.option("--data", "data_path", type=click.Path(path_type=Path, dir_okay=False, exists=True), required=True)
@click.pass_context
def create_cmd(ctx: click.Context, model_name: str, data_path: Path) -> None:
    """Create MODEL_NAME records from a JSON file (object or array)."""
    payload = _read_json(data_path)
    objects = payload if isinstance(payload, list) else [payload]
    instances = CommandRunner(ctx.obj).run(ctx.command.name, model_name, lambda command: command.create(objects))
    _echo_json(dict(instances))


@cli.command("update")
@click.argument("model_name")
@click.option("--data", "data_path", type=click.Path(path_type=Path, dir_okay=False, exists=True), required=True)
@_WHERE_OPTION
@click.pass_context
def update_cmd(ctx: click.Context, model_name: str, data_path: Path, where) -> None:
    """Update MODEL_NAME records matching the filters with a JSON object."""
    data = _read_json(data_path)

    def operation(command: SyncCommand):
        return command.update(data, build_query(command.service.model, where=where))

    instances = CommandRunner(ctx.obj).run(ctx.command.name, model_name, operation)
    _echo_json(dict(instances))


@cli.command("delete")
@click.argument("model_name")
@_WHERE_OPTION
@click.pass_context
def delete_cmd(ctx: click.Context, model_name: str, where) -> None:
    """Delete MODEL_NAME records matching the filters and print their keys."""
    def operation(command: SyncCommand):
        return command.delete(build_query(command.service.model, where=where))

    removed = CommandRunner(ctx.obj).run(ctx.command.name, model_name, operation)
    _echo_json({"deleted": removed})
