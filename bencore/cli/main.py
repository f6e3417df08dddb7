"""CLI for bencore.

Provides:
- ``decode``: decode a bencoded file and show it as a tree or JSON
- ``command``: build and read command protocol lines
- ``config``: show the effective configuration
"""

from __future__ import annotations

import json
import logging
from typing import Any

import click
from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from bencore.cli.verbosity import VerbosityManager
from bencore.config.config import ConfigManager, init_config
from bencore.core.bencode import decode
from bencore.core.values import Dictionary, Integer, List, Text, Value
from bencore.models import MAX_DEPTH_LIMIT, DuplicateKeyPolicy
from bencore.protocols.command import deserialize, parse, serialize
from bencore.utils.exceptions import (
    BencodeDecodeError,
    CommandError,
    ConfigurationError,
)
from bencore.utils.logging_config import LoggingContext, setup_logging

logger = logging.getLogger(__name__)


def _display_bytes(raw: bytes) -> str:
    """Show UTF-8 payloads as text, anything else as hex."""
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return f"0x{raw.hex()}"


def _jsonable(value: Value) -> Any:
    """Convert a value tree to JSON-compatible objects."""
    if isinstance(value, Text):
        return _display_bytes(value.value)
    if isinstance(value, Integer):
        return value.value
    if isinstance(value, List):
        return [_jsonable(item) for item in value]
    if isinstance(value, Dictionary):
        return {_display_bytes(key): _jsonable(item) for key, item in value.items()}
    msg = f"Unknown value type: {type(value).__name__}"
    raise TypeError(msg)


def _label(value: Value, prefix: str = "") -> str:
    if isinstance(value, Text):
        body = f"[green]{escape(repr(_display_bytes(value.value)))}[/green]"
        summary = f"text, {len(value)} bytes"
    elif isinstance(value, Integer):
        body = f"[cyan]{value.value}[/cyan]"
        summary = "integer"
    elif isinstance(value, List):
        body = "[bold]list[/bold]"
        summary = f"{len(value)} items"
    else:
        body = "[bold]dictionary[/bold]"
        summary = f"{len(value)} keys"
    return f"{prefix}{body} [dim]({summary})[/dim]"


def _add_children(node: Tree, value: Value) -> None:
    if isinstance(value, List):
        for index, item in enumerate(value):
            child = node.add(_label(item, f"[dim]{index}:[/dim] "))
            _add_children(child, item)
    elif isinstance(value, Dictionary):
        for key, item in value.items():
            prefix = f"[yellow]{escape(_display_bytes(key))}[/yellow]: "
            child = node.add(_label(item, prefix))
            _add_children(child, item)


def build_tree(value: Value) -> Tree:
    """Build a Rich tree for a decoded value."""
    tree = Tree(_label(value))
    _add_children(tree, value)
    return tree


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    help="Configuration file path",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v: info, -vv: debug)",
)
@click.pass_context
def cli(ctx, config, verbose):
    """bencore - bencode decoder and command protocol tools."""
    ctx.ensure_object(dict)
    ctx.obj["config"] = config

    verbosity_manager = VerbosityManager.from_count(verbose)
    ctx.obj["verbosity_manager"] = verbosity_manager

    try:
        config_manager = init_config(config)
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e
    ctx.obj["config_manager"] = config_manager

    setup_logging(
        config_manager.config.observability,
        level=verbosity_manager.logging_level if verbose else None,
    )


@cli.command("decode")
@click.argument("source", type=click.File("rb"), default="-")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["tree", "json"]),
    default="tree",
    show_default=True,
    help="Output format",
)
@click.option(
    "--strict/--no-strict",
    default=None,
    help="Reject bytes after the top-level value",
)
@click.option(
    "--max-depth",
    type=click.IntRange(min=1, max=MAX_DEPTH_LIMIT),
    default=None,
    help="Maximum nesting of lists and dictionaries",
)
@click.option(
    "--reject-duplicates",
    is_flag=True,
    help="Fail on repeated dictionary keys instead of keeping the last one",
)
@click.pass_context
def decode_cmd(ctx, source, output_format, strict, max_depth, reject_duplicates):
    """Decode a bencoded FILE (or stdin) and print it."""
    data = source.read()
    duplicate_keys = DuplicateKeyPolicy.REJECT if reject_duplicates else None

    try:
        with LoggingContext(
            "decode",
            logger=logger,
            failure_level=logging.DEBUG,
            source=source.name,
            size=len(data),
        ):
            value = decode(
                data,
                strict=strict,
                max_depth=max_depth,
                duplicate_keys=duplicate_keys,
            )
    except BencodeDecodeError as e:
        err_console = Console(stderr=True)
        err_console.print(
            f"[red]Error ({e.kind.value}, {e.context.value} at byte {e.position}): "
            f"{escape(e.message)}[/red]"
        )
        ctx.exit(1)

    if output_format == "json":
        click.echo(json.dumps(_jsonable(value), indent=2, ensure_ascii=False))
    else:
        Console().print(build_tree(value))


@cli.group("command")
def command_group():
    """Command protocol tools."""


@command_group.command(
    "run",
    context_settings={"ignore_unknown_options": True},
)
@click.argument("args", nargs=-1, required=True, type=click.UNPROCESSED)
def command_run(args):
    """Build a command from ARGS and print its wire line."""
    try:
        command = parse(list(args))
    except CommandError as e:
        raise click.ClickException(e.message) from e
    click.echo(serialize(command), nl=False)


@command_group.command("read")
@click.argument("line")
def command_read(line):
    """Read a command wire LINE, execute it and print the result."""
    try:
        command = deserialize(line)
    except CommandError as e:
        raise click.ClickException(e.message) from e
    result = command.execute()
    click.echo(json.dumps({"command": command.name, "result": result}))


@cli.group("config")
def config_group():
    """Configuration commands."""


@config_group.command("show")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["toml", "json"]),
    default="toml",
    show_default=True,
    help="Output format",
)
@click.pass_context
def config_show(ctx, output_format):
    """Show the effective configuration."""
    config_manager: ConfigManager = ctx.obj["config_manager"]
    click.echo(config_manager.export(output_format))


def main():
    """Main CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
