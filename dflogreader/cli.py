"""Click CLI for inspecting DataFlash log records."""
from __future__ import annotations

import dataclasses
import json
import logging
from pathlib import Path
from typing import Optional

import click

from dflogreader.config import Config, load_config
from dflogreader.errors import ConfigurationError, LogDecodeError
from dflogreader.log.handler import MsgHandler
from dflogreader.log.messages import decode_message
from dflogreader.log.records import FormatDescriptor
from dflogreader.log.types import KIND_NAMES


class Context:
    """Holds the loaded config and builds handlers on demand."""

    def __init__(self, config_path: Path | None = None):
        self._config_path = config_path
        self._config: Config | None = None

    @property
    def config(self) -> Config:
        if self._config is None:
            try:
                self._config = load_config(self._config_path)
            except ConfigurationError as e:
                raise click.UsageError(str(e)) from e
        return self._config

    @property
    def formats(self) -> dict[str, FormatDescriptor]:
        return self.config.all_formats()

    def handler(self, name: str) -> MsgHandler:
        formats = self.formats
        descriptor = formats.get(name)
        if descriptor is None:
            available = ", ".join(sorted(formats)) or "(none)"
            raise click.UsageError(f"Unknown format '{name}'. Known formats: {available}")
        try:
            return MsgHandler(descriptor)
        except ConfigurationError as e:
            raise click.UsageError(f"Format '{name}' is invalid: {e}") from e


pass_ctx = click.make_pass_decorator(Context)


def _parse_hex(ctx, param, value: str) -> bytes:
    try:
        return bytes.fromhex("".join(value.split()))
    except ValueError:
        raise click.BadParameter("expected hex-encoded record bytes") from None


def _jsonable(value):
    if isinstance(value, bytes):
        return value.split(b"\x00", 1)[0].decode("utf-8", errors="replace")
    return value


@click.group()
@click.option(
    "--config", "config_path", default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to config.toml (default: $DFLOGREADER_CONFIG or the app dir)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.version_option(package_name="dflogreader")
@click.pass_context
def cli(ctx, config_path: Optional[Path], verbose: bool):
    """dflog - DataFlash log record decoder.

    Inspect log formats and decode hex-encoded records field by field.
    """
    ctx.obj = Context(config_path=config_path)
    level = logging.DEBUG if verbose else ctx.obj.config.log_level
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@cli.command("formats")
@pass_ctx
def list_formats(ctx: Context):
    """List known formats."""
    formats = ctx.formats
    click.echo(f"{'Name':<6}  {'Type':>4}  {'Fields':>6}  {'Format':<20}")
    click.echo("-" * 42)
    for name in sorted(formats):
        d = formats[name]
        click.echo(f"{name:<6}  {d.type:>4}  {len(d.label_list):>6}  {d.format:<20}")


@cli.command()
@click.argument("name")
@pass_ctx
def describe(ctx: Context, name: str):
    """Show the field layout of format NAME."""
    handler = ctx.handler(name)
    click.echo(f"{handler.name} (type {handler.type}, {handler.record_size} bytes)")
    click.echo(f"{'Label':<12}  {'Type':<4}  {'Offset':>6}  {'Length':>6}")
    click.echo("-" * 34)
    for entry in handler:
        click.echo(f"{entry.label:<12}  {entry.type:<4}  {entry.offset:>6}  {entry.length:>6}")


@cli.command()
@click.argument("name")
@click.argument("record", callback=_parse_hex)
@click.argument("label")
@click.option("--as", "kind", type=click.Choice(["native", "string", *KIND_NAMES]), default="native",
              help="Representation to convert the field to")
@pass_ctx
def field(ctx: Context, name: str, record: bytes, label: str, kind: str):
    """Decode field LABEL of a hex-encoded RECORD in format NAME."""
    handler = ctx.handler(name)
    try:
        if kind == "string":
            value = handler.field_string(record, label)
        else:
            value = handler.field_value(record, label, None if kind == "native" else kind)
    except LogDecodeError as e:
        raise click.ClickException(str(e)) from e

    if value is None:
        raise click.ClickException(f"Field '{label}' not found in {name}")
    click.echo(_jsonable(value))


@cli.command()
@click.argument("name")
@click.argument("record", callback=_parse_hex)
@click.option("--format", "fmt", type=click.Choice(["text", "json"]), default="text")
@pass_ctx
def decode(ctx: Context, name: str, record: bytes, fmt: str):
    """Decode every field of a hex-encoded RECORD in format NAME."""
    handler = ctx.handler(name)
    try:
        fields = {entry.label: _jsonable(handler.field_value(record, entry.label)) for entry in handler}
        decoded = decode_message(handler, record)
    except LogDecodeError as e:
        raise click.ClickException(str(e)) from e

    if fmt == "json":
        data = {"format": handler.name, "fields": fields}
        if decoded is not None:
            data["decoded"] = dataclasses.asdict(decoded)
        click.echo(json.dumps(data, indent=2))
        return

    click.echo(f"{handler.name}:")
    for label, value in fields.items():
        click.echo(f"  {label:<12} {value}")
    if decoded is not None:
        click.echo(f"\n{decoded}")
