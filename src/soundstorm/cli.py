"""Soundstorm CLI - play and control an internet radio stream from the terminal."""

import json
from pathlib import Path

import click

from . import __version__
from .config import (
    Config,
    DEFAULT_CONFIG,
    default_config_path,
    load_config,
    read_config_file,
    save_config,
)
from .errors import ConfigError, IPCError
from .ipc import MpvIPC
from .logging import setup_logging
from .metadata import describe
from .repl import announce, run_repl
from .session import Session


def _load(ctx: click.Context) -> Config:
    """Load config for a subcommand, applying the group's overrides."""
    opts = ctx.obj
    try:
        config = load_config(opts["config_path"], logger=opts["logger"])
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    config = config.with_overrides(stream_url=opts["url"], ipc_path=opts["ipc_path"])
    is_valid, error = config.validate()
    if not is_valid:
        click.echo(f"Error: {error}", err=True)
        ctx.exit(1)
    return config


def _session(ctx: click.Context, config: Config, **kwargs) -> Session:
    return Session(config, logger=ctx.obj["logger"], **kwargs)


@click.group(invoke_without_command=True)
@click.option("--url", type=str, help="Stream URL (overrides config)")
@click.option("--socket", "ipc_path", type=str, help="mpv IPC socket path")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Config file (default: ~/.soundstorm.json)",
)
@click.version_option(__version__, prog_name="soundstorm")
@click.pass_context
def cli(ctx, url, ipc_path, config_path):
    """Play an internet radio stream through mpv and show what's on."""
    ctx.obj = {
        "url": url,
        "ipc_path": ipc_path,
        "config_path": config_path,
        "logger": setup_logging(),
    }

    if ctx.invoked_subcommand is None:
        ctx.invoke(repl)


@cli.command()
@click.pass_context
def repl(ctx):
    """Line-mode player (default)."""
    config = _load(ctx)
    session = _session(ctx, config, on_change=announce)
    ctx.exit(run_repl(session))


@cli.command()
@click.pass_context
def tui(ctx):
    """Full-screen player."""
    from .tui import run_tui

    config = _load(ctx)
    session = _session(ctx, config)
    ctx.exit(run_tui(session))


@cli.command()
@click.pass_context
def status(ctx):
    """Show what a running player is playing."""
    config = _load(ctx)
    ipc = MpvIPC(config.ipc_path, timeout=config.ipc_timeout)

    if not ipc.available():
        click.echo(f"No player running (socket {config.ipc_path} not found).", err=True)
        ctx.exit(1)

    try:
        ipc.request("get_property", "media-title")
    except IPCError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    click.echo(describe(ipc, config.station_marker))


@cli.command("config")
@click.option("--show", is_flag=True, help="Show config without modifying")
@click.option("--stream-url", type=str, help="Stream URL to play")
@click.option("--poll-interval", type=click.FloatRange(min=0, min_open=True), help="Seconds between title polls")
@click.option("--volume", type=click.IntRange(0, 100), help="Initial volume (0-100)")
@click.option("--reset", is_flag=True, help="Reset to defaults")
@click.pass_context
def configure(ctx, show, stream_url, poll_interval, volume, reset):
    """View or modify configuration."""
    config_path = ctx.obj["config_path"] or default_config_path()

    try:
        if reset:
            save_config(DEFAULT_CONFIG, config_path, include_stream_url=False)
            click.echo("Configuration reset to defaults.")
            return

        config = load_config(config_path, logger=ctx.obj["logger"])

        if show:
            click.echo(json.dumps(config.to_dict(), indent=2))
            return

        updated = config.with_overrides(
            stream_url=stream_url, poll_interval=poll_interval, volume=volume
        )
        if updated == config:
            click.echo(json.dumps(config.to_dict(), indent=2))
            return

        # A URL that came from the manifest or the default stays out of the file
        keep_url = stream_url is not None or "stream_url" in read_config_file(config_path)
        save_config(updated, config_path, include_stream_url=keep_url)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    click.echo("Configuration updated.")


if __name__ == "__main__":
    cli()
