"""Command-line interface using Click."""

import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .config import DEFAULT_COLOR, POLL_INTERVAL, get_log_file
from .exceptions import LyricDashError, ProbeError
from .core.engine import SyncEngine
from .core.genius import GeniusProvider
from .core.models import TrackIdentity
from .core.normalize import normalize_lyrics
from .core.probe import PlaybackProbe
from .ui.dashboard import Dashboard, parse_color
from .utils.logging import setup_logging

ENGINE_STOP_TIMEOUT = 2.0


def _validate_color(ctx, param, value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    try:
        parse_color(value)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e
    return value


@click.group(invoke_without_command=True)
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--log-file', type=click.Path(dir_okay=False),
              help='Log file (default: ~/.cache/lyricdash/lyricdash.log)')
@click.option('-p', '--player', default=None,
              help='playerctl player name (default: first active player)')
@click.option('-c', '--color', default=DEFAULT_COLOR, show_default=True,
              callback=_validate_color,
              help='Display color (name, 0-255 index or hex)')
@click.option('--interval', type=click.FloatRange(min=0.1), default=POLL_INTERVAL,
              show_default=True, help='Seconds between player polls')
@click.pass_context
def cli(ctx, verbose, log_file, player, color, interval):
    """lyricdash - show the playing track and its lyrics in the terminal."""
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    ctx.obj['log_file'] = Path(log_file) if log_file else get_log_file()
    ctx.obj['player'] = player
    ctx.obj['color'] = color
    ctx.obj['interval'] = interval

    if ctx.invoked_subcommand is None:
        ctx.invoke(show)


@cli.command()
@click.option('-c', '--color', default=None, callback=_validate_color,
              help='Override the display color for this run')
@click.option('--interval', type=click.FloatRange(min=0.1), default=None,
              help='Override the poll interval for this run')
@click.pass_context
def show(ctx, color, interval):
    """Run the now-playing dashboard (default command)."""
    color = color or ctx.obj['color']
    interval = interval or ctx.obj['interval']

    # The dashboard owns the terminal, so logs only go to the file.
    logger = setup_logging(
        level="DEBUG" if ctx.obj['verbose'] else "INFO",
        log_file=ctx.obj['log_file'],
        verbose=True,
        console=False,
    )

    probe = PlaybackProbe(player=ctx.obj['player'])
    engine = SyncEngine(probe, GeniusProvider(), poll_interval=interval)
    try:
        engine.start()
        Dashboard(engine, probe, color=color).run()
    except LyricDashError as e:
        logger.error(f"{e}")
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    finally:
        engine.stop(timeout=ENGINE_STOP_TIMEOUT)


@cli.command()
@click.pass_context
def now(ctx):
    """Print the currently playing track once."""
    setup_logging(
        level="DEBUG" if ctx.obj['verbose'] else "WARNING",
        verbose=ctx.obj['verbose'],
    )
    probe = PlaybackProbe(player=ctx.obj['player'])
    try:
        snapshot = probe.probe()
    except ProbeError as e:
        click.echo(f"Error: {e.kind.description}", err=True)
        sys.exit(1)

    track = snapshot.identity
    click.echo(f"Title:  {track.title}")
    click.echo(f"Artist: {track.artist}")
    click.echo(f"Status: {snapshot.status_display}")


@cli.command()
@click.argument('artist', required=False)
@click.argument('title', required=False)
@click.pass_context
def lyrics(ctx, artist: Optional[str], title: Optional[str]):
    """Print lyrics for ARTIST TITLE, or for the playing track."""
    logger = setup_logging(
        level="DEBUG" if ctx.obj['verbose'] else "WARNING",
        verbose=ctx.obj['verbose'],
    )

    if artist and title:
        track = TrackIdentity.create(artist, title)
    elif artist or title:
        raise click.UsageError("Give both ARTIST and TITLE, or neither")
    else:
        try:
            track = PlaybackProbe(player=ctx.obj['player']).probe().identity
        except ProbeError as e:
            click.echo(f"Error: {e.kind.description}", err=True)
            sys.exit(1)

    logger.debug(f"Looking up lyrics for {track}")
    result = GeniusProvider().fetch(track)
    if not result.is_text:
        click.echo(result.placeholder, err=True)
        sys.exit(1)
    click.echo(normalize_lyrics(result.lyrics or ""))


if __name__ == '__main__':
    cli()
