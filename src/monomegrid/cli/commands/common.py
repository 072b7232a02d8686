"""Helpers shared by the CLI commands."""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from monomegrid.devices import RowConnection, connections
from monomegrid.exceptions import MonomeGridError, format_error_for_display
from monomegrid.models import GridConfig

logger = logging.getLogger(__name__)


def report_error(error: Exception, log_path: Optional[Path] = None) -> None:
    """Print an error without a traceback."""
    user_message, recovery_hint = format_error_for_display(error)

    click.echo("\n" + "=" * 70, err=True)
    click.echo(f"ERROR: {user_message}", err=True)
    click.echo("=" * 70, err=True)

    if recovery_hint:
        click.echo(f"\n{recovery_hint}", err=True)

    if log_path is not None:
        click.echo(f"\nFor details, check the log file: {log_path}", err=True)


def fail(ctx: click.Context, error: Exception) -> None:
    """Log and report an error, then exit with status 1."""
    logger.error(f"Command {ctx.command.name} failed: {error}")
    report_error(error, ctx.obj.get("log_path") if ctx.obj else None)
    sys.exit(1)


def open_row(config: GridConfig) -> RowConnection:
    """
    Connect to all grids and combine them into one row device.

    Grids that could not be connected are reported as warnings. The grids
    are ordered from the smallest to the largest.

    Raises:
        click.ClickException: No grid could be connected
    """
    found, error = connections(config.connection)

    if error is not None:
        message, _ = format_error_for_display(error)
        click.echo(f"Warning: {message}", err=True)

    if not found:
        raise click.ClickException("no monome devices found")

    found.sort(key=lambda conn: conn.num_buttons)
    row = RowConnection(found, config.row_name)
    logger.info(f"Using {row} made of {', '.join(str(conn) for conn in found)}")
    return row


def close_quietly(device) -> None:
    """Close a device at the end of a command, logging failures."""
    try:
        device.close()
    except MonomeGridError as e:
        logger.warning(f"Could not close {device}: {e}")
