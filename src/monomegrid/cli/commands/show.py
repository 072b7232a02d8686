"""Text display commands: marquee and print."""

import logging
from typing import Optional

import click

from monomegrid.exceptions import MonomeGridError

from .common import close_quietly, fail, open_row

logger = logging.getLogger(__name__)


@click.command()
@click.argument('text')
@click.option(
    '--delay',
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help='Seconds per column (default from config)'
)
@click.pass_context
def marquee(ctx, text: str, delay: Optional[float]):
    """Scroll TEXT over all connected grids."""
    config = ctx.obj["config"]
    delay = delay or config.marquee_delay

    row = open_row(config)
    try:
        logger.info(f"Marquee {text!r} on {row} ({delay}s per column)")
        row.marquee(text, delay)
    except MonomeGridError as e:
        fail(ctx, e)
    finally:
        close_quietly(row)


@click.command(name="print")
@click.argument('text')
@click.option(
    '--delay',
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help='Seconds each letter is shown (default from config)'
)
@click.pass_context
def print_text(ctx, text: str, delay: Optional[float]):
    """Show TEXT letter by letter on every connected grid."""
    config = ctx.obj["config"]
    delay = delay or config.print_delay

    row = open_row(config)
    try:
        logger.info(f"Printing {text!r} on {row} ({delay}s per letter)")
        row.print_text(text, delay)
    except MonomeGridError as e:
        fail(ctx, e)
    finally:
        close_quietly(row)
