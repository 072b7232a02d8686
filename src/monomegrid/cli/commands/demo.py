"""Interactive demo: pads light up while they are pressed."""

import logging
import threading

import click

from monomegrid.devices import GridDevice
from monomegrid.exceptions import DeviceError, MonomeGridError
from monomegrid.rendering import greeter

from .common import close_quietly, fail, open_row

logger = logging.getLogger(__name__)


def light_while_pressed(source: GridDevice, x: int, y: int, down: bool) -> None:
    """Button handler mirroring the button state on its light."""
    action = "pressed" if down else "released"
    click.echo(f"{source} {action} {x}/{y}")
    try:
        source.switch(x, y, down)
    except DeviceError as e:
        logger.error(f"Could not switch {x}/{y}: {e}")


@click.command()
@click.option('--no-greeting', is_flag=True, help='Skip the greeting animation')
@click.pass_context
def demo(ctx, no_greeting: bool):
    """Combine all grids into one row and light pads while pressed (Ctrl+C to stop)."""
    config = ctx.obj["config"]
    row = open_row(config)
    stopped = threading.Event()

    def on_error(error: Exception) -> None:
        logger.error(f"Stopped listening: {error}")
        click.echo(f"Device stopped: {error}", err=True)
        if row.is_closed:
            stopped.set()

    try:
        if not no_greeting:
            greeter(row)

        row.set_handler(light_while_pressed)
        row.start_listening(on_error)
        click.echo(f"Listening on {row} ({row.rows}x{row.cols}). Press Ctrl+C to stop.")

        while not stopped.wait(0.5):
            pass
        click.echo("All devices are gone.")

    except KeyboardInterrupt:
        click.echo("\ninterrupted, cleaning up...")
    except MonomeGridError as e:
        fail(ctx, e)
    finally:
        row.stop_listening()
        if not row.is_closed:
            try:
                row.switch_all(False)
            except MonomeGridError as e:
                logger.warning(f"Could not switch off {row}: {e}")
        close_quietly(row)
