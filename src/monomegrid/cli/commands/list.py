"""List command implementation."""

import click

from monomegrid.devices import connect, usb_devices
from monomegrid.devices.usb import describe, device_details
from monomegrid.exceptions import MonomeGridError, format_error_for_display

from .common import fail


@click.command(name="list")
@click.option('--details', is_flag=True, help='Show configurations, interfaces and endpoints')
@click.option('--probe', is_flag=True, help='Connect to each device to find out its kind')
@click.pass_context
def list_devices(ctx, details: bool, probe: bool):
    """List USB devices that look like monome grids."""
    options = ctx.obj["config"].connection

    try:
        devices = usb_devices(options.vendor_id, options.product_id)
    except MonomeGridError as e:
        fail(ctx, e)

    if not devices:
        click.echo(f"No USB devices found for {options.vendor_id:04x}:{options.product_id:04x}.")
        return

    click.echo(f"USB devices ({options.vendor_id:04x}:{options.product_id:04x}):\n")

    for i, dev in enumerate(devices):
        if details:
            lines = device_details(dev)
            click.echo(f"[{i}] {lines[0]}")
            for line in lines[1:]:
                click.echo(f"    {line}")
        else:
            click.echo(f"[{i}] {describe(dev)}")

        if probe:
            try:
                with connect(dev, options) as conn:
                    click.echo(f"    Kind: {conn} ({conn.rows}x{conn.cols}, {conn.num_buttons} buttons)")
            except MonomeGridError as e:
                message, _ = format_error_for_display(e)
                click.echo(f"    Kind: unknown ({message})")
