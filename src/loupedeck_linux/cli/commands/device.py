"""Device commands."""

from typing import Optional

import click

from loupedeck_linux.exceptions import LoupedeckError
from loupedeck_linux.layout import GridGeometry
from loupedeck_linux.models import DEVICE_PRESETS, AppSettings


@click.group(name="device")
def device():
    """Device information."""
    pass


@device.command(name="info")
@click.option(
    "--preset",
    type=click.Choice(sorted(DEVICE_PRESETS)),
    default=None,
    help="Show this preset instead of the configured device",
)
@click.pass_context
def device_info(ctx, preset: Optional[str]):
    """Show screen, grid and control layout of the device."""
    if preset is None:
        obj = ctx.find_root().obj or {}
        try:
            preset = AppSettings.load_or_default(obj.get("settings_path")).device
        except LoupedeckError as e:
            raise click.ClickException(e.get_full_message()) from e

    metadata = DEVICE_PRESETS[preset]
    try:
        geometry = GridGeometry(metadata)
    except LoupedeckError as e:
        raise click.ClickException(e.get_full_message()) from e

    click.echo(f"{metadata.name} ({preset})\n")
    click.echo(f"  Screen:   {metadata.screen_width}x{metadata.screen_height}")
    click.echo(f"  Grid:     {metadata.columns}x{metadata.rows} cells of {metadata.key_size}px")
    click.echo(f"  Margins:  {geometry.margin_x:g}px left/right, {geometry.margin_y:g}px top")
    click.echo(f"  Knobs:    {', '.join(metadata.knob_ids)}")
    click.echo(f"  Buttons:  {', '.join(str(b) for b in metadata.button_ids)}")
