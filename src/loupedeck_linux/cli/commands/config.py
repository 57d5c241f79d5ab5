"""Page configuration commands."""

import json
from pathlib import Path
from typing import Optional

import click

from loupedeck_linux.exceptions import LoupedeckError
from loupedeck_linux.model_manager import PydanticPersistence
from loupedeck_linux.models import PagesConfig
from loupedeck_linux.services import default_pages_config
from loupedeck_linux.utils.paths import pages_config_path


def _config_path(ctx: click.Context) -> Path:
    obj = ctx.find_root().obj or {}
    path: Optional[Path] = obj.get("config_path")
    return path or pages_config_path()


@click.group(name="config")
def config():
    """Inspect and initialize the page configuration."""
    pass


@config.command(name="path")
@click.pass_context
def show_path(ctx):
    """Print the page configuration file location."""
    click.echo(str(_config_path(ctx)))


@config.command(name="show")
@click.option("--page", "-p", "page_id", default=None, help="Only show this page")
@click.pass_context
def show_config(ctx, page_id: Optional[str]):
    """Print the page configuration as JSON (defaults if the file is missing)."""
    path = _config_path(ctx)
    try:
        pages = PydanticPersistence.load_json_or_default(path, PagesConfig, default_pages_config)
    except LoupedeckError as e:
        raise click.ClickException(e.get_full_message()) from e

    data = pages.model_dump()["pages"]
    if page_id is not None:
        if page_id not in data:
            raise click.ClickException(f"Page {page_id} not found (pages: {', '.join(pages.page_ids())})")
        data = {page_id: data[page_id]}
    click.echo(json.dumps(data, indent=2))


@config.command(name="validate")
@click.pass_context
def validate_config(ctx):
    """Validate the page configuration file."""
    path = _config_path(ctx)
    if not path.exists():
        click.echo(f"No configuration file at {path} (defaults will be used)")
        return

    is_valid, error = PydanticPersistence.validate_json(path, PagesConfig)
    if not is_valid:
        click.echo(f"✗ {path} is invalid:\n{error}", err=True)
        ctx.exit(1)

    pages = PydanticPersistence.load_json(path, PagesConfig)
    components = sum(len(page.components) for page in pages.pages.values())
    click.echo(f"✓ {path} is valid ({len(pages.pages)} page(s), {components} component(s))")


@config.command(name="init")
@click.option("--force", is_flag=True, help="Overwrite an existing file (a .bak copy is kept)")
@click.pass_context
def init_config(ctx, force: bool):
    """Write the default page layout."""
    path = _config_path(ctx)
    if path.exists() and not force:
        raise click.ClickException(f"{path} already exists (use --force to overwrite)")
    PydanticPersistence.save_json(default_pages_config(), path)
    click.echo(f"Wrote default configuration to {path}")
