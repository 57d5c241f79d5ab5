"""Main CLI entry point."""

import asyncio
import importlib
import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

import click

from loupedeck_linux import __version__
from loupedeck_linux.utils.paths import default_log_path

from .commands import config, device

logger = logging.getLogger(__name__)


def resolve_log_path(debug: bool, log_file: Optional[Path]) -> Path:
    if log_file:
        return log_file
    if debug:
        return Path.cwd() / "loupedeck-linux-debug.log"
    return default_log_path()


def setup_logging(verbose: int, debug: bool, log_file: Optional[Path], log_level: str) -> None:
    """
    Configure logging for the application.

    Args:
        verbose: Verbosity count for the console (0 = WARNING, 1 = INFO, 2+ = DEBUG)
        debug: If True, log everything to ./loupedeck-linux-debug.log
        log_file: Custom log file path (optional)
        log_level: Log level for file logging (DEBUG/INFO/WARNING/ERROR)
    """
    if debug or verbose >= 2:
        console_level = logging.DEBUG
    elif verbose == 1:
        console_level = logging.INFO
    else:
        console_level = logging.WARNING

    file_level = logging.DEBUG if debug else getattr(logging, log_level.upper())

    log_path = resolve_log_path(debug, log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Keeps last 5 files, max 10MB each
    file_handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=10 * 1024 * 1024,
        backupCount=5
    )
    file_handler.setLevel(file_level)
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter('%(levelname)s %(name)s: %(message)s'))

    root_logger = logging.getLogger()
    root_logger.setLevel(min(file_level, console_level))
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    logger.info(
        f"Logging configured: console={logging.getLevelName(console_level)}, "
        f"file={logging.getLevelName(file_level)} ({log_path})"
    )


def load_backend(target: str, metadata, preview_dir: Optional[Path] = None):
    """
    Create the device backend.

    Args:
        target: ``"preview"`` or an import path ``"package.module:ClassName"``
            whose class accepts ``metadata=``
        metadata: Device preset from the settings
        preview_dir: Frame directory for the preview backend

    Raises:
        click.BadParameter: If the import path cannot be resolved
    """
    if target == "preview":
        from loupedeck_linux.devices import PreviewDevice

        return PreviewDevice(metadata, frame_dir=preview_dir)

    module_name, _, attr = target.partition(":")
    if not module_name or not attr:
        raise click.BadParameter(f"expected 'preview' or 'module:Class', got {target!r}", param_hint="--backend")
    try:
        factory = getattr(importlib.import_module(module_name), attr)
    except (ImportError, AttributeError) as e:
        raise click.BadParameter(f"cannot load {target!r}: {e}", param_hint="--backend") from e
    return factory(metadata=metadata)


@click.group(invoke_without_command=True)
@click.pass_context
@click.version_option(version=__version__, prog_name="loupedeck-linux")
@click.option(
    '--backend',
    '-b',
    default='preview',
    show_default=True,
    help="Device backend: 'preview' or an import path 'module:Class'"
)
@click.option(
    '--preview-dir',
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help='Directory where the preview backend writes screen.png'
)
@click.option(
    '--config',
    '-c',
    'config_path',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Page configuration file (default: $XDG_CONFIG_HOME/loupedeck-linux/config.json)'
)
@click.option(
    '--settings',
    'settings_file',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Settings file (default: $XDG_CONFIG_HOME/loupedeck-linux/settings.json)'
)
@click.option(
    '-v', '--verbose',
    count=True,
    help='Increase console verbosity (-v: INFO, -vv: DEBUG)'
)
@click.option(
    '--debug',
    is_flag=True,
    help='Enable debug mode (DEBUG level, logs to ./loupedeck-linux-debug.log)'
)
@click.option(
    '--log-file',
    type=click.Path(path_type=Path),
    default=None,
    help='Custom log file path'
)
@click.option(
    '--log-level',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
    default='INFO',
    help='Log level for file logging (default: INFO)'
)
def cli(
    ctx,
    backend: str,
    preview_dir: Optional[Path],
    config_path: Optional[Path],
    settings_file: Optional[Path],
    verbose: int,
    debug: bool,
    log_file: Optional[Path],
    log_level: str
):
    """
    Loupedeck Linux - drive a Loupedeck Live S touch surface on Linux.

    Runs the control surface until interrupted: a grid of touch buttons,
    a clock, volume, media and desktop notification overlays, Hyprland
    workspaces, and a local HTTP API for editing pages.

    \b
    Examples:
      # Run with the preview backend, writing frames to ./frames
      loupedeck-linux --preview-dir ./frames

      # Run with a hardware driver
      loupedeck-linux --backend mydriver.loupedeck:LiveS

      # Show or validate the page configuration
      loupedeck-linux config show
      loupedeck-linux config validate
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["settings_path"] = settings_file

    # If a subcommand was invoked, don't run the app
    if ctx.invoked_subcommand is not None:
        return

    from loupedeck_linux.app import LoupedeckApp
    from loupedeck_linux.exceptions import format_error_for_display
    from loupedeck_linux.models import AppSettings
    from loupedeck_linux.services import PageConfigService

    setup_logging(verbose, debug, log_file, log_level)
    log_path = resolve_log_path(debug, log_file)

    logger.info(f"Starting loupedeck-linux {__version__}")

    try:
        settings = AppSettings.load_or_default(settings_file)
        metadata = settings.device_metadata
        device_backend = load_backend(backend, metadata, preview_dir or settings.preview_dir)
        service = PageConfigService.load_or_create(config_path)
        app = LoupedeckApp(device_backend, settings, service)
        asyncio.run(app.run())

    except KeyboardInterrupt:
        logger.info("Application interrupted by user")
        click.echo("\nShutting down...", err=True)
    except click.ClickException:
        raise
    except Exception as e:
        logger.exception("Error running application")

        user_message, recovery_hint = format_error_for_display(e)

        click.echo("\n" + "="*70, err=True)
        click.echo(f"ERROR: {user_message}", err=True)
        click.echo("="*70, err=True)

        if recovery_hint:
            click.echo(f"\n{recovery_hint}", err=True)

        click.echo(f"\nFor details, check the log file: {log_path}", err=True)
        click.echo("For logging options, run: loupedeck-linux --help", err=True)
        sys.exit(1)


cli.add_command(config)
cli.add_command(device)

if __name__ == "__main__":
    cli()
