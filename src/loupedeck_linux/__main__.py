"""Run with ``python -m loupedeck_linux``."""

from loupedeck_linux.cli.main import cli

if __name__ == "__main__":
    cli()
