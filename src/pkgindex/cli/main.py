"""Main CLI entry point"""

from pathlib import Path

import click
from dotenv import load_dotenv

# Load .env file from current working directory before importing anything else
# This ensures environment variables are set before pydantic-settings reads them
_env_file = Path.cwd() / ".env"
if _env_file.exists():
    load_dotenv(_env_file)


@click.group()
@click.version_option(version='0.1.0', prog_name='pkgindex')
def cli():
    """pkgindex - index package archives into a local registry"""
    pass


def setup_cli():
    """Register all CLI commands"""
    from .index_cmd import exists, index_packages

    cli.add_command(index_packages, name='index')
    cli.add_command(exists, name='exists')


# Setup commands when module is imported
setup_cli()
