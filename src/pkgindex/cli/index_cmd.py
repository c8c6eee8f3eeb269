"""CLI commands for indexing package archives"""

import asyncio
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

logger = logging.getLogger(__name__)
console = Console()


def setup_logging(verbose: bool, log_level: str):
    """Configure logging based on verbosity"""
    level = logging.DEBUG if verbose else log_level.upper()
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )


def get_settings():
    """Get settings lazily."""
    from pkgindex.config import settings
    return settings


def _status_style(status: str) -> str:
    return "green" if status == "Success" else "red"


async def _index_all(paths: list[Path], allow_overwrite: bool | None) -> list[tuple[Path, dict]]:
    from pkgindex.core.factory import create_indexing_service
    from pkgindex.providers.policy import StaticOverwritePolicy

    policy = StaticOverwritePolicy(allow_overwrite) if allow_overwrite is not None else None
    service = create_indexing_service(get_settings(), policy=policy)

    results = []
    for path in paths:
        # The service takes ownership of the stream and closes it
        result = await service.index(open(path, "rb"))
        results.append((path, result.to_dict()))
    return results


@click.command()
@click.argument('paths', nargs=-1, required=True,
                type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--allow-overwrite/--no-allow-overwrite', default=None,
              help='Override ALLOW_PACKAGE_OVERWRITES for this run')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
def index_packages(paths: tuple[Path, ...], allow_overwrite: bool | None, verbose: bool):
    """
    Index one or more package archives.

    Exits with status 1 if any package was not accepted.

    Examples:

        pkgindex index Foo.1.0.0.nupkg

        pkgindex index --allow-overwrite dist/*.nupkg
    """
    setup_logging(verbose, get_settings().log_level)

    results = asyncio.run(_index_all(list(paths), allow_overwrite))

    table = Table(title="Indexing results")
    table.add_column("File")
    table.add_column("Id", no_wrap=True)
    table.add_column("Version", no_wrap=True)
    table.add_column("Status", no_wrap=True)
    table.add_column("Messages")

    failed = 0
    for path, result in results:
        package = result["package"] or {}
        status = result["status"]
        if status != "Success":
            failed += 1
        table.add_row(
            path.name,
            package.get("id", "-"),
            package.get("version", "-"),
            f"[{_status_style(status)}]{status}[/{_status_style(status)}]",
            "\n".join(result["messages"]),
        )

    console.print(table)
    if failed:
        console.print(f"[red]{failed} of {len(results)} packages were not indexed[/red]")
        sys.exit(1)


@click.command()
@click.argument('package_id')
@click.argument('version')
def exists(package_id: str, version: str):
    """
    Check whether PACKAGE_ID VERSION is already indexed.
    """
    from pkgindex.providers.sqlite import SQLitePackageDatabase
    from pkgindex.versioning import PackageVersion

    try:
        parsed = PackageVersion.parse(version)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint='VERSION')

    database = SQLitePackageDatabase(get_settings())
    if asyncio.run(database.exists(package_id, parsed)):
        console.print(f"[green]{package_id} {parsed.normalized} exists[/green]")
    else:
        console.print(f"[yellow]{package_id} {parsed.normalized} not found[/yellow]")
        sys.exit(1)
