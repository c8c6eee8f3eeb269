"""Tests for the pkgindex CLI"""

import pytest
from click.testing import CliRunner

from pkgindex.cli.main import cli


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    """Point the CLI's settings at a temporary directory"""
    from pkgindex.config import Settings
    from pkgindex.cli import index_cmd

    settings = Settings(
        storage_path=str(tmp_path / "packages"),
        database_path=str(tmp_path / "packages.db"),
    )
    monkeypatch.setattr(index_cmd, "get_settings", lambda: settings)
    return tmp_path


@pytest.fixture
def package_file(cli_env, nupkg_bytes):
    path = cli_env / "Foo.1.0.0.nupkg"
    path.write_bytes(nupkg_bytes)
    return path


def test_index_and_exists(package_file):
    runner = CliRunner()

    result = runner.invoke(cli, ["index", str(package_file)])
    assert result.exit_code == 0, result.output
    assert "Success" in result.output

    result = runner.invoke(cli, ["exists", "foo", "1.0"])
    assert result.exit_code == 0
    assert "exists" in result.output


def test_duplicate_exits_nonzero(package_file):
    runner = CliRunner()
    runner.invoke(cli, ["index", str(package_file)])

    result = runner.invoke(cli, ["index", "--no-allow-overwrite", str(package_file)])

    assert result.exit_code == 1
    assert "PackageAlreadyExists" in result.output


def test_allow_overwrite_flag(package_file):
    runner = CliRunner()
    runner.invoke(cli, ["index", str(package_file)])

    result = runner.invoke(cli, ["index", "--allow-overwrite", str(package_file)])

    assert result.exit_code == 0, result.output


def test_exists_missing(cli_env):
    result = CliRunner().invoke(cli, ["exists", "Missing", "1.0.0"])

    assert result.exit_code == 1
    assert "not found" in result.output


def test_exists_bad_version(cli_env):
    result = CliRunner().invoke(cli, ["exists", "Foo", "not-a-version"])

    assert result.exit_code == 2
