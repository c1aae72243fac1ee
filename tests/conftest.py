"""Project-level pytest configuration hooks."""

import pytest
from click.testing import CliRunner

from pdv.hosts import StaticCommandHost
from pdv.store import OverrideStore


@pytest.fixture(autouse=True)
def isolate_pdv_env(monkeypatch):
    """Keep tests away from the user's real store and command files."""
    for name in ("PDV_STORE_PATH", "PDV_COMMANDS_FILE", "PDV_TARGET"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def warnings_seen():
    """A warning sink that records messages."""
    return []


@pytest.fixture
def store(warnings_seen):
    return OverrideStore(warn=warnings_seen.append)


@pytest.fixture
def host():
    """A small command host with aliases, modelled on a shell's file commands."""
    return StaticCommandHost(
        commands={
            "Out-File": {
                "Encoding": ["enc"],
                "EncodingFormat": [],
                "FilePath": ["path", "PSPath"],
                "Append": [],
                "NoClobber": ["NoOverwrite"],
                "Width": [],
            },
            "Get-ChildItem": {
                "Path": [],
                "PathType": [],
                "Recurse": ["s"],
                "Filter": [],
            },
        },
        aliases={
            "of": "Out-File",
            "write-file": "of",
            "ls": "Get-ChildItem",
        },
    )


@pytest.fixture
def runner():
    return CliRunner()
