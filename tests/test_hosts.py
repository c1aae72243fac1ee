import json

import click
import pytest

from pdv.errors import CommandNotFound
from pdv.hosts import ClickCommandHost, ParameterInfo, StaticCommandHost, load_click_group
from pdv.resolver import Resolved, resolve


@click.group()
def sample_group():
    pass


@sample_group.command("convert")
@click.argument("source")
@click.option("--encoding", "-e", default="utf-8")
@click.option("--encoding-format", default=None)
@click.option("--overwrite/--no-overwrite", "overwrite", default=False)
def convert(source, encoding, encoding_format, overwrite):
    pass


@sample_group.command("list-files")
@click.option("--path", "-p", default=".")
@click.option("--path-type", default="any")
def list_files(path, path_type):
    pass


not_a_group = "just a string"


def test_click_host_lists_parameters_and_aliases():
    host = ClickCommandHost(sample_group)
    definition = host.lookup_command("convert")

    assert definition.name == "convert"
    assert definition.parameters == (
        ParameterInfo("source"),
        ParameterInfo("encoding", ("e",)),
        ParameterInfo("encoding_format", ("encoding-format",)),
        ParameterInfo("overwrite", ("no-overwrite",)),
    )


def test_click_host_lookup_is_case_insensitive():
    host = ClickCommandHost(sample_group)
    assert host.lookup_command("CONVERT").name == "convert"


def test_click_host_aliases():
    host = ClickCommandHost(sample_group, aliases={"ls": "list-files"})
    definition = host.lookup_command("ls")
    assert definition.is_alias
    assert definition.alias_target == "list-files"
    assert resolve(host, "ls", "path") == Resolved("list-files", "path")


def test_click_host_unknown_command():
    with pytest.raises(CommandNotFound):
        ClickCommandHost(sample_group).lookup_command("delete")


def test_click_host_resolves_dashed_alias():
    host = ClickCommandHost(sample_group)
    assert resolve(host, "convert", "-encoding") == Resolved("convert", "encoding")
    assert resolve(host, "convert", "no-over") == Resolved("convert", "overwrite")
    assert resolve(host, "convert", "encoding-format") == Resolved("convert", "encoding_format")


def test_static_host_accepts_lists_and_string_aliases():
    host = StaticCommandHost(
        commands={"a": ["x", "y"], "b": {"z": "zed"}},
    )
    assert host.lookup_command("a").parameters == (ParameterInfo("x"), ParameterInfo("y"))
    assert host.lookup_command("b").parameters == (ParameterInfo("z", ("zed",)),)


def test_static_host_single_parameter_scalar():
    host = StaticCommandHost(commands={"Out-File": "Encoding"})
    assert host.lookup_command("Out-File").parameters == (ParameterInfo("Encoding"),)
    assert resolve(host, "Out-File", "Enc") == Resolved("Out-File", "Encoding")


def test_static_host_prefers_exact_case():
    host = StaticCommandHost(commands={"Run": ["a"], "run": ["b"]})
    assert host.lookup_command("run").parameters == (ParameterInfo("b"),)
    assert host.lookup_command("RUN").name == "Run"


def test_static_host_from_file(tmp_path):
    path = tmp_path / "commands.json"
    path.write_text(json.dumps({
        "commands": {"Out-File": {"Encoding": ["enc"]}},
        "aliases": {"of": "Out-File"},
    }))
    host = StaticCommandHost.from_file(path)
    assert resolve(host, "of", "Enc") == Resolved("Out-File", "Encoding")


def test_load_click_group():
    group = load_click_group("test_hosts:sample_group")
    assert group is sample_group


@pytest.mark.parametrize("reference", [
    "no-colon",
    "test_hosts:missing",
    "test_hosts:not_a_group",
])
def test_load_click_group_rejects_bad_references(reference):
    with pytest.raises(ValueError):
        load_click_group(reference)
