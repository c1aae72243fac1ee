# pdv/cli.py
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Tuple

import click
import yaml
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import load_settings
from .console import console, info, set_quiet, warn
from .errors import StoreLoadMissing, handle_error
from .hosts import ClickCommandHost, CommandHost, StaticCommandHost, load_click_group
from .keys import OverrideKey, strip_flag
from .merge import ConflictRecord, import_sources
from .persistence import load_overrides, save_overrides
from .resolver import resolve_key
from .store import OverrideStore

logger = logging.getLogger(__name__)


# --- Helpers ---

def _load_store(ctx: click.Context) -> OverrideStore:
    path = ctx.obj["settings"].store_path
    try:
        data = load_overrides(path)
    except StoreLoadMissing:
        logger.debug(f"No store at {path}; starting empty")
        return OverrideStore(warn=warn)
    return OverrideStore.from_mapping(data, warn=warn)


def _save_store(ctx: click.Context, store: OverrideStore) -> None:
    save_overrides(ctx.obj["settings"].store_path, store.to_mapping())


def _build_host(ctx: click.Context) -> CommandHost:
    settings = ctx.obj["settings"]
    if settings.target:
        return ClickCommandHost(load_click_group(settings.target))
    if settings.commands_file:
        return StaticCommandHost.from_file(settings.commands_file)
    raise click.UsageError(
        "No command host configured. Pass --target module:group or --commands FILE, "
        "or use --raw to store the key as typed."
    )


def _show(value: Any) -> str:
    return escape(repr(value))


def _parse_value(value: str, as_yaml: bool) -> Any:
    if not as_yaml:
        return value
    try:
        return yaml.safe_load(value)
    except yaml.YAMLError as e:
        raise click.BadParameter(f"Not a YAML value: {e}", param_hint="VALUE") from e


def _print_conflicts(conflicts: List[ConflictRecord]) -> None:
    overwritten = [c for c in conflicts if c.overwritten]
    skipped = [c for c in conflicts if not c.overwritten]

    if overwritten:
        table = Table(title="Overwritten defaults")
        for column in ("Command", "Parameter", "NewDefault", "OldDefault"):
            table.add_column(column)
        for c in overwritten:
            table.add_row(c.command, c.parameter, _show(c.new_default), _show(c.old_default))
        console.print(table)

    if skipped:
        table = Table(title="Skipped (already set)")
        for column in ("Command", "Parameter", "CurrentDefault", "SkippedValue"):
            table.add_column(column)
        for c in skipped:
            table.add_row(c.command, c.parameter, _show(c.current_default), _show(c.skipped_value))
        console.print(table)
        warn(f"{len(skipped)} existing default(s) kept. Re-run with --force to overwrite them.")


# --- Main CLI Group ---
@click.group(help="PDV: manage default parameter values for CLI commands.")
@click.option(
    "--store",
    "store_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Override file to read and write (default: $PDV_STORE_PATH or ~/.pdv/defaults.yaml).",
)
@click.option(
    "--commands",
    "commands_file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML/JSON file describing commands, parameters and aliases.",
)
@click.option(
    "--target",
    default=None,
    help="Click group to introspect, as 'package.module:group'.",
)
@click.option("--verbose", is_flag=True, default=False, help="Show debug logging.")
@click.option("--quiet", is_flag=True, default=False, help="Only print errors.")
@click.version_option(version=__version__, prog_name="pdv")
@click.pass_context
def cli(
    ctx: click.Context,
    store_path: Optional[str],
    commands_file: Optional[str],
    target: Optional[str],
    verbose: bool,
    quiet: bool,
) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s: %(name)s: %(message)s")
    set_quiet(quiet)
    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet
    ctx.obj["settings"] = load_settings(store_path, commands_file, target)


@cli.command("set", context_settings={"ignore_unknown_options": True})
@click.argument("command")
@click.argument("parameter")
@click.argument("value")
@click.option("--yaml-value", is_flag=True, default=False, help="Parse VALUE as YAML (numbers, booleans, lists).")
@click.option("--raw", is_flag=True, default=False, help="Store COMMAND:PARAMETER as typed, without resolving.")
@click.pass_context
def set_cmd(ctx: click.Context, command: str, parameter: str, value: str, yaml_value: bool, raw: bool) -> None:
    """Set the default VALUE of PARAMETER for COMMAND."""
    parsed = _parse_value(value, yaml_value)
    try:
        store = _load_store(ctx)
        if raw:
            key = OverrideKey(command, strip_flag(parameter))
        else:
            key = resolve_key(_build_host(ctx), command, parameter, warn)
            if key is None:
                ctx.exit(1)
        store.set(key, parsed)
        _save_store(ctx, store)
        info(f"[success]Set[/success] [command]{escape(str(key))}[/command] = {_show(parsed)}")
    except Exception as e:
        handle_error(e, "set", ctx.obj["quiet"])


@cli.command("get")
@click.argument("command", default="*")
@click.argument("parameter", default="*")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print JSON instead of a table.")
@click.pass_context
def get_cmd(ctx: click.Context, command: str, parameter: str, as_json: bool) -> None:
    """List defaults matching COMMAND and PARAMETER (wildcards allowed)."""
    try:
        store = _load_store(ctx)
        entries = store.get(command, parameter)
    except Exception as e:
        handle_error(e, "get", ctx.obj["quiet"])
        return

    if as_json:
        rows: List[Dict[str, Any]] = [
            {"Command": entry.command, "Parameter": entry.parameter, "CurrentDefault": entry.current_default}
            for entry in entries
        ]
        click.echo(json.dumps(rows, indent=2, default=str))
        return

    if not entries:
        info("[info]No matching defaults.[/info]")
        return
    table = Table()
    for column in ("Command", "Parameter", "CurrentDefault"):
        table.add_column(column)
    for entry in entries:
        table.add_row(entry.command, entry.parameter, _show(entry.current_default))
    console.print(table)


@cli.command("remove", context_settings={"ignore_unknown_options": True})
@click.argument("command")
@click.argument("parameter")
@click.pass_context
def remove_cmd(ctx: click.Context, command: str, parameter: str) -> None:
    """Remove defaults matching COMMAND and PARAMETER*."""
    try:
        store = _load_store(ctx)
        removed = store.remove(command, strip_flag(parameter))
        _save_store(ctx, store)
    except Exception as e:
        handle_error(e, "remove", ctx.obj["quiet"])
        return
    if removed:
        for key in removed:
            info(f"[success]Removed[/success] [command]{escape(str(key))}[/command]")
    else:
        info("[info]Nothing matched.[/info]")


@cli.command("enable")
@click.pass_context
def enable_cmd(ctx: click.Context) -> None:
    """Activate the stored defaults."""
    try:
        store = _load_store(ctx)
        store.enable()
        _save_store(ctx, store)
    except Exception as e:
        handle_error(e, "enable", ctx.obj["quiet"])
        return
    info("[success]Parameter defaults enabled.[/success]")


@cli.command("disable")
@click.pass_context
def disable_cmd(ctx: click.Context) -> None:
    """Keep the stored defaults but stop applying them."""
    try:
        store = _load_store(ctx)
        store.disable()
        _save_store(ctx, store)
    except Exception as e:
        handle_error(e, "disable", ctx.obj["quiet"])
        return
    info("[success]Parameter defaults disabled.[/success]")


@cli.command("import")
@click.argument("paths", nargs=-1, type=click.Path(dir_okay=False))
@click.option(
    "--config",
    "config_paths",
    multiple=True,
    type=click.Path(dir_okay=False),
    help="Structured config file whose 'defaults' section is imported after PATHS.",
)
@click.option("--section", default="defaults", show_default=True, help="Config section holding the defaults.")
@click.option("--force", is_flag=True, default=False, help="Overwrite defaults that already exist.")
@click.pass_context
def import_cmd(
    ctx: click.Context,
    paths: Tuple[str, ...],
    config_paths: Tuple[str, ...],
    section: str,
    force: bool,
) -> None:
    """Merge defaults from override files and config files into the store."""
    if not paths and not config_paths:
        raise click.UsageError("Give at least one PATH or --config FILE.")
    try:
        store = _load_store(ctx)
        before = len(store)
        conflicts = import_sources(
            store,
            paths=paths,
            config_paths=config_paths,
            force_overwrite=force,
            config_section=section,
        )
        _save_store(ctx, store)
    except Exception as e:
        handle_error(e, "import", ctx.obj["quiet"])
        return
    if not ctx.obj["quiet"]:
        _print_conflicts(conflicts)
    info(f"[success]Imported {len(store) - before} new default(s).[/success]")


@cli.command("export")
@click.argument("path", type=click.Path(dir_okay=False))
@click.pass_context
def export_cmd(ctx: click.Context, path: str) -> None:
    """Write the current defaults to PATH (.json or YAML)."""
    try:
        store = _load_store(ctx)
        written = save_overrides(path, store.to_mapping())
    except Exception as e:
        handle_error(e, "export", ctx.obj["quiet"])
        return
    info(f"[success]Exported {len(store)} default(s) to[/success] [path]{escape(str(written))}[/path]")


if __name__ == "__main__":
    cli()
