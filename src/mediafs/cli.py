"""Command line interface for the mediafs adapter."""

from __future__ import annotations

import difflib
from pathlib import Path
from typing import Any, NoReturn, Union

import click
import yaml
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from mediafs.adapter import LocalAdapter
from mediafs.config import ConfigError, ConfigManager, MediaFSConfig, resolve_with_precedence
from mediafs.errors import (
    MediaFSError,
    NotADirectoryPathError,
    NotAFilePathError,
    PathNotFoundError,
    PathOperationError,
    SandboxViolationError,
)
from mediafs.logs import configure_logging
from mediafs.metadata import DirectoryEntry, FileEntry

console = Console()

_ERROR_CODES: tuple[tuple[type[Exception], str], ...] = (
    (PathNotFoundError, "not_found"),
    (NotADirectoryPathError, "not_a_directory"),
    (NotAFilePathError, "not_a_file"),
    (SandboxViolationError, "sandbox_violation"),
    (PathOperationError, "io_failure"),
    (ConfigError, "config_error"),
)


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    original: Exception | None = None,
) -> NoReturn:
    """Emit a standardized error and terminate the command appropriately.

    Args:
        message: Human-readable error message.
        code: Machine-readable error identifier.
        json_output: Indicates whether JSON mode is active.
        original: Original exception for chaining when not using JSON.

    Raises:
        SystemExit: When emitting JSON output to terminate the command.
        click.ClickException: For non-JSON flows to surface the error.
    """

    if json_output:
        console.print_json(data={"error": {"code": code, "message": message}})
        raise SystemExit(1)

    raise click.ClickException(message) from original


def _error_code(exc: Exception) -> str:
    for exc_type, code in _ERROR_CODES:
        if isinstance(exc, exc_type):
            return code
    return "internal_error"


def _config_manager(ctx: click.Context) -> ConfigManager:
    config_path = ctx.obj.get("config_path") if ctx.obj else None
    return ConfigManager(config_path=Path(config_path) if config_path else None)


def _load_runtime(ctx: click.Context, json_output: bool) -> tuple[MediaFSConfig, LocalAdapter]:
    """Resolve configuration, configure logging, and build the adapter."""
    overrides: dict[str, Any] = {}
    root = ctx.obj.get("root") if ctx.obj else None
    if root:
        overrides["adapter.root_path"] = root
    try:
        config = _config_manager(ctx).load(cli_overrides=overrides or None)
    except ConfigError as exc:
        _handle_cli_error(str(exc), code="config_error", json_output=json_output, original=exc)
    configure_logging(config.logging)
    return config, LocalAdapter.from_config(config)


def _entry_payload(entry: Union[FileEntry, DirectoryEntry]) -> dict[str, Any]:
    return entry.model_dump(mode="json", exclude_none=True)


def _format_size(entry: Union[FileEntry, DirectoryEntry]) -> str:
    if isinstance(entry, DirectoryEntry):
        return "-"
    return str(entry.size)


def _format_dimensions(entry: Union[FileEntry, DirectoryEntry]) -> str:
    if isinstance(entry, FileEntry) and entry.width is not None and entry.height is not None:
        return f"{entry.width}x{entry.height}"
    return ""


def _entries_table(entries: list[Union[FileEntry, DirectoryEntry]], title: str) -> Table:
    table = Table(title=title)
    table.add_column("Name", style="bold")
    table.add_column("Type")
    table.add_column("MIME")
    table.add_column("Size", justify="right")
    table.add_column("Dimensions")
    table.add_column("ID", style="dim")
    for entry in entries:
        name = f"[{entry.color}]{entry.name}[/]" if isinstance(entry, DirectoryEntry) else entry.name
        table.add_row(
            name,
            entry.type,
            entry.mime_type or "unknown",
            _format_size(entry),
            _format_dimensions(entry),
            entry.id[:12],
        )
    return table


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="mediafs")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=str),
    help="Path to the configuration file (defaults to ~/.mediafs/config.yaml).",
)
@click.option("--root", type=str, help="Override the sandbox root directory.")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, root: str | None) -> None:
    """mediafs describes and manages media files beneath a sandboxed root."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["root"] = root


@cli.command("ls")
@click.argument("path", required=False, default="")
@click.option("--json", "json_output", is_flag=True, help="Emit entry descriptors as JSON.")
@click.option("--sort", "sort_entries", is_flag=True, help="Sort entries by name.")
@click.pass_context
def list_entries(ctx: click.Context, path: str, json_output: bool, sort_entries: bool) -> None:
    """List the entries of PATH, relative to the sandbox root.

    Args:
        ctx: Click context carrying global options.
        path: Directory to list.
        json_output: Whether to emit JSON.
        sort_entries: Whether to sort entries by name.
    """
    config, adapter = _load_runtime(ctx, json_output)
    json_enabled = json_output or config.cli.json_default

    try:
        result = adapter.scan(path)
    except (MediaFSError, OSError) as exc:
        _handle_cli_error(str(exc), code=_error_code(exc), json_output=json_enabled, original=exc)

    entries = list(result.entries)
    if sort_entries or config.cli.sort_entries:
        entries.sort(key=lambda entry: entry.name)

    if json_enabled:
        console.print_json(
            data={
                "root": adapter.root,
                "path": adapter.resolve(path),
                "entries": [_entry_payload(entry) for entry in entries],
                "errors": result.errors,
            }
        )
        return

    console.print(_entries_table(entries, title=adapter.resolve(path)))
    for error in result.errors:
        console.print(f"[yellow]Skipped {error}[/yellow]")


@cli.command("info")
@click.argument("path")
@click.option("--json", "json_output", is_flag=True, help="Emit the descriptor as JSON.")
@click.pass_context
def info(ctx: click.Context, path: str, json_output: bool) -> None:
    """Describe a single entry at PATH."""
    config, adapter = _load_runtime(ctx, json_output)
    json_enabled = json_output or config.cli.json_default

    try:
        entry = adapter.get_info(path)
    except (MediaFSError, OSError) as exc:
        _handle_cli_error(str(exc), code=_error_code(exc), json_output=json_enabled, original=exc)

    payload = _entry_payload(entry)
    if json_enabled:
        console.print_json(data=payload)
        return

    table = Table(show_header=False, title=entry.path)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    for key, value in payload.items():
        table.add_row(key, str(value))
    console.print(table)


@cli.command("mkdir")
@click.argument("path")
@click.pass_context
def make_dir(ctx: click.Context, path: str) -> None:
    """Create directory PATH beneath the sandbox root."""
    _, adapter = _load_runtime(ctx, False)
    try:
        created = adapter.create_dir(path)
    except (MediaFSError, OSError) as exc:
        _handle_cli_error(str(exc), code=_error_code(exc), json_output=False, original=exc)
    console.print(f"[green]Directory ready: {created}[/green]")


@cli.command("cp")
@click.argument("source")
@click.argument("destination")
@click.pass_context
def copy(ctx: click.Context, source: str, destination: str) -> None:
    """Copy SOURCE to DESTINATION, mirroring directory trees."""
    _, adapter = _load_runtime(ctx, False)
    try:
        copied = adapter.copy(source, destination)
    except (MediaFSError, OSError) as exc:
        _handle_cli_error(str(exc), code=_error_code(exc), json_output=False, original=exc)
    console.print(f"[green]Copied to {copied}[/green]")


@cli.command("rm")
@click.argument("path")
@click.pass_context
def remove(ctx: click.Context, path: str) -> None:
    """Delete PATH, removing directories recursively."""
    _, adapter = _load_runtime(ctx, False)
    try:
        removed = adapter.delete(path)
    except (MediaFSError, OSError) as exc:
        _handle_cli_error(str(exc), code=_error_code(exc), json_output=False, original=exc)
    if removed:
        console.print(f"[green]Deleted {adapter.resolve(path)}[/green]")
    else:
        console.print(f"[yellow]Nothing to delete at {adapter.resolve(path)}[/yellow]")


@cli.group()
def config() -> None:
    """Manage mediafs configuration files and overrides."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
@click.pass_context
def config_view(ctx: click.Context, no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules.

    Raises:
        click.ClickException: If configuration cannot be loaded.
    """
    manager = _config_manager(ctx)
    try:
        loaded = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(loaded.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
@click.pass_context
def config_set(ctx: click.Context, key: str, value: str) -> None:
    """Persist a configuration value expressed as a dotted KEY.

    Args:
        ctx: Click context carrying global options.
        key: Dotted path describing the configuration field to update.
        value: YAML-literal value to write into the configuration file.

    Raises:
        click.ClickException: If parsing, assignment, or validation fails.
    """
    manager = _config_manager(ctx)
    manager.ensure_exists()

    segments = [segment.strip() for segment in key.split(".") if segment.strip()]
    if not segments:
        raise click.ClickException("KEY must specify a dotted path such as 'thumbnails.width'.")

    try:
        parsed_value = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    before = manager.read_text().splitlines()
    try:
        file_data = manager.load_file_overrides()
        node = file_data
        for segment in segments[:-1]:
            child = node.setdefault(segment, {})
            if not isinstance(child, dict):
                raise ConfigError(f"Cannot assign into '{segment}' because it is not a mapping.")
            node = child
        node[segments[-1]] = parsed_value
        resolve_with_precedence(defaults=MediaFSConfig(), file_overrides=file_data)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    manager.save(file_data)
    # Header timestamps always change, so only compare the YAML body.
    after = manager.read_text().splitlines()
    diff = list(
        difflib.unified_diff(
            [line for line in before if not line.startswith("#")],
            [line for line in after if not line.startswith("#")],
            fromfile="config.yaml (before)",
            tofile="config.yaml (after)",
            lineterm="",
        )
    )
    if not diff:
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return

    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {'.'.join(segments)}.[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
