"""CLI for confshare: run a host, or read and change the configuration of one."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from confshare.client import ConfigClient
from confshare.core.config import AppSettings
from confshare.exceptions import ConfShareError
from confshare.store.config_store import ConfigStore

app = typer.Typer(name="confshare", help="Share string settings between processes")
console = Console(soft_wrap=True)


def _build_settings(base_url: Optional[str], authority: Optional[str]) -> AppSettings:
    """Build settings, overriding env defaults with CLI flags."""
    settings = AppSettings()
    if base_url:
        settings.client.base_url = base_url
    if authority:
        settings.host.authority = authority
    return settings


def _client(base_url: Optional[str], authority: Optional[str]) -> ConfigClient:
    return ConfigClient.from_settings(_build_settings(base_url, authority))


@contextmanager
def _reported_errors() -> Iterator[None]:
    """Turn domain errors into a red message and exit code 1."""
    try:
        yield
    except ConfShareError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e


def _open_file(file: Path, encoding: str) -> ConfigStore:
    with _reported_errors():
        return ConfigStore.open(file.parent, file.name, encoding)


BaseUrl = typer.Option(None, "--base-url", help="Host address")
Authority = typer.Option(None, "--authority", "-a", help="Host authority")


@app.command()
def serve(
    bind: Optional[str] = typer.Option(None, help="Interface to bind"),
    port: Optional[int] = typer.Option(None, help="Port to listen on"),
    authority: Optional[str] = Authority,
    data_dir: Optional[Path] = typer.Option(None, "--data-dir", help="Directory of the backing file"),
) -> None:
    """Run a configuration host."""
    import uvicorn

    from confshare.api.app import create_app

    settings = AppSettings()
    if authority:
        settings.host.authority = authority
    if data_dir:
        settings.store.data_dir = data_dir
    uvicorn.run(
        create_app(settings),
        host=bind or settings.host.bind,
        port=port or settings.host.port,
        log_config=None,
    )


@app.command()
def get(
    key: str = typer.Argument(..., help="Key to read"),
    base_url: Optional[str] = BaseUrl,
    authority: Optional[str] = Authority,
) -> None:
    """Print the value of a key."""
    with _reported_errors(), _client(base_url, authority) as client:
        value = client.get(key)
    if value is None:
        console.print(f"[yellow]{escape(key)} not found[/yellow]")
        raise typer.Exit(code=1)
    console.print(value, markup=False, highlight=False)


@app.command()
def put(
    key: str = typer.Argument(..., help="Key to set"),
    value: str = typer.Argument(..., help="New value"),
    save: bool = typer.Option(False, "--save", help="Persist the host store afterwards"),
    base_url: Optional[str] = BaseUrl,
    authority: Optional[str] = Authority,
) -> None:
    """Set a key."""
    with _reported_errors(), _client(base_url, authority) as client:
        client.put(key, value)
        if save:
            console.print(f"Saved {client.save()} items")


@app.command()
def remove(
    key: str = typer.Argument(..., help="Key to remove"),
    base_url: Optional[str] = BaseUrl,
    authority: Optional[str] = Authority,
) -> None:
    """Remove a key."""
    with _reported_errors(), _client(base_url, authority) as client:
        removed = client.remove(key)
    console.print("[green]removed[/green]" if removed else f"[yellow]{escape(key)} not found[/yellow]")


@app.command(name="list")
def list_items(
    base_url: Optional[str] = BaseUrl,
    authority: Optional[str] = Authority,
) -> None:
    """Show every key and value."""
    with _reported_errors(), _client(base_url, authority) as client:
        items = client.get_all()

    table = Table(title=f"{len(items)} items")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key in sorted(items):
        table.add_row(Text(key), Text(items[key]))
    console.print(table)


@app.command()
def clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
    base_url: Optional[str] = BaseUrl,
    authority: Optional[str] = Authority,
) -> None:
    """Remove every key."""
    if not yes:
        typer.confirm("Remove every configuration item?", abort=True)
    with _reported_errors(), _client(base_url, authority) as client:
        console.print(f"Removed {client.clear()} items")


@app.command()
def save(
    comments: Optional[str] = typer.Option(None, help="Comment written at the top of the file"),
    base_url: Optional[str] = BaseUrl,
    authority: Optional[str] = Authority,
) -> None:
    """Persist the host store to its backing file."""
    with _reported_errors(), _client(base_url, authority) as client:
        count = client.save(comments)
    console.print(f"Saved {count} items")


@app.command()
def backup(
    file: Path = typer.Argument(..., help="Properties file to write"),
    encoding: str = typer.Option("utf-8", help="Encoding of the file"),
    base_url: Optional[str] = BaseUrl,
    authority: Optional[str] = Authority,
) -> None:
    """Copy the host configuration into a local properties file, replacing its content."""
    target = _open_file(file, encoding)
    with _reported_errors(), _client(base_url, authority) as client:
        count = client.backup_to(target)
        target.store(f"Backup of {client.authority}")
    console.print(f"[green]Backed up {count} items to {escape(str(file))}[/green]")


@app.command()
def restore(
    file: Path = typer.Argument(..., help="Properties file to read"),
    encoding: str = typer.Option("utf-8", help="Encoding of the file"),
    save: bool = typer.Option(False, "--save", help="Persist the host store afterwards"),
    base_url: Optional[str] = BaseUrl,
    authority: Optional[str] = Authority,
) -> None:
    """Replace the host configuration with the content of a local properties file."""
    if not file.is_file():
        console.print(f"[red]{escape(str(file))} does not exist[/red]")
        raise typer.Exit(code=1)
    source = _open_file(file, encoding)
    with _reported_errors(), _client(base_url, authority) as client:
        count = client.restore_from(source)
        if save:
            client.save()
    console.print(f"[green]Restored {count} items from {escape(str(file))}[/green]")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v")) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)


if __name__ == "__main__":
    app()
