"""CLI: restree config show|set-header|unset-header|set-timeout"""

import click
from rich.console import Console
from rich.table import Table

console = Console()


def _load_config() -> dict:
    from restree.cli.main import _load_config
    return _load_config()


def _save_config(cfg: dict) -> None:
    from restree.cli.main import _save_config
    _save_config(cfg)


@click.group()
def config():
    """Default headers and timeout."""


@config.command("show")
def config_show():
    """Show the saved configuration."""
    cfg = _load_config()
    headers = cfg.get("headers", {})
    table = Table(title="Default headers")
    table.add_column("Header", style="bold")
    table.add_column("Value")
    for key, value in headers.items():
        table.add_row(key, value)
    console.print(table)
    console.print(f"Timeout: {cfg.get('timeout', 'default')}")


@config.command("set-header")
@click.argument("name")
@click.argument("value")
def config_set_header(name: str, value: str):
    """Add a header to every loaded tree."""
    cfg = _load_config()
    cfg.setdefault("headers", {})[name] = value
    _save_config(cfg)
    console.print(f"[green]Header {name} saved.[/green]")


@config.command("unset-header")
@click.argument("name")
def config_unset_header(name: str):
    """Remove a saved header."""
    cfg = _load_config()
    if cfg.get("headers", {}).pop(name, None) is None:
        console.print(f"[yellow]No saved header {name}.[/yellow]")
        return
    _save_config(cfg)
    console.print(f"[green]Header {name} removed.[/green]")


@config.command("set-timeout")
@click.argument("seconds", type=float)
def config_set_timeout(seconds: float):
    """Set the HTTP timeout used by `restree call`."""
    cfg = _load_config()
    cfg["timeout"] = seconds
    _save_config(cfg)
    console.print(f"[green]Timeout set to {seconds}s.[/green]")
