"""
restree CLI — `restree` command.

Commands:
  restree show <tree.json>                 Endpoint tree overview
  restree url <tree.json> <endpoint>       Print the mounted URL
  restree call <tree.json> <endpoint>      Issue a request
  restree config <cmd>                     Default headers / timeout
"""

import asyncio
import json
import logging
from pathlib import Path

try:
    import click
    from rich.console import Console
except ImportError:
    raise SystemExit("CLI requires extras: pip install restree[cli]")

from restree.loader import load_tree
from restree.node import ConfigNode

console = Console()
CONFIG_FILE = Path.home() / ".restree" / "config.json"


def _load_config() -> dict:
    try:
        return json.loads(CONFIG_FILE.read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        return {}


def _save_config(cfg: dict) -> None:
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_FILE.write_text(json.dumps(cfg, indent=2))


def _load_tree(path: str) -> ConfigNode:
    """Load a tree file; configured default headers fill in what its root leaves unset."""
    root = load_tree(path)
    for key, value in _load_config().get("headers", {}).items():
        if key not in root.headers:
            root.header(key, value)
    return root


def _run(coro):
    return asyncio.run(coro)


@click.group()
@click.version_option("0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
def main(verbose: bool):
    """restree CLI — explore and call declared REST endpoint trees."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


# Register subcommands from separate modules
from restree.cli.tree import show_cmd, url_cmd, call_cmd
from restree.cli.config import config

main.add_command(show_cmd)
main.add_command(url_cmd)
main.add_command(call_cmd)
main.add_command(config)


if __name__ == "__main__":
    main()
