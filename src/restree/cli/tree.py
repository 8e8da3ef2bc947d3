"""CLI: restree show, restree url, restree call"""

import json
from typing import Any, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from restree.errors import RESTreeError
from restree.execution import Branch, ParamBranch
from restree.node import ConfigNode
from restree.pipeline import METHODS
from restree.transport.http import DEFAULT_TIMEOUT, HttpTransport, Transport

console = Console()


def _load_tree(path: str) -> ConfigNode:
    from restree.cli.main import _load_tree
    return _load_tree(path)


def _load_config() -> dict:
    from restree.cli.main import _load_config
    return _load_config()


def _run(coro):
    from restree.cli.main import _run
    return _run(coro)


def _make_transport(timeout: float) -> Transport:
    return HttpTransport(timeout=timeout)


def _pairs(sep: str):
    def parse(ctx, param, values) -> dict[str, str]:
        pairs = {}
        for value in values:
            key, found, rest = value.partition(sep)
            if not found or not key.strip():
                raise click.BadParameter(f"expected NAME{sep}VALUE, got {value!r}")
            pairs[key.strip()] = rest.strip() if sep == ":" else rest
        return pairs
    return parse


def resolve_branch(branch: Branch, endpoint: str, params: dict[str, Any]) -> Branch:
    """Follow a dotted endpoint path, feeding each parameterized node the params it declares."""
    branch = _apply(branch, params)
    for name in filter(None, endpoint.split(".")):
        branch = _apply(branch.child(name), params)
    return branch


def _apply(branch: Branch, params: dict[str, Any]) -> Branch:
    if isinstance(branch, ParamBranch):
        branch({p: params[p] for p in branch.config.params if p in params})
    return branch


def _describe(node: ConfigNode, name: str) -> str:
    label = f"[bold]{escape(name)}[/bold] [dim]{escape(node.location)}[/dim]"
    if node.params:
        label += f" [cyan]({', '.join(dict.fromkeys(node.params))})[/cyan]"
    for key, value in node.headers.items():
        label += f"\n[yellow]{escape(key)}: {escape(value)}[/yellow]"
    return label


def _render(node: ConfigNode, tree: Tree) -> None:
    for name, child in node.children.items():
        _render(child, tree.add(_describe(child, name)))


@click.command("show")
@click.argument("tree_file", type=click.Path(exists=True, dir_okay=False))
def show_cmd(tree_file: str):
    """Show the endpoints declared in a tree file."""
    try:
        root = _load_tree(tree_file)
    except RESTreeError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise SystemExit(1)
    tree = Tree(_describe(root, "(root)"))
    _render(root, tree)
    console.print(tree)


@click.command("url")
@click.argument("tree_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("endpoint", default="")
@click.option("-p", "--param", "params", multiple=True, callback=_pairs("="), help="Path parameter NAME=VALUE")
@click.option("-q", "--query", "query", multiple=True, callback=_pairs("="), help="Query parameter NAME=VALUE")
def url_cmd(tree_file: str, endpoint: str, params: dict[str, str], query: dict[str, str]):
    """Print the URL of a dotted ENDPOINT (e.g. user.images)."""
    try:
        branch = resolve_branch(_load_tree(tree_file).compile(Transport()), endpoint, params)
        click.echo(branch.mount(query or None))
    except RESTreeError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise SystemExit(1)


@click.command("call")
@click.argument("tree_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("endpoint", default="")
@click.option("-X", "--method", default="get", type=click.Choice(METHODS, case_sensitive=False))
@click.option("-p", "--param", "params", multiple=True, callback=_pairs("="), help="Path parameter NAME=VALUE")
@click.option("-q", "--query", "query", multiple=True, callback=_pairs("="), help="Query parameter NAME=VALUE")
@click.option("-H", "--header", "headers", multiple=True, callback=_pairs(":"), help="Extra header 'Name: value'")
@click.option("-d", "--data", "data", default=None, help="JSON request body")
@click.option("--json-output", "--json", is_flag=True)
def call_cmd(
    tree_file: str,
    endpoint: str,
    method: str,
    params: dict[str, str],
    query: dict[str, str],
    headers: dict[str, str],
    data: Optional[str],
    json_output: bool,
):
    """Call a dotted ENDPOINT and print the response."""
    try:
        body = json.loads(data) if data is not None else None
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="--data")

    async def _call():
        transport = _make_transport(_load_config().get("timeout", DEFAULT_TIMEOUT))
        try:
            tree = _load_tree(tree_file).compile(transport)
            branch = resolve_branch(tree, endpoint, params)
            if not json_output:
                console.print(f"[dim]{method.upper()} {branch.mount(query or None)}[/dim]")
            return await branch.request(method, query or None, body, headers=headers)
        finally:
            await transport.close()

    try:
        response = _run(_call())
    except RESTreeError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise SystemExit(1)

    if json_output:
        click.echo(json.dumps({"status": response.status_code, "data": response.data}))
    else:
        style = "green" if response.ok else "red"
        console.print(f"[{style}]HTTP {response.status_code or 'transport error'}[/{style}]")
        if response.data is not None:
            console.print_json(json.dumps(response.data))
    if not response.ok:
        raise SystemExit(1)
