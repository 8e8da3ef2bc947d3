"""
Build configuration trees from plain data (a dict or a JSON file).

Pipelines hold Python callables and cannot be declared this way; register
them on the returned tree before compiling it.
"""

import json
from pathlib import Path
from typing import Any, Mapping, Union

from pydantic import ValidationError

from restree.errors import DeclarationError
from restree.models.declaration import EndpointDeclaration, TreeDeclaration
from restree.node import ConfigNode


def build_tree(declaration: Mapping[str, Any]) -> ConfigNode:
    """Create a root ConfigNode, its headers and every declared endpoint."""
    try:
        tree = TreeDeclaration.model_validate(declaration)
    except ValidationError as e:
        raise DeclarationError(f"Invalid endpoint tree: {e}", details={"errors": e.errors()}) from e

    root = ConfigNode(tree.location)
    _populate(root, tree)
    return root


def load_tree(path: Union[str, Path]) -> ConfigNode:
    path = Path(path)
    try:
        data = json.loads(path.read_text())
    except FileNotFoundError as e:
        raise DeclarationError(f"Tree file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise DeclarationError(f"Tree file {path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise DeclarationError(f"Tree file {path} must contain a JSON object")
    return build_tree(data)


def _populate(node: ConfigNode, declaration: EndpointDeclaration) -> None:
    for key, value in declaration.headers.items():
        node.header(key, value)
    for name, endpoint in declaration.endpoints.items():
        node.add(name, endpoint.location)
        _populate(node.child(name), endpoint)
