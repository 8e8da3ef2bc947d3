"""
restree — declarative trees of REST endpoints.

Declare endpoints once, compile the tree, then branch through it with path
arguments to issue requests:

    api = restree.root("https://api.example.com")
    api.add("user", "user/{id}")
    api.user.add("images")
    tree = api.compile()
    await tree.user(id=5).images.get(success=on_images)
"""

from restree.node import ConfigNode
from restree.execution import Branch, ExecNode, ParamBranch
from restree.loader import build_tree, load_tree
from restree.models.http import PreparedRequest, Response, TransportResponse
from restree.transport.http import HttpTransport, Transport
from restree.errors import (
    RESTreeError,
    ConfigurationError,
    DuplicateNameError,
    InvalidRootError,
    InvalidMethodError,
    InvalidDirectionError,
    TreeFrozenError,
    DeclarationError,
    MissingParameterError,
    EndpointNotFoundError,
    TransportError,
)

__version__ = "0.1.0"


def root(domain: str) -> ConfigNode:
    """Create the root node of a tree; ``domain`` is the API base URL."""
    return ConfigNode(domain, None)


__all__ = [
    "root",
    "ConfigNode",
    "ExecNode",
    "Branch",
    "ParamBranch",
    "build_tree",
    "load_tree",
    "PreparedRequest",
    "Response",
    "TransportResponse",
    "Transport",
    "HttpTransport",
    "RESTreeError",
    "ConfigurationError",
    "DuplicateNameError",
    "InvalidRootError",
    "InvalidMethodError",
    "InvalidDirectionError",
    "TreeFrozenError",
    "DeclarationError",
    "MissingParameterError",
    "EndpointNotFoundError",
    "TransportError",
]
