"""
Configuration tree: one ConfigNode per API endpoint.

A tree is built incrementally with add/header/pipe and then compiled once
into an execution tree (see restree.execution). Compiling freezes every node
of the tree.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, Iterator, Mapping, Optional

from restree.errors import (
    DuplicateNameError,
    EndpointNotFoundError,
    InvalidRootError,
    MissingParameterError,
    TreeFrozenError,
)
from restree.pipeline import Pipe, PipeTable, check_direction, empty_pipe_table, normalize_method

if TYPE_CHECKING:
    from restree.execution import Branch
    from restree.transport.http import Transport

PARAM_PATTERN = re.compile(r"\{([a-zA-Z][a-zA-Z0-9_]*)\}")


def merge_headers(headers: dict[str, str], new: Mapping[str, str]) -> None:
    """Copy ``new`` into ``headers``; names are case-insensitive, so a match is replaced."""
    for key, value in new.items():
        for existing in [k for k in headers if k.lower() == key.lower()]:
            del headers[existing]
        headers[key] = value


class ConfigNode:
    """A mutable endpoint node.

    ``location`` is the URL template of this segment (``user/{id}``); the root
    location is normally the API base (``https://api.example.com``).
    """

    def __init__(self, location: str, parent: Optional[ConfigNode] = None):
        self.location = location
        self.parent = parent
        self.children: dict[str, ConfigNode] = {}
        self.params: list[str] = []
        self.headers: dict[str, str] = {}
        self.pipes: PipeTable = empty_pipe_table()
        self._frozen = False

        self.extract_params()

    def __repr__(self) -> str:
        return f"ConfigNode(location={self.location!r}, children={list(self.children)!r})"

    def __getattr__(self, name: str) -> ConfigNode:
        if name.startswith("_") or "children" not in self.__dict__:
            raise AttributeError(name)
        try:
            return self.children[name]
        except KeyError:
            raise AttributeError(f"'{self.location}' has no endpoint named '{name}'") from None

    # ------------------------------------------------------------------ #
    # Building
    # ------------------------------------------------------------------ #

    def add(self, name: str, location: Optional[str] = None) -> ConfigNode:
        """Register a child endpoint. ``location`` defaults to ``name``. Returns self for chaining."""
        self._ensure_mutable()
        if name in self.children or name in vars(self):
            raise DuplicateNameError(name, self.location)
        self.children[name] = ConfigNode(location or name, self)
        return self

    def header(self, key: str, value: str) -> ConfigNode:
        """Register a default header, inherited by every descendant."""
        self._ensure_mutable()
        self.headers[key] = value
        return self

    def pipe(self, method: str, direction: str, pipes: list[Pipe]) -> ConfigNode:
        """Append ``pipes`` to the ``direction`` ('in' or 'out') pipeline of ``method``."""
        self._ensure_mutable()
        method = normalize_method(method)
        check_direction(direction)
        self.pipes[method][direction].extend(pipes)
        return self

    def in_(self, method: str, *pipes: Pipe) -> ConfigNode:
        return self.pipe(method, "in", list(pipes))

    def out(self, method: str, *pipes: Pipe) -> ConfigNode:
        return self.pipe(method, "out", list(pipes))

    def extract_params(self) -> None:
        self.params.extend(match.group(1) for match in PARAM_PATTERN.finditer(self.location))

    # ------------------------------------------------------------------ #
    # Reading
    # ------------------------------------------------------------------ #

    @property
    def frozen(self) -> bool:
        return self._frozen

    def child(self, name: str) -> ConfigNode:
        try:
            return self.children[name]
        except KeyError:
            raise EndpointNotFoundError(name, self.location) from None

    def local_location(self, args: Optional[Mapping[str, Any]]) -> str:
        """Fill this node's placeholders from ``args`` in a single pass over the template."""
        for param in self.params:
            if args is None or param not in args:
                raise MissingParameterError(param, self.location)
        if not self.params:
            return self.location
        return PARAM_PATTERN.sub(lambda match: str(args[match.group(1)]), self.location)

    def lineage(self) -> list[ConfigNode]:
        """Nodes from the root down to this one."""
        nodes: list[ConfigNode] = []
        node: Optional[ConfigNode] = self
        while node is not None:
            nodes.append(node)
            node = node.parent
        nodes.reverse()
        return nodes

    def merged_headers(self) -> dict[str, str]:
        """Headers accumulated root to leaf; the closest definition of a key wins."""
        headers: dict[str, str] = {}
        for node in self.lineage():
            merge_headers(headers, node.headers)
        return headers

    def walk(self, prefix: str = "") -> Iterator[tuple[str, ConfigNode]]:
        """Depth-first ``(dotted_path, node)`` pairs, starting with this node."""
        yield prefix, self
        for name, child in self.children.items():
            yield from child.walk(f"{prefix}.{name}" if prefix else name)

    # ------------------------------------------------------------------ #
    # Compiling
    # ------------------------------------------------------------------ #

    def compile(self, transport: Optional[Transport] = None) -> Branch:
        """Compile the whole tree and return the root branch. Root only.

        Without a ``transport`` a new HttpTransport is created; it belongs to the
        caller, who closes it through ``tree.node.transport.close()``.
        """
        if self.parent is not None:
            raise InvalidRootError(self.location)
        from restree.execution import compile_tree

        root = compile_tree(self, transport)
        for _, node in self.walk():
            node._frozen = True
        return root.branch(None)

    def _ensure_mutable(self) -> None:
        if self._frozen:
            raise TreeFrozenError(self.location)
