"""
Execution tree: compiled, immutable mirror of a ConfigNode tree.

Every child access on a Branch builds a fresh Branch that remembers the
branch it came from (``last``) and, once called, its own path arguments.
Mounting walks that chain back to the root, so two traversals of the same
compiled tree never see each other's arguments.
"""

from __future__ import annotations

import inspect
import json
import logging
from collections import deque
from types import MappingProxyType
from typing import Any, Callable, Coroutine, Mapping, Optional
from urllib.parse import quote

from restree.errors import EndpointNotFoundError, TransportError
from restree.models.http import PreparedRequest, Response
from restree.node import ConfigNode, merge_headers
from restree.pipeline import execute_pipes, normalize_method
from restree.transport.http import HttpTransport, Transport

# Characters encodeURIComponent leaves alone, besides alphanumerics and "_.-~".
URI_COMPONENT_SAFE = "!*'()"

Callback = Callable[[int, Any], Any]

logger = logging.getLogger("restree.execution")


class ExecNode:
    """Compiled counterpart of one ConfigNode. Never mutated after compile."""

    def __init__(self, node: ConfigNode, parent: Optional[ExecNode], transport: Transport):
        self.node = node
        self.parent = parent
        self.transport = transport
        self._children: dict[str, ExecNode] = {}

    def __repr__(self) -> str:
        return f"ExecNode(location={self.node.location!r})"

    @property
    def children(self) -> Mapping[str, ExecNode]:
        return MappingProxyType(self._children)

    def branch(self, last: Optional[Branch]) -> Branch:
        """Start a traversal step at this node, reached from ``last``."""
        if self.node.params:
            return ParamBranch(self, last)
        return Branch(self, last)


def compile_tree(root: ConfigNode, transport: Optional[Transport] = None) -> ExecNode:
    """Create one ExecNode per ConfigNode, breadth-first, and return the compiled root."""
    transport = transport or HttpTransport()
    compiled = ExecNode(root, None, transport)
    pending: deque[tuple[ConfigNode, ExecNode]] = deque([(root, compiled)])
    count = 1
    while pending:
        node, exec_node = pending.popleft()
        for name, child in node.children.items():
            exec_child = ExecNode(child, exec_node, transport)
            exec_node._children[name] = exec_child
            pending.append((child, exec_child))
            count += 1
    logger.debug(f"Compiled {count} endpoints under '{root.location}'")
    return compiled


class Branch:
    """Transient traversal state: one endpoint plus the branch that led to it."""

    def __init__(self, node: ExecNode, last: Optional[Branch]):
        self.node = node
        self.last = last
        self.args: Optional[dict[str, Any]] = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(location={self.config.location!r}, args={self.args!r})"

    def __getattr__(self, name: str) -> Branch:
        if name.startswith("_") or name in ("node", "last", "args"):
            raise AttributeError(name)
        try:
            return self.child(name)
        except EndpointNotFoundError as e:
            raise AttributeError(str(e)) from None

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(self.node.children))

    @property
    def config(self) -> ConfigNode:
        return self.node.node

    def child(self, name: str) -> Branch:
        """A new branch of the child endpoint ``name``; never cached."""
        try:
            exec_child = self.node.children[name]
        except KeyError:
            raise EndpointNotFoundError(name, self.config.location) from None
        return exec_child.branch(self)

    def mount(self, url_params: Optional[Mapping[str, Any]] = None) -> str:
        """Build the full URL from the root down to this branch, plus an optional query string."""
        segments: list[str] = []
        current: Optional[Branch] = self
        while current is not None:
            segments.append(current.config.local_location(current.args))
            current = current.last
        url = "/".join(reversed(segments))

        if url_params:
            url += "?" + "&".join(
                f"{key}={quote(_query_value(value), safe=URI_COMPONENT_SAFE)}"
                for key, value in url_params.items()
            )
        return url

    def headers(self, extra: Optional[Mapping[str, str]] = None) -> dict[str, str]:
        """JSON content type, then tree headers root to leaf, then ``extra``. Later keys win."""
        headers: dict[str, str] = {"Content-Type": "application/json"}
        merge_headers(headers, self.config.merged_headers())
        if extra:
            merge_headers(headers, extra)
        return headers

    def request(
        self,
        method: str,
        query: Optional[Mapping[str, Any]] = None,
        body: Any = None,
        success: Optional[Callback] = None,
        fail: Optional[Callback] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Coroutine[Any, Any, Response]:
        """Resolve the request now and return a coroutine that performs it.

        Unknown methods and missing path parameters raise here, before anything
        is awaited. ``success(status, data)`` runs on a 2xx response after the
        incoming pipeline; ``fail(status, data)`` runs otherwise with the
        decoded body as received. Transport failures report status 0.
        """
        method = normalize_method(method)
        url = self.mount(query)
        return self._perform(method, url, self.headers(headers), body, success, fail)

    def get(self, query=None, body=None, success=None, fail=None, headers=None) -> Coroutine[Any, Any, Response]:
        return self.request("get", query, body, success, fail, headers)

    def post(self, query=None, body=None, success=None, fail=None, headers=None) -> Coroutine[Any, Any, Response]:
        return self.request("post", query, body, success, fail, headers)

    def put(self, query=None, body=None, success=None, fail=None, headers=None) -> Coroutine[Any, Any, Response]:
        return self.request("put", query, body, success, fail, headers)

    def delete(self, query=None, body=None, success=None, fail=None, headers=None) -> Coroutine[Any, Any, Response]:
        return self.request("delete", query, body, success, fail, headers)

    async def _perform(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: Any,
        success: Optional[Callback],
        fail: Optional[Callback],
    ) -> Response:
        pipes = self.config.pipes[method]
        request = PreparedRequest(
            method=method,
            url=url,
            headers=headers,
            body=execute_pipes(pipes["out"], body),
        )
        logger.debug(f"{method.upper()} {url}")
        try:
            raw = await self.node.transport.send(request)
        except TransportError:
            await _notify(fail, 0, None)
            return Response(status_code=0)

        data = _decode(raw.text, url)
        if 200 <= raw.status_code < 300:
            data = execute_pipes(pipes["in"], data)
            await _notify(success, raw.status_code, data)
        else:
            await _notify(fail, raw.status_code, data)
        return Response(status_code=raw.status_code, data=data)


class ParamBranch(Branch):
    """Branch of a parameterized endpoint; call it with the path arguments."""

    def __call__(self, args: Optional[Mapping[str, Any]] = None, /, **kwargs: Any) -> ParamBranch:
        self.args = {**(args or {}), **kwargs}
        return self


def _query_value(value: Any) -> str:
    # Booleans and None use their JSON spelling: true, false, null.
    if value is None or isinstance(value, bool):
        return json.dumps(value)
    return str(value)


def _decode(text: str, url: str) -> Any:
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        logger.debug(f"Response from {url} is not JSON, ignoring body")
        return None


async def _notify(callback: Optional[Callback], status: int, data: Any) -> None:
    if callback is None:
        return
    result = callback(status, data)
    if inspect.isawaitable(result):
        await result
