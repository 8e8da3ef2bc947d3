"""
Transformation pipelines: one outgoing and one incoming list per HTTP method.
"""

from typing import Any, Callable, Iterable, Optional

from restree.errors import InvalidDirectionError, InvalidMethodError

METHODS = ("get", "post", "put", "delete")
DIRECTIONS = ("in", "out")

Pipe = Callable[[Any], Any]
PipeTable = dict[str, dict[str, list[Pipe]]]


def normalize_method(method: str) -> str:
    name = method.lower() if isinstance(method, str) else method
    if name not in METHODS:
        raise InvalidMethodError(str(method), METHODS)
    return name


def check_direction(direction: str) -> str:
    if direction not in DIRECTIONS:
        raise InvalidDirectionError(str(direction), DIRECTIONS)
    return direction


def empty_pipe_table() -> PipeTable:
    return {method: {direction: [] for direction in DIRECTIONS} for method in METHODS}


def is_absent(data: Any) -> bool:
    """None and empty text count as no body; empty containers are real values."""
    if data is None:
        return True
    return isinstance(data, (str, bytes)) and not data


def execute_pipes(pipes: Iterable[Pipe], data: Any) -> Optional[Any]:
    """Run each transform in registration order, feeding it the previous output."""
    if is_absent(data):
        return None
    for pipe in pipes:
        data = pipe(data)
    return data
