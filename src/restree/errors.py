"""
restree error types.

Configuration misuse is raised at the call site. HTTP outcomes are never
raised: they reach the caller through the fail callback.
"""

from typing import Any, Optional


class RESTreeError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class ConfigurationError(RESTreeError):
    def __init__(self, message: str, code: str = "configuration_error", details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)


class DuplicateNameError(ConfigurationError):
    def __init__(self, name: str, location: str):
        super().__init__(
            f"The given name '{name}' is already registered on node '{location}'",
            code="duplicate_name",
            details={"name": name, "location": location},
        )


class InvalidRootError(ConfigurationError):
    def __init__(self, location: str):
        super().__init__(
            f"compile() may only be called on the root node, not on '{location}'",
            code="invalid_root",
            details={"location": location},
        )


class InvalidMethodError(ConfigurationError):
    def __init__(self, method: str, allowed: tuple[str, ...]):
        super().__init__(
            f"The given method name '{method}' does not exist, use {', '.join(repr(m) for m in allowed)}",
            code="invalid_method",
            details={"method": method},
        )


class InvalidDirectionError(ConfigurationError):
    def __init__(self, direction: str, allowed: tuple[str, ...]):
        super().__init__(
            f"The given direction '{direction}' is not defined, use {', '.join(repr(d) for d in allowed)}",
            code="invalid_direction",
            details={"direction": direction},
        )


class TreeFrozenError(ConfigurationError):
    def __init__(self, location: str):
        super().__init__(
            f"Node '{location}' belongs to a compiled tree and can no longer be changed",
            code="tree_frozen",
            details={"location": location},
        )


class DeclarationError(ConfigurationError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message, code="invalid_declaration", details=details)


class MissingParameterError(RESTreeError):
    def __init__(self, param: str, location: str):
        super().__init__(
            "missing_parameter",
            f"Missing parameter '{param}' on '{location}'",
            {"param": param, "location": location},
        )


class EndpointNotFoundError(RESTreeError):
    def __init__(self, name: str, location: str):
        super().__init__(
            "endpoint_not_found",
            f"No endpoint named '{name}' under '{location}'",
            {"name": name, "location": location},
        )


class TransportError(RESTreeError):
    def __init__(self, message: str):
        super().__init__("transport_error", message)
