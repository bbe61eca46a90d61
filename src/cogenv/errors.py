"""Error hierarchy for the cogenv discovery layer."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

__all__ = [
    "CogeError",
    "ConfigNotFoundError",
    "ConfigError",
    "AliasLoopError",
    "NamespaceSyntaxError",
    "MissingNamespaceError",
    "RegistrationError",
    "InvalidInputError",
    "ErrorCodes",
]


class CogeError(Exception):
    """Base error for all cogenv errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details: dict[str, Any] = details or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc).isoformat()

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ConfigNotFoundError(CogeError):
    """Raised when a configuration file cannot be found."""

    def __init__(self, config_path: str, **kwargs: Any) -> None:
        super().__init__(
            code="CONFIG_NOT_FOUND",
            message=f"Configuration file not found: {config_path}",
            details={"config_path": config_path},
            **kwargs,
        )


class ConfigError(CogeError):
    """Raised when configuration is invalid."""

    def __init__(self, message: str, code: str = "CONFIG_INVALID", **kwargs: Any) -> None:
        super().__init__(code=code, message=message, **kwargs)


class AliasLoopError(ConfigError):
    """Raised when alias rules keep rewriting a value without settling."""

    def __init__(self, value: str, iterations: int, **kwargs: Any) -> None:
        super().__init__(
            message=f"Alias rules did not converge for '{value}' after {iterations} passes",
            code="ALIAS_LOOP",
            details={"value": value, "iterations": iterations},
            **kwargs,
        )

    @property
    def value(self) -> str:
        """The input that was being aliased."""
        return self.details["value"]


class NamespaceSyntaxError(CogeError):
    """Raised when a string does not match the namespace grammar."""

    def __init__(self, namespace: str, position: int | None = None, reason: str = "", **kwargs: Any) -> None:
        message = f"Error parsing namespace '{namespace}'"
        if position is not None:
            message += f" at position {position}"
        if reason:
            message += f": {reason}"
        super().__init__(
            code="NAMESPACE_SYNTAX_ERROR",
            message=message,
            details={"namespace": namespace, "position": position, "reason": reason},
            **kwargs,
        )

    @property
    def namespace(self) -> str:
        """The string that failed to parse."""
        return self.details["namespace"]

    @property
    def position(self) -> int | None:
        """Offset of the first character the grammar rejected."""
        return self.details["position"]


class MissingNamespaceError(CogeError):
    """Raised when a namespace is derived from an empty path."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(code="MISSING_NAMESPACE", message="Missing namespace", **kwargs)


class RegistrationError(CogeError):
    """Raised when a generator cannot be registered."""

    def __init__(self, message: str, reference: Any = None, **kwargs: Any) -> None:
        super().__init__(
            code="REGISTRATION_ERROR",
            message=message,
            details={"reference": reference},
            **kwargs,
        )


class InvalidInputError(CogeError):
    """Raised for invalid input."""

    def __init__(self, message: str = "Invalid input", **kwargs: Any) -> None:
        super().__init__(code="GENERAL_INVALID_INPUT", message=message, **kwargs)


class ErrorCodes:
    """All cogenv error codes as constants.

    Example:
        if error.code == ErrorCodes.ALIAS_LOOP:
            fix_alias_rules()
    """

    CONFIG_NOT_FOUND = "CONFIG_NOT_FOUND"
    CONFIG_INVALID = "CONFIG_INVALID"
    ALIAS_LOOP = "ALIAS_LOOP"
    NAMESPACE_SYNTAX_ERROR = "NAMESPACE_SYNTAX_ERROR"
    MISSING_NAMESPACE = "MISSING_NAMESPACE"
    REGISTRATION_ERROR = "REGISTRATION_ERROR"
    GENERAL_INVALID_INPUT = "GENERAL_INVALID_INPUT"

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("ErrorCodes is immutable")
