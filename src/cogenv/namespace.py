"""Structured generator namespaces.

A namespace string has the shape::

    @scope/name:generator:sub@semver@+instance#method!

Every part except ``name`` is optional. ``parse_namespace`` returns ``None``
for strings outside the grammar; ``require_namespace`` raises
:class:`~cogenv.errors.NamespaceSyntaxError` instead.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

from cogenv.errors import NamespaceSyntaxError

logger = logging.getLogger(__name__)

__all__ = [
    "Namespace",
    "NamespaceFlag",
    "ParsedNamespace",
    "parse_namespace",
    "to_namespace",
    "require_namespace",
    "is_namespace",
    "camel_case",
]

_FIRST_CHARS = frozenset("abcdefghijklmnopqrstuvwxyz0123456789-~")
_NAME_CHARS = _FIRST_CHARS | frozenset("._")
_SEMVER_CHARS = frozenset("abcdefghijklmnopqrstuvwxyz0123456789-.~><+=^* ")


class NamespaceFlag(str, Enum):
    """Trailing control flag of a namespace."""

    INSTALL = "!"
    LOAD = "!?"
    OPTIONAL = "?"


@dataclass
class ParsedNamespace:
    """Raw fields produced by the parser."""

    complete: str
    unscoped: str
    scope: str | None = None
    generator: str | None = None
    semver: str | None = None
    instance_id: str | None = None
    method: str | None = None
    flags: NamespaceFlag | None = None


class _Parser:
    """Recursive-descent parser for the namespace grammar."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def fail(self, reason: str) -> NamespaceSyntaxError:
        return NamespaceSyntaxError(self.text, position=self.pos, reason=reason)

    def peek(self, size: int = 1) -> str:
        return self.text[self.pos : self.pos + size]

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def segment(self, what: str) -> str:
        start = self.pos
        if self.at_end() or self.text[self.pos] not in _FIRST_CHARS:
            raise self.fail(f"expected {what}")
        self.pos += 1
        while not self.at_end() and self.text[self.pos] in _NAME_CHARS:
            self.pos += 1
        return self.text[start : self.pos]

    def segment_list(self, separator: str) -> str | None:
        # Zero or more segments joined by ``separator``; a trailing separator is allowed.
        segments: list[str] = []
        while not self.at_end() and self.text[self.pos] in _FIRST_CHARS:
            segments.append(self.segment("segment"))
            if self.peek() != separator:
                break
            self.pos += 1
        return separator.join(segments) or None

    def parse(self) -> ParsedNamespace:
        scope = None
        if self.peek() == "@":
            self.pos += 1
            scope = "@" + self.segment("scope name")
            if self.peek() != "/":
                raise self.fail("expected '/' after scope")
            self.pos += 1

        result = ParsedNamespace(complete=self.text, unscoped=self.segment("package name"), scope=scope)

        if self.peek() == ":":
            self.pos += 1
            result.generator = self.segment_list(":")

        if self.peek() == "@":
            self.pos += 1
            start = self.pos
            while not self.at_end() and self.text[self.pos] in _SEMVER_CHARS:
                self.pos += 1
            if self.peek() != "@":
                raise self.fail("unterminated version constraint")
            result.semver = self.text[start : self.pos] or None
            self.pos += 1

        if self.peek() == "+":
            self.pos += 1
            result.instance_id = self.segment_list("+")

        if self.peek() == "#":
            self.pos += 1
            result.method = self.segment("method name")

        for flag in (NamespaceFlag.LOAD, NamespaceFlag.INSTALL, NamespaceFlag.OPTIONAL):
            if self.text.startswith(flag.value, self.pos):
                result.flags = flag
                self.pos += len(flag.value)
                break

        if not self.at_end():
            raise self.fail(f"unexpected character {self.text[self.pos]!r}")
        return result


def camel_case(value: str) -> str:
    """Convert a dashed, dotted or underscored name to camelCase."""
    parts = [p for p in re.split(r"[-_.~\s]+", value) if p]
    if not parts:
        return ""
    return parts[0].lower() + "".join(p[:1].upper() + p[1:].lower() for p in parts[1:])


class Namespace:
    """A parsed generator namespace with value semantics."""

    def __init__(self, parsed: ParsedNamespace) -> None:
        self.scope = parsed.scope
        self.unscoped = parsed.unscoped
        self.generator = parsed.generator
        self.semver = parsed.semver
        self.instance_id = parsed.instance_id
        self.method = parsed.method
        self.flags = parsed.flags
        logger.debug("Parsed namespace %r", self)

    @staticmethod
    def parse(complete: str) -> ParsedNamespace | None:
        """Parse ``complete`` into raw fields, or return None if it is not a namespace."""
        if not isinstance(complete, str):
            return None
        try:
            return _Parser(complete).parse()
        except NamespaceSyntaxError as e:
            logger.debug("Namespace failed to parse: %s", e)
            return None

    # ----- Derived strings -----

    @property
    def generator_path(self) -> list[str]:
        """Generator path split into its colon-separated segments."""
        return self.generator.split(":") if self.generator else []

    @property
    def package_namespace(self) -> str:
        scope = f"{self.scope}/" if self.scope else ""
        return f"{scope}{self.unscoped}"

    @property
    def namespace(self) -> str:
        generator = f":{self.generator}" if self.generator else ""
        return f"{self.package_namespace}{generator}"

    @namespace.setter
    def namespace(self, value: str) -> None:
        parsed = _Parser(value).parse()
        self.scope = parsed.scope or self.scope
        self.unscoped = parsed.unscoped or self.unscoped
        self.generator = parsed.generator or self.generator
        self.semver = parsed.semver or self.semver
        self.instance_id = parsed.instance_id or self.instance_id
        self.method = parsed.method or self.method
        self.flags = parsed.flags or self.flags

    @property
    def id(self) -> str:
        instance = f"+{self.instance_id}" if self.instance_id else ""
        return f"{self.namespace}{instance}"

    @property
    def complete(self) -> str:
        semver = f"@{self.semver}@" if self.semver else ""
        instance = f"+{self.instance_id}" if self.instance_id else ""
        method = f"#{self.method}" if self.method else ""
        flags = self.flags.value if self.flags else ""
        return f"{self.namespace}{semver}{instance}{method}{flags}"

    @property
    def generator_hint(self) -> str:
        """Name of the package expected to provide this namespace."""
        scope = f"{self.scope}/" if self.scope else ""
        return f"{scope}gen-{self.unscoped}"

    @property
    def versioned_hint(self) -> str:
        if self.semver:
            return f'{self.generator_hint}@"{self.semver}"'
        return self.generator_hint

    @property
    def method_name(self) -> str | None:
        return camel_case(self.method) if self.method else None

    # ----- Flags -----

    @property
    def install(self) -> bool:
        return self.flags is NamespaceFlag.INSTALL

    @property
    def load(self) -> bool:
        return self.flags is NamespaceFlag.LOAD

    @property
    def optional(self) -> bool:
        return self.flags is NamespaceFlag.OPTIONAL

    # ----- Mutation -----

    def bump_id(self) -> None:
        """Advance the instance id: unset -> 1 -> 2, appending when the last part can't be incremented."""
        if not self.instance_id:
            self.instance_id = "1"
            return
        ids = self.instance_id.split("+")
        last = ids.pop()
        if not last.isdigit() or last.startswith("0"):
            ids.extend([last, "1"])
        else:
            ids.append(str(int(last) + 1))
        self.instance_id = "+".join(ids)

    def copy(self) -> Namespace:
        return Namespace(
            ParsedNamespace(
                complete=self.complete,
                unscoped=self.unscoped,
                scope=self.scope,
                generator=self.generator,
                semver=self.semver,
                instance_id=self.instance_id,
                method=self.method,
                flags=self.flags,
            )
        )

    def _fields(self) -> tuple[Any, ...]:
        return (
            self.scope,
            self.unscoped,
            self.generator,
            self.semver,
            self.instance_id,
            self.method,
            self.flags,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Namespace):
            return NotImplemented
        return self._fields() == other._fields()

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return self.complete

    def __repr__(self) -> str:
        return f"Namespace({self.complete!r})"


def parse_namespace(namespace: str) -> Namespace | None:
    """Parse a namespace string, returning None when it is not a namespace."""
    parsed = Namespace.parse(namespace)
    return Namespace(parsed) if parsed else None


def is_namespace(value: object) -> bool:
    """Test if ``value`` is a :class:`Namespace` instance."""
    return isinstance(value, Namespace)


def to_namespace(value: str | Namespace) -> Namespace | None:
    """Convert a string to a Namespace, passing Namespace instances through."""
    if isinstance(value, Namespace):
        return value
    return parse_namespace(value)


def require_namespace(value: str | Namespace) -> Namespace:
    """Like :func:`to_namespace` but raise when ``value`` is not a namespace."""
    if isinstance(value, Namespace):
        return value
    if not isinstance(value, str):
        raise NamespaceSyntaxError(repr(value), reason="not a string")
    return Namespace(_Parser(value).parse())
