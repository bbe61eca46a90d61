"""Status line output for consumers of the environment.

Status kinds map to ANSI styles through a fixed table; asking for a kind
that is not a :class:`StatusKind` is an error, never silently unstyled.
"""

from __future__ import annotations

import os
import sys
from enum import Enum
from typing import Any, Iterable, TextIO

from cogenv.errors import InvalidInputError

__all__ = ["StatusKind", "StatusLogger", "STATUS_STYLES"]

_RESET = "\x1b[0m"
_BOLD = "\x1b[1m"
_RED = "\x1b[31m"
_GREEN = "\x1b[32m"
_YELLOW = "\x1b[33m"
_MAGENTA = "\x1b[35m"
_CYAN = "\x1b[36m"
_GRAY = "\x1b[90m"


class StatusKind(str, Enum):
    SKIP = "skip"
    FORCE = "force"
    CREATE = "create"
    INVOKE = "invoke"
    CONFLICT = "conflict"
    IDENTICAL = "identical"
    INJECT = "inject"
    INFO = "info"


STATUS_STYLES: dict[StatusKind, str] = {
    StatusKind.SKIP: _YELLOW,
    StatusKind.FORCE: _YELLOW,
    StatusKind.CREATE: _GREEN,
    StatusKind.INVOKE: _BOLD,
    StatusKind.CONFLICT: _RED,
    StatusKind.IDENTICAL: _CYAN,
    StatusKind.INJECT: _MAGENTA,
    StatusKind.INFO: _GRAY,
}

_STATUS_WIDTH = max(len(kind.value) for kind in StatusKind)
_OK_SYMBOL = "✔"
_ERROR_SYMBOL = "✖"


def _use_color() -> bool:
    return not os.environ.get("NO_COLOR")


def _format(message: str, args: tuple[Any, ...]) -> str:
    return message % args if args else message


class StatusLogger:
    """Writes padded, colored status lines to a stream (stderr by default)."""

    def __init__(self, stream: TextIO | None = None, color: bool | None = None) -> None:
        self.stream = stream if stream is not None else sys.stderr
        self.color = _use_color() if color is None else color

    def _style(self, text: str, style: str) -> str:
        if not self.color:
            return text
        return f"{style}{text}{_RESET}"

    def write(self, message: str = "", *args: Any) -> StatusLogger:
        self.stream.write(_format(message, args))
        return self

    def writeln(self, message: str = "", *args: Any) -> StatusLogger:
        return self.write(message, *args).write("\n")

    def ok(self, message: str, *args: Any) -> StatusLogger:
        return self.writeln(f"{self._style(_OK_SYMBOL, _GREEN)} {_format(message, args)}")

    def error(self, message: str, *args: Any) -> StatusLogger:
        return self.writeln(f"{self._style(_ERROR_SYMBOL, _RED)} {_format(message, args)}")

    def status(self, kind: StatusKind | str, message: str, *args: Any) -> StatusLogger:
        """Write ``message`` prefixed with the right-aligned, styled ``kind``.

        Raises:
            InvalidInputError: If ``kind`` is not a known status.
        """
        try:
            kind = StatusKind(kind)
        except ValueError:
            raise InvalidInputError(message=f"Unknown status kind: {kind!r}") from None
        label = self._style(kind.value.rjust(_STATUS_WIDTH), STATUS_STYLES[kind])
        return self.writeln(f"{label} {_format(message, args)}")

    def skip(self, message: str, *args: Any) -> StatusLogger:
        return self.status(StatusKind.SKIP, message, *args)

    def force(self, message: str, *args: Any) -> StatusLogger:
        return self.status(StatusKind.FORCE, message, *args)

    def create(self, message: str, *args: Any) -> StatusLogger:
        return self.status(StatusKind.CREATE, message, *args)

    def invoke(self, message: str, *args: Any) -> StatusLogger:
        return self.status(StatusKind.INVOKE, message, *args)

    def conflict(self, message: str, *args: Any) -> StatusLogger:
        return self.status(StatusKind.CONFLICT, message, *args)

    def identical(self, message: str, *args: Any) -> StatusLogger:
        return self.status(StatusKind.IDENTICAL, message, *args)

    def inject(self, message: str, *args: Any) -> StatusLogger:
        return self.status(StatusKind.INJECT, message, *args)

    def info(self, message: str, *args: Any) -> StatusLogger:
        return self.status(StatusKind.INFO, message, *args)

    @staticmethod
    def table(rows: Iterable[Iterable[Any]]) -> str:
        """Align ``rows`` into left-justified columns separated by two spaces."""
        cells = [[str(cell) for cell in row] for row in rows]
        if not cells:
            return ""
        widths: list[int] = []
        for row in cells:
            for i, cell in enumerate(row):
                if i == len(widths):
                    widths.append(len(cell))
                else:
                    widths[i] = max(widths[i], len(cell))
        lines = ["  ".join(cell.ljust(widths[i]) for i, cell in enumerate(row)).rstrip() for row in cells]
        return "\n".join(lines)
