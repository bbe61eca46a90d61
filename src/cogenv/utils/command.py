"""Best-effort execution of external helper commands."""

from __future__ import annotations

import logging
import re
import subprocess
from typing import Sequence

logger = logging.getLogger(__name__)

__all__ = ["run_command", "clean_ansi", "ANSI_RE"]

ANSI_RE = re.compile(
    r"[\u001B\u009B][\[\]()#;?]*(?:(?:(?:[a-zA-Z\d]*(?:;[-a-zA-Z\d/#&.:=?%@~_]*)*)?\u0007)"
    r"|(?:(?:\d{1,4}(?:;\d{0,4})*)?[\dA-PR-TZcf-ntqry=><~]))"
)


def clean_ansi(text: str) -> str:
    """Strip ANSI escape sequences from ``text``."""
    return ANSI_RE.sub("", text)


def run_command(name: str, args: Sequence[str] = (), timeout: float = 5.0) -> str:
    """Run ``name`` with ``args`` and return its trimmed stdout.

    Any failure (missing executable, non-zero exit, timeout) yields ``""``.
    """
    try:
        result = subprocess.run(
            [name, *args],
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("Command %s %s failed: %s", name, " ".join(args), e)
        return ""
    if result.returncode != 0:
        logger.debug("Command %s %s exited with %d", name, " ".join(args), result.returncode)
        return ""
    return clean_ansi(result.stdout).strip()
