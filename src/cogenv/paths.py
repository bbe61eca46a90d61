"""Search-root computation for installed generator packages.

Local roots are the ``node_modules`` folders of the working directory and
its ancestors. Global roots come from platform defaults, environment
variables, the location this package is installed in and, when allowed,
the ``npm``/``yarn`` global directory commands.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path, PurePath
from typing import Callable, Iterable, Mapping, Sequence

from cogenv.utils.command import run_command as default_run_command

logger = logging.getLogger(__name__)

__all__ = ["PathResolver", "PACKAGES_DIR", "VALID_ROOT_SUFFIXES", "unique"]

PACKAGES_DIR = "node_modules"
VALID_ROOT_SUFFIXES = ("/node_modules", "/.node_modules", "/.node_libraries", "/node")

PROJECT_ROOT = Path(__file__).resolve().parent

_YARN_BASES: dict[str, Callable[[Mapping[str, str]], list[str]]] = {
    "win32": lambda env: [f"{env.get('APPDATA', '')}/Yarn/config/global"],
    "darwin": lambda env: ["~/.config/yarn/global"],
    "linux": lambda env: ["/usr/local/share/.config/yarn/global"],
}

_NPM_ROOTS: dict[str, Callable[[Mapping[str, str]], list[str]]] = {
    "win32": lambda env: [
        f"{env.get('APPDATA', '')}/npm/node_modules",
        f"{env.get('APPDATA', '')}/roaming/npm/node_modules",
    ],
    "darwin": lambda env: ["/usr/local/lib/node_modules"],
    "linux": lambda env: ["/usr/local/lib/node_modules"],
}

RunCommand = Callable[[str, Sequence[str], float], str]


def unique(paths: Iterable[str | None]) -> list[str]:
    """Drop empty values and duplicates, keeping first occurrences."""
    seen: set[str] = set()
    result: list[str] = []
    for path in paths:
        if not path or path in seen:
            continue
        seen.add(path)
        result.append(path)
    return result


def _platform_key(platform: str) -> str:
    if platform.startswith("linux"):
        return "linux"
    return platform


class PathResolver:
    """Computes the ordered package roots to search.

    Results that require external commands are cached on the instance.
    """

    def __init__(
        self,
        cwd: str | os.PathLike[str] | None = None,
        env: Mapping[str, str] | None = None,
        platform: str | None = None,
        run_command: RunCommand | None = None,
        command_timeout: float = 5.0,
        ask_package_managers: bool = True,
        extra_roots: Iterable[str] = (),
        argv0: str | None = None,
    ) -> None:
        self.cwd = os.path.abspath(cwd) if cwd is not None else os.getcwd()
        self.env: Mapping[str, str] = env if env is not None else os.environ
        self.platform = _platform_key(platform or sys.platform)
        self.command_timeout = command_timeout
        self.ask_package_managers = ask_package_managers
        self.extra_roots = list(extra_roots)
        self.argv0 = argv0 if argv0 is not None else (sys.argv[0] if sys.argv else "")
        self._run_command: RunCommand = run_command or default_run_command
        self._command_cache: dict[tuple[str, ...], str] = {}
        self._global_cache: dict[bool, list[str]] = {}

    @property
    def win32(self) -> bool:
        return self.platform == "win32"

    def _join(self, *parts: str) -> str:
        return os.path.normpath(os.path.join(*parts))

    def command_output(self, name: str, *args: str) -> str:
        """Cached, best-effort output of an external command."""
        if not self.ask_package_managers:
            return ""
        key = (name, *args)
        if key not in self._command_cache:
            try:
                self._command_cache[key] = self._run_command(name, list(args), self.command_timeout) or ""
            except Exception as e:
                logger.debug("Command %s failed: %s", " ".join(key), e)
                self._command_cache[key] = ""
        return self._command_cache[key]

    def _filter_valid(self, path: str, filter_paths: bool) -> str | None:
        if not filter_paths:
            return path
        posix = path.replace("\\", "/")
        return path if posix.endswith(VALID_ROOT_SUFFIXES) else None

    # ----- Roots -----

    def local_roots(self) -> list[str]:
        """``node_modules`` of the cwd and each ancestor, deepest first."""
        cwd = PurePath(self.cwd)
        return unique(str(directory / PACKAGES_DIR) for directory in [cwd, *cwd.parents])

    def global_roots(self, filter_paths: bool = False) -> list[str]:
        """Global package roots, lowest priority first.

        With ``filter_paths`` the roots inferred from the install location
        are dropped unless they end in a known package folder name.
        """
        if filter_paths in self._global_cache:
            return list(self._global_cache[filter_paths])

        paths: list[str | None] = []

        nvm_home = self.env.get("NVM_HOME")
        if nvm_home:
            node_version = self.command_output("node", "--version")
            if node_version:
                paths.append(self._join(nvm_home, node_version, PACKAGES_DIR))
        elif self.win32:
            paths.append(self._join(self.env.get("APPDATA", ""), "npm", PACKAGES_DIR))
        else:
            paths.append("/usr/lib/node_modules")
            paths.append("/usr/local/lib/node_modules")

        nvm_path = self.env.get("NVM_PATH")
        if nvm_path:
            paths.append(self._join(os.path.dirname(nvm_path), PACKAGES_DIR))

        extra = [p for p in self.env.get("NODE_PATH", "").split(os.pathsep) if p]
        extra.extend(self.extra_roots)
        if extra:
            paths = [*extra, *paths]

        # The package is installed either as <root>/gen-foo/node_modules/cogenv
        # (nested) or as <root>/cogenv (direct).
        parents = PROJECT_ROOT.parents
        if len(parents) > 2:
            paths.append(self._filter_valid(str(parents[2]), filter_paths))
        if len(parents) > 0:
            paths.append(str(parents[0]))

        yarn_base = self.command_output("yarn", "global", "dir")
        if yarn_base:
            paths.append(self._join(yarn_base, PACKAGES_DIR))
            paths.append(self._join(yarn_base, "..", "link"))

        npm_root = self.command_output("npm", "root", "-g")
        if npm_root:
            paths.append(os.path.abspath(npm_root))

        if self.argv0:
            linked = self._join(os.path.dirname(os.path.abspath(self.argv0)), "..", "..")
            paths.append(self._filter_valid(linked, filter_paths))

        result = list(reversed(unique(paths)))
        self._global_cache[filter_paths] = result
        logger.debug("Global package roots: %s", result)
        return list(result)

    def get_npm_paths(self, local_only: bool = False, filter_paths: bool = False) -> list[str]:
        """Local roots followed by global roots unless ``local_only``."""
        paths = self.local_roots()
        if not local_only:
            paths.extend(self.global_roots(filter_paths))
        return unique(paths)

    # ----- Package manager bases -----

    def _platform_defaults(self, table: Mapping[str, Callable[[Mapping[str, str]], list[str]]]) -> list[str]:
        factory = table.get(self.platform)
        if factory is None:
            return []
        return [os.path.abspath(os.path.expanduser(p)) for p in factory(self.env)]

    def resolve_yarn_base(self, ask: bool = False) -> list[str]:
        """Yarn global base directories that exist on disk."""
        if ask:
            result = [self.command_output("yarn", "global", "dir")]
        else:
            result = self._platform_defaults(_YARN_BASES)
        return [p for p in result if p and os.path.exists(p)]

    def resolve_npm_root(self, ask: bool = False) -> list[str]:
        """npm global ``node_modules`` directories that exist on disk."""
        if ask:
            result = [self.command_output("npm", "root", "-g")]
        else:
            result = self._platform_defaults(_NPM_ROOTS)
        return [p for p in result if p and os.path.exists(p)]
