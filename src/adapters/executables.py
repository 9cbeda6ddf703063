"""Companion executable location and command building.

Lookup order:
1) The directory of this tool's own binary, after following symlinks, when
   *both* companions live there.
2) Otherwise bare program names, resolved by PATH at spawn time.

The fallback is deliberately lenient: a computed directory without both
companions is treated as "installed via PATH", never as an error, and a set is
never half located.
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from adapters.process_runner import CommandSpec
from adapters.provider import YaProviderCommand
from adapters.yagna import YagnaCommand
from core.config import AppSettings
from core.errors import LocationError

logger = logging.getLogger(__name__)

# Fixed bound on symlink hops; protects against link cycles.
MAX_SYMLINK_HOPS = 5

DAEMON_PROGRAM = "yagna"
PROVIDER_PROGRAM = "ya-provider"
PLUGINS_DIR = Path(".local/lib/yagna/plugins")
PLUGINS_GLOB = "ya-*.json"
EXE_UNIT_PATH_ENV = "EXE_UNIT_PATH"


def current_executable() -> Path:
    """Absolute path of the running tool (the frozen binary or the launcher script)."""

    if getattr(sys, "frozen", False):
        candidate = sys.executable
    else:
        candidate = sys.argv[0] if sys.argv else ""
    if not candidate:
        raise LocationError("Unable to resolve own executable path")
    return Path(os.path.abspath(candidate))


def resolve_symlinks(path: Path, *, max_hops: int = MAX_SYMLINK_HOPS) -> Path:
    """Follow at most ``max_hops`` symlinks starting from ``path``."""

    current = path
    for _ in range(max_hops):
        try:
            target = Path(os.readlink(current))
        except OSError:
            break
        current = target if target.is_absolute() else current.parent / target
    return current


def _home_dir() -> Path | None:
    try:
        return Path.home()
    except RuntimeError:
        return None


@dataclass(frozen=True)
class ExecutableSet:
    """Where the companions live: ``base_dir`` or, when ``None``, PATH."""

    base_dir: Path | None = None
    daemon_program: str = DAEMON_PROGRAM
    provider_program: str = PROVIDER_PROGRAM
    plugins_dir: Path = PLUGINS_DIR
    plugins_glob: str = PLUGINS_GLOB

    def __post_init__(self) -> None:
        base = self.base_dir
        if base is None:
            return
        if not (base / self.daemon_program).exists() or not (base / self.provider_program).exists():
            logger.debug("Companions not found in %s, using PATH", base)
            object.__setattr__(self, "base_dir", None)
        else:
            logger.debug("Using companions from %s", base)

    @classmethod
    def locate(
        cls,
        exe_path: Path | None = None,
        *,
        daemon_program: str = DAEMON_PROGRAM,
        provider_program: str = PROVIDER_PROGRAM,
        plugins_dir: Path = PLUGINS_DIR,
        plugins_glob: str = PLUGINS_GLOB,
    ) -> "ExecutableSet":
        me = resolve_symlinks(exe_path if exe_path is not None else current_executable())

        base = me.parent
        if base == me:
            raise LocationError("Unable to resolve yagna binaries location")

        return cls(
            base_dir=base,
            daemon_program=daemon_program,
            provider_program=provider_program,
            plugins_dir=plugins_dir,
            plugins_glob=plugins_glob,
        )

    @classmethod
    def from_settings(cls, settings: AppSettings, exe_path: Path | None = None) -> "ExecutableSet":
        return cls.locate(
            exe_path,
            daemon_program=settings.daemon_program,
            provider_program=settings.provider_program,
            plugins_dir=settings.plugins_dir,
            plugins_glob=settings.plugins_glob,
        )

    @property
    def uses_path(self) -> bool:
        return self.base_dir is None

    def cmd(self, program: str) -> CommandSpec:
        if self.base_dir is None:
            return CommandSpec(program=program)
        return CommandSpec(program=str(self.base_dir / program))

    def ya_provider(self, *, home: Path | None = None) -> YaProviderCommand:
        """Provider agent builder; exposes ExeUnit plugins when they are installed."""

        spec = self.cmd(self.provider_program)
        home = home if home is not None else _home_dir()
        if home is not None:
            plugins = home / self.plugins_dir
            if plugins.exists():
                spec = spec.with_env(EXE_UNIT_PATH_ENV, str(plugins / self.plugins_glob))
        return YaProviderCommand(spec)

    def yagna(self) -> YagnaCommand:
        return YagnaCommand(self.cmd(self.daemon_program))
