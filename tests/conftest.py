"""Pytest configuration and fixtures."""

from __future__ import annotations

import json
import os
import stat
import sys
from pathlib import Path
from typing import Callable

import pytest

# src layout: make `core`, `adapters`, `cli` importable without an install.
_SRC = Path(__file__).resolve().parents[1] / "src"
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

_SCRIPT = """#!{python}
import json
import os
import sys

RESPONSES = json.loads({responses!r})
LOG = {log!r}

key = " ".join(sys.argv[1:])
with open(LOG, "a", encoding="utf-8") as fh:
    fh.write(json.dumps({{"argv": sys.argv[1:], "exe_unit_path": os.environ.get("EXE_UNIT_PATH")}}) + "\\n")
stdout, stderr, code = RESPONSES.get(key, RESPONSES.get("*", ["", "unknown command: " + key, 2]))
sys.stdout.write(stdout)
sys.stderr.write(stderr)
sys.exit(code)
"""


class FakeProgram:
    """A real executable that answers by argv lookup and records its calls."""

    def __init__(self, path: Path, log: Path) -> None:
        self.path = path
        self.log = log

    @property
    def calls(self) -> list[dict]:
        if not self.log.exists():
            return []
        return [json.loads(line) for line in self.log.read_text(encoding="utf-8").splitlines()]


@pytest.fixture
def make_program(tmp_path: Path) -> Callable[..., FakeProgram]:
    def factory(
        name: str,
        responses: dict[str, tuple[str, str, int]],
        *,
        directory: Path | None = None,
    ) -> FakeProgram:
        directory = directory or tmp_path / "bin"
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        log = tmp_path / f"{name}.calls.jsonl"
        path.write_text(
            _SCRIPT.format(
                python=sys.executable,
                responses=json.dumps({k: list(v) for k, v in responses.items()}),
                log=str(log),
            ),
            encoding="utf-8",
        )
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return FakeProgram(path, log)

    return factory


@pytest.fixture
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Keep settings away from the developer's real .env and config dir."""

    for key in list(os.environ):
        if key.startswith("YA_STATUS_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)
    return tmp_path
