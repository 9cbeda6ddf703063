"""Subprocess execution for the companion executables.

Why a wrapper:
- Every query follows the same rules: stdin closed, stdout and stderr captured
  separately, exit status decides success.
- Failures keep the rendered command and both streams so a diagnostic can be
  shown without re-running anything.

Known limitation: there is no timeout. A hung child hangs the awaiting task
until it is cancelled, and cancellation kills the child.
"""

from __future__ import annotations

import asyncio
import logging
import os
import shlex
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping, Union

from core.errors import ExecutionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandSpec:
    """A ready-to-run invocation. Never mutated: ``with_*`` return copies."""

    program: str
    args: tuple[str, ...] = ()
    env: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(str(a) for a in self.args))
        object.__setattr__(self, "env", MappingProxyType(dict(self.env)))

    def with_args(self, *args: str) -> "CommandSpec":
        return replace(self, args=(*self.args, *args))

    def with_env(self, key: str, value: str) -> "CommandSpec":
        return replace(self, env={**self.env, key: value})

    @property
    def argv(self) -> list[str]:
        return [self.program, *self.args]

    def describe(self) -> str:
        """Shell-like rendering, with environment overrides first."""

        prefix = " ".join(f"{k}={shlex.quote(v)}" for k, v in sorted(self.env.items()))
        line = shlex.join(self.argv)
        return f"{prefix} {line}" if prefix else line


@dataclass(frozen=True)
class ProcessSuccess:
    stdout: bytes

    ok = True


@dataclass(frozen=True)
class ProcessFailure:
    command: str
    stdout: str
    stderr: str
    returncode: int | None

    ok = False

    def to_error(self) -> ExecutionError:
        return ExecutionError(
            self.command,
            stdout=self.stdout,
            stderr=self.stderr,
            returncode=self.returncode,
        )


ProcessResult = Union[ProcessSuccess, ProcessFailure]


def _decode(data: bytes | None) -> str:
    return (data or b"").decode("utf-8", errors="replace")


async def run(spec: CommandSpec) -> ProcessResult:
    """Run ``spec`` to completion and classify the outcome."""

    command = spec.describe()
    logger.debug("Running: %s", command)

    env = {**os.environ, **spec.env}
    try:
        process = await asyncio.create_subprocess_exec(
            spec.program,
            *spec.args,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=env,
        )
    except (OSError, ValueError) as exc:
        # OSError: missing or non-executable program; ValueError: NUL byte in argv.
        logger.debug("Could not spawn %s: %s", command, exc)
        return ProcessFailure(command=command, stdout="", stderr=str(exc), returncode=None)

    try:
        stdout, stderr = await process.communicate()
    except asyncio.CancelledError:
        if process.returncode is None:
            try:
                process.kill()
            except ProcessLookupError:
                pass
            await process.wait()
        raise

    if process.returncode == 0:
        return ProcessSuccess(stdout=stdout)

    logger.debug("%s exited with %s", command, process.returncode)
    return ProcessFailure(
        command=command,
        stdout=_decode(stdout),
        stderr=_decode(stderr),
        returncode=process.returncode,
    )


async def run_checked(spec: CommandSpec) -> bytes:
    """Like ``run`` but raise ``ExecutionError`` on failure; returns raw stdout."""

    result = await run(spec)
    if isinstance(result, ProcessFailure):
        raise result.to_error()
    return result.stdout
