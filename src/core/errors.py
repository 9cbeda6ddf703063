"""Error types for the status tool.

Every failure keeps the context needed to explain it afterwards (the command
line, both captured streams, or the text that could not be parsed).
"""

from __future__ import annotations


class StatusToolError(RuntimeError):
    """Base error."""


class LocationError(StatusToolError):
    """The running executable (or its directory) could not be resolved."""


class ExecutionError(StatusToolError):
    """A companion executable failed to spawn or exited non-zero."""

    def __init__(
        self,
        command: str,
        *,
        stdout: str = "",
        stderr: str = "",
        returncode: int | None = None,
    ) -> None:
        super().__init__(f"{command} failed.: Stdout:\n{stdout}\nStderr:\n{stderr}")
        self.command = command
        self.stdout = stdout
        self.stderr = stderr
        self.returncode = returncode


class DecodeError(StatusToolError):
    """The executable succeeded but its output did not match the expected shape."""

    def __init__(self, message: str, *, raw: str = "") -> None:
        super().__init__(message)
        self.raw = raw


class NetworkLookupError(StatusToolError, LookupError):
    """A network has no entry in the active payment driver table."""

    def __init__(self, network: str) -> None:
        super().__init__(f"Payment driver config for network '{network}' not found.")
        self.network = network


class IdentityError(StatusToolError):
    """The daemon answered the identity query with a domain-level failure."""
