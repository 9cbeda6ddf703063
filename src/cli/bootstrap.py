"""Shared startup for CLI commands: settings and companion location.

Configuration and location problems end the command with exit code 1 and a
logged message instead of a traceback.
"""

from __future__ import annotations

import logging

import typer
from pydantic import ValidationError

from adapters.executables import ExecutableSet
from core.config import AppSettings
from core.errors import StatusToolError

logger = logging.getLogger(__name__)


def load_settings() -> AppSettings:
    try:
        return AppSettings()
    except ValidationError as exc:
        logger.error("Invalid configuration: %s", exc)
        raise typer.Exit(code=1) from exc


def load_executables(settings: AppSettings) -> ExecutableSet:
    try:
        return ExecutableSet.from_settings(settings)
    except StatusToolError as exc:
        logger.error("%s", exc)
        raise typer.Exit(code=1) from exc
