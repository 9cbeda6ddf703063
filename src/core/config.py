"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) without leaking them
  into the CLI.
- Locator, command builders and the status pipeline all read the same contract.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.payment import NetworkGroup, driver_for

APP_NAME = "ya-status"


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / APP_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_NAME

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], *, env_path: Path | None = None) -> Path:
    """Write/update variables in the user's global .env file."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# ya-status user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Central application settings.

    Why pydantic-settings:
    - Typed and validated at the edge (env vars, .env) so the core never parses
      strings itself.
    - One configuration contract for the CLI and the adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="YA_STATUS_",
        extra="ignore",
        case_sensitive=False,
        # Project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    log_level: str = Field(
        default="INFO",
        description="Root log level (DEBUG shows every spawned command).",
    )

    payment_driver: str = Field(
        default="erc20",
        description="Payment driver table used to resolve networks (erc20 or zksync).",
    )
    network_group: NetworkGroup = Field(
        default=NetworkGroup.MAINNET,
        description="Which group of networks the status report queries.",
    )
    account: str | None = Field(
        default=None,
        description="Account to report on; defaults to the provider/identity account.",
    )

    daemon_program: str = Field(
        default="yagna",
        min_length=1,
        description="Core daemon executable name.",
    )
    provider_program: str = Field(
        default="ya-provider",
        min_length=1,
        description="Provider agent executable name.",
    )
    plugins_dir: Path = Field(
        default=Path(".local/lib/yagna/plugins"),
        description="ExeUnit plugin directory, relative to the user's home.",
    )
    plugins_glob: str = Field(
        default="ya-*.json",
        min_length=1,
        description="Glob of plugin descriptors inside `plugins_dir`.",
    )

    @field_validator("payment_driver")
    @classmethod
    def _known_driver(cls, value: str) -> str:
        return driver_for(value).name

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.strip().upper() or "INFO"
