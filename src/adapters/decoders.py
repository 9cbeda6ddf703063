"""Decoders for companion executable output.

Two strategies:
- JSON: the whole stdout is one JSON value validated into a Pydantic model.
- Version banner: ``yagna --version`` prints free text, matched with a regex.

Both raise ``DecodeError`` (never ``ExecutionError``): the process succeeded,
only its output contract changed.
"""

from __future__ import annotations

import re
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from core.domain.models import VersionRaw
from core.errors import DecodeError

ModelT = TypeVar("ModelT", bound=BaseModel)

# "yagna 0.9.1 (abc1234 2022-05-10 build #42)"; the build clause is optional.
VERSION_BANNER_RE = re.compile(r"yagna ([0-9.]+) \(([a-z0-9]+) ([-0-9]+)( build #(\d+))?")


def _text(raw: bytes | str) -> str:
    if isinstance(raw, bytes):
        return raw.decode("utf-8", errors="replace")
    return raw


def decode_json(raw: bytes | str, model: type[ModelT], *, what: str = "output") -> ModelT:
    """Validate ``raw`` JSON into ``model``."""

    try:
        return model.model_validate_json(raw)
    except ValidationError as exc:
        raise DecodeError(f"parsing {what}: {exc}", raw=_text(raw)) from exc


def parse_version_banner(raw: bytes | str) -> VersionRaw:
    """Extract version, sha, date and optional CI build number from the banner."""

    text = _text(raw)
    match = VERSION_BANNER_RE.search(text)
    if match is None:
        raise DecodeError(f"cannot parse yagna version {text!r}", raw=text)
    return VersionRaw(
        version=match.group(1),
        sha=match.group(2),
        date=match.group(3),
        build=match.group(5) or "",
    )
