"""Typed queries against the provider agent (`ya-provider`)."""

from __future__ import annotations

from adapters.decoders import decode_json
from adapters.process_runner import CommandSpec, run_checked
from core.domain.models import ProviderConfig


class YaProviderCommand:
    def __init__(self, spec: CommandSpec) -> None:
        self.spec = spec

    async def get_config(self) -> ProviderConfig:
        """Current provider configuration (node name, subnet, account)."""

        stdout = await run_checked(self.spec.with_args("--json", "config", "get"))
        return decode_json(stdout, ProviderConfig, what="ya-provider config get")
