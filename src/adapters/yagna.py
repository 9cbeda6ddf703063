"""Typed queries against the core daemon (`yagna`).

Each query spawns exactly one child process and decodes its reply into a
domain model.
"""

from __future__ import annotations

from typing import TypeVar

from pydantic import BaseModel

from adapters.decoders import decode_json, parse_version_banner
from adapters.process_runner import CommandSpec, run_checked
from core.domain.models import (
    ActivityStatus,
    Id,
    IdentityResult,
    InvoiceStats,
    StatusResult,
    VersionInfo,
    VersionRaw,
)
from core.domain.payment import NetworkName, PaymentDriver

ModelT = TypeVar("ModelT", bound=BaseModel)

JSON_FLAG = "--json"


class YagnaCommand:
    """Daemon command builder; every method uses its own copy of the base spec."""

    def __init__(self, spec: CommandSpec) -> None:
        self.spec = spec

    async def _run_json(self, spec: CommandSpec, model: type[ModelT]) -> ModelT:
        stdout = await run_checked(spec.with_args(JSON_FLAG))
        return decode_json(stdout, model, what=" ".join(spec.args))

    async def identity(self) -> IdentityResult:
        """Raw `id show` union: ``Ok`` with the identity or ``Err`` with a message."""

        return await self._run_json(self.spec.with_args("id", "show"), IdentityResult)

    async def default_id(self) -> Id:
        """Default identity; raises ``IdentityError`` when the daemon reports ``Err``."""

        result = await self.identity()
        return result.unwrap()

    async def version(self) -> VersionInfo:
        return await self._run_json(self.spec.with_args("version", "show"), VersionInfo)

    async def version_raw(self) -> VersionRaw:
        stdout = await run_checked(self.spec.with_args("--version"))
        return parse_version_banner(stdout)

    async def payment_status(
        self,
        address: str,
        network: NetworkName | str,
        payment_driver: PaymentDriver,
    ) -> StatusResult:
        platform = payment_driver.platform(network)
        spec = self.spec.with_args(
            "payment",
            "status",
            "--account",
            address,
            "--network",
            str(network),
            "--driver",
            platform.driver,
        )
        return await self._run_json(spec, StatusResult)

    async def invoice_status(self) -> InvoiceStats:
        return await self._run_json(self.spec.with_args("payment", "invoice", "status"), InvoiceStats)

    async def activity_status(self) -> ActivityStatus:
        return await self._run_json(self.spec.with_args("activity", "status"), ActivityStatus)
