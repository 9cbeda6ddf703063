"""Node status aggregation.

This module runs every query the status report needs and collects the results
in one structure. The CLI only renders it, which keeps the pipeline reusable
(tests, JSON export) and keeps printing out of the core logic.

Each section fails independently: an error becomes a warning and the section is
left empty, the rest of the report is still produced.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, TypeVar

from adapters.executables import ExecutableSet
from core.config import AppSettings
from core.domain.models import (
    ActivityStatus,
    InvoiceStats,
    ProviderConfig,
    StatusResult,
    VersionInfo,
    VersionRaw,
)
from core.domain.payment import NETWORK_GROUP_MAP, NetworkName, driver_for, networks_in_group
from core.errors import StatusToolError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class PipelineHooks:
    """Optional callbacks for UI layers."""

    warning: Callable[[str], None] | None = None


@dataclass
class StatusReport:
    """Everything the status command shows. Sections are ``None`` when unavailable."""

    config: ProviderConfig | None = None
    node_id: str | None = None
    account: str | None = None
    version: VersionInfo | None = None
    version_raw: VersionRaw | None = None
    activity: ActivityStatus | None = None
    invoices: InvoiceStats | None = None
    payments: dict[str, StatusResult] = field(default_factory=dict)
    driver: str = ""
    network_group: str = ""
    warnings: list[str] = field(default_factory=list)

    @property
    def daemon_running(self) -> bool:
        return self.version is not None or self.version_raw is not None

    def to_payload(self) -> dict[str, Any]:
        def dump(model: Any) -> Any:
            return model.model_dump(mode="json") if model is not None else None

        return {
            "config": dump(self.config),
            "node_id": self.node_id,
            "account": self.account,
            "version": dump(self.version),
            "version_raw": dump(self.version_raw),
            "activity": dump(self.activity),
            "invoices": dump(self.invoices),
            "payments": {network: dump(status) for network, status in self.payments.items()},
            "driver": self.driver,
            "network_group": self.network_group,
            "warnings": list(self.warnings),
        }


async def collect_status(
    *,
    settings: AppSettings,
    executables: ExecutableSet,
    hooks: PipelineHooks | None = None,
) -> StatusReport:
    hooks = hooks or PipelineHooks()
    driver = driver_for(settings.payment_driver)
    report = StatusReport(driver=driver.name, network_group=settings.network_group.value)

    def warn(message: str) -> None:
        logger.debug("status: %s", message)
        report.warnings.append(message)
        if hooks.warning:
            hooks.warning(message)

    async def safe(label: str, factory: Callable[[], Awaitable[T]]) -> T | None:
        try:
            return await factory()
        except StatusToolError as exc:
            warn(f"{label}: {exc}")
            return None

    yagna = executables.yagna
    (
        report.config,
        identity,
        report.version,
        report.version_raw,
        report.activity,
        report.invoices,
    ) = await asyncio.gather(
        safe("provider config", lambda: executables.ya_provider().get_config()),
        safe("identity", lambda: yagna().default_id()),
        safe("version", lambda: yagna().version()),
        safe("version banner", lambda: yagna().version_raw()),
        safe("activity status", lambda: yagna().activity_status()),
        safe("invoice status", lambda: yagna().invoice_status()),
    )

    if identity is not None:
        report.node_id = identity.node_id
    report.account = settings.account or (report.config.account if report.config else None) or report.node_id

    group_networks = NETWORK_GROUP_MAP.get(settings.network_group, ())
    networks = networks_in_group(settings.network_group, driver)
    for skipped in (n for n in group_networks if n not in networks):
        warn(f"network '{skipped}' is not supported by the {driver.name} driver")

    if report.account is None:
        warn("payment status: no account available")
        return report

    account = report.account

    async def payment(network: NetworkName) -> tuple[str, StatusResult | None]:
        status = await safe(
            f"payment status ({network})",
            lambda: yagna().payment_status(account, network, driver),
        )
        return network.value, status

    for network, status in await asyncio.gather(*(payment(n) for n in networks)):
        if status is not None:
            report.payments[network] = status

    return report
