"""CLI UI components (Rich).

Why separate components:
- Keeps command logic apart from visual details.
- Tables/panels are reused by `status` and `doctor`.
"""

from __future__ import annotations

from decimal import Decimal

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.payment import network_group_of
from core.interfaces.summary import PaymentSummary
from core.services.status_pipeline import StatusReport


def print_banner(console: Console) -> None:
    """Print the header; skipped in non-interactive (JSON) mode."""

    title = Text("ya-status", style="bold cyan")
    subtitle = Text("Provider node • Daemon • Payments", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def _fmt_amount(amount: Decimal, token: str = "") -> str:
    text = f"{amount.normalize():f}"
    return f"{text} {token}".strip()


def _fmt_summary(pair: tuple[Decimal, int], token: str) -> str:
    amount, count = pair
    return f"{_fmt_amount(amount, token)} ({count})"


def build_node_table(report: StatusReport) -> Table:
    table = Table(title="Status", show_header=False)
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")

    if report.daemon_running:
        table.add_row("Service", Text("is running", style="green"))
    else:
        table.add_row("Service", Text("is not running", style="red"))

    raw = report.version_raw
    if raw is not None:
        table.add_row("Version", raw.version)
        table.add_row("Commit", raw.sha)
        table.add_row("Date", raw.date)
        table.add_row("Build", raw.build if raw.is_ci_build else "local")
    elif report.version is not None:
        table.add_row("Version", report.version.current.version)

    if report.version is not None and report.version.pending is not None:
        table.add_row("Update", Text(report.version.pending.version, style="yellow"))

    if report.config is not None:
        table.add_row("Node Name", report.config.node_name or "")
        table.add_row("Subnet", report.config.subnet or "")
    if report.node_id:
        table.add_row("Node ID", report.node_id)
    return table


def build_wallet_table(report: StatusReport) -> Table:
    table = Table(title=f"Wallet ({report.driver}, {report.network_group})")
    table.add_column("Network", style="cyan", no_wrap=True)
    table.add_column("Group", style="dim")
    table.add_column("Amount", style="bright_green")
    table.add_column("Pending", style="yellow")
    table.add_column("Unconfirmed", style="red")
    table.add_column("Gas", style="magenta")

    for network, status in report.payments.items():
        incoming: PaymentSummary = status.incoming
        group = network_group_of(network)
        gas = _fmt_amount(status.gas.balance, status.gas.currency_short_name) if status.gas else ""
        table.add_row(
            network,
            group.value if group else "",
            _fmt_amount(status.amount, status.token),
            _fmt_summary(incoming.total_pending(), status.token),
            _fmt_summary(incoming.unconfirmed(), status.token),
            gas,
        )
    if report.account:
        table.caption = f"account: {report.account}"
    return table


def build_tasks_table(report: StatusReport) -> Table:
    table = Table(title="Tasks", show_header=False)
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")

    activity = report.activity
    if activity is not None:
        table.add_row("last 1h processed", str(activity.last1h_processed()))
        table.add_row("last 1h in progress", str(activity.in_progress()))
        table.add_row("total processed", str(activity.total_processed()))
        if activity.last_activity_ts is not None:
            table.add_row("last activity", activity.last_activity_ts.isoformat())

    if report.invoices is not None:
        issued: PaymentSummary = report.invoices.issued
        table.add_row("invoices pending", _fmt_summary(issued.total_pending(), ""))
        table.add_row("invoices unconfirmed", _fmt_summary(issued.unconfirmed(), ""))
    return table


def build_warnings_panel(warnings: list[str]) -> Panel:
    body = Text()
    for message in warnings:
        body.append(f"- {message}\n")
    return Panel(body, title=Text("Warnings", style="bold yellow"), border_style="yellow")
