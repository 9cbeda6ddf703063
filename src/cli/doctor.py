"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio
import shutil

import typer
from rich.console import Console
from rich.table import Table

from adapters.executables import ExecutableSet
from cli.bootstrap import load_executables, load_settings
from core.config import write_user_env_vars
from core.domain.payment import NetworkGroup, driver_for
from core.errors import StatusToolError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _check_program(executables: ExecutableSet, program: str) -> tuple[bool, str]:
    if executables.base_dir is not None:
        path = executables.base_dir / program
        if path.exists():
            return True, str(path)
        return False, f"{path} is missing"
    found = shutil.which(program)
    if found:
        return True, f"{found} (PATH)"
    return False, "not found next to ya-status nor on PATH"


async def _check_daemon(executables: ExecutableSet) -> tuple[bool, str]:
    try:
        raw = await executables.yagna().version_raw()
    except StatusToolError as exc:
        return False, str(exc).splitlines()[0]
    return True, f"{raw.version} ({raw.sha} {raw.date})"


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = load_settings()
    executables = load_executables(settings)

    table = Table(title="ya-status Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Location
    if executables.uses_path:
        table.add_row("Binaries location", "PATH", "companions not installed next to ya-status")
    else:
        table.add_row("Binaries location", "OK", str(executables.base_dir))

    for program in (executables.daemon_program, executables.provider_program):
        ok, detail = _check_program(executables, program)
        table.add_row(program, "OK" if ok else "FAIL", detail)

    # Plugins
    provider_env = executables.ya_provider().spec.env
    if provider_env:
        table.add_row("ExeUnit plugins", "OK", next(iter(provider_env.values())))
    else:
        table.add_row("ExeUnit plugins", "OPTIONAL", f"~/{settings.plugins_dir} not found")

    table.add_row("Payment driver", "OK", f"{settings.payment_driver} / {settings.network_group.value}")

    ok_daemon, detail_daemon = asyncio.run(_check_daemon(executables))
    table.add_row("Daemon", "OK" if ok_daemon else "FAIL", detail_daemon)

    _console.print(table)

    if not ok_daemon:
        _console.print("\n[yellow]Note:[/yellow] Start the provider node, then run `ya-status status`.")


@app.command(name="setup")
def setup() -> None:
    """Interactive setup (stores config in the user config .env)."""

    driver = typer.prompt("Payment driver", default="erc20", show_default=True).strip().lower()
    group = typer.prompt(
        "Network group",
        default=NetworkGroup.MAINNET.value,
        show_default=True,
    ).strip().lower()
    account = typer.prompt("Account (empty = node default)", default="", show_default=False).strip()

    try:
        driver = driver_for(driver).name
        group = NetworkGroup(group).value
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    values = {
        "YA_STATUS_PAYMENT_DRIVER": driver,
        "YA_STATUS_NETWORK_GROUP": group,
    }
    if account:
        values["YA_STATUS_ACCOUNT"] = account

    env_path = write_user_env_vars(values)
    _console.print(f"[green]Saved config to:[/green] {env_path}")
