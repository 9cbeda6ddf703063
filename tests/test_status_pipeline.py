from __future__ import annotations

import json
from pathlib import Path

import pytest

from adapters.executables import ExecutableSet
from adapters.json_exporter import export_report_json, report_to_json
from core.config import AppSettings
from core.domain.payment import NetworkGroup
from core.services.status_pipeline import PipelineHooks, collect_status


def _status(network: str, amount: str) -> str:
    return json.dumps(
        {"amount": amount, "reserved": "0", "driver": "erc20", "network": network, "token": "GLM"}
    )


DAEMON_OK = {
    "id show --json": ('{"Ok": {"nodeId": "0xnode"}}', "", 0),
    "version show --json": ('{"current": {"version": "0.9.1", "name": "x"}}', "", 0),
    "--version": ("yagna 0.9.1 (abc1234 2022-05-10)\n", "", 0),
    "activity status --json": ('{"last1h": {"Terminated": 1, "Running": 2}, "total": {"Terminated": 9}}', "", 0),
    "payment invoice status --json": ("{}", "", 0),
    "payment status --account 0xacct --network mainnet --driver erc20 --json": (_status("mainnet", "1"), "", 0),
    "payment status --account 0xacct --network polygon --driver erc20 --json": (_status("polygon", "2"), "", 0),
}
PROVIDER_OK = {"--json config get": ('{"node_name": "n1", "subnet": "public", "account": "0xacct"}', "", 0)}


@pytest.fixture
def executables(make_program, tmp_path: Path):
    def factory(daemon: dict, provider: dict) -> ExecutableSet:
        base = tmp_path / "bin"
        make_program("yagna", daemon, directory=base)
        make_program("ya-provider", provider, directory=base)
        return ExecutableSet(base_dir=base)

    return factory


async def test_full_report(executables, isolated_env: Path) -> None:
    report = await collect_status(settings=AppSettings(), executables=executables(DAEMON_OK, PROVIDER_OK))
    assert report.warnings == []
    assert report.node_id == "0xnode"
    assert report.account == "0xacct"
    assert report.daemon_running
    assert report.version_raw is not None and report.version_raw.version == "0.9.1"
    assert report.activity is not None and report.activity.total_processed() == 9
    assert sorted(report.payments) == ["mainnet", "polygon"]
    assert str(report.payments["polygon"].amount) == "2"


async def test_account_falls_back_to_node_id(executables, isolated_env: Path) -> None:
    daemon = {
        **DAEMON_OK,
        "payment status --account 0xnode --network mainnet --driver erc20 --json": (_status("mainnet", "5"), "", 0),
    }
    provider = {"--json config get": ("{}", "", 0)}
    report = await collect_status(settings=AppSettings(), executables=executables(daemon, provider))
    assert report.account == "0xnode"
    assert list(report.payments) == ["mainnet"]
    assert any("payment status (polygon)" in w for w in report.warnings)


async def test_account_override_from_settings(executables, isolated_env: Path) -> None:
    settings = AppSettings(account="0xother", network_group=NetworkGroup.TESTNET, payment_driver="zksync")
    daemon = {
        **DAEMON_OK,
        "payment status --account 0xother --network rinkeby --driver zksync --json": (_status("rinkeby", "3"), "", 0),
    }
    report = await collect_status(settings=settings, executables=executables(daemon, PROVIDER_OK))
    assert report.account == "0xother"
    assert list(report.payments) == ["rinkeby"]
    skipped = [w for w in report.warnings if "not supported by the zksync driver" in w]
    assert len(skipped) == 2


async def test_sections_fail_independently(executables, isolated_env: Path) -> None:
    daemon = {
        "id show --json": ('{"Err": "identity locked"}', "", 0),
        "version show --json": ("", "daemon not running", 1),
        "--version": ("yagna 0.9.1 (abc1234 2022-05-10 build #3)\n", "", 0),
        "activity status --json": ("garbage", "", 0),
        "*": ("", "daemon not running", 1),
    }
    seen: list[str] = []
    report = await collect_status(
        settings=AppSettings(),
        executables=executables(daemon, {"*": ("", "provider down", 1)}),
        hooks=PipelineHooks(warning=seen.append),
    )
    assert report.version is None
    assert report.version_raw is not None and report.version_raw.build == "3"
    assert report.daemon_running
    assert report.activity is None
    assert report.node_id is None
    assert report.config is None
    assert report.payments == {}
    assert seen == report.warnings
    joined = "\n".join(report.warnings)
    assert "identity locked" in joined
    assert "daemon not running" in joined
    assert "provider down" in joined
    assert "no account available" in joined


async def test_daemon_missing_entirely(tmp_path: Path, isolated_env: Path) -> None:
    executables = ExecutableSet(
        base_dir=tmp_path / "empty",
        daemon_program="ya-status-absent-daemon",
        provider_program="ya-status-absent-provider",
    )
    assert executables.base_dir is None
    report = await collect_status(settings=AppSettings(), executables=executables)
    assert not report.daemon_running
    assert report.warnings


async def test_json_export(executables, isolated_env: Path, tmp_path: Path) -> None:
    report = await collect_status(settings=AppSettings(), executables=executables(DAEMON_OK, PROVIDER_OK))
    payload = json.loads(report_to_json(report))
    assert payload["payments"]["mainnet"]["amount"] == "1"
    assert payload["driver"] == "erc20"
    assert payload["network_group"] == "mainnet"

    out = export_report_json(report=report, output_path=tmp_path / "out" / "status.json")
    assert json.loads(out.read_text(encoding="utf-8")) == payload
