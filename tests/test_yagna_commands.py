from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path

import pytest

from adapters.executables import ExecutableSet
from core.domain.payment import ERC20_DRIVER, ZKSYNC_DRIVER, NetworkName
from core.errors import DecodeError, ExecutionError, IdentityError, NetworkLookupError

STATUS_JSON = json.dumps(
    {
        "amount": "150.5",
        "reserved": "0",
        "outgoing": {},
        "incoming": {
            "requested": {"totalAmount": "10", "agreementsCount": 5},
            "accepted": {"totalAmount": "7", "agreementsCount": 3},
            "confirmed": {"totalAmount": "4", "agreementsCount": 2},
        },
        "driver": "erc20",
        "network": "polygon",
        "token": "GLM",
    }
)


@pytest.fixture
def install(make_program, tmp_path: Path):
    def factory(yagna: dict, provider: dict | None = None) -> tuple[ExecutableSet, object, object]:
        base = tmp_path / "bin"
        daemon = make_program("yagna", yagna, directory=base)
        agent = make_program("ya-provider", provider or {}, directory=base)
        (base / "ya-status").write_text("", encoding="utf-8")
        return ExecutableSet.locate(base / "ya-status"), daemon, agent

    return factory


async def test_default_id(install) -> None:
    executables, daemon, _ = install({"id show --json": ('{"Ok": {"nodeId": "0xabc"}}', "", 0)})
    identity = await executables.yagna().default_id()
    assert identity.node_id == "0xabc"
    assert daemon.calls[0]["argv"] == ["id", "show", "--json"]


async def test_identity_err_is_not_decode_error(install) -> None:
    executables, _, _ = install({"id show --json": ('{"Err": "no default identity"}', "", 0)})
    result = await executables.yagna().identity()
    assert result.err == "no default identity"
    with pytest.raises(IdentityError, match="no default identity"):
        await executables.yagna().default_id()


async def test_version_structured(install) -> None:
    payload = '{"current": {"version": "0.9.1", "name": "rc", "seen": false, "releaseTs": "2022-05-10T00:00:00"}}'
    executables, _, _ = install({"version show --json": (payload, "", 0)})
    info = await executables.yagna().version()
    assert info.current.version == "0.9.1"


async def test_version_raw(install) -> None:
    executables, daemon, _ = install({"--version": ("yagna 0.9.1 (abc1234 2022-05-10 build #42)\n", "", 0)})
    raw = await executables.yagna().version_raw()
    assert raw.build == "42"
    assert daemon.calls[0]["argv"] == ["--version"]


async def test_version_raw_unparseable(install) -> None:
    executables, _, _ = install({"--version": ("something else\n", "", 0)})
    with pytest.raises(DecodeError) as excinfo:
        await executables.yagna().version_raw()
    assert "something else" in excinfo.value.raw


async def test_payment_status_arguments(install) -> None:
    key = "payment status --account 0xabc --network polygon --driver erc20 --json"
    executables, daemon, _ = install({key: (STATUS_JSON, "", 0)})
    status = await executables.yagna().payment_status("0xabc", NetworkName.POLYGON, ERC20_DRIVER)
    assert status.amount == Decimal("150.5")
    assert status.incoming.total_pending() == (Decimal("3"), 1)
    assert status.incoming.unconfirmed() == (Decimal("3"), 2)
    assert daemon.calls[0]["argv"] == key.split()


async def test_payment_status_unknown_network_spawns_nothing(install) -> None:
    executables, daemon, _ = install({"*": (STATUS_JSON, "", 0)})
    with pytest.raises(NetworkLookupError, match="'polygon'"):
        await executables.yagna().payment_status("0xabc", NetworkName.POLYGON, ZKSYNC_DRIVER)
    assert daemon.calls == []


async def test_invoice_and_activity_status(install) -> None:
    executables, _, _ = install(
        {
            "payment invoice status --json": (
                '{"issued": {"accepted": {"totalAmount": "5", "agreementsCount": 2}}, "received": {}}',
                "",
                0,
            ),
            "activity status --json": ('{"last1h": {"Terminated": 3, "New": 2, "Running": 5}, "total": {}}', "", 0),
        }
    )
    invoices = await executables.yagna().invoice_status()
    assert invoices.issued.total_pending() == (Decimal("5"), 2)
    activity = await executables.yagna().activity_status()
    assert (activity.last1h_processed(), activity.in_progress()) == (3, 5)


async def test_non_zero_exit_carries_stderr(install) -> None:
    executables, _, _ = install({"activity status --json": ("", "Called service `/local/activity` is unavailable", 1)})
    with pytest.raises(ExecutionError) as excinfo:
        await executables.yagna().activity_status()
    assert "unavailable" in excinfo.value.stderr
    assert excinfo.value.returncode == 1
    assert "activity status --json" in excinfo.value.command


async def test_malformed_json_is_decode_error(install) -> None:
    executables, _, _ = install({"activity status --json": ("{not json", "", 0)})
    with pytest.raises(DecodeError):
        await executables.yagna().activity_status()


async def test_provider_config(install, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    home = tmp_path / "home"
    (home / ".local" / "lib" / "yagna" / "plugins").mkdir(parents=True)
    monkeypatch.setenv("HOME", str(home))
    executables, _, agent = install(
        {},
        {"--json config get": ('{"node_name": "node-1", "subnet": "public", "account": "0xdef"}', "", 0)},
    )
    config = await executables.ya_provider().get_config()
    assert (config.node_name, config.subnet, config.account) == ("node-1", "public", "0xdef")
    call = agent.calls[0]
    assert call["argv"] == ["--json", "config", "get"]
    assert call["exe_unit_path"] == str(home / ".local" / "lib" / "yagna" / "plugins" / "ya-*.json")
