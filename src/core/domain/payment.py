"""Payment networks, drivers and platforms.

These tables are fixed for the lifetime of the process. They are built once as
immutable objects and can be read concurrently without any locking.

Two driver tables exist and are independent: the caller picks ``zksync`` or
``erc20`` explicitly (see ``driver_for``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping

from core.errors import NetworkLookupError


class NetworkName(str, Enum):
    """Networks understood by the daemon's payment subsystem."""

    MAINNET = "mainnet"
    RINKEBY = "rinkeby"
    GOERLI = "goerli"
    MUMBAI = "mumbai"
    POLYGON = "polygon"

    def __str__(self) -> str:
        return self.value


class NetworkGroup(str, Enum):
    """Coarse classification of networks, used for display only."""

    MAINNET = "mainnet"
    TESTNET = "testnet"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PaymentPlatform:
    platform: str
    driver: str
    token: str


@dataclass(frozen=True)
class PaymentDriver:
    """Mapping of network name to the platform a given driver uses on it."""

    name: str
    platforms: Mapping[str, PaymentPlatform] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "platforms", MappingProxyType(dict(self.platforms)))

    def platform(self, network: NetworkName | str) -> PaymentPlatform:
        """Return the platform for ``network`` or raise ``NetworkLookupError``."""

        key = str(network)
        try:
            return self.platforms[key]
        except KeyError:
            raise NetworkLookupError(key) from None

    def networks(self) -> list[str]:
        return list(self.platforms)

    def __contains__(self, network: object) -> bool:
        return str(network) in self.platforms


ZKSYNC_DRIVER = PaymentDriver(
    name="zksync",
    platforms={
        NetworkName.MAINNET.value: PaymentPlatform("zksync-mainnet-glm", "zksync", "GLM"),
        NetworkName.RINKEBY.value: PaymentPlatform("zksync-rinkeby-tglm", "zksync", "tGLM"),
    },
)

ERC20_DRIVER = PaymentDriver(
    name="erc20",
    platforms={
        NetworkName.MAINNET.value: PaymentPlatform("erc20-mainnet-glm", "erc20", "GLM"),
        NetworkName.RINKEBY.value: PaymentPlatform("erc20-rinkeby-tglm", "erc20", "tGLM"),
        NetworkName.GOERLI.value: PaymentPlatform("erc20-goerli-tglm", "erc20", "tGLM"),
        NetworkName.MUMBAI.value: PaymentPlatform("erc20-mumbai-tglm", "erc20", "tGLM"),
        NetworkName.POLYGON.value: PaymentPlatform("erc20-polygon-glm", "erc20", "GLM"),
    },
)

_DRIVERS: Mapping[str, PaymentDriver] = MappingProxyType(
    {ZKSYNC_DRIVER.name: ZKSYNC_DRIVER, ERC20_DRIVER.name: ERC20_DRIVER}
)

NETWORK_GROUP_MAP: Mapping[NetworkGroup, tuple[NetworkName, ...]] = MappingProxyType(
    {
        NetworkGroup.MAINNET: (NetworkName.MAINNET, NetworkName.POLYGON),
        NetworkGroup.TESTNET: (NetworkName.RINKEBY, NetworkName.MUMBAI, NetworkName.GOERLI),
    }
)


def driver_for(name: str) -> PaymentDriver:
    """Return the driver table registered under ``name`` (``erc20``/``zksync``)."""

    try:
        return _DRIVERS[name.strip().lower()]
    except KeyError:
        known = ", ".join(sorted(_DRIVERS))
        raise ValueError(f"Unknown payment driver '{name}' (expected one of: {known}).") from None


def network_group_of(network: NetworkName | str) -> NetworkGroup | None:
    """Classify a network as mainnet-like or testnet-like."""

    key = str(network)
    for group, members in NETWORK_GROUP_MAP.items():
        if any(member.value == key for member in members):
            return group
    return None


def networks_in_group(group: NetworkGroup, driver: PaymentDriver | None = None) -> list[NetworkName]:
    """Networks of ``group`` in their listed order, optionally limited to ``driver``."""

    members: Iterable[NetworkName] = NETWORK_GROUP_MAP.get(group, ())
    if driver is None:
        return list(members)
    return [network for network in members if network in driver]
