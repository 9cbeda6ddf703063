"""Domain models (Pydantic v2).

Why Pydantic here:
- The companion executables answer in JSON; validating at the edge gives typed
  values (Decimal amounts, datetimes) instead of loose dicts.
- Aliases absorb the daemon's camelCase keys without leaking them into the code.

Note:
- These models describe *what* the node reports, not *how* it is queried.
  All of them are decode targets: built once per invocation, never mutated.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict

from core.errors import IdentityError

_TERMINATED = "Terminated"
_NEW = "New"


class _WireModel(BaseModel):
    """Base for payloads produced by the daemon (camelCase keys)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


class Id(_WireModel):
    node_id: str = Field(..., min_length=1, description="Default identity of the node.")


class IdentityResult(BaseModel):
    """`id show` payload: either ``{"Ok": {...}}`` or ``{"Err": "..."}``.

    The failure branch is a regular value, not a decode error: the daemon ran
    fine and told us it has no usable identity.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    ok: Id | None = Field(default=None, alias="Ok")
    err: str | None = Field(default=None, alias="Err")

    @model_validator(mode="after")
    def _exactly_one_branch(self) -> "IdentityResult":
        if (self.ok is None) == (self.err is None):
            raise ValueError("identity payload must carry exactly one of 'Ok' or 'Err'")
        return self

    @property
    def is_ok(self) -> bool:
        return self.ok is not None

    def unwrap(self) -> Id:
        if self.ok is None:
            raise IdentityError(self.err or "unknown identity error")
        return self.ok


class Release(_WireModel):
    version: str
    name: str = ""
    seen: bool = False
    release_ts: datetime | None = None
    insertion_ts: datetime | None = None
    update_ts: datetime | None = None


class VersionInfo(_WireModel):
    current: Release
    pending: Release | None = None


class VersionRaw(BaseModel):
    """Version data scraped from the free-text ``--version`` banner."""

    model_config = ConfigDict(frozen=True)

    version: str
    sha: str
    date: str
    build: str = Field(default="", description="CI build number; empty for local builds.")

    @property
    def is_ci_build(self) -> bool:
        return bool(self.build)


class StatValue(_WireModel):
    total_amount: Decimal = Decimal(0)
    agreements_count: int = Field(default=0, ge=0)

    def __add__(self, other: "StatValue") -> "StatValue":
        return StatValue(
            total_amount=self.total_amount + other.total_amount,
            agreements_count=self.agreements_count + other.agreements_count,
        )


class StatusNotes(_WireModel):
    """Payment amounts by stage: requested, accepted, confirmed."""

    requested: StatValue = Field(default_factory=StatValue)
    accepted: StatValue = Field(default_factory=StatValue)
    confirmed: StatValue = Field(default_factory=StatValue)

    def total_pending(self) -> tuple[Decimal, int]:
        return (
            self.accepted.total_amount - self.confirmed.total_amount,
            self.accepted.agreements_count - self.confirmed.agreements_count,
        )

    def unconfirmed(self) -> tuple[Decimal, int]:
        return (
            self.requested.total_amount - self.accepted.total_amount,
            self.requested.agreements_count - self.accepted.agreements_count,
        )


class InvoiceStatusNotes(_WireModel):
    """Invoice amounts by lifecycle stage."""

    issued: StatValue = Field(default_factory=StatValue)
    received: StatValue = Field(default_factory=StatValue)
    accepted: StatValue = Field(default_factory=StatValue)
    rejected: StatValue = Field(default_factory=StatValue)
    failed: StatValue = Field(default_factory=StatValue)
    settled: StatValue = Field(default_factory=StatValue)
    cancelled: StatValue = Field(default_factory=StatValue)

    def total_pending(self) -> tuple[Decimal, int]:
        return self.accepted.total_amount, self.accepted.agreements_count

    def unconfirmed(self) -> tuple[Decimal, int]:
        value = self.issued + self.received
        return value.total_amount, value.agreements_count


class InvoiceStats(_WireModel):
    issued: InvoiceStatusNotes = Field(default_factory=InvoiceStatusNotes)
    received: InvoiceStatusNotes = Field(default_factory=InvoiceStatusNotes)


class GasDetails(_WireModel):
    currency_short_name: str
    currency_long_name: str
    balance: Decimal


class StatusResult(_WireModel):
    """`payment status` payload for one account on one network."""

    amount: Decimal
    reserved: Decimal = Decimal(0)
    outgoing: StatusNotes = Field(default_factory=StatusNotes)
    incoming: StatusNotes = Field(default_factory=StatusNotes)
    driver: str
    network: str
    token: str
    gas: GasDetails | None = None


class ActivityStatus(_WireModel):
    """Activity counts by state, for the last hour and overall."""

    # to_camel would produce "last1H".
    last1h: dict[str, int] = Field(default_factory=dict, alias="last1h")
    total: dict[str, int] = Field(default_factory=dict)
    last_activity_ts: datetime | None = None

    def last1h_processed(self) -> int:
        return self.last1h.get(_TERMINATED, 0)

    def in_progress(self) -> int:
        return sum(count for state, count in self.last1h.items() if state not in (_TERMINATED, _NEW))

    def total_processed(self) -> int:
        return self.total.get(_TERMINATED, 0)


class ProviderConfig(BaseModel):
    """`ya-provider config get` payload (snake_case keys)."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    node_name: str | None = None
    subnet: str | None = None
    account: str | None = Field(
        default=None,
        description="Payment account (node id, 0x-prefixed hex).",
    )
