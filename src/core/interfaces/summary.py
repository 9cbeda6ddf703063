"""Payment summary contract.

Why Protocol:
- Outgoing payments (`StatusNotes`) and invoices (`InvoiceStatusNotes`) have
  different stages but the report shows both as "pending" and "unconfirmed".
- A structural contract lets each model keep its own arithmetic without a
  shared base class.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Protocol, runtime_checkable


@runtime_checkable
class PaymentSummary(Protocol):
    """(amount, count) pairs derived from a payment or invoice breakdown."""

    def total_pending(self) -> tuple[Decimal, int]:
        """Amount and count accepted but not yet settled."""

        ...

    def unconfirmed(self) -> tuple[Decimal, int]:
        """Amount and count not yet accepted."""

        ...
