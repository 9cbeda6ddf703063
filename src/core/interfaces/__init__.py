"""Core interfaces/abstractions.

Why:
- Defines the contracts (Protocol) shared by otherwise unrelated models.
"""

from core.interfaces.summary import PaymentSummary

__all__ = ["PaymentSummary"]
