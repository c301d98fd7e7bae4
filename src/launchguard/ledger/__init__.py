"""Ledger — коллаборатор бухгалтерии балансов и allowance."""

from .base import Ledger
from .in_memory import InMemoryLedger

__all__ = ["Ledger", "InMemoryLedger"]
