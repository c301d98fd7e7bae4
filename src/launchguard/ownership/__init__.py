"""Ownership — двухшаговая передача владения экземпляром контракта."""

from .state_machine import (
    OwnershipPhase,
    OwnershipRegistry,
    OwnershipState,
    OwnershipTransitionResult,
    PendingHandoff,
    Renounced,
    Stable,
)

__all__ = [
    "OwnershipRegistry",
    "OwnershipState",
    "OwnershipPhase",
    "OwnershipTransitionResult",
    "Stable",
    "PendingHandoff",
    "Renounced",
]
