"""
Domain models and value objects.

Contains identities, token amounts, events and the guard config snapshot.
"""

from launchguard.core.domain.events import (
    Approval,
    Event,
    EventLog,
    MarkedUnthrottled,
    MarkedWhitelisted,
    MaxTransferAmountChanged,
    OwnershipTransferred,
    RestrictionActiveChanged,
    Transfer,
)
from launchguard.core.domain.guard_state import GuardConfigSnapshot
from launchguard.core.domain.identity import (
    ZERO_ADDRESS,
    Identity,
    is_zero,
    same_identity,
    to_identity,
)
from launchguard.core.domain.units import (
    DEFAULT_MAX_TRANSFER_TOKENS,
    MAX_UINT256,
    THROTTLE_WINDOW_SEC,
    TOKEN_DECIMALS,
    amount_to_tokens,
    tokens_to_amount,
    validate_amount,
    validate_timestamp,
)

__all__ = [
    # Identity
    "Identity",
    "ZERO_ADDRESS",
    "to_identity",
    "is_zero",
    "same_identity",
    # Units
    "TOKEN_DECIMALS",
    "MAX_UINT256",
    "DEFAULT_MAX_TRANSFER_TOKENS",
    "THROTTLE_WINDOW_SEC",
    "tokens_to_amount",
    "amount_to_tokens",
    "validate_amount",
    "validate_timestamp",
    # Events
    "Event",
    "EventLog",
    "OwnershipTransferred",
    "MaxTransferAmountChanged",
    "MarkedWhitelisted",
    "MarkedUnthrottled",
    "RestrictionActiveChanged",
    "Approval",
    "Transfer",
    # Guard state
    "GuardConfigSnapshot",
]
