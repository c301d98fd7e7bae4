"""
Errors — таксономия ошибок launchguard

Каждая ошибка терминальна для вызова: состояние не изменяется, причина
(reason) передаётся вызывающему дословно. Строки reason стабильны, на них
опираются off-chain клиенты и тесты.
"""

from typing import Final


# =============================================================================
# REASON STRINGS
# =============================================================================

REASON_NOT_OWNER: Final[str] = "Ownable: caller is not the owner"
REASON_NOT_PENDING_OWNER: Final[str] = "Ownable: caller != pending owner"
REASON_INVALID_TARGET: Final[str] = "Ownable: zero address"

REASON_ZERO_ADDRESS: Final[str] = "Zero address"
REASON_ALREADY_INITIALIZED: Final[str] = "Protection: Already initialized"
REASON_NOT_INITIALIZED: Final[str] = "Protection: Not initialized"
REASON_TOO_LATE: Final[str] = "To late"
REASON_TRANSFERS_DISABLED: Final[str] = "Protection: Transfers disabled"
REASON_LIMIT_EXCEEDED: Final[str] = "Protection: Limit exceeded"
REASON_THROTTLED: Final[str] = "Protection: 30 sec/tx allowed"

REASON_EXPIRED: Final[str] = "ERC20Permit: expired deadline"
REASON_INVALID_SIGNATURE: Final[str] = "ERC20Permit: invalid signature"
REASON_INVALID_OWNER: Final[str] = "ERC20Permit: Permit from zero address"


# =============================================================================
# EXCEPTIONS
# =============================================================================


class LaunchGuardError(Exception):
    """
    Базовая ошибка launchguard.

    str(exc) и exc.reason всегда равны стабильной строке причины.
    """

    default_reason: str = ""

    def __init__(self, reason: str = ""):
        self.reason = reason or self.default_reason
        super().__init__(self.reason)


class Unauthorized(LaunchGuardError):
    """Вызывающий не обладает требуемой ролью (owner / pending owner)."""

    default_reason = REASON_NOT_OWNER


class InvalidTarget(LaunchGuardError):
    """Передача владения на нулевой адрес без явного renounce."""

    default_reason = REASON_INVALID_TARGET


class ZeroAddress(LaunchGuardError):
    default_reason = REASON_ZERO_ADDRESS


class AlreadyInitialized(LaunchGuardError):
    default_reason = REASON_ALREADY_INITIALIZED


class NotInitialized(LaunchGuardError):
    """Конфигурация guard до вызова initialize()."""

    default_reason = REASON_NOT_INITIALIZED


class TooLate(LaunchGuardError):
    """Trading start уже наступил — время старта заморожено."""

    default_reason = REASON_TOO_LATE


class AdmissionRejected(LaunchGuardError):
    """Базовая ошибка отказа в допуске перевода (anti-bot guard)."""


class TransfersDisabled(AdmissionRejected):
    default_reason = REASON_TRANSFERS_DISABLED


class LimitExceeded(AdmissionRejected):
    default_reason = REASON_LIMIT_EXCEEDED


class ThrottleViolation(AdmissionRejected):
    default_reason = REASON_THROTTLED


class PermitError(LaunchGuardError):
    """Базовая ошибка проверки permit."""


class Expired(PermitError):
    default_reason = REASON_EXPIRED


class InvalidSignature(PermitError):
    default_reason = REASON_INVALID_SIGNATURE


class InvalidOwner(PermitError):
    default_reason = REASON_INVALID_OWNER


class LedgerError(LaunchGuardError):
    """Ошибка бухгалтерии ledger (баланс, allowance, нулевой адрес)."""


ADMISSION_ERRORS: Final[dict[str, type[AdmissionRejected]]] = {
    REASON_TRANSFERS_DISABLED: TransfersDisabled,
    REASON_LIMIT_EXCEEDED: LimitExceeded,
    REASON_THROTTLED: ThrottleViolation,
}


def admission_error(reason: str) -> AdmissionRejected:
    """Ошибка, соответствующая reason отказа guard."""
    return ADMISSION_ERRORS.get(reason, AdmissionRejected)(reason)
