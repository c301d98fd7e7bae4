"""
Identity — адреса аккаунтов

Identity — checksum-адрес в формате 0x + 40 hex символов (EIP-55).
Нулевой адрес (ZERO_ADDRESS) — "пустая" identity: None на входе
трактуется так же, как ZERO_ADDRESS.
"""

from typing import Final, Optional

from eth_utils import is_address, to_checksum_address


Identity = str

ZERO_ADDRESS: Final[Identity] = "0x0000000000000000000000000000000000000000"


def to_identity(value: Optional[str]) -> Identity:
    """
    Нормализация адреса в checksum-форму.

    Args:
        value: Адрес (hex строка в любом регистре) или None

    Returns:
        Checksum-адрес; ZERO_ADDRESS для None

    Raises:
        ValueError: Если строка не является адресом
    """
    if value is None:
        return ZERO_ADDRESS

    if not isinstance(value, str) or not is_address(value):
        raise ValueError(f"Invalid account address: {value!r}")

    return to_checksum_address(value)


def is_zero(value: Optional[str]) -> bool:
    """True для None и нулевого адреса."""
    return value is None or to_identity(value) == ZERO_ADDRESS


def same_identity(a: Optional[str], b: Optional[str]) -> bool:
    """Сравнение адресов без учёта регистра."""
    return to_identity(a) == to_identity(b)
