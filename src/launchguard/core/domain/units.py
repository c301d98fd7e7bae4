"""
Units — единицы количества токена

Amount — неотрицательное целое число в базовых единицах (wei-подобных).
Все суммы в guard, permit и ledger передаются только в базовых единицах;
конверсия из "целых токенов" выполняется исключительно через этот модуль.
"""

from typing import Final


# =============================================================================
# КОНСТАНТЫ
# =============================================================================
# Десятичная шкала токена
TOKEN_DECIMALS: Final[int] = 18

# Максимальное значение uint256 (бесконечный allowance)
MAX_UINT256: Final[int] = 2**256 - 1

# Лимит суммы одной транзакции по умолчанию (в целых токенах)
DEFAULT_MAX_TRANSFER_TOKENS: Final[int] = 50_000

# Минимальный интервал между транзакциями одного аккаунта (секунды)
THROTTLE_WINDOW_SEC: Final[int] = 30


# =============================================================================
# КОНВЕРТЕРЫ
# =============================================================================


def tokens_to_amount(tokens: int, decimals: int = TOKEN_DECIMALS) -> int:
    """
    Конверсия: целые токены → базовые единицы

    Args:
        tokens: Количество целых токенов
        decimals: Десятичная шкала (default: TOKEN_DECIMALS)

    Returns:
        Amount в базовых единицах
    """
    return validate_amount(tokens * 10**decimals)


def amount_to_tokens(amount: int, decimals: int = TOKEN_DECIMALS) -> int:
    """Конверсия: базовые единицы → целые токены (с округлением вниз)."""
    return validate_amount(amount) // 10**decimals


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_amount(amount: int, name: str = "amount") -> int:
    """
    Проверка, что сумма является корректным uint256.

    Args:
        amount: Сумма в базовых единицах
        name: Имя параметра для сообщения об ошибке

    Returns:
        amount без изменений

    Raises:
        ValueError: Если сумма не int, отрицательная или больше MAX_UINT256
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValueError(f"{name} must be an integer, got {type(amount).__name__}")

    if amount < 0:
        raise ValueError(f"{name} cannot be negative: {amount}")

    if amount > MAX_UINT256:
        raise ValueError(f"{name} exceeds uint256 range: {amount}")

    return amount


def validate_timestamp(ts: int, name: str = "timestamp") -> int:
    """Проверка unix timestamp (секунды, неотрицательный int)."""
    if isinstance(ts, bool) or not isinstance(ts, int):
        raise ValueError(f"{name} must be an integer, got {type(ts).__name__}")
    if ts < 0:
        raise ValueError(f"{name} cannot be negative: {ts}")
    return ts
