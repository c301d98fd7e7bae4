"""
InMemoryLedger — эталонная in-memory реализация Ledger

Минимальная ERC20-бухгалтерия для конвейера допуска и тестов:
балансы, allowance, перевод и списание allowance. Mint/burn и метаданные
токена находятся вне области launchguard.
"""

from collections import defaultdict
from typing import Final, Optional

from launchguard.core.domain.events import EventLog, Transfer
from launchguard.core.domain.identity import ZERO_ADDRESS, Identity, to_identity
from launchguard.core.domain.units import MAX_UINT256, validate_amount
from launchguard.core.errors import LedgerError


REASON_TRANSFER_FROM_ZERO: Final[str] = "ERC20: transfer from the zero address"
REASON_TRANSFER_TO_ZERO: Final[str] = "ERC20: transfer to the zero address"
REASON_AMOUNT_ZERO: Final[str] = "Transfer amount is 0"
REASON_EXCEEDS_BALANCE: Final[str] = "ERC20: transfer amount exceeds balance"
REASON_EXCEEDS_ALLOWANCE: Final[str] = "ERC20: transfer amount exceeds allowance"
REASON_APPROVE_FROM_ZERO: Final[str] = "ERC20: approve from the zero address"
REASON_APPROVE_TO_ZERO: Final[str] = "ERC20: approve to the zero address"


class InMemoryLedger:
    """Балансы и allowance в памяти процесса."""

    def __init__(self, event_log: Optional[EventLog] = None):
        self._events = event_log if event_log is not None else EventLog()
        self._balances: dict[Identity, int] = defaultdict(int)
        self._allowances: dict[tuple[Identity, Identity], int] = defaultdict(int)
        self._total_supply = 0

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, account: str) -> int:
        return self._balances.get(to_identity(account), 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((to_identity(owner), to_identity(spender)), 0)

    def credit(self, account: str, amount: int) -> None:
        """Начальное распределение (genesis balance)."""
        target = to_identity(account)
        validate_amount(amount)
        if target == ZERO_ADDRESS:
            raise LedgerError("ERC20: mint to the zero address")

        self._balances[target] += amount
        self._total_supply += amount
        self._events.emit(Transfer(sender=ZERO_ADDRESS, receiver=target, value=amount))

    def set_allowance(self, owner: str, spender: str, value: int) -> None:
        owner_id = to_identity(owner)
        spender_id = to_identity(spender)
        validate_amount(value, "value")
        if owner_id == ZERO_ADDRESS:
            raise LedgerError(REASON_APPROVE_FROM_ZERO)
        if spender_id == ZERO_ADDRESS:
            raise LedgerError(REASON_APPROVE_TO_ZERO)

        self._allowances[(owner_id, spender_id)] = value

    def _check_move(self, sender: Identity, receiver: Identity, amount: int) -> None:
        validate_amount(amount)
        if sender == ZERO_ADDRESS:
            raise LedgerError(REASON_TRANSFER_FROM_ZERO)
        if receiver == ZERO_ADDRESS:
            raise LedgerError(REASON_TRANSFER_TO_ZERO)
        if amount == 0:
            raise LedgerError(REASON_AMOUNT_ZERO)
        if self._balances.get(sender, 0) < amount:
            raise LedgerError(REASON_EXCEEDS_BALANCE)

    def check_transfer_from(
        self, spender: Identity, source: Identity, receiver: Identity, amount: int
    ) -> None:
        self._check_move(source, receiver, amount)
        if self.allowance(source, spender) < amount:
            raise LedgerError(REASON_EXCEEDS_ALLOWANCE)

    def move(self, sender: str, receiver: str, amount: int) -> None:
        sender_id = to_identity(sender)
        receiver_id = to_identity(receiver)
        self._check_move(sender_id, receiver_id, amount)

        self._balances[sender_id] -= amount
        self._balances[receiver_id] += amount
        self._events.emit(Transfer(sender=sender_id, receiver=receiver_id, value=amount))

    def spend_allowance(self, owner: str, spender: str, amount: int) -> int:
        key = (to_identity(owner), to_identity(spender))
        current = self._allowances.get(key, 0)
        if current < amount:
            raise LedgerError(REASON_EXCEEDS_ALLOWANCE)
        if current == MAX_UINT256:
            return current

        self._allowances[key] = current - amount
        return current - amount
