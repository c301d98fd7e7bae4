"""GATE 3: Per-transaction cap

- max_transfer_amount == 0 → лимита нет
- amount > max_transfer_amount → отказ, если ни одна сторона не whitelisted
- Whitelisted отправитель ИЛИ получатель снимает лимит для всей пары
"""

from dataclasses import dataclass

from launchguard.core.errors import REASON_LIMIT_EXCEEDED

from .verdict import GateVerdict


@dataclass(frozen=True)
class Gate03Result:
    """Результат GATE 3."""

    verdict: GateVerdict
    block_reason: str
    amount: int
    max_transfer_amount: int
    pair_whitelisted: bool
    details: str

    @property
    def entry_allowed(self) -> bool:
        return self.verdict != GateVerdict.REJECT


class Gate03TransferCap:
    """GATE 3: лимит суммы одной транзакции."""

    def evaluate(
        self,
        amount: int,
        max_transfer_amount: int,
        sender_whitelisted: bool,
        receiver_whitelisted: bool,
    ) -> Gate03Result:
        pair_whitelisted = sender_whitelisted or receiver_whitelisted

        if max_transfer_amount == 0:
            details = "No cap configured"
        elif amount <= max_transfer_amount:
            details = f"amount={amount} within cap={max_transfer_amount}"
        elif pair_whitelisted:
            details = f"amount={amount} over cap={max_transfer_amount}, pair whitelisted"
        else:
            return Gate03Result(
                verdict=GateVerdict.REJECT,
                block_reason=REASON_LIMIT_EXCEEDED,
                amount=amount,
                max_transfer_amount=max_transfer_amount,
                pair_whitelisted=False,
                details=f"amount={amount} exceeds cap={max_transfer_amount}",
            )

        return Gate03Result(
            verdict=GateVerdict.CONTINUE,
            block_reason="",
            amount=amount,
            max_transfer_amount=max_transfer_amount,
            pair_whitelisted=pair_whitelisted,
            details=details,
        )
