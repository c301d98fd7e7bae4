"""GATE 1: Owner exemption

- Перевод, в котором владелец является отправителем или получателем,
  допускается всегда (в том числе до начала торговли)
- После renounce владельца нет: гейт всегда передаёт проверку дальше
"""

from dataclasses import dataclass
from typing import Optional

from launchguard.core.domain.identity import ZERO_ADDRESS, Identity

from .verdict import GateVerdict


@dataclass(frozen=True)
class Gate01Result:
    """Результат GATE 1."""

    verdict: GateVerdict
    block_reason: str
    sender_is_owner: bool
    receiver_is_owner: bool
    details: str

    @property
    def entry_allowed(self) -> bool:
        return self.verdict != GateVerdict.REJECT


class Gate01OwnerExemption:
    """GATE 1: владелец освобождён от всех ограничений."""

    def evaluate(
        self,
        sender: Identity,
        receiver: Identity,
        owner: Optional[Identity],
    ) -> Gate01Result:
        """
        Args:
            sender: отправитель (источник токенов)
            receiver: получатель
            owner: текущий владелец (ZERO_ADDRESS/None после renounce)
        """
        has_owner = owner is not None and owner != ZERO_ADDRESS
        sender_is_owner = has_owner and sender == owner
        receiver_is_owner = has_owner and receiver == owner

        if sender_is_owner or receiver_is_owner:
            side = "sender" if sender_is_owner else "receiver"
            return Gate01Result(
                verdict=GateVerdict.ADMIT,
                block_reason="",
                sender_is_owner=sender_is_owner,
                receiver_is_owner=receiver_is_owner,
                details=f"PASS: owner is {side}",
            )

        return Gate01Result(
            verdict=GateVerdict.CONTINUE,
            block_reason="",
            sender_is_owner=False,
            receiver_is_owner=False,
            details="owner not involved",
        )
