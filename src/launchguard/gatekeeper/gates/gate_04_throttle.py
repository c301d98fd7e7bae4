"""GATE 4: Throttle (одна транзакция на аккаунт за окно)

- Если хотя бы одна сторона unthrottled или whitelisted — проверка пропускается
- Иначе обе стороны должны не участвовать в переводах последние
  throttle_window_sec секунд
- Аккаунт без записи о переводе не ограничен
"""

from dataclasses import dataclass
from typing import Optional

from launchguard.core.domain.units import THROTTLE_WINDOW_SEC
from launchguard.core.errors import REASON_THROTTLED

from .verdict import GateVerdict


@dataclass(frozen=True)
class Gate04Result:
    """Результат GATE 4."""

    verdict: GateVerdict
    block_reason: str
    pair_exempt: bool
    sender_last_ts: Optional[int]
    receiver_last_ts: Optional[int]
    details: str

    @property
    def entry_allowed(self) -> bool:
        return self.verdict != GateVerdict.REJECT


class Gate04Throttle:
    """GATE 4: throttle window."""

    def __init__(self, window_sec: int = THROTTLE_WINDOW_SEC):
        if window_sec <= 0:
            raise ValueError(f"window_sec must be positive, got {window_sec}")
        self.window_sec = window_sec

    def _within_window(self, last_ts: Optional[int], now: int) -> bool:
        return last_ts is not None and now - last_ts < self.window_sec

    def evaluate(
        self,
        now: int,
        sender_exempt: bool,
        receiver_exempt: bool,
        sender_last_ts: Optional[int],
        receiver_last_ts: Optional[int],
    ) -> Gate04Result:
        """
        Args:
            now: текущее время (unix sec)
            sender_exempt: отправитель unthrottled или whitelisted
            receiver_exempt: получатель unthrottled или whitelisted
            sender_last_ts: время последнего перевода отправителя (None — не было)
            receiver_last_ts: время последнего перевода получателя
        """
        if sender_exempt or receiver_exempt:
            return Gate04Result(
                verdict=GateVerdict.CONTINUE,
                block_reason="",
                pair_exempt=True,
                sender_last_ts=sender_last_ts,
                receiver_last_ts=receiver_last_ts,
                details="PASS: pair exempt from throttle",
            )

        for side, last_ts in (("sender", sender_last_ts), ("receiver", receiver_last_ts)):
            if self._within_window(last_ts, now):
                return Gate04Result(
                    verdict=GateVerdict.REJECT,
                    block_reason=REASON_THROTTLED,
                    pair_exempt=False,
                    sender_last_ts=sender_last_ts,
                    receiver_last_ts=receiver_last_ts,
                    details=f"{side} transferred {now - last_ts}s ago (< {self.window_sec}s)",
                )

        return Gate04Result(
            verdict=GateVerdict.CONTINUE,
            block_reason="",
            pair_exempt=False,
            sender_last_ts=sender_last_ts,
            receiver_last_ts=receiver_last_ts,
            details="PASS: outside throttle window",
        )
