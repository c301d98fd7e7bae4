"""GATE 2: Trading window (pre-launch lockout)

- trading_start == 0 → торговля не назначена, переводы запрещены
- now < trading_start → переводы запрещены
- Исключения (whitelist/unthrottle) на этот гейт НЕ действуют
"""

from dataclasses import dataclass

from launchguard.core.errors import REASON_TRANSFERS_DISABLED

from .verdict import GateVerdict


@dataclass(frozen=True)
class Gate02Result:
    """Результат GATE 2."""

    verdict: GateVerdict
    block_reason: str
    trading_start: int
    now: int
    details: str

    @property
    def entry_allowed(self) -> bool:
        return self.verdict != GateVerdict.REJECT


class Gate02TradingWindow:
    """GATE 2: блокировка до начала торговли."""

    def evaluate(self, trading_start: int, now: int) -> Gate02Result:
        if trading_start == 0:
            return Gate02Result(
                verdict=GateVerdict.REJECT,
                block_reason=REASON_TRANSFERS_DISABLED,
                trading_start=trading_start,
                now=now,
                details="Trading start not scheduled",
            )

        if now < trading_start:
            return Gate02Result(
                verdict=GateVerdict.REJECT,
                block_reason=REASON_TRANSFERS_DISABLED,
                trading_start=trading_start,
                now=now,
                details=f"Trading starts in {trading_start - now}s",
            )

        return Gate02Result(
            verdict=GateVerdict.CONTINUE,
            block_reason="",
            trading_start=trading_start,
            now=now,
            details=f"Trading open since {now - trading_start}s",
        )
