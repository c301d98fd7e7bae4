"""GATE 0: Restriction master switch

- Первый gate в цепочке
- restriction_active == False → перевод допускается без дальнейших проверок
  (guard отключён либо ещё не инициализирован)
"""

from dataclasses import dataclass

from .verdict import GateVerdict


@dataclass(frozen=True)
class Gate00Result:
    """Результат GATE 0."""

    verdict: GateVerdict
    block_reason: str
    restriction_active: bool
    details: str

    @property
    def entry_allowed(self) -> bool:
        return self.verdict != GateVerdict.REJECT


class Gate00RestrictionSwitch:
    """GATE 0: master switch ограничений (stateless)."""

    def evaluate(self, restriction_active: bool) -> Gate00Result:
        if not restriction_active:
            return Gate00Result(
                verdict=GateVerdict.ADMIT,
                block_reason="",
                restriction_active=False,
                details="PASS: restrictions inactive",
            )

        return Gate00Result(
            verdict=GateVerdict.CONTINUE,
            block_reason="",
            restriction_active=True,
            details="restrictions active",
        )
