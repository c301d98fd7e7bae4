"""Verdict — исход проверки одного гейта."""

from enum import Enum


class GateVerdict(str, Enum):
    """Исход гейта.

    - ADMIT: перевод допущен, дальнейшие гейты не проверяются
    - CONTINUE: гейт пройден, проверка переходит к следующему гейту
    - REJECT: перевод отклонён с block_reason
    """

    ADMIT = "ADMIT"
    CONTINUE = "CONTINUE"
    REJECT = "REJECT"
