"""Gatekeeper — anti-bot допуск переводов в период запуска токена.

- 5 gates с фиксированным порядком (gates/)
- AntiBotGuard: конфигурация guard и сборка решения по гейтам
"""

from .antibot_guard import AdmissionDecision, AntiBotGuard, GuardConfig
from .gates import GateVerdict

__all__ = [
    "AntiBotGuard",
    "AdmissionDecision",
    "GuardConfig",
    "GateVerdict",
]
