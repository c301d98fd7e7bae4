"""
GuardConfigSnapshot — снапшот конфигурации anti-bot guard

Immutable Pydantic модель для экспорта состояния guard наблюдателям.
Совместима с JSON Schema (core/contracts/schema/guard_config.json).
"""

from pydantic import BaseModel, Field


class GuardConfigSnapshot(BaseModel):
    """
    Снапшот конфигурации AntiBotGuard.

    Содержит:
    - Флаги жизненного цикла (initialized, restriction_active)
    - Окно торговли и лимит транзакции
    - Списки исключений (whitelisted, unthrottled)
    """

    initialized: bool = Field(..., description="Guard инициализирован")
    restriction_active: bool = Field(..., description="Master switch ограничений")
    trading_start: int = Field(
        ..., ge=0, description="Начало торговли (unix sec, 0 = не назначено)"
    )
    max_transfer_amount: int = Field(
        ..., ge=0, description="Лимит одной транзакции (0 = без лимита)"
    )
    throttle_window_sec: int = Field(..., gt=0, description="Окно throttle (секунды)")
    whitelisted: list[str] = Field(default_factory=list, description="Whitelisted аккаунты")
    unthrottled: list[str] = Field(default_factory=list, description="Unthrottled аккаунты")

    model_config = {"frozen": True}
