"""
Config — параметры guard и развёртывания токена

- GuardSettings: константы anti-bot guard (frozen dataclass)
- LaunchConfig: параметры конструктора (name/version/chain_id/...),
  загружаются из JSON с предварительной проверкой по launch_config.json
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator

from .contracts import validate_launch_config
from .domain.identity import to_identity
from .domain.units import DEFAULT_MAX_TRANSFER_TOKENS, THROTTLE_WINDOW_SEC, tokens_to_amount


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GuardSettings:
    """Конфигурация AntiBotGuard.

    - throttle_window_sec: минимальный интервал между транзакциями
      одного не-исключённого аккаунта
    - default_max_transfer_amount: лимит транзакции, выставляемый initialize()
    """
    throttle_window_sec: int = THROTTLE_WINDOW_SEC
    default_max_transfer_amount: int = tokens_to_amount(DEFAULT_MAX_TRANSFER_TOKENS)

    def __post_init__(self):
        if self.throttle_window_sec <= 0:
            raise ValueError(
                f"throttle_window_sec must be positive, got {self.throttle_window_sec}"
            )
        if self.default_max_transfer_amount < 0:
            raise ValueError(
                "default_max_transfer_amount cannot be negative, "
                f"got {self.default_max_transfer_amount}"
            )


class LaunchConfig(BaseModel):
    """
    Параметры развёртывания экземпляра контракта.

    name/version/chain_id/verifying_contract определяют domain separator,
    admin — начальный владелец.
    """

    name: str = Field(..., min_length=1, description="Имя токена (EIP-712 domain name)")
    version: str = Field(..., min_length=1, description="Версия (EIP-712 domain version)")
    chain_id: int = Field(..., ge=1, description="Chain id")
    verifying_contract: str = Field(..., description="Адрес контракта")
    admin: str = Field(..., description="Начальный владелец")
    initial_supply: int = Field(default=0, ge=0, description="Начальный баланс admin")
    throttle_window_sec: int = Field(default=THROTTLE_WINDOW_SEC, gt=0)
    default_max_transfer_amount: int = Field(
        default=tokens_to_amount(DEFAULT_MAX_TRANSFER_TOKENS), ge=0
    )

    model_config = {"frozen": True}

    @field_validator("verifying_contract", "admin")
    @classmethod
    def normalize_address(cls, v: str) -> str:
        return to_identity(v)

    @property
    def guard_settings(self) -> GuardSettings:
        return GuardSettings(
            throttle_window_sec=self.throttle_window_sec,
            default_max_transfer_amount=self.default_max_transfer_amount,
        )


def launch_config_from_dict(data: Dict[str, Any]) -> LaunchConfig:
    """
    Построение LaunchConfig из сырого JSON-объекта.

    Raises:
        jsonschema.ValidationError: Если данные не соответствуют схеме
        pydantic.ValidationError: Если адреса невалидны
    """
    validate_launch_config(data)

    fields = {k: v for k, v in data.items() if k != "guard"}
    fields.update(data.get("guard", {}))
    return LaunchConfig(**fields)


def load_launch_config(path: str | Path) -> LaunchConfig:
    """Загрузка LaunchConfig из JSON файла."""
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    config = launch_config_from_dict(data)
    logger.info(
        "Loaded launch config %s: name=%s chain_id=%d admin=%s",
        path, config.name, config.chain_id, config.admin,
    )
    return config
