"""
Events — события для off-chain наблюдателей

Immutable Pydantic модели. Поле `name` — дискриминатор события,
payload доступен через model_dump().
"""

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, Literal, Union

from pydantic import BaseModel, Field


logger = logging.getLogger(__name__)


# =============================================================================
# OWNERSHIP
# =============================================================================


class OwnershipTransferred(BaseModel):
    """Смена владельца (direct transfer, claim или renounce)."""

    name: Literal["OwnershipTransferred"] = "OwnershipTransferred"
    previous_owner: str = Field(..., description="Предыдущий владелец")
    new_owner: str = Field(..., description="Новый владелец (ZERO_ADDRESS при renounce)")

    model_config = {"frozen": True}


# =============================================================================
# ANTI-BOT GUARD
# =============================================================================


class MaxTransferAmountChanged(BaseModel):
    name: Literal["MaxTransferAmountChanged"] = "MaxTransferAmountChanged"
    amount: int = Field(..., ge=0, description="Новый лимит одной транзакции (0 = без лимита)")

    model_config = {"frozen": True}


class MarkedWhitelisted(BaseModel):
    name: Literal["MarkedWhitelisted"] = "MarkedWhitelisted"
    account: str
    whitelisted: bool

    model_config = {"frozen": True}


class MarkedUnthrottled(BaseModel):
    name: Literal["MarkedUnthrottled"] = "MarkedUnthrottled"
    account: str
    unthrottled: bool

    model_config = {"frozen": True}


class RestrictionActiveChanged(BaseModel):
    name: Literal["RestrictionActiveChanged"] = "RestrictionActiveChanged"
    active: bool

    model_config = {"frozen": True}


# =============================================================================
# LEDGER / PERMIT
# =============================================================================


class Approval(BaseModel):
    """Изменение allowance (approve или permit)."""

    name: Literal["Approval"] = "Approval"
    owner: str
    spender: str
    value: int = Field(..., ge=0)

    model_config = {"frozen": True}


class Transfer(BaseModel):
    name: Literal["Transfer"] = "Transfer"
    sender: str
    receiver: str
    value: int = Field(..., ge=0)

    model_config = {"frozen": True}


Event = Union[
    OwnershipTransferred,
    MaxTransferAmountChanged,
    MarkedWhitelisted,
    MarkedUnthrottled,
    RestrictionActiveChanged,
    Approval,
    Transfer,
]


# =============================================================================
# EVENT LOG
# =============================================================================


class EventLog:
    """
    Журнал событий одного экземпляра контракта.

    Событие попадает в журнал сразу при emit(). Подписчики вызываются
    синхронно в порядке подписки:
    - вне deferred(): сразу после emit()
    - внутри deferred(): после выхода из самого внешнего deferred() в этом
      потоке, т.е. когда операция уже записала всё своё состояние

    Исключение подписчика логируется и не прерывает доставку остальным:
    операция к этому моменту уже применена.
    """

    def __init__(self):
        self._events: list[Event] = []
        self._subscribers: list[Callable[[Event], None]] = []
        self._local = threading.local()

    def emit(self, event: Event) -> None:
        self._events.append(event)
        if getattr(self._local, "depth", 0):
            self._local.pending.append(event)
        else:
            self._dispatch([event])

    @contextmanager
    def deferred(self) -> Iterator[None]:
        """Отложенная доставка подписчикам событий текущего потока.

        Если блок завершился исключением, накопленные события не доставляются.
        """
        local = self._local
        depth = getattr(local, "depth", 0)
        if depth == 0:
            local.pending = []

        local.depth = depth + 1
        try:
            yield
        finally:
            local.depth = depth

        if depth == 0:
            pending, local.pending = local.pending, []
            self._dispatch(pending)

    def _dispatch(self, events: list[Event]) -> None:
        for event in events:
            for callback in list(self._subscribers):
                try:
                    callback(event)
                except Exception:
                    logger.exception("Event subscriber failed on %s", event.name)

    def subscribe(self, callback: Callable[[Event], None]) -> None:
        self._subscribers.append(callback)

    @property
    def events(self) -> tuple[Event, ...]:
        return tuple(self._events)

    def named(self, name: str) -> list[Event]:
        """Все события с данным дискриминатором `name`."""
        return [e for e in self._events if e.name == name]
