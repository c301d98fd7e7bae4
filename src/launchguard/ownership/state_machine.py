"""Ownership State Machine — двухшаговая передача владения.

States:
- Stable(owner): владелец зафиксирован, кандидата нет
- PendingHandoff(owner, candidate): кандидат назначен и ждёт claim
- Renounced: владелец отказался от прав, owner-gated операции
  недоступны навсегда (absorbing state)

Переходы:
- Stable → PendingHandoff: transfer_ownership(direct=False)
- PendingHandoff → Stable: claim_ownership() кандидатом или direct transfer
- * → Renounced: transfer_ownership(ZERO_ADDRESS, direct=True, renounce=True)
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from launchguard.core.domain.events import EventLog, OwnershipTransferred
from launchguard.core.domain.identity import ZERO_ADDRESS, Identity, to_identity
from launchguard.core.errors import (
    REASON_NOT_OWNER,
    REASON_NOT_PENDING_OWNER,
    InvalidTarget,
    Unauthorized,
)


logger = logging.getLogger(__name__)


class OwnershipPhase(str, Enum):
    STABLE = "STABLE"
    PENDING_HANDOFF = "PENDING_HANDOFF"
    RENOUNCED = "RENOUNCED"


@dataclass(frozen=True)
class Stable:
    owner: Identity

    phase = OwnershipPhase.STABLE

    @property
    def pending_owner(self) -> Optional[Identity]:
        return None


@dataclass(frozen=True)
class PendingHandoff:
    owner: Identity
    candidate: Identity

    phase = OwnershipPhase.PENDING_HANDOFF

    @property
    def pending_owner(self) -> Optional[Identity]:
        return self.candidate


@dataclass(frozen=True)
class Renounced:
    phase = OwnershipPhase.RENOUNCED

    @property
    def owner(self) -> Identity:
        return ZERO_ADDRESS

    @property
    def pending_owner(self) -> Optional[Identity]:
        return None


OwnershipState = Union[Stable, PendingHandoff, Renounced]


@dataclass(frozen=True)
class OwnershipTransitionResult:
    """Результат перехода состояния владения."""

    new_state: OwnershipState
    previous_state: OwnershipState
    transition_reason: str
    event: Optional[OwnershipTransferred]

    @property
    def owner_changed(self) -> bool:
        return self.event is not None


class OwnershipRegistry:
    """Реестр владельца одного экземпляра контракта.

    Все привилегированные операции других компонентов начинаются с
    require_owner(caller).
    """

    def __init__(self, initial_owner: str, event_log: Optional[EventLog] = None):
        owner = to_identity(initial_owner)
        if owner == ZERO_ADDRESS:
            raise InvalidTarget()

        self._state: OwnershipState = Stable(owner)
        self._events = event_log if event_log is not None else EventLog()

    # -------------------------------------------------------------------------
    # Read accessors
    # -------------------------------------------------------------------------

    @property
    def state(self) -> OwnershipState:
        return self._state

    @property
    def owner(self) -> Identity:
        return self._state.owner

    @property
    def pending_owner(self) -> Optional[Identity]:
        return self._state.pending_owner

    def is_owner(self, account: Optional[str]) -> bool:
        if isinstance(self._state, Renounced):
            return False
        return to_identity(account) == self._state.owner

    def require_owner(self, caller: Optional[str]) -> None:
        """
        Raises:
            Unauthorized: Если caller не является текущим владельцем
        """
        if not self.is_owner(caller):
            raise Unauthorized(REASON_NOT_OWNER)

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def transfer_ownership(
        self,
        caller: str,
        candidate: Optional[str],
        direct: bool,
        renounce: bool = False,
    ) -> OwnershipTransitionResult:
        """Передача владения: немедленная (direct) или через claim.

        Args:
            caller: вызывающий аккаунт (должен быть владельцем)
            candidate: новый владелец; ZERO_ADDRESS/None допустим только при renounce
            direct: True — владелец меняется сразу; False — назначается кандидат
            renounce: разрешает нулевой candidate (отказ от владения
                при direct, отмена pending handoff при non-direct)

        Returns:
            OwnershipTransitionResult

        Raises:
            Unauthorized: caller не владелец
            InvalidTarget: нулевой candidate без renounce
        """
        self.require_owner(caller)
        target = to_identity(candidate)
        if target == ZERO_ADDRESS and not renounce:
            raise InvalidTarget()

        previous = self._state
        old_owner = previous.owner

        if not direct:
            if target == ZERO_ADDRESS:
                self._state = Stable(old_owner)
                reason = "pending_handoff_cleared"
            else:
                self._state = PendingHandoff(old_owner, target)
                reason = "pending_handoff_started"
            logger.info("Ownership %s: owner=%s candidate=%s", reason, old_owner, target)
            return OwnershipTransitionResult(
                new_state=self._state,
                previous_state=previous,
                transition_reason=reason,
                event=None,
            )

        if target == ZERO_ADDRESS:
            self._state = Renounced()
            reason = "renounced"
        else:
            self._state = Stable(target)
            reason = "direct_transfer"

        event = OwnershipTransferred(previous_owner=old_owner, new_owner=target)
        self._events.emit(event)
        logger.info("Ownership %s: %s -> %s", reason, old_owner, target)

        return OwnershipTransitionResult(
            new_state=self._state,
            previous_state=previous,
            transition_reason=reason,
            event=event,
        )

    def claim_ownership(self, caller: str) -> OwnershipTransitionResult:
        """Завершение двухшаговой передачи кандидатом.

        Raises:
            Unauthorized: caller не является pending owner (или кандидата нет)
        """
        previous = self._state
        if not isinstance(previous, PendingHandoff) or to_identity(caller) != previous.candidate:
            raise Unauthorized(REASON_NOT_PENDING_OWNER)

        self._state = Stable(previous.candidate)
        event = OwnershipTransferred(previous_owner=previous.owner, new_owner=previous.candidate)
        self._events.emit(event)
        logger.info("Ownership claimed: %s -> %s", previous.owner, previous.candidate)

        return OwnershipTransitionResult(
            new_state=self._state,
            previous_state=previous,
            transition_reason="claimed",
            event=event,
        )
