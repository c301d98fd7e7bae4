"""AntiBotGuard — политика допуска переводов в период запуска токена.

Порядок гейтов фиксирован:
0. Restriction switch выключен → ADMIT
1. Владелец — отправитель или получатель → ADMIT
2. До trading_start (или старт не назначен) → REJECT "Transfers disabled"
3. Сумма выше лимита и ни одна сторона не whitelisted → REJECT "Limit exceeded"
4. Ни одна сторона не исключена и любая сторона участвовала в переводе
   в течение окна throttle → REJECT "30 sec/tx allowed"
5. ADMIT; вызывающий обязан записать timestamps обеих сторон (record_transfer)

Timestamps записываются только для переводов, прошедших гейты 2-4,
причём для обеих сторон, даже если сторона исключена из throttle.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from launchguard.core.config import GuardSettings
from launchguard.core.domain.events import (
    EventLog,
    MarkedUnthrottled,
    MarkedWhitelisted,
    MaxTransferAmountChanged,
    RestrictionActiveChanged,
)
from launchguard.core.domain.guard_state import GuardConfigSnapshot
from launchguard.core.domain.identity import ZERO_ADDRESS, Identity, to_identity
from launchguard.core.domain.units import validate_amount, validate_timestamp
from launchguard.core.errors import (
    AlreadyInitialized,
    NotInitialized,
    TooLate,
    ZeroAddress,
    admission_error,
)
from launchguard.gatekeeper.gates import (
    Gate00RestrictionSwitch,
    Gate01OwnerExemption,
    Gate02TradingWindow,
    Gate03TransferCap,
    Gate04Throttle,
    GateVerdict,
)
from launchguard.ownership.state_machine import OwnershipRegistry


logger = logging.getLogger(__name__)


@dataclass
class GuardConfig:
    """Изменяемое состояние guard одного экземпляра контракта."""

    initialized: bool = False
    restriction_active: bool = False
    trading_start: int = 0
    max_transfer_amount: int = 0
    whitelisted: set[Identity] = field(default_factory=set)
    unthrottled: set[Identity] = field(default_factory=set)
    last_transfer_timestamp: dict[Identity, int] = field(default_factory=dict)


@dataclass(frozen=True)
class AdmissionDecision:
    """Решение guard по одному переводу."""

    admitted: bool
    reason: str

    # True только для допуска через гейты 2-4 (throttled path)
    records_timestamps: bool

    deciding_gate: str
    gate_results: tuple[Any, ...]
    details: str

    def raise_if_rejected(self) -> None:
        """
        Raises:
            TransfersDisabled / LimitExceeded / ThrottleViolation: при отказе
        """
        if not self.admitted:
            raise admission_error(self.reason)


class AntiBotGuard:
    """Anti-bot guard одного экземпляра контракта.

    Создаётся inert (initialized=False, restriction_active=False) и
    активируется один раз через initialize().
    """

    def __init__(
        self,
        ownership: OwnershipRegistry,
        settings: Optional[GuardSettings] = None,
        event_log: Optional[EventLog] = None,
    ):
        self.ownership = ownership
        self.settings = settings or GuardSettings()
        self._events = event_log if event_log is not None else EventLog()
        self._config = GuardConfig()

        self._gate00 = Gate00RestrictionSwitch()
        self._gate01 = Gate01OwnerExemption()
        self._gate02 = Gate02TradingWindow()
        self._gate03 = Gate03TransferCap()
        self._gate04 = Gate04Throttle(self.settings.throttle_window_sec)

    # -------------------------------------------------------------------------
    # Read accessors
    # -------------------------------------------------------------------------

    @property
    def initialized(self) -> bool:
        return self._config.initialized

    @property
    def restriction_active(self) -> bool:
        return self._config.restriction_active

    @property
    def trading_start(self) -> int:
        return self._config.trading_start

    @property
    def max_transfer_amount(self) -> int:
        return self._config.max_transfer_amount

    def is_whitelisted(self, account: str) -> bool:
        return to_identity(account) in self._config.whitelisted

    def is_unthrottled(self, account: str) -> bool:
        return to_identity(account) in self._config.unthrottled

    def last_transfer_at(self, account: str) -> Optional[int]:
        return self._config.last_transfer_timestamp.get(to_identity(account))

    def snapshot(self) -> GuardConfigSnapshot:
        config = self._config
        return GuardConfigSnapshot(
            initialized=config.initialized,
            restriction_active=config.restriction_active,
            trading_start=config.trading_start,
            max_transfer_amount=config.max_transfer_amount,
            throttle_window_sec=self.settings.throttle_window_sec,
            whitelisted=sorted(config.whitelisted),
            unthrottled=sorted(config.unthrottled),
        )

    # -------------------------------------------------------------------------
    # Configuration (owner-only)
    # -------------------------------------------------------------------------

    def _require_configurable(self, caller: str) -> None:
        self.ownership.require_owner(caller)
        if not self._config.initialized:
            raise NotInitialized()

    def initialize(self, caller: str) -> None:
        """Однократная активация guard.

        Включает ограничения, выставляет лимит по умолчанию и добавляет
        владельца в unthrottled.

        Raises:
            Unauthorized: caller не владелец
            AlreadyInitialized: повторный вызов
        """
        self.ownership.require_owner(caller)
        if self._config.initialized:
            raise AlreadyInitialized()

        owner = self.ownership.owner
        self._config.initialized = True
        self._config.restriction_active = True
        self._config.max_transfer_amount = self.settings.default_max_transfer_amount
        self._config.unthrottled.add(owner)
        logger.info(
            "Anti-bot guard initialized: owner=%s max_transfer_amount=%d",
            owner, self._config.max_transfer_amount,
        )

    def set_trading_start(self, caller: str, trading_start: int, now: int) -> None:
        """Назначение (или перенос ещё не наступившего) начала торговли.

        Raises:
            TooLate: текущий trading_start уже наступил
        """
        self._require_configurable(caller)
        validate_timestamp(trading_start, "trading_start")
        validate_timestamp(now, "now")

        current = self._config.trading_start
        if current != 0 and now >= current:
            raise TooLate()

        self._config.trading_start = trading_start
        logger.info("Trading start set: %d -> %d", current, trading_start)

    def set_max_transfer_amount(self, caller: str, amount: int) -> None:
        self._require_configurable(caller)
        validate_amount(amount)

        self._config.max_transfer_amount = amount
        self._events.emit(MaxTransferAmountChanged(amount=amount))
        logger.info("Max transfer amount set: %d", amount)

    def set_restriction_active(self, caller: str, active: bool) -> None:
        self._require_configurable(caller)

        self._config.restriction_active = bool(active)
        self._events.emit(RestrictionActiveChanged(active=bool(active)))
        logger.info("Restriction active: %s", bool(active))

    def whitelist_account(self, caller: str, account: Optional[str], whitelisted: bool) -> None:
        """
        Raises:
            ZeroAddress: account нулевой
        """
        self._require_configurable(caller)
        target = self._require_account(account)

        if whitelisted:
            self._config.whitelisted.add(target)
        else:
            self._config.whitelisted.discard(target)
        self._events.emit(MarkedWhitelisted(account=target, whitelisted=bool(whitelisted)))
        logger.info("Whitelisted %s: %s", target, bool(whitelisted))

    def unthrottle_account(self, caller: str, account: Optional[str], unthrottled: bool) -> None:
        """
        Raises:
            ZeroAddress: account нулевой
        """
        self._require_configurable(caller)
        target = self._require_account(account)

        if unthrottled:
            self._config.unthrottled.add(target)
        else:
            self._config.unthrottled.discard(target)
        self._events.emit(MarkedUnthrottled(account=target, unthrottled=bool(unthrottled)))
        logger.info("Unthrottled %s: %s", target, bool(unthrottled))

    @staticmethod
    def _require_account(account: Optional[str]) -> Identity:
        target = to_identity(account)
        if target == ZERO_ADDRESS:
            raise ZeroAddress()
        return target

    # -------------------------------------------------------------------------
    # Admission
    # -------------------------------------------------------------------------

    def admit(self, sender: str, receiver: str, amount: int, now: int) -> AdmissionDecision:
        """Решение о допуске перевода sender → receiver.

        Не изменяет состояние. При admitted и records_timestamps вызывающий
        обязан вызвать record_transfer() в той же критической секции.

        Args:
            sender: источник токенов
            receiver: получатель
            amount: сумма в базовых единицах
            now: текущее время (unix sec)

        Returns:
            AdmissionDecision
        """
        sender = to_identity(sender)
        receiver = to_identity(receiver)
        validate_amount(amount)
        validate_timestamp(now, "now")
        config = self._config
        results: list[Any] = []

        r0 = self._gate00.evaluate(config.restriction_active)
        results.append(r0)
        if r0.verdict == GateVerdict.ADMIT:
            return self._decide(results, "GATE_00", records_timestamps=False)

        r1 = self._gate01.evaluate(sender, receiver, self.ownership.owner)
        results.append(r1)
        if r1.verdict == GateVerdict.ADMIT:
            return self._decide(results, "GATE_01", records_timestamps=False)

        r2 = self._gate02.evaluate(config.trading_start, now)
        results.append(r2)
        if r2.verdict == GateVerdict.REJECT:
            return self._decide(results, "GATE_02", records_timestamps=False)

        sender_whitelisted = sender in config.whitelisted
        receiver_whitelisted = receiver in config.whitelisted

        r3 = self._gate03.evaluate(
            amount=amount,
            max_transfer_amount=config.max_transfer_amount,
            sender_whitelisted=sender_whitelisted,
            receiver_whitelisted=receiver_whitelisted,
        )
        results.append(r3)
        if r3.verdict == GateVerdict.REJECT:
            return self._decide(results, "GATE_03", records_timestamps=False)

        r4 = self._gate04.evaluate(
            now=now,
            sender_exempt=sender_whitelisted or sender in config.unthrottled,
            receiver_exempt=receiver_whitelisted or receiver in config.unthrottled,
            sender_last_ts=config.last_transfer_timestamp.get(sender),
            receiver_last_ts=config.last_transfer_timestamp.get(receiver),
        )
        results.append(r4)
        if r4.verdict == GateVerdict.REJECT:
            return self._decide(results, "GATE_04", records_timestamps=False)

        return self._decide(results, "GATE_04", records_timestamps=True)

    def _decide(
        self, results: list[Any], deciding_gate: str, records_timestamps: bool
    ) -> AdmissionDecision:
        last = results[-1]
        decision = AdmissionDecision(
            admitted=last.entry_allowed,
            reason=last.block_reason,
            records_timestamps=records_timestamps,
            deciding_gate=deciding_gate,
            gate_results=tuple(results),
            details=last.details,
        )
        logger.debug(
            "Admission %s at %s: %s",
            "ADMIT" if decision.admitted else "REJECT", deciding_gate, decision.details,
        )
        return decision

    def record_transfer(self, sender: str, receiver: str, now: int) -> None:
        """Запись времени перевода для обеих сторон."""
        validate_timestamp(now, "now")
        self._config.last_transfer_timestamp[to_identity(sender)] = now
        self._config.last_transfer_timestamp[to_identity(receiver)] = now
