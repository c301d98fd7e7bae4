"""TransferAdmissionPipeline — экземпляр контракта: ownership + guard + permit + ledger.

Каждый перевод стоимости (transfer и transfer_from) проходит через
один и тот же AntiBotGuard.admit(source, receiver, amount, now) до
изменения балансов. Отказ guard передаётся вызывающему дословно.

Все изменяющие операции выполняются под одной блокировкой экземпляра:
admit, изменение ledger и запись timestamps — одна критическая секция.
Подписчики событий вызываются после выхода из неё, когда состояние
уже записано полностью; повторный вход из подписчика видит новые timestamps.
"""

import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Optional

from launchguard.core.config import LaunchConfig, load_launch_config
from launchguard.core.contracts import validate_permit_request
from launchguard.core.domain.events import Approval, Event, EventLog
from launchguard.core.domain.identity import Identity, to_identity
from launchguard.core.domain.units import validate_amount
from launchguard.gatekeeper.antibot_guard import AdmissionDecision, AntiBotGuard
from launchguard.ledger.base import Ledger
from launchguard.ledger.in_memory import InMemoryLedger
from launchguard.ownership.state_machine import OwnershipRegistry, OwnershipTransitionResult
from launchguard.permit.signature import SignatureInput
from launchguard.permit.verifier import PermitResult, PermitVerifier


logger = logging.getLogger(__name__)


class TransferAdmissionPipeline:
    """Один развёрнутый экземпляр токена с anti-bot защитой.

    Состояние не разделяется между экземплярами; caller и now передаются
    в каждую операцию явно.

    config.initial_supply зачисляется admin только в InMemoryLedger,
    создаваемый по умолчанию. Внешний ledger передаётся уже с балансами,
    и initial_supply для него игнорируется.
    """

    def __init__(self, config: LaunchConfig, ledger: Optional[Ledger] = None):
        self.config = config
        self._lock = threading.RLock()
        self.event_log = EventLog()

        self.ownership = OwnershipRegistry(config.admin, self.event_log)
        self.guard = AntiBotGuard(self.ownership, config.guard_settings, self.event_log)

        if ledger is None:
            ledger = InMemoryLedger(self.event_log)
            if config.initial_supply:
                ledger.credit(config.admin, config.initial_supply)
        self.ledger = ledger

        self.permits = PermitVerifier(
            name=config.name,
            version=config.version,
            chain_id=config.chain_id,
            verifying_contract=config.verifying_contract,
            ledger=self.ledger,
            event_log=self.event_log,
        )

    @contextmanager
    def _operation(self) -> Iterator[None]:
        # deferred() снаружи: подписчики вызываются уже без блокировки
        with self.event_log.deferred():
            with self._lock:
                yield

    @classmethod
    def from_config_file(cls, path: str | Path) -> "TransferAdmissionPipeline":
        return cls(load_launch_config(path))

    # =========================================================================
    # VIEWS
    # =========================================================================

    @property
    def owner(self) -> Identity:
        return self.ownership.owner

    @property
    def pending_owner(self) -> Optional[Identity]:
        return self.ownership.pending_owner

    @property
    def domain_separator(self) -> bytes:
        return self.permits.domain_separator

    @property
    def events(self) -> tuple[Event, ...]:
        return self.event_log.events

    def subscribe(self, callback: Callable[[Event], None]) -> None:
        self.event_log.subscribe(callback)

    def nonces(self, owner: str) -> int:
        return self.permits.nonces(owner)

    def balance_of(self, account: str) -> int:
        return self.ledger.balance_of(account)

    def allowance(self, owner: str, spender: str) -> int:
        return self.ledger.allowance(owner, spender)

    def is_whitelisted(self, account: str) -> bool:
        return self.guard.is_whitelisted(account)

    def is_unthrottled(self, account: str) -> bool:
        return self.guard.is_unthrottled(account)

    # =========================================================================
    # OWNERSHIP
    # =========================================================================

    def transfer_ownership(
        self, caller: str, candidate: Optional[str], direct: bool, renounce: bool = False
    ) -> OwnershipTransitionResult:
        with self._operation():
            return self.ownership.transfer_ownership(caller, candidate, direct, renounce)

    def claim_ownership(self, caller: str) -> OwnershipTransitionResult:
        with self._operation():
            return self.ownership.claim_ownership(caller)

    # =========================================================================
    # GUARD CONFIGURATION
    # =========================================================================

    def init_antibot(self, caller: str) -> None:
        with self._operation():
            self.guard.initialize(caller)

    def set_trading_start(self, caller: str, trading_start: int, now: int) -> None:
        with self._operation():
            self.guard.set_trading_start(caller, trading_start, now)

    def set_max_transfer_amount(self, caller: str, amount: int) -> None:
        with self._operation():
            self.guard.set_max_transfer_amount(caller, amount)

    def set_restriction_active(self, caller: str, active: bool) -> None:
        with self._operation():
            self.guard.set_restriction_active(caller, active)

    def whitelist_account(self, caller: str, account: Optional[str], whitelisted: bool) -> None:
        with self._operation():
            self.guard.whitelist_account(caller, account, whitelisted)

    def unthrottle_account(self, caller: str, account: Optional[str], unthrottled: bool) -> None:
        with self._operation():
            self.guard.unthrottle_account(caller, account, unthrottled)

    # =========================================================================
    # VALUE TRANSFERS
    # =========================================================================

    def _admit_or_raise(self, source: Identity, receiver: Identity, amount: int, now: int) -> AdmissionDecision:
        decision = self.guard.admit(source, receiver, amount, now)
        if not decision.admitted:
            logger.info(
                "Transfer %s -> %s (%d) rejected: %s", source, receiver, amount, decision.reason
            )
        decision.raise_if_rejected()
        return decision

    def transfer(self, caller: str, to: str, amount: int, now: int) -> AdmissionDecision:
        """Перевод caller → to.

        Raises:
            TransfersDisabled / LimitExceeded / ThrottleViolation: отказ guard
            LedgerError: ошибка бухгалтерии (баланс, нулевой адрес)
        """
        source = to_identity(caller)
        receiver = to_identity(to)
        validate_amount(amount)

        with self._operation():
            decision = self._admit_or_raise(source, receiver, amount, now)
            self.ledger.move(source, receiver, amount)
            if decision.records_timestamps:
                self.guard.record_transfer(source, receiver, now)
            return decision

    def transfer_from(
        self, caller: str, source: str, to: str, amount: int, now: int
    ) -> AdmissionDecision:
        """Перевод source → to по allowance caller.

        Guard проверяет пару (source, to) — те же аргументы, что и transfer.
        """
        spender = to_identity(caller)
        source_id = to_identity(source)
        receiver = to_identity(to)
        validate_amount(amount)

        with self._operation():
            decision = self._admit_or_raise(source_id, receiver, amount, now)
            self.ledger.check_transfer_from(spender, source_id, receiver, amount)

            remaining = self.ledger.spend_allowance(source_id, spender, amount)
            self.ledger.move(source_id, receiver, amount)
            self.event_log.emit(Approval(owner=source_id, spender=spender, value=remaining))
            if decision.records_timestamps:
                self.guard.record_transfer(source_id, receiver, now)
            return decision

    # =========================================================================
    # ALLOWANCES
    # =========================================================================

    def approve(self, caller: str, spender: Optional[str], value: int) -> Approval:
        owner = to_identity(caller)
        spender_id = to_identity(spender)
        with self._operation():
            self.ledger.set_allowance(owner, spender_id, value)
            event = Approval(owner=owner, spender=spender_id, value=value)
            self.event_log.emit(event)
            return event

    def permit(
        self,
        owner: Optional[str],
        spender: Optional[str],
        value: int,
        deadline: int,
        signature: SignatureInput,
        now: int,
    ) -> PermitResult:
        with self._operation():
            return self.permits.permit(owner, spender, value, deadline, signature, now)

    def submit_permit_request(self, request: Dict[str, Any], now: int) -> PermitResult:
        """Permit из JSON-запроса (permit_request.json).

        Raises:
            jsonschema.ValidationError: Если запрос не соответствует схеме
        """
        validate_permit_request(request)
        return self.permit(
            owner=request["owner"],
            spender=request["spender"],
            value=request["value"],
            deadline=request["deadline"],
            signature=request["signature"],
            now=now,
        )
