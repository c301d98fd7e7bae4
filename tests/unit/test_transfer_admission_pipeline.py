"""Integration тесты TransferAdmissionPipeline.

Coverage:
- До начала торговли (transfer / transfer_from)
- Период ограничений: лимит, throttle, whitelist, unthrottle
- Без лимита, перенос trading start, смена лимита, master switch
- Атомарность: отказ ledger не записывает timestamps
- Сериализация конкурентных переводов
- Ownership, permit-запросы и загрузка конфигурации
"""

import json
import threading

import pytest
from eth_keys import keys
from jsonschema import ValidationError

from launchguard.core.config import LaunchConfig
from launchguard.core.domain.identity import ZERO_ADDRESS
from launchguard.core.domain.units import tokens_to_amount
from launchguard.ledger import InMemoryLedger
from launchguard.core.errors import (
    LedgerError,
    LimitExceeded,
    ThrottleViolation,
    TooLate,
    TransfersDisabled,
    Unauthorized,
)
from launchguard.permit import PermitMessage, permit_digest
from launchguard.pipeline import TransferAdmissionPipeline


DEPLOYER = "0x1111111111111111111111111111111111111111"
BOB = "0x3333333333333333333333333333333333333333"
CAROL = "0x4444444444444444444444444444444444444444"
POOL = "0x5555555555555555555555555555555555555555"

ALICE_KEY = keys.PrivateKey(b"\xa1" * 32)
ALICE = ALICE_KEY.public_key.to_checksum_address()

NOW = 1_700_000_000


def T(tokens):
    return tokens_to_amount(tokens)


@pytest.fixture
def config():
    return LaunchConfig(
        name="Jigen",
        version="1",
        chain_id=31337,
        verifying_contract="0x5FbDB2315678afecb367f032d93F642f64180aa3",
        admin=DEPLOYER,
        initial_supply=T(500_000_000),
    )


@pytest.fixture
def token(config):
    token = TransferAdmissionPipeline(config)
    token.init_antibot(DEPLOYER)
    return token


@pytest.fixture
def live_token(token):
    """Торговля открыта с NOW."""
    token.set_trading_start(DEPLOYER, NOW, now=NOW)
    return token


def transfers(token):
    return [(e.sender, e.receiver, e.value) for e in token.event_log.named("Transfer")]


# =============================================================================
# BEFORE TRADING TIME
# =============================================================================


class TestBeforeTradingTime:
    def test_transfer_rejected(self, token):
        token.transfer(DEPLOYER, ALICE, T(100), now=NOW)

        with pytest.raises(TransfersDisabled, match="Protection: Transfers disabled"):
            token.transfer(ALICE, BOB, T(100), now=NOW)

    def test_owner_transfers_allowed(self, token):
        token.transfer(DEPLOYER, ALICE, T(150_000), now=NOW)
        token.transfer(ALICE, DEPLOYER, T(150_000), now=NOW)

        assert transfers(token)[-2:] == [
            (DEPLOYER, ALICE, T(150_000)),
            (ALICE, DEPLOYER, T(150_000)),
        ]

    def test_unthrottled_account_still_locked(self, token):
        token.transfer(DEPLOYER, ALICE, T(150_000), now=NOW)
        token.unthrottle_account(DEPLOYER, ALICE, True)

        with pytest.raises(TransfersDisabled):
            token.transfer(ALICE, BOB, T(150_000), now=NOW)

    def test_transfer_from_rejected(self, token):
        token.transfer(DEPLOYER, ALICE, T(150_000), now=NOW)
        token.approve(ALICE, BOB, T(150_000))

        with pytest.raises(TransfersDisabled):
            token.transfer_from(BOB, ALICE, BOB, T(150_000), now=NOW)

    def test_transfer_from_owner_allowed(self, token):
        token.approve(DEPLOYER, BOB, T(150_000))
        token.transfer_from(BOB, DEPLOYER, BOB, T(150_000), now=NOW)

        assert token.balance_of(BOB) == T(150_000)
        assert token.allowance(DEPLOYER, BOB) == 0


# =============================================================================
# DURING RESTRICTION TIME
# =============================================================================


class TestDuringRestriction:
    def test_amount_over_limit(self, live_token):
        live_token.transfer(DEPLOYER, POOL, T(150_000), now=NOW)

        with pytest.raises(LimitExceeded, match="Protection: Limit exceeded"):
            live_token.transfer(POOL, ALICE, T(150_000), now=NOW)

        live_token.approve(ALICE, BOB, T(150_000))
        with pytest.raises(LimitExceeded):
            live_token.transfer_from(BOB, ALICE, BOB, T(150_000), now=NOW + 30)

    def test_amount_under_limit(self, live_token):
        live_token.transfer(DEPLOYER, ALICE, T(50_000), now=NOW)

        live_token.approve(ALICE, BOB, T(50_000))
        live_token.transfer_from(BOB, ALICE, BOB, T(50_000), now=NOW + 30)

        assert transfers(live_token)[-1] == (ALICE, BOB, T(50_000))

    def test_throttle_across_transfer_and_transfer_from(self, live_token):
        live_token.transfer(DEPLOYER, POOL, T(50_000), now=NOW)
        live_token.transfer(POOL, ALICE, T(50_000), now=NOW)

        live_token.approve(ALICE, BOB, T(50_000))
        with pytest.raises(ThrottleViolation, match="Protection: 30 sec/tx allowed"):
            live_token.transfer_from(BOB, ALICE, BOB, T(50_000), now=NOW)

    def test_throttle_window_scenario(self, live_token):
        """A → B 50000, затем B → C в пределах 30s отклоняется, через 30s проходит."""
        live_token.transfer(DEPLOYER, ALICE, T(50_000), now=NOW)

        live_token.transfer(ALICE, BOB, T(50_000), now=NOW + 1)
        with pytest.raises(ThrottleViolation):
            live_token.transfer(BOB, CAROL, 1, now=NOW + 20)

        live_token.transfer(BOB, CAROL, 1, now=NOW + 31)
        assert live_token.balance_of(CAROL) == 1

    def test_owner_transfer_does_not_start_throttle(self, live_token):
        live_token.transfer(DEPLOYER, POOL, T(1_000_000), now=NOW)
        live_token.transfer(POOL, ALICE, T(1_000), now=NOW)

        with pytest.raises(ThrottleViolation):
            live_token.transfer(POOL, ALICE, T(1_000), now=NOW)

    def test_whitelisted_sender_distributes(self, live_token):
        live_token.whitelist_account(DEPLOYER, POOL, True)
        live_token.transfer(DEPLOYER, POOL, T(50_000), now=NOW)

        live_token.transfer(POOL, ALICE, T(1_000), now=NOW)
        live_token.transfer(POOL, BOB, T(1_000), now=NOW)

        live_token.approve(POOL, CAROL, T(10_000))
        live_token.transfer_from(CAROL, POOL, CAROL, T(10_000), now=NOW)

        assert live_token.balance_of(CAROL) == T(10_000)

    def test_whitelisted_receiver_collects(self, live_token):
        for i, account in enumerate((ALICE, BOB, CAROL)):
            live_token.transfer(DEPLOYER, account, T(1_000), now=NOW + 60 * i)

        live_token.whitelist_account(DEPLOYER, POOL, True)
        at = NOW + 180

        live_token.transfer(ALICE, POOL, T(1_000), now=at)
        live_token.approve(BOB, POOL, T(1_000))
        live_token.transfer_from(POOL, BOB, POOL, T(1_000), now=at)

        assert live_token.balance_of(POOL) == T(2_000)

    def test_whitelisted_endpoint_exempts_pair(self, live_token):
        """Исключение любой стороны снимает throttle для всей пары."""
        live_token.transfer(DEPLOYER, ALICE, T(10_000), now=NOW)
        live_token.whitelist_account(DEPLOYER, POOL, True)

        live_token.transfer(ALICE, POOL, T(1_000), now=NOW + 60)
        live_token.transfer(ALICE, POOL, T(1_000), now=NOW + 60)

        assert live_token.balance_of(POOL) == T(2_000)

    def test_exempt_pair_still_records_timestamps(self, live_token):
        live_token.whitelist_account(DEPLOYER, POOL, True)
        live_token.transfer(DEPLOYER, POOL, T(10_000), now=NOW)

        live_token.transfer(POOL, ALICE, T(1_000), now=NOW)
        assert live_token.guard.last_transfer_at(ALICE) == NOW
        assert live_token.guard.last_transfer_at(POOL) == NOW

        with pytest.raises(ThrottleViolation):
            live_token.transfer(ALICE, BOB, T(100), now=NOW + 5)


# =============================================================================
# CONFIGURATION SCENARIOS
# =============================================================================


def test_without_transfer_limit(live_token):
    live_token.set_max_transfer_amount(DEPLOYER, 0)
    live_token.transfer(DEPLOYER, ALICE, T(1_000_000), now=NOW)

    live_token.approve(ALICE, BOB, T(1_000_000))
    live_token.transfer_from(BOB, ALICE, BOB, T(1_000_000), now=NOW + 30)

    assert live_token.balance_of(BOB) == T(1_000_000)


def test_reschedule_trading_start(token):
    start = NOW + 3600
    token.set_trading_start(DEPLOYER, start, now=NOW)
    token.transfer(DEPLOYER, ALICE, T(200_000), now=NOW)

    with pytest.raises(TransfersDisabled):
        token.transfer(ALICE, BOB, T(200_000), now=NOW)

    token.set_trading_start(DEPLOYER, start + 3600, now=NOW)

    with pytest.raises(TransfersDisabled):
        token.transfer(ALICE, BOB, T(200_000), now=NOW + 3600)

    with pytest.raises(LimitExceeded):
        token.transfer(ALICE, BOB, T(200_000), now=NOW + 7200)

    token.transfer(ALICE, BOB, T(50_000), now=NOW + 7200)
    assert token.balance_of(BOB) == T(50_000)


def test_set_trading_start_after_start_too_late(token):
    token.set_trading_start(DEPLOYER, NOW + 3600, now=NOW)

    with pytest.raises(TooLate, match="To late"):
        token.set_trading_start(DEPLOYER, 1000, now=NOW + 3600)


def test_change_max_transfer_amount(live_token):
    live_token.transfer(DEPLOYER, ALICE, T(200_000), now=NOW)

    with pytest.raises(LimitExceeded):
        live_token.transfer(ALICE, BOB, T(200_000), now=NOW)

    live_token.set_max_transfer_amount(DEPLOYER, T(200_000))
    live_token.transfer(ALICE, BOB, T(200_000), now=NOW)

    assert live_token.event_log.named("MaxTransferAmountChanged")[-1].amount == T(200_000)


def test_restriction_inactive(live_token):
    live_token.set_restriction_active(DEPLOYER, False)
    live_token.transfer(DEPLOYER, ALICE, T(1_000_000), now=NOW)

    live_token.transfer(ALICE, BOB, T(1_000_000), now=NOW)
    live_token.transfer(BOB, CAROL, T(1_000), now=NOW)

    assert live_token.event_log.named("RestrictionActiveChanged")[-1].active is False


def test_non_owner_cannot_configure(token):
    with pytest.raises(Unauthorized):
        token.set_restriction_active(ALICE, False)
    with pytest.raises(Unauthorized):
        token.init_antibot(ALICE)


# =============================================================================
# ATOMICITY / CONCURRENCY
# =============================================================================


def test_ledger_failure_records_nothing(live_token):
    with pytest.raises(LedgerError, match="exceeds balance"):
        live_token.transfer(ALICE, BOB, T(10), now=NOW)

    assert live_token.guard.last_transfer_at(ALICE) is None
    assert live_token.guard.last_transfer_at(BOB) is None


def test_transfer_from_without_allowance(live_token):
    live_token.transfer(DEPLOYER, ALICE, T(100), now=NOW)

    with pytest.raises(LedgerError, match="exceeds allowance"):
        live_token.transfer_from(BOB, ALICE, BOB, T(100), now=NOW)
    assert live_token.balance_of(ALICE) == T(100)
    assert live_token.guard.last_transfer_at(ALICE) is None


def test_concurrent_transfers_from_same_account(live_token):
    """Только один из одновременных переводов аккаунта проходит throttle."""
    live_token.transfer(DEPLOYER, ALICE, T(1_000), now=NOW)
    barrier = threading.Barrier(8)
    outcomes = []

    def worker(receiver):
        barrier.wait()
        try:
            live_token.transfer(ALICE, receiver, T(1), now=NOW + 1)
            outcomes.append("ok")
        except ThrottleViolation:
            outcomes.append("throttled")

    receivers = ["0x%040x" % (0xB000 + i) for i in range(8)]
    threads = [threading.Thread(target=worker, args=(r,)) for r in receivers]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count("ok") == 1
    assert outcomes.count("throttled") == 7


# =============================================================================
# OWNERSHIP / PERMIT / CONFIG
# =============================================================================


def test_ownership_handoff_moves_privileges(live_token):
    live_token.transfer_ownership(DEPLOYER, CAROL, direct=False)
    live_token.claim_ownership(CAROL)

    assert live_token.owner == CAROL
    live_token.set_max_transfer_amount(CAROL, 0)
    with pytest.raises(Unauthorized):
        live_token.set_max_transfer_amount(DEPLOYER, 1)

    # владелец освобождён от ограничений
    live_token.transfer(DEPLOYER, CAROL, T(10), now=NOW)
    live_token.transfer(CAROL, ALICE, T(10), now=NOW)


def test_submit_permit_request(token):
    deadline = NOW + 100
    message = PermitMessage(owner=ALICE, spender=BOB, value=T(5), nonce=0, deadline=deadline)
    signature = ALICE_KEY.sign_msg_hash(permit_digest(token.domain_separator, message))

    result = token.submit_permit_request(
        {
            "owner": ALICE,
            "spender": BOB,
            "value": T(5),
            "deadline": deadline,
            "signature": "0x" + signature.to_bytes().hex(),
        },
        now=NOW,
    )

    assert result.event.value == T(5)
    assert token.allowance(ALICE, BOB) == T(5)
    assert token.nonces(ALICE) == 1


def test_submit_permit_request_schema_violation(token):
    with pytest.raises(ValidationError):
        token.submit_permit_request({"owner": ALICE, "spender": BOB}, now=NOW)
    assert token.nonces(ALICE) == 0


def test_subscribers_receive_events(token):
    seen = []
    token.subscribe(seen.append)

    token.whitelist_account(DEPLOYER, POOL, True)
    token.transfer(DEPLOYER, POOL, T(1), now=NOW)

    assert [e.name for e in seen] == ["MarkedWhitelisted", "Transfer"]


# =============================================================================
# SUBSCRIBERS
# =============================================================================


def test_failing_subscriber_does_not_split_transfer(live_token):
    """Исключение подписчика не оставляет перевод без записанных timestamps."""
    live_token.transfer(DEPLOYER, ALICE, T(10), now=NOW)

    def broken_observer(event):
        if event.name == "Transfer":
            raise RuntimeError("observer is down")

    live_token.subscribe(broken_observer)
    live_token.transfer(ALICE, BOB, T(1), now=NOW + 1)

    assert live_token.balance_of(BOB) == T(1)
    assert live_token.guard.last_transfer_at(ALICE) == NOW + 1

    with pytest.raises(ThrottleViolation):
        live_token.transfer(ALICE, BOB, T(1), now=NOW + 2)


def test_reentrant_subscriber_is_throttled(live_token):
    """Подписчик, вызывающий transfer повторно, видит уже записанный timestamp."""
    live_token.transfer(DEPLOYER, ALICE, T(10), now=NOW)
    outcomes = []

    def forwarder(event):
        if event.name == "Transfer" and event.receiver == BOB:
            try:
                live_token.transfer(ALICE, CAROL, T(1), now=NOW + 1)
            except ThrottleViolation:
                outcomes.append("throttled")
            else:
                outcomes.append("admitted")

    live_token.subscribe(forwarder)
    live_token.transfer(ALICE, BOB, T(1), now=NOW + 1)

    assert outcomes == ["throttled"]
    assert live_token.balance_of(BOB) == T(1)
    assert live_token.balance_of(CAROL) == 0


def test_subscriber_sees_completed_transfer_from(live_token):
    live_token.transfer(DEPLOYER, ALICE, T(10), now=NOW)
    live_token.approve(ALICE, BOB, T(5))
    observed = []

    def snapshot(event):
        observed.append(
            (
                event.name,
                live_token.balance_of(CAROL),
                live_token.allowance(ALICE, BOB),
                live_token.guard.last_transfer_at(ALICE),
            )
        )

    live_token.subscribe(snapshot)
    live_token.transfer_from(BOB, ALICE, CAROL, T(2), now=NOW + 1)

    assert observed == [
        ("Transfer", T(2), T(3), NOW + 1),
        ("Approval", T(2), T(3), NOW + 1),
    ]


def test_subscriber_sees_completed_permit(token):
    deadline = NOW + 100
    message = PermitMessage(owner=ALICE, spender=BOB, value=T(5), nonce=0, deadline=deadline)
    signature = ALICE_KEY.sign_msg_hash(permit_digest(token.domain_separator, message))
    observed = []
    token.subscribe(
        lambda event: observed.append((token.nonces(ALICE), token.allowance(ALICE, BOB)))
    )

    token.permit(ALICE, BOB, T(5), deadline, signature.to_bytes(), now=NOW)

    assert observed == [(1, T(5))]


# =============================================================================
# CONSTRUCTION
# =============================================================================


def test_initial_supply_credited_to_admin(token):
    assert token.ledger.total_supply == T(500_000_000)
    assert token.balance_of(DEPLOYER) == T(500_000_000)


def test_injected_ledger_keeps_its_balances(config):
    ledger = InMemoryLedger()
    ledger.credit(DEPLOYER, T(7))

    token = TransferAdmissionPipeline(config, ledger=ledger)

    assert token.ledger is ledger
    assert ledger.total_supply == T(7)
    assert token.balance_of(DEPLOYER) == T(7)


def test_from_config_file(tmp_path):
    path = tmp_path / "launch.json"
    path.write_text(
        json.dumps(
            {
                "name": "Jigen",
                "version": "1",
                "chain_id": 31337,
                "verifying_contract": "0x5FbDB2315678afecb367f032d93F642f64180aa3",
                "admin": DEPLOYER,
                "initial_supply": T(1_000),
                "guard": {"throttle_window_sec": 60},
            }
        )
    )

    token = TransferAdmissionPipeline.from_config_file(path)
    token.init_antibot(DEPLOYER)

    assert token.owner == DEPLOYER
    assert token.balance_of(DEPLOYER) == T(1_000)
    assert token.guard.snapshot().throttle_window_sec == 60
    assert token.events[0].sender == ZERO_ADDRESS
