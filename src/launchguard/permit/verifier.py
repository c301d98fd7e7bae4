"""
PermitVerifier — проверка off-chain подписанных permit

permit(owner, spender, value, deadline, signature, now):
1. owner не нулевой → иначе InvalidOwner
2. now ≤ deadline → иначе Expired
3. recover_signer(digest(Permit{..., nonce: nonces[owner]})) == owner
   → иначе InvalidSignature
4. allowance[owner][spender] := value, nonces[owner] += 1, событие Approval

Все проверки (включая проверку spender в ledger) выполняются до
инкремента nonce: неуспешный permit не расходует nonce.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from launchguard.core.domain.events import Approval, EventLog
from launchguard.core.domain.identity import ZERO_ADDRESS, Identity, to_identity
from launchguard.core.domain.units import validate_amount, validate_timestamp
from launchguard.core.errors import Expired, InvalidOwner, InvalidSignature
from launchguard.ledger.base import Ledger

from .eip712 import PermitMessage, domain_separator, permit_digest
from .signature import SignatureInput, recover_signer


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PermitResult:
    """Результат успешного permit."""

    message: PermitMessage
    digest: bytes
    event: Approval


class PermitVerifier:
    """Проверка permit и выдача allowance для одного экземпляра контракта."""

    def __init__(
        self,
        name: str,
        version: str,
        chain_id: int,
        verifying_contract: str,
        ledger: Ledger,
        event_log: Optional[EventLog] = None,
    ):
        self.name = name
        self.version = version
        self.chain_id = chain_id
        self.verifying_contract = to_identity(verifying_contract)
        self.domain_separator = domain_separator(
            name, version, chain_id, self.verifying_contract
        )

        self._ledger = ledger
        self._events = event_log if event_log is not None else EventLog()
        self._nonces: dict[Identity, int] = {}

    def nonces(self, owner: str) -> int:
        return self._nonces.get(to_identity(owner), 0)

    def build_message(self, owner: str, spender: str, value: int, deadline: int) -> PermitMessage:
        """Сообщение Permit с текущим nonce владельца."""
        owner_id = to_identity(owner)
        return PermitMessage(
            owner=owner_id,
            spender=to_identity(spender),
            value=value,
            nonce=self._nonces.get(owner_id, 0),
            deadline=deadline,
        )

    def permit(
        self,
        owner: Optional[str],
        spender: Optional[str],
        value: int,
        deadline: int,
        signature: SignatureInput,
        now: int,
    ) -> PermitResult:
        """
        Args:
            owner: владелец токенов (подписант)
            spender: получатель allowance
            value: размер allowance
            deadline: последний допустимый момент (unix sec, включительно)
            signature: подпись владельца над EIP-712 digest
            now: текущее время (unix sec)

        Returns:
            PermitResult

        Raises:
            InvalidOwner: owner нулевой
            Expired: now > deadline
            InvalidSignature: подпись не принадлежит owner
            LedgerError: spender нулевой
        """
        owner_id = to_identity(owner)
        validate_amount(value, "value")
        validate_timestamp(deadline, "deadline")
        validate_timestamp(now, "now")

        if owner_id == ZERO_ADDRESS:
            raise InvalidOwner()

        if now > deadline:
            raise Expired()

        message = self.build_message(owner_id, spender, value, deadline)
        digest = permit_digest(self.domain_separator, message)

        signer = recover_signer(digest, signature)
        if signer != owner_id:
            logger.warning(
                "Permit rejected: signer=%s owner=%s nonce=%d", signer, owner_id, message.nonce
            )
            raise InvalidSignature()

        self._ledger.set_allowance(owner_id, message.spender, value)
        self._nonces[owner_id] = message.nonce + 1

        event = Approval(owner=owner_id, spender=message.spender, value=value)
        self._events.emit(event)
        logger.info(
            "Permit accepted: owner=%s spender=%s value=%d nonce=%d",
            owner_id, message.spender, value, message.nonce,
        )
        return PermitResult(message=message, digest=digest, event=event)
