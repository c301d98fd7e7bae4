"""
EIP-712 — структурированные сообщения permit

digest = keccak256(0x19 0x01 ‖ domain_separator ‖ hashStruct(Permit))

Domain separator вычисляется один раз на экземпляр контракта из
{name, version, chainId, verifyingContract} и не меняется.
"""

from dataclasses import dataclass
from typing import Final

from eth_abi import encode
from eth_utils import keccak

from launchguard.core.domain.identity import Identity, to_identity
from launchguard.core.domain.units import validate_amount


# =============================================================================
# TYPE HASHES
# =============================================================================

DOMAIN_TYPE: Final[str] = (
    "EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)"
)
PERMIT_TYPE: Final[str] = (
    "Permit(address owner,address spender,uint256 value,uint256 nonce,uint256 deadline)"
)

DOMAIN_TYPEHASH: Final[bytes] = keccak(text=DOMAIN_TYPE)
PERMIT_TYPEHASH: Final[bytes] = keccak(text=PERMIT_TYPE)

EIP712_PREFIX: Final[bytes] = b"\x19\x01"


# =============================================================================
# HASHING
# =============================================================================


def domain_separator(
    name: str, version: str, chain_id: int, verifying_contract: str
) -> bytes:
    """
    Domain separator экземпляра контракта.

    Args:
        name: Имя токена
        version: Версия домена (например, "1")
        chain_id: Chain id
        verifying_contract: Адрес контракта

    Returns:
        32-байтовый hash
    """
    return keccak(
        encode(
            ["bytes32", "bytes32", "bytes32", "uint256", "address"],
            [
                DOMAIN_TYPEHASH,
                keccak(text=name),
                keccak(text=version),
                chain_id,
                to_identity(verifying_contract),
            ],
        )
    )


@dataclass(frozen=True)
class PermitMessage:
    """Сообщение Permit{owner, spender, value, nonce, deadline}."""

    owner: Identity
    spender: Identity
    value: int
    nonce: int
    deadline: int

    def struct_hash(self) -> bytes:
        return permit_struct_hash(self.owner, self.spender, self.value, self.nonce, self.deadline)


def permit_struct_hash(owner: str, spender: str, value: int, nonce: int, deadline: int) -> bytes:
    """hashStruct(Permit) по EIP-712."""
    return keccak(
        encode(
            ["bytes32", "address", "address", "uint256", "uint256", "uint256"],
            [
                PERMIT_TYPEHASH,
                to_identity(owner),
                to_identity(spender),
                validate_amount(value, "value"),
                validate_amount(nonce, "nonce"),
                validate_amount(deadline, "deadline"),
            ],
        )
    )


def typed_data_digest(separator: bytes, struct_hash: bytes) -> bytes:
    """Финальный digest для подписи."""
    if len(separator) != 32 or len(struct_hash) != 32:
        raise ValueError("domain separator and struct hash must be 32 bytes")
    return keccak(EIP712_PREFIX + separator + struct_hash)


def permit_digest(separator: bytes, message: PermitMessage) -> bytes:
    return typed_data_digest(separator, message.struct_hash())
