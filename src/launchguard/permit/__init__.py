"""Permit — EIP-712 permit: hashing, signature recovery, verification."""

from .eip712 import (
    DOMAIN_TYPEHASH,
    PERMIT_TYPEHASH,
    PermitMessage,
    domain_separator,
    permit_digest,
    permit_struct_hash,
    typed_data_digest,
)
from .signature import recover_signer, split_signature
from .verifier import PermitResult, PermitVerifier

__all__ = [
    "DOMAIN_TYPEHASH",
    "PERMIT_TYPEHASH",
    "PermitMessage",
    "domain_separator",
    "permit_struct_hash",
    "typed_data_digest",
    "permit_digest",
    "recover_signer",
    "split_signature",
    "PermitVerifier",
    "PermitResult",
]
