"""
Signature recovery — восстановление адреса подписанта (secp256k1)

recover_signer(digest, signature) — чистая функция без состояния.
Принимает 65-байтовую подпись r ‖ s ‖ v (bytes или 0x-hex) либо кортеж (v, r, s).
v допускается в форме {0, 1} и {27, 28}. Подписи с high-s (EIP-2) отклоняются.
"""

from typing import Final, Tuple, Union

from eth_keys import keys
from eth_keys.exceptions import BadSignature
from eth_keys.exceptions import ValidationError as KeysValidationError
from eth_utils import decode_hex

from launchguard.core.domain.identity import Identity
from launchguard.core.errors import InvalidSignature


# Порядок группы secp256k1
SECP256K1_N: Final[int] = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
SECP256K1_HALF_N: Final[int] = SECP256K1_N // 2

SignatureInput = Union[bytes, str, Tuple[int, int, int]]


def split_signature(signature: SignatureInput) -> Tuple[int, int, int]:
    """
    Разбор подписи в (v, r, s) с нормализацией v в {0, 1}.

    Raises:
        InvalidSignature: Если подпись имеет неверный формат
    """
    if isinstance(signature, tuple):
        if len(signature) != 3:
            raise InvalidSignature()
        v, r, s = signature
    else:
        if isinstance(signature, str):
            try:
                raw = decode_hex(signature)
            except ValueError:
                raise InvalidSignature()
        else:
            raw = bytes(signature)

        if len(raw) != 65:
            raise InvalidSignature()

        r = int.from_bytes(raw[0:32], "big")
        s = int.from_bytes(raw[32:64], "big")
        v = raw[64]

    if v in (27, 28):
        v -= 27
    if v not in (0, 1):
        raise InvalidSignature()

    if not 0 < r < SECP256K1_N or not 0 < s <= SECP256K1_HALF_N:
        raise InvalidSignature()

    return v, r, s


def recover_signer(digest: bytes, signature: SignatureInput) -> Identity:
    """
    Восстановление checksum-адреса подписанта digest.

    Args:
        digest: 32-байтовый hash сообщения
        signature: подпись (65 байт, 0x-hex или (v, r, s))

    Returns:
        Адрес подписанта

    Raises:
        ValueError: Если digest не 32 байта
        InvalidSignature: Если подпись некорректна или не восстанавливается
    """
    if len(digest) != 32:
        raise ValueError(f"digest must be 32 bytes, got {len(digest)}")

    v, r, s = split_signature(signature)

    try:
        public_key = keys.Signature(vrs=(v, r, s)).recover_public_key_from_msg_hash(digest)
    except (BadSignature, KeysValidationError):
        raise InvalidSignature()

    return public_key.to_checksum_address()
