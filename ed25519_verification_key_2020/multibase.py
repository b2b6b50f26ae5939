"""Multibase / multicodec key encoding.

A key string is ``"z" + base58btc(header + raw_key)`` where ``z`` is the
multibase prefix for base58-btc and ``header`` is the varint-encoded
multicodec identifier of the key type:

* ``0xed 0x01`` - ed25519-pub
* ``0x80 0x26`` - ed25519-priv

Also hosts the base58 and base64url helpers shared by the legacy and JWK
representations.
"""

from __future__ import annotations

import base64
import binascii

import base58 as b58

from ed25519_verification_key_2020.errors import KeyFormatError
from ed25519_verification_key_2020.types import MULTIBASE_BASE58BTC_HEADER

# multicodec ed25519-pub header as varint
MULTICODEC_ED25519_PUB_HEADER = b"\xed\x01"
# multicodec ed25519-priv header as varint
MULTICODEC_ED25519_PRIV_HEADER = b"\x80\x26"


# ---------------------------------------------------------------------------
# Base encodings
# ---------------------------------------------------------------------------


def base58_encode(data: bytes) -> str:
    return b58.b58encode(bytes(data)).decode("ascii")


def base58_decode(value: str, kind: str = "public", code: str | None = None) -> bytes:
    """Decode base58-btc *value*, reporting failures as a format error.

    Args:
        value: The base58 text.
        kind: Human-readable description of the material (``"public"``,
            ``"private"``) used in the error message.
        code: Optional machine-readable error code.

    Raises:
        KeyFormatError: If *value* is not a string or not valid base58.
    """
    if not isinstance(value, str):
        raise KeyFormatError(f"The {kind} key material must be Base58 encoded.", code=code)
    try:
        return b58.b58decode(value)
    except ValueError as exc:
        raise KeyFormatError(f"The {kind} key material must be Base58 encoded.", code=code) from exc


def base64url_encode(data: bytes) -> str:
    """Base64url without padding (RFC 7515 §2)."""
    return base64.urlsafe_b64encode(bytes(data)).rstrip(b"=").decode("ascii")


def base64url_decode(value: str) -> bytes:
    """Decode unpadded base64url text.

    Raises:
        KeyFormatError: If *value* is not valid base64url.
    """
    if not isinstance(value, str):
        raise KeyFormatError("Expected a base64url encoded string.")
    # Restore base64 padding
    padded = value + "=" * (-len(value) % 4)
    try:
        return base64.b64decode(padded, altchars=b"-_", validate=True)
    except (binascii.Error, ValueError) as exc:
        raise KeyFormatError("Invalid base64url encoding.") from exc


# ---------------------------------------------------------------------------
# Multibase keys
# ---------------------------------------------------------------------------


def encode_multibase_key(header: bytes, key: bytes) -> str:
    """Encode *key* with a multicodec *header* as a multibase base58-btc string."""
    return MULTIBASE_BASE58BTC_HEADER + base58_encode(bytes(header) + bytes(key))


def decode_multibase_key(
    value: str,
    expected_header: bytes,
    *,
    kind: str = "public",
    code: str | None = None,
    header_code: str | None = None,
) -> bytes:
    """Decode a multibase key string and strip its multicodec header.

    *code* tags a bad prefix or bad base58; *header_code* (falling back to
    *code*) tags a multicodec header for some other key type.

    Returns:
        The raw key bytes following the header. Length is not checked here.

    Raises:
        KeyFormatError: If the multibase prefix is missing, the payload is not
            base58, or the header does not match *expected_header*.
    """
    if not (isinstance(value, str) and value.startswith(MULTIBASE_BASE58BTC_HEADER)):
        raise KeyFormatError(
            f'The {kind} key must be a multibase base58-btc string starting with "z".',
            code=code,
        )
    decoded = base58_decode(value[1:], kind, code)
    if decoded[: len(expected_header)] != expected_header:
        raise KeyFormatError(
            f"The {kind} key has invalid multicodec header bytes.",
            code=header_code or code,
        )
    return decoded[len(expected_header) :]
