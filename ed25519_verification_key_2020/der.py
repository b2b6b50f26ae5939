"""DER framing for raw Ed25519 key bytes.

OpenSSL-backed primitives only accept keys as PKCS#8 (private) or
SubjectPublicKeyInfo (public) structures. For Ed25519 both are a fixed
prefix followed by the 32 raw key bytes, so encoding is a concatenation and
decoding is a prefix strip.
"""

from __future__ import annotations

from ed25519_verification_key_2020.errors import KeyArgumentError, KeyFormatError
from ed25519_verification_key_2020.validators import assert_key_bytes

# PKCS#8 OneAsymmetricKey header for an Ed25519 seed (RFC 8410).
DER_PRIVATE_KEY_PREFIX = bytes.fromhex("302e020100300506032b657004220420")
# SubjectPublicKeyInfo header for an Ed25519 public key (RFC 8410).
DER_PUBLIC_KEY_PREFIX = bytes.fromhex("302a300506032b6570032100")


def get_key_material(der: bytes) -> bytes:
    """Return the raw key bytes that follow a known Ed25519 DER prefix.

    Raises:
        KeyFormatError: If *der* starts with neither prefix.
    """
    if der.startswith(DER_PUBLIC_KEY_PREFIX):
        return der[len(DER_PUBLIC_KEY_PREFIX) :]
    if der.startswith(DER_PRIVATE_KEY_PREFIX):
        return der[len(DER_PRIVATE_KEY_PREFIX) :]
    raise KeyFormatError("Expected DER bytes to match the Ed25519 public or private prefix.")


def private_key_der_encode(
    *, private_key_bytes: bytes | None = None, seed_bytes: bytes | None = None
) -> bytes:
    """Encode a 32-byte seed or a 64-byte private key as PKCS#8 DER.

    Only the first 32 bytes (the seed) of a 64-byte private key are used.

    Raises:
        KeyArgumentError: If neither argument is given.
        DataError: If the supplied bytes have the wrong length.
    """
    if private_key_bytes is None and seed_bytes is None:
        raise KeyArgumentError('"private_key_bytes" or "seed_bytes" is required.')
    if seed_bytes is not None:
        assert_key_bytes(seed_bytes, 32)
        seed = bytes(seed_bytes)
    else:
        assert_key_bytes(private_key_bytes, 64)
        seed = bytes(private_key_bytes[:32])
    return DER_PRIVATE_KEY_PREFIX + seed


def public_key_der_encode(public_key_bytes: bytes) -> bytes:
    """Encode 32 raw public key bytes as SubjectPublicKeyInfo DER."""
    assert_key_bytes(public_key_bytes, 32, code="invalidPublicKeyLength")
    return DER_PUBLIC_KEY_PREFIX + bytes(public_key_bytes)
