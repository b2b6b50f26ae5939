"""Length and type checks for raw key material."""

from __future__ import annotations

from typing import Any

from ed25519_verification_key_2020.errors import DataError


def assert_key_bytes(key_bytes: Any, expected_length: int = 32, code: str | None = None) -> None:
    """Check that *key_bytes* is a byte sequence of exactly *expected_length*.

    The offending value is never included in the error message so that
    secret key material cannot leak into logs or tracebacks.

    Args:
        key_bytes: The value being checked.
        expected_length: Required length in bytes.
        code: Optional machine-readable code attached to the error.

    Raises:
        DataError: If *key_bytes* is not ``bytes``/``bytearray`` or has the
            wrong length.
    """
    if not isinstance(key_bytes, (bytes, bytearray)):
        raise DataError('"bytes" must be a bytes-like object.', code=code)
    if len(key_bytes) != expected_length:
        raise DataError(f'"bytes" must be {expected_length} bytes long.', code=code)
