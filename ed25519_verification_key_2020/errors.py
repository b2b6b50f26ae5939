"""Exception types raised by the Ed25519VerificationKey2020 library.

Every error carries an optional machine-readable ``code``. Where one exists
the code mirrors the error identifiers of the did:key method specification,
so resolvers can tell "not base58" apart from "wrong length".
"""

from __future__ import annotations


class Ed25519KeyError(Exception):
    """Base class for all errors raised by this package."""

    def __init__(self, message: str, *, code: str | None = None) -> None:
        self.message = message
        self.code = code
        super().__init__(message)


class KeyArgumentError(Ed25519KeyError, TypeError):
    """A required argument is missing or has the wrong type."""


class KeyFormatError(Ed25519KeyError, ValueError):
    """Key material decodes but is structurally invalid.

    Raised for a wrong multibase prefix, an undecodable base58 or base64url
    payload, or a multicodec header that does not match the expected one.
    """


class DataError(Ed25519KeyError, ValueError):
    """Key material is not a byte sequence of the expected length."""


class MissingKeyError(Ed25519KeyError):
    """The key pair lacks the key material an operation needs."""
