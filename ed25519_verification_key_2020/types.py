"""Core types for the Ed25519VerificationKey2020 library.

Records that cross the API boundary are defined here as Pydantic v2 models.
Wire field names follow the Linked Data vocabulary (``publicKeyMultibase``,
``privateKeyMultibase``, ``@context``) and are mapped onto snake_case
attributes via aliases. Raw key bytes are modelled as ``bytes`` subclasses
that enforce their length on validation.
"""

from __future__ import annotations

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    GetCoreSchemaHandler,
    model_validator,
)
from pydantic_core import CoreSchema, core_schema

SUITE_ID = "Ed25519VerificationKey2020"
SUITE_CONTEXT = "https://w3id.org/security/suites/ed25519-2020/v1"
LEGACY_SUITE_ID = "Ed25519VerificationKey2018"
JWK_SUITE_ID = "JsonWebKey2020"

# multibase base58-btc prefix character
MULTIBASE_BASE58BTC_HEADER = "z"


# ---------------------------------------------------------------------------
# Annotated scalar types
# ---------------------------------------------------------------------------


def _coerce_bytes(v: Any) -> bytes:
    if isinstance(v, str):
        return bytes.fromhex(v)
    if isinstance(v, (bytes, bytearray, memoryview)):
        return bytes(v)
    raise ValueError("expected bytes or a hex string")


class PublicKeyBytes(bytes):
    """32-byte raw Ed25519 public key."""

    @classmethod
    def __get_pydantic_core_schema__(
        cls, _source_type: Any, handler: GetCoreSchemaHandler
    ) -> CoreSchema:
        return core_schema.no_info_plain_validator_function(cls._validate)

    @classmethod
    def _validate(cls, v: bytes | str) -> "PublicKeyBytes":
        v = _coerce_bytes(v)
        if len(v) != 32:
            raise ValueError(f"public key must be 32 bytes, got {len(v)}")
        return cls(v)


class PrivateKeyBytes(bytes):
    """64-byte raw Ed25519 private key: ``seed(32) || public_key(32)``."""

    @classmethod
    def __get_pydantic_core_schema__(
        cls, _source_type: Any, handler: GetCoreSchemaHandler
    ) -> CoreSchema:
        return core_schema.no_info_plain_validator_function(cls._validate)

    @classmethod
    def _validate(cls, v: bytes | str) -> "PrivateKeyBytes":
        v = _coerce_bytes(v)
        if len(v) != 64:
            raise ValueError(f"private key must be 64 bytes, got {len(v)}")
        return cls(v)


class MultibaseKey(str):
    """A multibase base58-btc string (``z`` prefix).

    Only the prefix is checked here; header and length checks need the
    expected multicodec and live in :mod:`ed25519_verification_key_2020.multibase`.
    """

    @classmethod
    def __get_pydantic_core_schema__(
        cls, _source_type: Any, handler: GetCoreSchemaHandler
    ) -> CoreSchema:
        return core_schema.no_info_plain_validator_function(cls._validate)

    @classmethod
    def _validate(cls, v: str) -> "MultibaseKey":
        if not isinstance(v, str):
            raise ValueError("multibase key must be a string")
        if not v.startswith(MULTIBASE_BASE58BTC_HEADER):
            raise ValueError(f"multibase key must start with '{MULTIBASE_BASE58BTC_HEADER}'")
        return cls(v)


# ---------------------------------------------------------------------------
# Backend results
# ---------------------------------------------------------------------------


class KeyMaterial(BaseModel):
    """Raw key pair produced by a primitive backend."""

    model_config = ConfigDict(frozen=True)

    public_key: PublicKeyBytes
    secret_key: PrivateKeyBytes

    @model_validator(mode="after")
    def _check_packing(self) -> "KeyMaterial":
        if self.secret_key[32:] != self.public_key:
            raise ValueError("secret key must end with the public key bytes")
        return self


class FingerprintVerification(BaseModel):
    """Outcome of :meth:`Ed25519VerificationKey2020.verify_fingerprint`."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    valid: bool
    error: Exception | None = None


# ---------------------------------------------------------------------------
# Serialized records
# ---------------------------------------------------------------------------


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        """Plain dict with wire field names; unset optional fields are omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ExportedKeyPair(_Record):
    """Serialized Ed25519VerificationKey2020 verification method."""

    context: str | None = Field(default=None, alias="@context")
    id: str | None = None
    type: str = SUITE_ID
    controller: str | None = None
    public_key_multibase: MultibaseKey | None = Field(default=None, alias="publicKeyMultibase")
    private_key_multibase: MultibaseKey | None = Field(default=None, alias="privateKeyMultibase")
    revoked: str | None = None


class LegacyKeyPairData(_Record):
    """Serialized Ed25519VerificationKey2018 key pair (raw base58 keys)."""

    id: str | None = None
    type: str = LEGACY_SUITE_ID
    controller: str | None = None
    public_key_base58: str = Field(alias="publicKeyBase58")
    private_key_base58: str | None = Field(default=None, alias="privateKeyBase58")
    revoked: str | None = None


class JsonWebKey(_Record):
    """An OKP/Ed25519 JSON Web Key (RFC 8037)."""

    kty: str
    crv: str
    x: str | None = None
    d: str | None = None


class JsonWebKey2020Data(_Record):
    """Serialized JsonWebKey2020 verification method."""

    context: str | None = Field(default=None, alias="@context")
    id: str | None = None
    type: str = JWK_SUITE_ID
    controller: str | None = None
    public_key_jwk: JsonWebKey = Field(alias="publicKeyJwk")
    private_key_jwk: JsonWebKey | None = Field(default=None, alias="privateKeyJwk")
    revoked: str | None = None
