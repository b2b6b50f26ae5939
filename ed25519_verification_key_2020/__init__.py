"""Ed25519VerificationKey2020 key pairs for Linked Data Proofs.

Generates, imports, exports, signs and verifies with Ed25519 keys encoded as
multibase/multicodec strings, and converts from the older
Ed25519VerificationKey2018 (bare base58) format.

Quick start::

    from ed25519_verification_key_2020 import Ed25519VerificationKey2020

    key_pair = await Ed25519VerificationKey2020.generate(controller="did:example:1234")
    signature = await key_pair.signer().sign(b"hello")
    assert await key_pair.verifier().verify(b"hello", signature)
"""

import logging

from ed25519_verification_key_2020.backends import (
    CryptographyBackend,
    Ed25519Backend,
    NaclBackend,
    get_backend,
)
from ed25519_verification_key_2020.config import Settings, configure_logging, get_settings
from ed25519_verification_key_2020.errors import (
    DataError,
    Ed25519KeyError,
    KeyArgumentError,
    KeyFormatError,
    MissingKeyError,
)
from ed25519_verification_key_2020.key_pair import (
    Ed25519VerificationKey2020,
    KeySigner,
    KeyVerifier,
)
from ed25519_verification_key_2020.multibase import (
    MULTICODEC_ED25519_PRIV_HEADER,
    MULTICODEC_ED25519_PUB_HEADER,
    decode_multibase_key,
    encode_multibase_key,
)
from ed25519_verification_key_2020.types import (
    SUITE_CONTEXT,
    SUITE_ID,
    ExportedKeyPair,
    FingerprintVerification,
    JsonWebKey,
    JsonWebKey2020Data,
    KeyMaterial,
    LegacyKeyPairData,
)
from ed25519_verification_key_2020.validators import assert_key_bytes

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Key pair
    "Ed25519VerificationKey2020",
    "KeySigner",
    "KeyVerifier",
    # Backends
    "CryptographyBackend",
    "Ed25519Backend",
    "NaclBackend",
    "get_backend",
    # Codec
    "MULTICODEC_ED25519_PRIV_HEADER",
    "MULTICODEC_ED25519_PUB_HEADER",
    "decode_multibase_key",
    "encode_multibase_key",
    "assert_key_bytes",
    # Errors
    "DataError",
    "Ed25519KeyError",
    "KeyArgumentError",
    "KeyFormatError",
    "MissingKeyError",
    # Types
    "SUITE_CONTEXT",
    "SUITE_ID",
    "ExportedKeyPair",
    "FingerprintVerification",
    "JsonWebKey",
    "JsonWebKey2020Data",
    "KeyMaterial",
    "LegacyKeyPairData",
    # Config
    "Settings",
    "configure_logging",
    "get_settings",
]

__version__ = "1.0.0"
