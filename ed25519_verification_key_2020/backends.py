"""Ed25519 primitive backends.

Every backend exposes the same coroutine interface so that a key pair can be
generated, signed and verified without knowing which library does the
arithmetic:

* :class:`NaclBackend` - PyNaCl (libsodium), works on raw seeds.
* :class:`CryptographyBackend` - pyca/cryptography (OpenSSL), works on
  PKCS#8 / SPKI DER structures built by :mod:`ed25519_verification_key_2020.der`.

Both pack a private key as ``seed(32) || public_key(32)`` and sign using the
seed only, so the same seed yields byte-identical keys and signatures on
either backend.
"""

from __future__ import annotations

import abc
import asyncio
import hashlib
import inspect
import logging
import secrets
from collections.abc import Awaitable, Callable

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    PublicFormat,
    load_der_private_key,
    load_der_public_key,
)
from nacl.exceptions import BadSignatureError
from nacl.signing import SigningKey, VerifyKey

from ed25519_verification_key_2020.config import SUPPORTED_BACKENDS, get_settings
from ed25519_verification_key_2020.der import (
    get_key_material,
    private_key_der_encode,
    public_key_der_encode,
)
from ed25519_verification_key_2020.errors import KeyArgumentError
from ed25519_verification_key_2020.types import KeyMaterial
from ed25519_verification_key_2020.validators import assert_key_bytes

logger = logging.getLogger(__name__)

SEED_LENGTH = 32
SIGNATURE_LENGTH = 64

# A seed may be given directly or as a callable producing it.
SeedSource = bytes | Callable[[], bytes | Awaitable[bytes]]


async def resolve_seed(seed: SeedSource) -> bytes:
    """Return 32 seed bytes from *seed* or from calling it."""
    if callable(seed):
        seed = seed()
        if inspect.isawaitable(seed):
            seed = await seed
    assert_key_bytes(seed, SEED_LENGTH, code="invalidSeedLength")
    return bytes(seed)


def _as_data(data: bytes) -> bytes:
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise KeyArgumentError('"data" must be a bytes-like object.')
    return bytes(data)


class Ed25519Backend(abc.ABC):
    """Interface every Ed25519 primitive backend implements."""

    name: str

    @abc.abstractmethod
    async def generate_key_pair_from_seed(self, seed: SeedSource) -> KeyMaterial:
        """Deterministically derive a key pair from a 32-byte seed."""

    async def generate_key_pair(self) -> KeyMaterial:
        """Derive a key pair from 32 fresh bytes of system randomness.

        The entropy read happens off the event loop and is not retried; a
        failure to obtain randomness propagates to the caller.
        """
        seed = await asyncio.to_thread(secrets.token_bytes, SEED_LENGTH)
        return await self.generate_key_pair_from_seed(seed)

    @abc.abstractmethod
    async def sign(self, secret_key: bytes, data: bytes) -> bytes:
        """Sign *data* with a 64-byte secret key; only the seed half is used."""

    @abc.abstractmethod
    async def verify(self, public_key: bytes, data: bytes, signature: bytes) -> bool:
        """Return whether *signature* is valid. Never raises on a bad signature."""

    async def sha256_digest(self, data: bytes) -> bytes:
        return hashlib.sha256(_as_data(data)).digest()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"


class NaclBackend(Ed25519Backend):
    """Ed25519 via PyNaCl / libsodium."""

    name = "nacl"

    async def generate_key_pair_from_seed(self, seed: SeedSource) -> KeyMaterial:
        seed_bytes = await resolve_seed(seed)
        sk = SigningKey(seed_bytes)
        public_key = bytes(sk.verify_key)
        return KeyMaterial(public_key=public_key, secret_key=seed_bytes + public_key)

    async def sign(self, secret_key: bytes, data: bytes) -> bytes:
        assert_key_bytes(secret_key, 64)
        sk = SigningKey(bytes(secret_key[:SEED_LENGTH]))
        return sk.sign(_as_data(data)).signature

    async def verify(self, public_key: bytes, data: bytes, signature: bytes) -> bool:
        assert_key_bytes(public_key, 32, code="invalidPublicKeyLength")
        data = _as_data(data)
        if len(signature) != SIGNATURE_LENGTH:
            return False
        try:
            VerifyKey(bytes(public_key)).verify(data, bytes(signature))
        except BadSignatureError:
            return False
        return True


class CryptographyBackend(Ed25519Backend):
    """Ed25519 via pyca/cryptography, fed through DER-encoded keys."""

    name = "cryptography"

    async def generate_key_pair_from_seed(self, seed: SeedSource) -> KeyMaterial:
        seed_bytes = await resolve_seed(seed)
        private_key = self._load_private_key(private_key_der_encode(seed_bytes=seed_bytes))
        public_der = private_key.public_key().public_bytes(
            Encoding.DER, PublicFormat.SubjectPublicKeyInfo
        )
        private_der = private_key.private_bytes(Encoding.DER, PrivateFormat.PKCS8, NoEncryption())
        public_key = get_key_material(public_der)
        return KeyMaterial(
            public_key=public_key, secret_key=get_key_material(private_der) + public_key
        )

    async def sign(self, secret_key: bytes, data: bytes) -> bytes:
        private_key = self._load_private_key(private_key_der_encode(private_key_bytes=secret_key))
        return private_key.sign(_as_data(data))

    async def verify(self, public_key: bytes, data: bytes, signature: bytes) -> bool:
        key = load_der_public_key(public_key_der_encode(public_key))
        if not isinstance(key, Ed25519PublicKey):
            raise TypeError("DER public key is not an Ed25519 key")
        data = _as_data(data)
        if len(signature) != SIGNATURE_LENGTH:
            return False
        try:
            key.verify(bytes(signature), data)
        except InvalidSignature:
            return False
        return True

    @staticmethod
    def _load_private_key(der: bytes) -> Ed25519PrivateKey:
        key = load_der_private_key(der, password=None)
        if not isinstance(key, Ed25519PrivateKey):
            raise TypeError("DER private key is not an Ed25519 key")
        return key


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

_BACKENDS: dict[str, Ed25519Backend] = {
    NaclBackend.name: NaclBackend(),
    CryptographyBackend.name: CryptographyBackend(),
}


def get_backend(name: str | None = None) -> Ed25519Backend:
    """Return the backend registered under *name*.

    Args:
        name: ``"nacl"`` or ``"cryptography"``. ``None`` selects the backend
            configured by ``ED25519_KEY_BACKEND``.

    Raises:
        ValueError: If *name* is not a known backend.
    """
    if name is None:
        name = get_settings().backend
    try:
        backend = _BACKENDS[name]
    except KeyError:
        raise ValueError(
            f"unknown Ed25519 backend '{name}', expected one of {', '.join(SUPPORTED_BACKENDS)}"
        ) from None
    logger.debug("Using Ed25519 backend %s", backend.name)
    return backend
