"""Ed25519VerificationKey2020 key pairs for Linked Data Proofs.

:class:`Ed25519VerificationKey2020` bundles identity metadata (``id``,
``controller``, ``revoked``) with the multibase-encoded public and, optionally,
private key. Cryptographic work is delegated to an injected
:class:`~ed25519_verification_key_2020.backends.Ed25519Backend`; the key pair
never depends on a concrete backend type.

See https://w3c-ccg.github.io/lds-ed25519-2020/#ed25519verificationkey2020
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from nacl.signing import SigningKey
from pydantic import ValidationError

from ed25519_verification_key_2020 import legacy
from ed25519_verification_key_2020.backends import Ed25519Backend, SeedSource, get_backend
from ed25519_verification_key_2020.errors import (
    KeyArgumentError,
    KeyFormatError,
    MissingKeyError,
)
from ed25519_verification_key_2020.multibase import (
    MULTICODEC_ED25519_PRIV_HEADER,
    MULTICODEC_ED25519_PUB_HEADER,
    base58_decode,
    base64url_decode,
    base64url_encode,
    decode_multibase_key,
    encode_multibase_key,
)
from ed25519_verification_key_2020.types import (
    JWK_SUITE_ID,
    LEGACY_SUITE_ID,
    MULTIBASE_BASE58BTC_HEADER,
    SUITE_CONTEXT,
    SUITE_ID,
    ExportedKeyPair,
    FingerprintVerification,
    JsonWebKey,
    JsonWebKey2020Data,
    LegacyKeyPairData,
)
from ed25519_verification_key_2020.validators import assert_key_bytes

logger = logging.getLogger(__name__)

JWK_SUITE_CONTEXT = "https://w3id.org/security/suites/jws-2020/v1"


class KeySigner:
    """Signs data with a captured private key.

    Returned by :meth:`Ed25519VerificationKey2020.signer`.
    """

    __slots__ = ("id", "_private_key", "_backend")

    def __init__(self, id: str | None, private_key: bytes, backend: Ed25519Backend) -> None:  # noqa: A002
        self.id = id
        self._private_key = private_key
        self._backend = backend

    async def sign(self, data: bytes) -> bytes:
        """Return the 64-byte Ed25519 signature over *data*."""
        return await self._backend.sign(self._private_key, data)

    def __repr__(self) -> str:
        return f"<KeySigner id={self.id!r}>"


class KeyVerifier:
    """Verifies signatures against a captured public key.

    Returned by :meth:`Ed25519VerificationKey2020.verifier`.
    """

    __slots__ = ("id", "_public_key", "_backend")

    def __init__(self, id: str | None, public_key: bytes, backend: Ed25519Backend) -> None:  # noqa: A002
        self.id = id
        self._public_key = public_key
        self._backend = backend

    async def verify(self, data: bytes, signature: bytes) -> bool:
        """Return ``True`` if *signature* is valid for *data*, ``False`` otherwise."""
        return await self._backend.verify(self._public_key, data, signature)

    def __repr__(self) -> str:
        return f"<KeyVerifier id={self.id!r}>"


class Ed25519VerificationKey2020:
    """An Ed25519 key pair in the Ed25519VerificationKey2020 format.

    Instances are created with :meth:`generate`, :meth:`from_dict` or
    :meth:`from_fingerprint`. Key material is fixed at construction; only
    metadata such as :attr:`revoked` may be reassigned afterwards. The private
    key is held in memory and never serialised unless explicitly exported.

    Args:
        public_key_multibase: Multibase public key with the ed25519-pub
            multicodec header ``0xed 0x01``.
        private_key_multibase: Optional multibase private key with the
            ed25519-priv multicodec header ``0x80 0x26``.
        controller: Controller DID or document URL.
        id: Key identifier. Defaults to ``controller + "#" + fingerprint``
            when a controller is given.
        revoked: RFC 3339 timestamp of revocation. Carried, not enforced.
        backend: Primitive backend; defaults to :func:`get_backend`.

    Raises:
        KeyArgumentError: If *public_key_multibase* is missing.
        KeyFormatError: If either key has the wrong prefix or header, or the
            private key does not belong to the public key.
        DataError: If a decoded key has the wrong length.
    """

    # Used by Linked Data key pair harnesses for dispatching.
    suite = SUITE_ID
    SUITE_CONTEXT = SUITE_CONTEXT

    def __init__(
        self,
        public_key_multibase: str | None = None,
        *,
        private_key_multibase: str | None = None,
        controller: str | None = None,
        id: str | None = None,  # noqa: A002
        revoked: str | None = None,
        backend: Ed25519Backend | None = None,
    ) -> None:
        if not public_key_multibase:
            raise KeyArgumentError('The "publicKeyMultibase" property is required.')

        public_key = decode_multibase_key(
            public_key_multibase,
            MULTICODEC_ED25519_PUB_HEADER,
            kind="public",
            code="invalidPublicKeyMultibase",
            header_code="unsupportedPublicKeyType",
        )
        assert_key_bytes(public_key, 32, code="invalidPublicKeyLength")

        private_key = None
        if private_key_multibase:
            private_key = decode_multibase_key(
                private_key_multibase,
                MULTICODEC_ED25519_PRIV_HEADER,
                kind="private",
                code="invalidPrivateKeyMultibase",
                header_code="unsupportedPrivateKeyType",
            )
            assert_key_bytes(private_key, 64, code="invalidPrivateKeyLength")
            # both halves must match: the stored public key and the one the seed derives
            derived = bytes(SigningKey(bytes(private_key[:32])).verify_key)
            if private_key[32:] != public_key or derived != public_key:
                raise KeyFormatError(
                    '"privateKeyMultibase" does not belong to "publicKeyMultibase".',
                    code="invalidPrivateKey",
                )

        self.type = SUITE_ID
        self.controller = controller
        self.revoked = revoked
        self.backend = backend if backend is not None else get_backend()
        self._public_key_multibase = public_key_multibase
        self._private_key_multibase = private_key_multibase or None
        self._public_key = bytes(public_key)
        self._private_key = bytes(private_key) if private_key is not None else None

        self.id = id
        if self.controller and not self.id:
            self.id = f"{self.controller}#{self.fingerprint()}"

    # ----- constructors ----------------------------------------------------

    @classmethod
    async def generate(
        cls,
        seed: SeedSource | None = None,
        *,
        controller: str | None = None,
        id: str | None = None,  # noqa: A002
        revoked: str | None = None,
        backend: Ed25519Backend | None = None,
    ) -> "Ed25519VerificationKey2020":
        """Generate a key pair, deterministically when a seed is given.

        Args:
            seed: 32 bytes, or a callable returning them. When omitted a
                fresh seed is drawn from system randomness.
            controller: Controller DID or document URL.
            id: Key identifier.
            revoked: Revocation timestamp.
            backend: Primitive backend; defaults to :func:`get_backend`.

        Raises:
            DataError: If *seed* is not exactly 32 bytes.
        """
        backend = backend if backend is not None else get_backend()
        if seed is not None:
            key_material = await backend.generate_key_pair_from_seed(seed)
        else:
            key_material = await backend.generate_key_pair()

        key_pair = cls(
            encode_multibase_key(MULTICODEC_ED25519_PUB_HEADER, key_material.public_key),
            private_key_multibase=encode_multibase_key(
                MULTICODEC_ED25519_PRIV_HEADER, key_material.secret_key
            ),
            controller=controller,
            id=id,
            revoked=revoked,
            backend=backend,
        )
        logger.debug("Generated %s key pair %s", SUITE_ID, key_pair.fingerprint())
        return key_pair

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], *, backend: Ed25519Backend | None = None
    ) -> "Ed25519VerificationKey2020":
        """Create a key pair from a serialized record.

        The ``type`` field selects the decoder: ``Ed25519VerificationKey2020``
        (or absent) reads ``publicKeyMultibase`` / ``privateKeyMultibase``,
        ``Ed25519VerificationKey2018`` goes through the legacy converter and
        ``JsonWebKey2020`` reads ``publicKeyJwk`` / ``privateKeyJwk``.

        Example::

            key_pair = Ed25519VerificationKey2020.from_dict({
                "controller": "did:example:1234",
                "type": "Ed25519VerificationKey2020",
                "publicKeyMultibase": public_key_multibase,
                "privateKeyMultibase": private_key_multibase,
            })

        Raises:
            KeyArgumentError: If *data* is not a mapping or ``type`` is not
                a supported suite.
        """
        if not isinstance(data, Mapping):
            raise KeyArgumentError("Serialized key pair must be a mapping.")
        key_type = data.get("type", SUITE_ID)
        if key_type == LEGACY_SUITE_ID:
            return cls.from_ed25519_verification_key_2018(data, backend=backend)
        if key_type == JWK_SUITE_ID:
            return cls.from_json_web_key_2020(data, backend=backend)
        if key_type != SUITE_ID:
            raise KeyArgumentError(f'Unsupported key type "{key_type}".')
        return cls(
            data.get("publicKeyMultibase"),
            private_key_multibase=data.get("privateKeyMultibase"),
            controller=data.get("controller"),
            id=data.get("id"),
            revoked=data.get("revoked"),
            backend=backend,
        )

    @classmethod
    def from_fingerprint(
        cls, fingerprint: str, *, backend: Ed25519Backend | None = None
    ) -> "Ed25519VerificationKey2020":
        """Create a public-key-only instance from a key fingerprint.

        Raises:
            KeyFormatError: If *fingerprint* is not an ed25519-pub multibase key.
        """
        return cls(fingerprint, backend=backend)

    @classmethod
    def from_ed25519_verification_key_2018(
        cls,
        key_pair: Mapping[str, Any] | LegacyKeyPairData,
        *,
        backend: Ed25519Backend | None = None,
    ) -> "Ed25519VerificationKey2020":
        """Create an instance from an Ed25519VerificationKey2018 key pair.

        The raw key bytes are carried over unchanged, so fingerprints and
        signatures are identical to those of the 2018 key.
        """
        converted = legacy.legacy_to_multibase(key_pair)
        return cls(
            converted.public_key_multibase,
            private_key_multibase=converted.private_key_multibase,
            controller=converted.controller,
            id=converted.id,
            revoked=converted.revoked,
            backend=backend,
        )

    @classmethod
    def from_jwk(
        cls,
        jwk: Mapping[str, Any] | JsonWebKey,
        *,
        controller: str | None = None,
        id: str | None = None,  # noqa: A002
        revoked: str | None = None,
        backend: Ed25519Backend | None = None,
    ) -> "Ed25519VerificationKey2020":
        """Create an instance from an OKP/Ed25519 JSON Web Key.

        ``d`` may hold either the 32-byte seed (RFC 8037) or the 64-byte
        private key.

        Raises:
            KeyArgumentError: If ``kty`` is not ``"OKP"``, ``crv`` is not
                ``"Ed25519"`` or ``x`` is missing.
            KeyFormatError: If ``x`` or ``d`` is not base64url, or ``d`` does
                not derive ``x``.
            DataError: If a decoded key has the wrong length.
        """
        if not isinstance(jwk, JsonWebKey):
            try:
                jwk = JsonWebKey.model_validate(dict(jwk))
            except (TypeError, ValueError, ValidationError) as exc:
                raise KeyArgumentError("Invalid JSON Web Key.") from exc
        if jwk.kty != "OKP":
            raise KeyArgumentError(f'"kty" is "{jwk.kty}"; expected "OKP".')
        if jwk.crv != "Ed25519":
            raise KeyArgumentError(f'"crv" is "{jwk.crv}"; expected "Ed25519".')
        if not jwk.x:
            raise KeyArgumentError('JSON Web Key is missing "x".')

        public_key = base64url_decode(jwk.x)
        assert_key_bytes(public_key, 32, code="invalidPublicKeyLength")
        private_key_multibase = None
        if jwk.d:
            private_key = base64url_decode(jwk.d)
            if len(private_key) == 32:
                private_key += public_key
            assert_key_bytes(private_key, 64, code="invalidPrivateKeyLength")
            private_key_multibase = encode_multibase_key(
                MULTICODEC_ED25519_PRIV_HEADER, private_key
            )

        return cls(
            encode_multibase_key(MULTICODEC_ED25519_PUB_HEADER, public_key),
            private_key_multibase=private_key_multibase,
            controller=controller,
            id=id,
            revoked=revoked,
            backend=backend,
        )

    @classmethod
    def from_json_web_key_2020(
        cls,
        data: Mapping[str, Any] | JsonWebKey2020Data,
        *,
        backend: Ed25519Backend | None = None,
    ) -> "Ed25519VerificationKey2020":
        """Create an instance from a JsonWebKey2020 verification method."""
        if not isinstance(data, JsonWebKey2020Data):
            if data.get("type") != JWK_SUITE_ID:
                raise KeyArgumentError(
                    f'Expected key type "{JWK_SUITE_ID}", got "{data.get("type")}".'
                )
            try:
                data = JsonWebKey2020Data.model_validate(dict(data))
            except ValidationError as exc:
                raise KeyArgumentError(f"Invalid {JWK_SUITE_ID} key pair.") from exc

        jwk = data.public_key_jwk
        if data.private_key_jwk is not None:
            jwk = data.private_key_jwk.model_copy(update={"x": data.private_key_jwk.x or jwk.x})
        return cls.from_jwk(
            jwk, controller=data.controller, id=data.id, revoked=data.revoked, backend=backend
        )

    # ----- properties ------------------------------------------------------

    @property
    def public_key_multibase(self) -> str:
        return self._public_key_multibase

    @property
    def private_key_multibase(self) -> str | None:
        return self._private_key_multibase

    @property
    def public_key_bytes(self) -> bytes:
        """The raw 32-byte public key."""
        return self._public_key

    @property
    def private_key_bytes(self) -> bytes | None:
        """The raw 64-byte private key, or ``None`` for a public-only instance."""
        return self._private_key

    @property
    def has_private_key(self) -> bool:
        return self._private_key is not None

    # ----- fingerprints ----------------------------------------------------

    def fingerprint(self) -> str:
        """Return the multibase public key, which doubles as the key fingerprint.

        See https://github.com/multiformats/multicodec
        """
        return self._public_key_multibase

    def verify_fingerprint(self, fingerprint: Any) -> FingerprintVerification:
        """Check whether *fingerprint* was generated from this key pair.

        Never raises; failures are reported on the returned result.

        Example::

            >>> key_pair.verify_fingerprint("z6MkszZtxCmA2Ce4vUV132PCuLQmwnaDD5mw2L23fGNnsiX3")
            FingerprintVerification(valid=True, error=None)
        """
        # fingerprint should have multibase base58-btc header
        if not (isinstance(fingerprint, str) and fingerprint.startswith(MULTIBASE_BASE58BTC_HEADER)):
            return FingerprintVerification(
                valid=False,
                error=KeyFormatError('"fingerprint" must be a multibase encoded string.'),
            )
        try:
            fingerprint_bytes = base58_decode(fingerprint[1:], "fingerprint")
        except KeyFormatError as exc:
            return FingerprintVerification(valid=False, error=exc)

        # validate the first two multicodec bytes
        header = fingerprint_bytes[: len(MULTICODEC_ED25519_PUB_HEADER)]
        valid = header == MULTICODEC_ED25519_PUB_HEADER and _is_equal_buffer(
            self._public_key, fingerprint_bytes[len(MULTICODEC_ED25519_PUB_HEADER) :]
        )
        if not valid:
            return FingerprintVerification(
                valid=False,
                error=KeyFormatError("The fingerprint does not match the public key."),
            )
        return FingerprintVerification(valid=True)

    # ----- export ----------------------------------------------------------

    def export(
        self,
        *,
        public_key: bool = False,
        private_key: bool = False,
        include_context: bool = False,
    ) -> dict[str, Any]:
        """Export the key pair as a plain dict for DID documents and proofs.

        Optional fields that are not set are omitted rather than emitted as
        ``None``.

        Raises:
            KeyArgumentError: If neither *public_key* nor *private_key* is set.
        """
        if not (public_key or private_key):
            raise KeyArgumentError('Export requires specifying either "publicKey" or "privateKey".')
        return ExportedKeyPair(
            context=SUITE_CONTEXT if include_context else None,
            id=self.id,
            type=self.type,
            controller=self.controller,
            public_key_multibase=self._public_key_multibase if public_key else None,
            private_key_multibase=self._private_key_multibase if private_key else None,
            # an empty revocation stamp is the same as none
            revoked=self.revoked or None,
        ).to_dict()

    def to_ed25519_verification_key_2018(
        self, *, public_key: bool = True, private_key: bool = False
    ) -> dict[str, Any]:
        """Export as an Ed25519VerificationKey2018 record (bare base58 keys).

        Shorthand for :func:`ed25519_verification_key_2020.legacy.to_ed25519_verification_key_2018`.
        """
        if not (public_key or private_key):
            raise KeyArgumentError('Export requires specifying either "publicKey" or "privateKey".')
        return legacy.to_ed25519_verification_key_2018(self, private_key=private_key)

    # ----- JSON Web Keys ---------------------------------------------------

    def to_jwk(self, *, public_key: bool = True, private_key: bool = False) -> dict[str, Any]:
        """Return the key as an OKP/Ed25519 JSON Web Key.

        Raises:
            KeyArgumentError: If neither flag is set.
            MissingKeyError: If the private key is requested but absent.
        """
        if not (public_key or private_key):
            raise KeyArgumentError('Either "publicKey" or "privateKey" is required.')
        jwk = JsonWebKey(kty="OKP", crv="Ed25519")
        if public_key:
            jwk.x = base64url_encode(self._public_key)
        if private_key:
            if self._private_key is None:
                raise MissingKeyError("No private key to export.")
            jwk.d = base64url_encode(self._private_key)
        return jwk.to_dict()

    def to_json_web_key_2020(
        self, *, private_key: bool = False, include_context: bool = False
    ) -> dict[str, Any]:
        """Export as a JsonWebKey2020 verification method."""
        record = JsonWebKey2020Data(
            context=JWK_SUITE_CONTEXT if include_context else None,
            id=self.id,
            controller=self.controller,
            public_key_jwk=JsonWebKey.model_validate(self.to_jwk(public_key=True)),
            private_key_jwk=(
                JsonWebKey.model_validate(self.to_jwk(private_key=True)) if private_key else None
            ),
            revoked=self.revoked or None,
        )
        return record.to_dict()

    async def jwk_thumbprint(self) -> str:
        """Return the RFC 7638 thumbprint of the public JWK.

        The required members ``crv``, ``kty``, ``x`` are serialised in
        lexicographic order without whitespace, hashed with SHA-256 and
        base64url encoded.
        """
        jwk = self.to_jwk(public_key=True)
        canonical = json.dumps(
            {"crv": jwk["crv"], "kty": jwk["kty"], "x": jwk["x"]},
            sort_keys=True,
            separators=(",", ":"),
        ).encode("utf-8")
        return base64url_encode(await self.backend.sha256_digest(canonical))

    # ----- signing ---------------------------------------------------------

    def signer(self) -> KeySigner:
        """Return a signer bound to this key pair's private key.

        Raises:
            MissingKeyError: If this is a public-only key pair.
        """
        if self._private_key is None:
            raise MissingKeyError("No private key to sign with.")
        return KeySigner(self.id, self._private_key, self.backend)

    def verifier(self) -> KeyVerifier:
        """Return a verifier bound to this key pair's public key."""
        return KeyVerifier(self.id, self._public_key, self.backend)

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} id={self.id!r} "
            f"fingerprint={self._public_key_multibase!r} private={self.has_private_key}>"
        )


# check to ensure that two buffers are byte-for-byte equal
# WARNING: this function must only be used to check public information as
#          timing attacks can be used for non-constant time checks on
#          secret information.
def _is_equal_buffer(buf1: bytes, buf2: bytes) -> bool:
    if len(buf1) != len(buf2):
        return False
    for a, b in zip(buf1, buf2):
        if a != b:
            return False
    return True
