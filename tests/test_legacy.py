"""Tests for Ed25519VerificationKey2018 <-> 2020 conversion."""

from __future__ import annotations

import base58 as b58
import pytest

from vectors import CONTROLLER, RFC8032_PUBLIC_KEY, RFC8032_SEED
from ed25519_verification_key_2020 import Ed25519VerificationKey2020
from ed25519_verification_key_2020.backends import Ed25519Backend
from ed25519_verification_key_2020.errors import DataError, KeyArgumentError, KeyFormatError
from ed25519_verification_key_2020.legacy import (
    legacy_to_multibase,
    multibase_to_legacy,
    to_ed25519_verification_key_2018,
)
from ed25519_verification_key_2020.types import LEGACY_SUITE_ID, LegacyKeyPairData

SEED = b"\x09" * 32


def _b58(data: bytes) -> str:
    return b58.b58encode(data).decode("ascii")


async def _legacy_key_pair(backend: Ed25519Backend, seed: bytes = SEED) -> dict:
    km = await backend.generate_key_pair_from_seed(seed)
    return {
        "id": "did:example:1234#legacy-1",
        "type": LEGACY_SUITE_ID,
        "controller": CONTROLLER,
        "publicKeyBase58": _b58(km.public_key),
        "privateKeyBase58": _b58(km.secret_key),
    }


class TestLegacyToMultibase:
    """Re-encoding 2018 records without touching key bytes."""

    def test_rfc8032_key(self) -> None:
        converted = legacy_to_multibase({
            "type": LEGACY_SUITE_ID,
            "publicKeyBase58": _b58(RFC8032_PUBLIC_KEY),
            "privateKeyBase58": _b58(RFC8032_SEED + RFC8032_PUBLIC_KEY),
        })
        decoded_public = b58.b58decode(converted.public_key_multibase[1:])
        decoded_private = b58.b58decode(converted.private_key_multibase[1:])
        assert decoded_public == b"\xed\x01" + RFC8032_PUBLIC_KEY
        assert decoded_private == b"\x80\x26" + RFC8032_SEED + RFC8032_PUBLIC_KEY

    def test_public_only(self) -> None:
        converted = legacy_to_multibase({"publicKeyBase58": _b58(RFC8032_PUBLIC_KEY)})
        assert converted.private_key_multibase is None

    def test_missing_public_key(self) -> None:
        with pytest.raises(KeyArgumentError):
            legacy_to_multibase({"type": LEGACY_SUITE_ID})

    def test_wrong_type(self) -> None:
        with pytest.raises(KeyArgumentError):
            legacy_to_multibase({"type": "JsonWebKey2020", "publicKeyBase58": "abc"})

    def test_invalid_base58(self) -> None:
        with pytest.raises(KeyFormatError, match="The public key material must be Base58 encoded."):
            legacy_to_multibase({"publicKeyBase58": "0OIl"})

    def test_wrong_length(self) -> None:
        with pytest.raises(DataError) as exc_info:
            legacy_to_multibase({"publicKeyBase58": _b58(b"\x01" * 31)})
        assert exc_info.value.code == "invalidPublicKeyLength"

    def test_accepts_model(self) -> None:
        data = LegacyKeyPairData(public_key_base58=_b58(RFC8032_PUBLIC_KEY))
        converted = legacy_to_multibase(data)
        assert converted.public_key_multibase.startswith("z6Mk")


class TestFromEd25519VerificationKey2018:
    """Key pairs built from legacy records behave like native ones."""

    @pytest.mark.asyncio
    async def test_same_fingerprint_as_native(self, backend: Ed25519Backend) -> None:
        legacy = await _legacy_key_pair(backend)
        converted = Ed25519VerificationKey2020.from_ed25519_verification_key_2018(
            legacy, backend=backend
        )
        native = await Ed25519VerificationKey2020.generate(SEED, backend=backend)
        assert converted.fingerprint() == native.fingerprint()
        assert converted.private_key_multibase == native.private_key_multibase
        assert converted.id == legacy["id"]
        assert converted.controller == CONTROLLER

    @pytest.mark.asyncio
    async def test_from_dict_dispatches_on_type(self, backend: Ed25519Backend) -> None:
        legacy = await _legacy_key_pair(backend)
        converted = Ed25519VerificationKey2020.from_dict(legacy, backend=backend)
        assert converted.type == "Ed25519VerificationKey2020"
        assert converted.has_private_key

    @pytest.mark.asyncio
    async def test_signatures_identical_and_cross_verify(self, backend: Ed25519Backend) -> None:
        legacy = await _legacy_key_pair(backend)
        data = b"legacy equivalence"
        legacy_signature = await backend.sign(b58.b58decode(legacy["privateKeyBase58"]), data)

        converted = Ed25519VerificationKey2020.from_dict(legacy, backend=backend)
        native = await Ed25519VerificationKey2020.generate(SEED, backend=backend)
        converted_signature = await converted.signer().sign(data)
        native_signature = await native.signer().sign(data)

        assert legacy_signature == converted_signature == native_signature
        assert await converted.verifier().verify(data, legacy_signature) is True
        assert await backend.verify(
            b58.b58decode(legacy["publicKeyBase58"]), data, native_signature
        ) is True

    @pytest.mark.asyncio
    async def test_public_only_legacy(self, backend: Ed25519Backend) -> None:
        legacy = await _legacy_key_pair(backend)
        del legacy["privateKeyBase58"]
        converted = Ed25519VerificationKey2020.from_dict(legacy, backend=backend)
        assert not converted.has_private_key


class TestToEd25519VerificationKey2018:
    """Exporting back to the legacy format."""

    @pytest.mark.asyncio
    async def test_round_trip(self, backend: Ed25519Backend) -> None:
        key_pair = await Ed25519VerificationKey2020.generate(
            SEED, controller=CONTROLLER, backend=backend
        )
        legacy = key_pair.to_ed25519_verification_key_2018(private_key=True)
        assert legacy["type"] == LEGACY_SUITE_ID
        assert b58.b58decode(legacy["publicKeyBase58"]) == key_pair.public_key_bytes
        assert b58.b58decode(legacy["privateKeyBase58"]) == key_pair.private_key_bytes

        restored = Ed25519VerificationKey2020.from_dict(legacy, backend=backend)
        assert restored.export(public_key=True, private_key=True) == key_pair.export(
            public_key=True, private_key=True
        )

    @pytest.mark.asyncio
    async def test_public_only_by_default(self) -> None:
        key_pair = await Ed25519VerificationKey2020.generate(SEED)
        legacy = key_pair.to_ed25519_verification_key_2018()
        assert "privateKeyBase58" not in legacy

    def test_multibase_to_legacy_validates_lengths(self) -> None:
        with pytest.raises(DataError):
            multibase_to_legacy(b"\x00" * 31)
        with pytest.raises(DataError):
            multibase_to_legacy(RFC8032_PUBLIC_KEY, RFC8032_SEED)

    @pytest.mark.asyncio
    async def test_module_function_matches_method(self) -> None:
        key_pair = await Ed25519VerificationKey2020.generate(SEED, controller=CONTROLLER)
        record = to_ed25519_verification_key_2018(key_pair, private_key=True)
        assert record == key_pair.to_ed25519_verification_key_2018(private_key=True)
        assert record["id"] == key_pair.id
        assert record["controller"] == CONTROLLER

    def test_module_function_on_public_only_pair(self) -> None:
        key_pair = Ed25519VerificationKey2020.from_fingerprint(
            "z" + _b58(b"\xed\x01" + RFC8032_PUBLIC_KEY)
        )
        record = to_ed25519_verification_key_2018(key_pair, private_key=True)
        assert record == {"type": LEGACY_SUITE_ID, "publicKeyBase58": _b58(RFC8032_PUBLIC_KEY)}


class TestForeignSeed:
    """A 2018 private key whose seed does not derive its public key."""

    def test_rejected_on_import(self) -> None:
        data = {
            "type": LEGACY_SUITE_ID,
            "publicKeyBase58": _b58(RFC8032_PUBLIC_KEY),
            "privateKeyBase58": _b58(b"\x01" * 32 + RFC8032_PUBLIC_KEY),
        }
        with pytest.raises(KeyFormatError) as exc_info:
            Ed25519VerificationKey2020.from_ed25519_verification_key_2018(data)
        assert exc_info.value.code == "invalidPrivateKey"
