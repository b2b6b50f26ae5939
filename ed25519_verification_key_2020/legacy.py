"""Conversion between Ed25519VerificationKey2018 and 2020 key records.

The 2018 suite stores keys as bare base58 (``publicKeyBase58``,
``privateKeyBase58``) with no multibase prefix and no multicodec header. The
2020 suite wraps the very same raw bytes as ``"z" + base58btc(header + key)``,
so conversion is purely a re-encoding: seeds, keys and signatures are
unchanged in either direction.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from ed25519_verification_key_2020.errors import KeyArgumentError
from ed25519_verification_key_2020.multibase import (
    MULTICODEC_ED25519_PRIV_HEADER,
    MULTICODEC_ED25519_PUB_HEADER,
    base58_decode,
    base58_encode,
    encode_multibase_key,
)
from ed25519_verification_key_2020.types import (
    LEGACY_SUITE_ID,
    ExportedKeyPair,
    LegacyKeyPairData,
)
from ed25519_verification_key_2020.validators import assert_key_bytes

logger = logging.getLogger(__name__)


def parse_legacy_key_pair(data: Mapping[str, Any] | LegacyKeyPairData) -> LegacyKeyPairData:
    """Validate a serialized Ed25519VerificationKey2018 record.

    Raises:
        KeyArgumentError: If the record has the wrong ``type`` or lacks
            ``publicKeyBase58``.
    """
    if isinstance(data, LegacyKeyPairData):
        return data
    if data.get("type", LEGACY_SUITE_ID) != LEGACY_SUITE_ID:
        raise KeyArgumentError(f'Expected key type "{LEGACY_SUITE_ID}", got "{data.get("type")}".')
    try:
        return LegacyKeyPairData.model_validate(dict(data))
    except ValidationError as exc:
        raise KeyArgumentError(f"Invalid {LEGACY_SUITE_ID} key pair: {exc.error_count()} error(s).") from exc


def legacy_to_multibase(data: Mapping[str, Any] | LegacyKeyPairData) -> ExportedKeyPair:
    """Re-encode a 2018 key record as a 2020 (multibase/multicodec) record.

    Raises:
        KeyArgumentError: If the record is malformed.
        KeyFormatError: If a key is not valid base58.
        DataError: If a decoded key has the wrong length.
    """
    legacy = parse_legacy_key_pair(data)

    public_key = base58_decode(legacy.public_key_base58, "public", "invalidPublicKeyBase58")
    assert_key_bytes(public_key, 32, code="invalidPublicKeyLength")
    private_key_multibase = None
    if legacy.private_key_base58:
        private_key = base58_decode(legacy.private_key_base58, "private")
        assert_key_bytes(private_key, 64, code="invalidPrivateKeyLength")
        private_key_multibase = encode_multibase_key(MULTICODEC_ED25519_PRIV_HEADER, private_key)

    logger.debug("Converted %s key %s to multibase", LEGACY_SUITE_ID, legacy.id)
    return ExportedKeyPair(
        id=legacy.id,
        controller=legacy.controller,
        public_key_multibase=encode_multibase_key(MULTICODEC_ED25519_PUB_HEADER, public_key),
        private_key_multibase=private_key_multibase,
        revoked=legacy.revoked,
    )


def multibase_to_legacy(
    public_key: bytes,
    private_key: bytes | None = None,
    *,
    id: str | None = None,  # noqa: A002
    controller: str | None = None,
    revoked: str | None = None,
) -> LegacyKeyPairData:
    """Build a 2018 key record from raw key bytes."""
    assert_key_bytes(public_key, 32, code="invalidPublicKeyLength")
    private_key_base58 = None
    if private_key is not None:
        assert_key_bytes(private_key, 64, code="invalidPrivateKeyLength")
        private_key_base58 = base58_encode(private_key)
    return LegacyKeyPairData(
        id=id,
        controller=controller,
        public_key_base58=base58_encode(public_key),
        private_key_base58=private_key_base58,
        revoked=revoked,
    )


def to_ed25519_verification_key_2018(key_pair: Any, *, private_key: bool = False) -> dict[str, Any]:
    """Export an Ed25519VerificationKey2020 key pair as a 2018 record.

    *key_pair* only needs ``public_key_bytes``, ``private_key_bytes``, ``id``,
    ``controller`` and ``revoked``. The private key is included when
    *private_key* is set and the key pair holds one.

    Example::

        record = to_ed25519_verification_key_2018(key_pair, private_key=True)
        assert record["type"] == "Ed25519VerificationKey2018"
    """
    record = multibase_to_legacy(
        key_pair.public_key_bytes,
        key_pair.private_key_bytes if private_key else None,
        id=key_pair.id,
        controller=key_pair.controller,
        revoked=key_pair.revoked or None,
    )
    logger.debug("Exported key %s as %s", record.id, LEGACY_SUITE_ID)
    return record.to_dict()
