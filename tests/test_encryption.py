"""Tests for trabit.data.encryption."""

from __future__ import annotations

import pyrage
import pyrage.x25519
import pytest

from trabit.data.encryption import LakeKeyError, seal, unseal


@pytest.fixture
def age_keypair() -> tuple[str, str]:
    """Generate a fresh age keypair (public, private)."""
    identity = pyrage.x25519.Identity.generate()
    recipient = identity.to_public()
    return str(recipient), str(identity)


class TestSealUnseal:
    def test_roundtrip(self, age_keypair: tuple[str, str]) -> None:
        pub, priv = age_keypair
        document = '{"name": "Water", "logs": []}'.encode()
        ciphertext = seal(document, pub)
        assert ciphertext != document
        assert unseal(ciphertext, priv) == document

    def test_unicode_document(self, age_keypair: tuple[str, str]) -> None:
        pub, priv = age_keypair
        document = '{"name": "Czytanie książek"}'.encode()
        assert unseal(seal(document, pub), priv) == document

    def test_wrong_key_raises(self, age_keypair: tuple[str, str]) -> None:
        pub, _priv = age_keypair
        other_identity = pyrage.x25519.Identity.generate()
        ciphertext = seal(b"secret", pub)
        with pytest.raises(pyrage.DecryptError):
            unseal(ciphertext, str(other_identity))


class TestMissingKeys:
    def test_seal_without_recipient(self) -> None:
        with pytest.raises(LakeKeyError):
            seal(b"x", "")

    def test_unseal_without_identity(self) -> None:
        with pytest.raises(LakeKeyError):
            unseal(b"x", "")

    def test_is_value_error(self) -> None:
        assert issubclass(LakeKeyError, ValueError)
