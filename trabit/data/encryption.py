"""age sealing of habit documents using pyrage."""

from __future__ import annotations

import logging

import pyrage
import pyrage.x25519

logger = logging.getLogger(__name__)


class LakeKeyError(ValueError):
    """Raised when the age key needed for an operation is not configured."""


def seal(plaintext: bytes, recipient_public_key: str) -> bytes:
    """Encrypt a document for the configured age recipient."""
    if not recipient_public_key:
        msg = "age recipient is not configured"
        raise LakeKeyError(msg)
    recipient = pyrage.x25519.Recipient.from_str(recipient_public_key)
    result: bytes = pyrage.encrypt(plaintext, [recipient])
    return result


def unseal(ciphertext: bytes, identity_private_key: str) -> bytes:
    """Decrypt a document with the configured age identity."""
    if not identity_private_key:
        msg = "age identity is not configured"
        raise LakeKeyError(msg)
    identity = pyrage.x25519.Identity.from_str(identity_private_key)
    result: bytes = pyrage.decrypt(ciphertext, [identity])
    return result
