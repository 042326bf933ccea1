"""AES-GCM encryption of database contents."""

from __future__ import annotations

import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .common import Key

NONCE_SIZE = 12


class DecryptionError(ValueError):
    """Raised when encrypted data cannot be opened."""


def _cipher(key: Key | bytes) -> AESGCM:
    return AESGCM(bytes(key))


def encrypt(data: bytes, key: Key | bytes) -> bytes:
    """Encrypt ``data``; the result is the random nonce followed by ciphertext and tag."""
    cipher = _cipher(key)
    nonce = os.urandom(NONCE_SIZE)
    return nonce + cipher.encrypt(nonce, bytes(data), None)


def decrypt(encrypted_data: bytes, key: Key | bytes) -> bytes:
    """Decrypt data produced by :func:`encrypt`."""
    cipher = _cipher(key)
    if len(encrypted_data) < NONCE_SIZE:
        raise DecryptionError("invalid encrypted data")
    nonce, ciphertext = encrypted_data[:NONCE_SIZE], encrypted_data[NONCE_SIZE:]
    try:
        return cipher.decrypt(nonce, ciphertext, None)
    except InvalidTag as exc:
        raise DecryptionError("message authentication failed") from exc