"""AES-256-GCM encryption with the nonce appended to the ciphertext."""

from __future__ import annotations

import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from dotenv import load_dotenv

_NONCE_SIZE = 12
_KEY_SIZE = 32


def _resolve_key(key: bytes | str | None) -> bytes:
    if key is None:
        load_dotenv()
        key = os.environ.get("SECRET_KEY")
        if key is None:
            raise ValueError("SECRET_KEY environment variable not set")
    raw = key.encode() if isinstance(key, str) else bytes(key)
    if len(raw) != _KEY_SIZE:
        raise ValueError("Key must be 32 bytes long for AES-256")
    return raw


def encrypt(data: bytes, key: bytes | str | None = None) -> bytes:
    """Encrypt data; the key defaults to the SECRET_KEY environment variable."""
    cipher = AESGCM(_resolve_key(key))
    nonce = os.urandom(_NONCE_SIZE)
    return cipher.encrypt(nonce, bytes(data), None) + nonce


def decrypt(data: bytes, key: bytes | str | None = None) -> bytes:
    """Decrypt what encrypt produced, raising ValueError on any failure."""
    cipher = AESGCM(_resolve_key(key))
    if len(data) < _NONCE_SIZE:
        raise ValueError("Decryption failed")
    ciphertext, nonce = bytes(data[:-_NONCE_SIZE]), bytes(data[-_NONCE_SIZE:])
    try:
        return cipher.decrypt(nonce, ciphertext, None)
    except InvalidTag:
        raise ValueError("Decryption failed") from None