"""
One-shot authenticated encryption of export documents.

Every call draws a fresh 256-bit key and 96-bit nonce and encrypts with
AES-256-GCM. The returned blob is base64(nonce || tag || ciphertext); the key
travels separately (base64) and is never embedded in the blob.
"""
import base64
import os
from dataclasses import dataclass

from cryptography.hazmat.primitives.ciphers.aead import AESGCM

KEY_BYTES = 32
NONCE_BYTES = 12
TAG_BYTES = 16


@dataclass(frozen=True)
class EncryptedDocument:
    ciphertext: str  # base64 blob
    key: str         # base64 key


def encrypt_with_random_key(plaintext: str) -> EncryptedDocument:
    key = os.urandom(KEY_BYTES)
    nonce = os.urandom(NONCE_BYTES)

    # AESGCM appends the tag: ciphertext || tag
    sealed = AESGCM(key).encrypt(nonce, plaintext.encode("utf-8"), None)
    body, tag = sealed[:-TAG_BYTES], sealed[-TAG_BYTES:]

    blob = nonce + tag + body
    return EncryptedDocument(
        ciphertext=base64.b64encode(blob).decode("ascii"),
        key=base64.b64encode(key).decode("ascii"),
    )
