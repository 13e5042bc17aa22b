import base64

import pytest
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from amtconfig.export.cipher import KEY_BYTES, NONCE_BYTES, TAG_BYTES, encrypt_with_random_key


def open_blob(blob: str, key: str) -> str:
    raw = base64.b64decode(blob)
    nonce, tag, body = raw[:NONCE_BYTES], raw[NONCE_BYTES:NONCE_BYTES + TAG_BYTES], raw[NONCE_BYTES + TAG_BYTES:]
    return AESGCM(base64.b64decode(key)).decrypt(nonce, body + tag, None).decode("utf-8")


def test_blob_layout_and_key_size():
    plaintext = "configuration:\n  name: profile1\n"

    encrypted = encrypt_with_random_key(plaintext)

    assert len(base64.b64decode(encrypted.key)) == KEY_BYTES
    assert len(base64.b64decode(encrypted.ciphertext)) == NONCE_BYTES + TAG_BYTES + len(plaintext.encode())


def test_decrypts_with_returned_key():
    plaintext = "tenantId: ''\npassword: päss\n"

    encrypted = encrypt_with_random_key(plaintext)

    assert open_blob(encrypted.ciphertext, encrypted.key) == plaintext


def test_every_call_uses_fresh_key_and_nonce():
    first = encrypt_with_random_key("same text")
    second = encrypt_with_random_key("same text")

    assert first.key != second.key
    assert first.ciphertext != second.ciphertext
    assert base64.b64decode(first.ciphertext)[:NONCE_BYTES] != base64.b64decode(second.ciphertext)[:NONCE_BYTES]


def test_wrong_key_fails_authentication():
    encrypted = encrypt_with_random_key("secret document")
    other = encrypt_with_random_key("anything")

    with pytest.raises(InvalidTag):
        open_blob(encrypted.ciphertext, other.key)


def test_tampered_blob_fails_authentication():
    encrypted = encrypt_with_random_key("secret document")
    raw = bytearray(base64.b64decode(encrypted.ciphertext))
    raw[-1] ^= 0x01

    with pytest.raises(InvalidTag):
        open_blob(base64.b64encode(bytes(raw)).decode(), encrypted.key)
