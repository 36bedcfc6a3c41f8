"""Digest format and verification."""

import pytest

from passwords import (
    KEY_LENGTH,
    SEPARATOR,
    MalformedDigestError,
    check_digest,
    hash_password,
    verify_password,
)


def test_digest_is_hex_key_and_hex_salt() -> None:
    digest = hash_password("pw123456")
    key_hex, salt = digest.split(SEPARATOR)

    assert len(key_hex) == KEY_LENGTH * 2
    assert len(salt) == 32  # 16 random bytes
    int(key_hex, 16)
    int(salt, 16)


@pytest.mark.parametrize("password", ["pw123456", "", "päss wörd ✓", "x" * 200])
def test_verify_accepts_own_hash(password) -> None:
    assert verify_password(password, hash_password(password))


def test_same_password_hashes_differently() -> None:
    assert hash_password("pw123456") != hash_password("pw123456")


def test_verify_rejects_other_password() -> None:
    digest = hash_password("correct horse")
    assert not verify_password("battery staple", digest)
    assert not verify_password("correct horse ", digest)


def test_swapped_salt_does_not_verify() -> None:
    first = hash_password("pw123456")
    second = hash_password("pw123456")
    forged = first.split(SEPARATOR)[0] + SEPARATOR + second.split(SEPARATOR)[1]
    assert not verify_password("pw123456", forged)


@pytest.mark.parametrize("digest", [
    "",
    "no-separator-here",
    "abc.def.012",
    "zz" * KEY_LENGTH + ".00112233445566778899aabbccddeeff",
    "ab" * KEY_LENGTH + ".not-hex",
    "abcd.00112233445566778899aabbccddeeff",
    "ab" * KEY_LENGTH + ".",
])
def test_malformed_digest_raises(digest) -> None:
    with pytest.raises(MalformedDigestError):
        verify_password("whatever", digest)


def test_check_digest_returns_key_bytes_and_salt() -> None:
    digest = hash_password("pw")
    key, salt = check_digest(digest)
    assert isinstance(key, bytes) and len(key) == KEY_LENGTH
    assert digest.endswith(SEPARATOR + salt)
