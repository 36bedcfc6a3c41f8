"""Password digests: scrypt-derived key and salt, hex encoded, joined by ``.``.

A digest looks like ``<128 hex chars of key>.<32 hex chars of salt>``. The salt
is used as its hex text, which keeps digests interchangeable with the ones the
Node version of the portal produced (``crypto.scrypt`` with default cost).
"""

import hashlib
import hmac
import secrets
import string

SALT_BYTES = 16
KEY_LENGTH = 64
SCRYPT_N = 16384
SCRYPT_R = 8
SCRYPT_P = 1
SEPARATOR = "."

_HEX = frozenset(string.hexdigits)


class MalformedDigestError(ValueError):
    """Raised when a stored digest cannot be split into key and salt."""


def _derive(password: str, salt: str) -> bytes:
    return hashlib.scrypt(
        password.encode("utf-8"),
        salt=salt.encode("ascii"),
        n=SCRYPT_N,
        r=SCRYPT_R,
        p=SCRYPT_P,
        dklen=KEY_LENGTH,
    )


def check_digest(digest: str) -> tuple[bytes, str]:
    """Split ``digest`` into the derived key bytes and the salt text."""
    if not isinstance(digest, str) or digest.count(SEPARATOR) != 1:
        raise MalformedDigestError("digest must contain exactly one separator")

    key_hex, salt = digest.split(SEPARATOR)
    if not key_hex or not salt:
        raise MalformedDigestError("digest has an empty component")
    if not set(key_hex) <= _HEX or not set(salt) <= _HEX:
        raise MalformedDigestError("digest components must be hex encoded")
    if len(key_hex) != KEY_LENGTH * 2:
        raise MalformedDigestError("derived key has the wrong length")

    return bytes.fromhex(key_hex), salt


def hash_password(password: str) -> str:
    """Return a fresh salted digest for ``password``."""
    salt = secrets.token_hex(SALT_BYTES)
    return f"{_derive(password, salt).hex()}{SEPARATOR}{salt}"


def verify_password(password: str, digest: str) -> bool:
    """Check ``password`` against ``digest`` in constant time.

    Raises ``MalformedDigestError`` when ``digest`` is not a valid digest.
    """
    stored_key, salt = check_digest(digest)
    return hmac.compare_digest(stored_key, _derive(password, salt))
