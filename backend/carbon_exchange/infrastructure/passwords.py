"""Password Hashing - salted scrypt, stored as "<hex hash>.<hex salt>".

Invariants:
    - Plain passwords are never stored or logged
    - Comparison is constant-time (hmac.compare_digest)
"""

import hashlib
import hmac
import secrets

_KEY_LENGTH = 64
_SALT_BYTES = 16


def _derive(password: str, salt: bytes) -> bytes:
    return hashlib.scrypt(
        password.encode("utf-8"), salt=salt, n=2**14, r=8, p=1, dklen=_KEY_LENGTH,
    )


def hash_password(password: str) -> str:
    salt = secrets.token_bytes(_SALT_BYTES)
    return f"{_derive(password, salt).hex()}.{salt.hex()}"


def verify_password(password: str, stored: str) -> bool:
    """True if password matches the stored hash. Malformed hashes never match."""
    hashed, _, salt_hex = stored.partition(".")
    try:
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(hashed)
    except ValueError:
        return False
    if not salt or not expected:
        return False
    return hmac.compare_digest(_derive(password, salt), expected)
