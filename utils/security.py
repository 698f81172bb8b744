# utils/security.py
import hashlib
import hmac
import secrets

SALT_BYTES = 16
KEY_LENGTH = 64
SCRYPT_N = 16384
SCRYPT_R = 8
SCRYPT_P = 1


def _derive(password: str, salt: str) -> bytes:
    return hashlib.scrypt(
        password.encode("utf-8"),
        salt=salt.encode("utf-8"),
        n=SCRYPT_N,
        r=SCRYPT_R,
        p=SCRYPT_P,
        dklen=KEY_LENGTH,
    )


def hash_password(password: str) -> str:
    """Return ``hex(derived_key).hex(salt)`` with a fresh random salt."""
    salt = secrets.token_hex(SALT_BYTES)
    return f"{_derive(password, salt).hex()}.{salt}"


def verify_password(supplied: str, stored: str | None) -> bool:
    if not stored or "." not in stored:
        return False
    hashed, salt = stored.split(".", 1)
    try:
        expected = bytes.fromhex(hashed)
    except ValueError:
        return False
    if len(expected) != KEY_LENGTH or not salt:
        return False
    return hmac.compare_digest(expected, _derive(supplied or "", salt))
