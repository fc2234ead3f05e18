"""
Auth helpers: doctor-name normalization and password hashing.

New hashes are per-user salted PBKDF2-HMAC-SHA256 over a secret-keyed HMAC of
the password ("pepper"), stored as ``pbkdf2_sha256$<iterations>$<salt>$<hex>``.
Hashes written by the earlier service are a bare 64-char hex HMAC-SHA256 of the
password keyed by the same secret; those still verify so existing doctors can
log in.
"""

import hashlib
import hmac
import re
import secrets

DOCTOR_PREFIX = "Dr."
DOCTOR_ROLE = "doctor"
MIN_PASSWORD_LENGTH = 6

SCHEME = "pbkdf2_sha256"
SALT_BYTES = 16

_LEGACY_HASH = re.compile(r"^[0-9a-f]{64}$")


def normalize_doctor_name(name: str) -> str:
    """Trim and prefix "Dr. " unless the name already starts with "Dr."."""
    name = name.strip()
    if name.startswith(DOCTOR_PREFIX):
        return name
    return f"{DOCTOR_PREFIX} {name}"


def legacy_password_hash(password: str, secret: str) -> str:
    return hmac.new(secret.encode(), password.encode(), hashlib.sha256).hexdigest()


def _derive(password: str, secret: str, salt: str, iterations: int) -> str:
    peppered = hmac.new(secret.encode(), password.encode(), hashlib.sha256).digest()
    return hashlib.pbkdf2_hmac("sha256", peppered, salt.encode(), iterations).hex()


def hash_password(password: str, secret: str, iterations: int = 210_000) -> str:
    salt = secrets.token_hex(SALT_BYTES)
    digest = _derive(password, secret, salt, iterations)
    return f"{SCHEME}${iterations}${salt}${digest}"


def verify_password(password: str, stored: str, secret: str) -> bool:
    if _LEGACY_HASH.match(stored):
        return hmac.compare_digest(legacy_password_hash(password, secret), stored)

    try:
        scheme, iterations, salt, digest = stored.split("$")
        rounds = int(iterations)
    except ValueError:
        return False
    if scheme != SCHEME:
        return False
    return hmac.compare_digest(_derive(password, secret, salt, rounds), digest)
