"""Password hashing helpers."""

import bcrypt

BCRYPT_ROUNDS = 10
# bcrypt only looks at the first 72 bytes and newer releases refuse longer input
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    """Return a salted bcrypt hash of ``password``."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def check_password(password: str, password_hash: str | None) -> bool:
    """Compare a plain password against a stored hash. Missing hashes never match."""
    if not password_hash or password is None:
        return False
    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        return False
    return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))
