"""
bcrypt helpers for dashboard accounts.

Hashes are stored in `users.password_hash`. bcrypt only looks at the first
72 bytes of a password, so longer input is cut there explicitly; current
bcrypt releases raise instead of truncating.
"""
import bcrypt

BCRYPT_ROUNDS = 12
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """Return a cost-12 bcrypt hash of `password` as text."""
    hashed = bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=BCRYPT_ROUNDS))
    return hashed.decode("utf-8")


# Compared against when the email is unknown so both failure paths cost one bcrypt check
_DUMMY_HASH = hash_password("unused-dummy-password")


def verify_password(password: str, password_hash: str) -> bool:
    """
    Check a login attempt against a stored hash.

    Returns:
        bool: True on a match; False on a mismatch or an unreadable stored hash
    """
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        return False


def burn_password_check(password: str) -> None:
    verify_password(password, _DUMMY_HASH)
