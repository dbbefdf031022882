"""Security utilities: password hashing, tokens and derived identifiers."""

import hashlib

import bcrypt

from membership.app.runtime.context import get_config


def normalize_email(email: str) -> str:
    return email.strip().lower()


def hash_password(password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password with bcrypt.

    Args:
        password: Plain-text password
        rounds: Cost factor; defaults to ``security.bcrypt_rounds``

    Returns:
        The bcrypt hash as a string
    """
    if rounds is None:
        rounds = get_config().security.bcrypt_rounds
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plain-text password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash or over-long password
        return False


def password_fingerprint(password_hash: str) -> str:
    """Digest of a password hash, embedded in reset tokens.

    Any password change alters the fingerprint, which invalidates tokens
    issued before it.
    """
    return hashlib.sha256(password_hash.encode("utf-8")).hexdigest()[:32]


def membership_id_from_email(email: str) -> str:
    """Derive the membership identifier assigned at registration."""
    digest = hashlib.sha256(normalize_email(email).encode("utf-8")).hexdigest()
    return f"MBR-{digest[:10].upper()}"
