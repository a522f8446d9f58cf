import hashlib
import secrets

import bcrypt

# 32 bytes = 256 bits of entropy
RESET_SECRET_BYTES = 32


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(12)).decode()


def generate_reset_secret() -> str:
    return secrets.token_urlsafe(RESET_SECRET_BYTES)


def hash_reset_secret(secret: str) -> str:
    """SHA-256 hex digest, the only form of the secret that is persisted"""
    return hashlib.sha256(secret.encode()).hexdigest()
