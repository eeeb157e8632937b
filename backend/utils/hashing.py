# backend/utils/hashing.py
import bcrypt

BCRYPT_ROUNDS = 12


def get_password_hash(password: str) -> str:
    """Hash a password with bcrypt; the result is stored as text."""
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash in the database
        return False
