import bcrypt


def hash_password(password: str) -> str:
    """bcrypt hash stored on the admin account."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")
