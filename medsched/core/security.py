import jwt

from medsched.core.config import settings

ROLES = ("admin", "staff", "doctor", "patient")
MANAGER_ROLES = ("admin", "staff")


def decode_access_token(token: str) -> dict:
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
