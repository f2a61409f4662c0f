import bcrypt
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from fastapi.concurrency import run_in_threadpool
from jose import jwt

from config import Settings
from errors import ServiceError, internal_error


def hash_password(password: str, rounds: int = 10) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode('utf-8'), hashed.encode('utf-8'))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


class CredentialService:
    """Password hashing and token signing, configured once at startup."""

    def __init__(self, settings: Settings):
        self.secret_key = settings.JWT_SECRET
        self.algorithm = settings.JWT_ALGORITHM
        self.expire_minutes = settings.JWT_EXPIRE_MINUTES
        self.rounds = settings.BCRYPT_ROUNDS

    async def hash_password(self, password: str) -> str:
        # bcrypt is deliberately slow; keep it off the event loop
        return await run_in_threadpool(hash_password, password, self.rounds)

    async def verify_password(self, password: str, hashed: str) -> bool:
        return await run_in_threadpool(verify_password, password, hashed)

    def issue_token(
        self, account_id: str, username: str, email: str
    ) -> Tuple[Optional[str], Optional[ServiceError]]:
        if not self.secret_key:
            return None, internal_error("JWT_SECRET is not configured.")

        now = datetime.now(timezone.utc)
        claims = {
            "userId": str(account_id),
            "username": username,
            "email": email,
            "iat": now,
            "exp": now + timedelta(minutes=self.expire_minutes),
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm), None
