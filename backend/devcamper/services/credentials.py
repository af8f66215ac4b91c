"""
DevCamper API - Credential Service
==================================

What:  Password hashing and bearer-token signing.
How:   passlib's pbkdf2_sha256 for password hashes; python-jose HS256 JWTs
       carrying the user id in `id`, with `iat`/`exp` claims.
Who:   AuthService (register, login) and the `get_current_user` dependency.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import JWTError, jwt
from passlib.context import CryptContext

from devcamper.config import Settings
from devcamper.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class CredentialService:
    def __init__(self, settings: Settings):
        self.secret = settings.jwt_secret
        self.algorithm = settings.jwt_algorithm
        self.expires = timedelta(days=settings.jwt_expire_days)

    def hash_password(self, password: str) -> str:
        return pwd_context.hash(password)

    def verify_password(self, password: str, password_hash: str) -> bool:
        return pwd_context.verify(password, password_hash)

    def create_token(self, user_id: str) -> str:
        if not self.secret:
            raise RuntimeError("JWT_SECRET is not configured")
        now = datetime.now(timezone.utc)
        claims = {
            "id": str(user_id),
            "iat": int(now.timestamp()),
            "exp": int((now + self.expires).timestamp()),
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def decode_token(self, token: str) -> Dict[str, Any]:
        """
        Verify signature and expiry.

        Raises:
            UnauthorizedError: bad signature, expired, malformed, or no `id` claim
        """
        try:
            claims = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as e:
            logger.info("Rejected bearer token: %s", str(e))
            raise UnauthorizedError(context={"reason": type(e).__name__})
        if not claims.get("id"):
            raise UnauthorizedError(context={"reason": "missing id claim"})
        return claims
