"""
DevCamper API - Auth Service
============================

What:  User registration, login and current-user lookup.
How:   Passwords are hashed and tokens signed by the CredentialService; the
       session stores and finds users.
Who:   Called by the /auth route handlers and the `get_current_user`
       dependency.

Login answers "Invalid credentials" (401) both for an unknown email and for
a wrong password.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from devcamper.exceptions import (
    DatabaseError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from devcamper.models import User
from devcamper.schemas.auth import LoginRequest, RegisterRequest
from devcamper.services.bootcamp_service import parse_id
from devcamper.services.credentials import CredentialService

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, credentials: CredentialService):
        self.credentials = credentials

    async def register(self, db: AsyncSession, data: RegisterRequest) -> str:
        """Create the user and return a signed token for it."""
        user = User(
            name=data.name,
            email=data.email.lower(),
            role=data.role,
            password_hash=self.credentials.hash_password(data.password),
        )
        db.add(user)
        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            raise ValidationError(message="Duplicate field value entered", field="email")
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error registering user: %s", str(e), exc_info=True)
            raise DatabaseError()

        logger.info("User registered: %s (%s)", user.id, user.role)
        return self.credentials.create_token(str(user.id))

    async def login(self, db: AsyncSession, data: LoginRequest) -> str:
        """
        Raises:
            ValidationError:   email or password missing (→ 400)
            UnauthorizedError: unknown email or wrong password (→ 401)
        """
        if not data.email or not data.password:
            raise ValidationError(message="Please provide an email and password")

        result = await db.execute(select(User).where(User.email == data.email.strip().lower()))
        user = result.scalar_one_or_none()
        if user is None or not self.credentials.verify_password(data.password, user.password_hash):
            logger.info("Failed login attempt")
            raise UnauthorizedError(message="Invalid credentials")

        return self.credentials.create_token(str(user.id))

    async def current_user(self, db: AsyncSession, token: str) -> User:
        """Resolve a bearer token to its user; any failure is 401."""
        claims = self.credentials.decode_token(token)
        try:
            user_id = parse_id("User", claims["id"])
        except NotFoundError:
            raise UnauthorizedError(context={"reason": "malformed id claim"})
        user = await db.get(User, user_id)
        if user is None:
            raise UnauthorizedError()
        return user
