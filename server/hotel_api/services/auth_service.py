"""Authentication service: registration and login."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import AuthenticationError, ConflictError
from ..core.security import create_access_token, hash_password, verify_password
from ..models.user import User, UserRole
from ..schemas.auth import AuthData, LoginRequest, RegisterRequest

logger = logging.getLogger(__name__)


class AuthService:
    """Service for account operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _auth_data(self, user: User) -> AuthData:
        role = UserRole(user.role)
        return AuthData(
            user_id=user.user_id,
            name=user.full_name,
            email=user.email,
            role=role,
            token=create_access_token(user.user_id, user.email, role.value),
        )

    async def get_user_by_email(self, email: str) -> User | None:
        stmt = select(User).where(User.email == email.lower())
        return (await self.db.execute(stmt)).scalar_one_or_none()

    async def register(self, request: RegisterRequest) -> AuthData:
        """
        Create a USER account and issue a token for it.

        Args:
            request: Registration request

        Returns:
            AuthData: New account with its bearer token

        Raises:
            ConflictError: If the email is already registered
        """
        email = request.email.lower()

        if await self.get_user_by_email(email) is not None:
            raise ConflictError("Email already registered")

        user = User(
            full_name=request.name,
            email=email,
            password_hash=hash_password(request.password),
            phone=request.phone,
            role=UserRole.USER,
        )
        self.db.add(user)

        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("Email already registered")

        logger.info("User registered", extra={"user_id": user.user_id})
        return self._auth_data(user)

    async def login(self, request: LoginRequest) -> AuthData:
        """
        Verify credentials and issue a token.

        Raises:
            AuthenticationError: If the email is unknown or the password is wrong
        """
        user = await self.get_user_by_email(request.email)

        if user is None or not verify_password(user.password_hash, request.password):
            logger.warning("Login failed", extra={"email_domain": request.email.split("@")[-1]})
            raise AuthenticationError("Invalid email or password")

        logger.info("User logged in", extra={"user_id": user.user_id})
        return self._auth_data(user)
