"""Auth router for registration, login and logout."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import CurrentUser
from ..core.exceptions import ApiError, InternalServerError
from ..core.responses import api_success
from ..schemas.auth import LoginRequest, RegisterRequest, TokenUser
from ..services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

DB_DEPENDENCY = Depends(get_db)


@router.post("/register", status_code=201)
async def register(
    request: RegisterRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Create a user account and return a bearer token for it."""
    try:
        auth_data = await AuthService(db).register(request)
        return api_success(auth_data, "User registered successfully", status_code=201)

    except ApiError:
        raise

    except Exception as e:
        logger.error("Unexpected error in registration", extra={"error": str(e)}, exc_info=True)
        raise InternalServerError("Registration failed", error=str(e))


@router.post("/login")
async def login(
    request: LoginRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Exchange email and password for a bearer token."""
    try:
        auth_data = await AuthService(db).login(request)
        return api_success(auth_data, "Login successful")

    except ApiError:
        raise

    except Exception as e:
        logger.error("Unexpected error in login", extra={"error": str(e)}, exc_info=True)
        raise InternalServerError("Login failed", error=str(e))


@router.post("/logout")
async def logout(current_user: TokenUser = CurrentUser) -> JSONResponse:
    """
    Log out.

    Tokens are stateless, so the client simply discards its token.
    """
    logger.info("User logged out", extra={"user_id": current_user.user_id})
    return api_success(message="Logout successful")
