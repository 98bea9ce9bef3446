"""Authentication route handlers."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from backend.api.routes import limiter, AUTH_RATE_LIMIT, INVALID_CREDENTIALS_RESPONSE
from backend.database.db import get_db_session
from backend.services import auth_service, user_service
from backend.api.auth_dependencies import get_current_user
from backend.models.schemas import (
    RegisterRequest,
    LoginRequest,
    GoogleAuthRequest,
    AuthResponse,
    UserResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter()


def _auth_response(user: dict) -> AuthResponse:
    return AuthResponse(
        token=auth_service.create_token_for_user(user),
        user=UserResponse(**user),
    )


@router.post("/auth/register", response_model=AuthResponse)
@limiter.limit(AUTH_RATE_LIMIT)
async def register(
    request: Request, payload: RegisterRequest, session: AsyncSession = Depends(get_db_session)
):
    """Create a password account and return a token for it."""
    try:
        email = auth_service.normalize_email(payload.email)
        if not payload.name.strip():
            raise HTTPException(status_code=400, detail="Name is required")

        password_hash = auth_service.hash_password(payload.password)
        user_id = await user_service.create_user(session, email, payload.name, password_hash)
        user = await user_service.get_user_by_id(session, user_id)
        return _auth_response(user)
    except HTTPException:
        raise
    except user_service.EmailAlreadyRegisteredError:
        raise HTTPException(status_code=409, detail="Email is already registered")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.error("Error during registration", exc_info=True)
        raise HTTPException(status_code=500, detail="Error during registration")


@router.post("/auth/login", response_model=AuthResponse)
@limiter.limit(AUTH_RATE_LIMIT)
async def login(
    request: Request, payload: LoginRequest, session: AsyncSession = Depends(get_db_session)
):
    """Login with email and password."""
    try:
        if not auth_service.validate_email(payload.email.strip()):
            raise INVALID_CREDENTIALS_RESPONSE
        user = await user_service.get_user_by_email(session, payload.email)
        if not user:
            raise INVALID_CREDENTIALS_RESPONSE

        if not user.get("password_hash"):
            if user.get("auth_provider") == "google":
                raise HTTPException(
                    status_code=401,
                    detail="This account uses Google Sign-In. Please use the Google button to log in.",
                )
            raise INVALID_CREDENTIALS_RESPONSE

        if not auth_service.verify_password(payload.password, user["password_hash"]):
            raise INVALID_CREDENTIALS_RESPONSE

        logger.info(f"User {user['id']} logged in")
        return _auth_response(user)
    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.error("Error during login", exc_info=True)
        raise HTTPException(status_code=500, detail="Error during login")


@router.post("/auth/google", response_model=AuthResponse)
@limiter.limit(AUTH_RATE_LIMIT)
async def google_auth(
    request: Request, payload: GoogleAuthRequest, session: AsyncSession = Depends(get_db_session)
):
    """
    Sign in with a Google identity.

    Looks the user up by google_id first, then by email (linking the Google
    id to the existing account), and creates a new account otherwise.
    """
    try:
        email = auth_service.normalize_email(payload.email)

        user = await user_service.get_user_by_google_id(session, payload.google_id)
        if not user:
            user = await user_service.get_user_by_email(session, email)
            if user:
                if user.get("google_id") and user["google_id"] != payload.google_id:
                    raise HTTPException(
                        status_code=409,
                        detail="Email is linked to a different Google account",
                    )
                await user_service.link_google_id(session, user["id"], payload.google_id)
                logger.info(f"Linked Google account to user {user['id']}")
                user = await user_service.get_user_by_id(session, user["id"])
            else:
                name = payload.name.strip() or email.split("@")[0]
                user_id = await user_service.create_google_user(
                    session, email, payload.google_id, name
                )
                user = await user_service.get_user_by_id(session, user_id)

        return _auth_response(user)
    except HTTPException:
        raise
    except user_service.EmailAlreadyRegisteredError:
        raise HTTPException(status_code=409, detail="Email is already registered")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.error("Error during Google authentication", exc_info=True)
        raise HTTPException(status_code=500, detail="Error during Google authentication")


@router.get("/auth/me", response_model=UserResponse)
async def get_current_user_info(current_user: dict = Depends(get_current_user)):
    """Get current authenticated user information."""
    return UserResponse(**current_user)
