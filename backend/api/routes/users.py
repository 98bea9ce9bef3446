"""User profile route handlers."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from backend.database.db import get_db_session
from backend.services import auth_service, user_service, session_service
from backend.api.auth_dependencies import get_current_user
from backend.models.schemas import UserResponse, UserUpdate, UserSessionsResponse

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/users/profile", response_model=UserResponse)
async def get_profile(current_user: dict = Depends(get_current_user)):
    """Get the current user's profile."""
    return UserResponse(**current_user)


@router.put("/users/profile", response_model=UserResponse)
async def update_profile(
    payload: UserUpdate,
    current_user: dict = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Update the current user's name and/or email."""
    try:
        email = auth_service.normalize_email(payload.email) if payload.email else None
        if payload.name is not None and not payload.name.strip():
            raise HTTPException(status_code=400, detail="Name cannot be empty")

        updated = await user_service.update_user_profile(
            session, current_user["id"], name=payload.name, email=email
        )
        logger.info(f"User {current_user['id']} updated profile")
        return UserResponse(**updated)
    except HTTPException:
        raise
    except user_service.EmailAlreadyRegisteredError:
        raise HTTPException(status_code=409, detail="Email is already registered")
    except user_service.UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.error(f"Error updating profile for user {current_user['id']}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error updating profile")


@router.get("/users/me/sessions", response_model=UserSessionsResponse)
async def get_my_sessions(
    current_user: dict = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Get the sessions the current user hosts and the ones they have joined."""
    try:
        return await session_service.get_user_session_summary(session, current_user["id"])
    except Exception:
        logger.error(f"Error getting sessions for user {current_user['id']}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error getting user sessions")
