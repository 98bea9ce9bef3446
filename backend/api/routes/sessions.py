"""Session route handlers: listings, creation and membership."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from backend.database.db import get_db_session
from backend.services import session_service
from backend.api.auth_dependencies import get_current_user
from backend.models.schemas import SessionCreate, SessionResponse, SessionDetailResponse

logger = logging.getLogger(__name__)
router = APIRouter()


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------


@router.get("/sessions", response_model=List[SessionResponse])
async def list_sessions(session: AsyncSession = Depends(get_db_session)):
    """Get relevant sessions (upcoming or started within the last two hours), soonest first."""
    try:
        return await session_service.list_sessions(session)
    except Exception:
        logger.error("Error listing sessions", exc_info=True)
        raise HTTPException(status_code=500, detail="Error listing sessions")


@router.get("/sessions/hosted", response_model=List[SessionResponse])
async def list_hosted_sessions(
    current_user: dict = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Get the current user's relevant hosted sessions, latest first."""
    try:
        return await session_service.list_hosted_sessions(session, current_user["id"])
    except Exception:
        logger.error(f"Error listing sessions hosted by user {current_user['id']}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error listing hosted sessions")


@router.get("/sessions/joined", response_model=List[SessionResponse])
async def list_joined_sessions(
    current_user: dict = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Get sessions the current user has joined but does not host."""
    try:
        return await session_service.list_joined_sessions(session, current_user["id"])
    except Exception:
        logger.error(f"Error listing sessions joined by user {current_user['id']}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error listing joined sessions")


@router.get("/sessions/search", response_model=List[SessionResponse])
async def search_sessions(
    q: Optional[str] = None,
    sport: Optional[str] = None,
    skill_level: Optional[str] = None,
    session: AsyncSession = Depends(get_db_session),
):
    """
    Browse relevant sessions, closest start time first.

    Query params:
    - q: text matched against venue, sport and host name
    - sport: exact sport
    - skill_level: tier that must fall within the session's range
    """
    try:
        return await session_service.search_sessions(
            session, query=q, sport=sport, skill_level=skill_level
        )
    except Exception:
        logger.error("Error searching sessions", exc_info=True)
        raise HTTPException(status_code=500, detail="Error searching sessions")


@router.get("/sessions/{session_id}", response_model=SessionDetailResponse)
async def get_session(session_id: int, session: AsyncSession = Depends(get_db_session)):
    """Get one session with its host and participants."""
    try:
        sess = await session_service.get_session(session, session_id)
    except Exception:
        logger.error(f"Error getting session {session_id}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error getting session")
    if not sess:
        raise HTTPException(status_code=404, detail="Session not found")
    return sess


# ---------------------------------------------------------------------------
# Create / cancel
# ---------------------------------------------------------------------------


@router.post("/sessions", response_model=SessionDetailResponse)
async def create_session(
    payload: SessionCreate,
    current_user: dict = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Create a session hosted by the current user."""
    try:
        return await session_service.create_session(
            session, current_user["id"], payload.model_dump()
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.error(f"Error creating session for user {current_user['id']}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error creating session")


@router.delete("/sessions/{session_id}")
async def cancel_session(
    session_id: int,
    current_user: dict = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Cancel (delete) a session. Host only."""
    try:
        await session_service.cancel_session(session, session_id, current_user["id"])
        return {"status": "success", "message": "Session cancelled"}
    except session_service.SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except session_service.NotSessionHostError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.error(f"Error cancelling session {session_id}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error cancelling session")


# ---------------------------------------------------------------------------
# Membership
# ---------------------------------------------------------------------------


@router.post("/sessions/{session_id}/join", response_model=SessionDetailResponse)
async def join_session(
    session_id: int,
    current_user: dict = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Join a session as the current user."""
    try:
        return await session_service.join_session(session, session_id, current_user["id"])
    except session_service.SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (session_service.AlreadyJoinedError, session_service.SessionFullError) as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.error(f"Error joining session {session_id}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error joining session")


@router.post("/sessions/{session_id}/leave", response_model=SessionDetailResponse)
async def leave_session(
    session_id: int,
    current_user: dict = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Leave a session as the current user."""
    try:
        return await session_service.leave_session(session, session_id, current_user["id"])
    except session_service.SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.error(f"Error leaving session {session_id}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error leaving session")
