"""Venue directory route handlers."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from backend.database.db import get_db_session
from backend.services import venue_service
from backend.models.schemas import VenueCreate, VenueResponse

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/venues", response_model=List[VenueResponse])
async def list_venues(sport: Optional[str] = None, session: AsyncSession = Depends(get_db_session)):
    """Get venues for a sport, sorted by name."""
    if not sport or not sport.strip():
        raise HTTPException(status_code=400, detail="Missing sport parameter")
    try:
        return await venue_service.list_venues(session, sport.strip())
    except Exception:
        logger.error(f"Error listing venues for {sport}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error listing venues")


@router.post("/venues", response_model=VenueResponse)
async def upsert_venue(payload: VenueCreate, session: AsyncSession = Depends(get_db_session)):
    """Add a venue for a sport, or return the existing one with the same name."""
    try:
        return await venue_service.upsert_venue(session, payload.name, payload.sport)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.error("Error saving venue", exc_info=True)
        raise HTTPException(status_code=500, detail="Error saving venue")
