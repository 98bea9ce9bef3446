"""
Venue directory: venues are unique per (name, sport).
"""

import logging
from typing import Dict, List

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from backend.database.models import Venue

logger = logging.getLogger(__name__)


def _insert_for(session: AsyncSession):
    """Pick the dialect-specific INSERT construct that supports ON CONFLICT."""
    if session.get_bind().dialect.name == "sqlite":
        return sqlite_insert
    return pg_insert


async def list_venues(session: AsyncSession, sport: str) -> List[Dict]:
    """Get all venues for a sport, sorted by name."""
    result = await session.execute(
        select(Venue).where(Venue.sport == sport).order_by(Venue.name.asc())
    )
    return [_venue_to_dict(v) for v in result.scalars().all()]


async def upsert_venue(session: AsyncSession, name: str, sport: str, commit: bool = True) -> Dict:
    """
    Insert a venue or return the existing one with the same name and sport.

    Runs as a single INSERT ... ON CONFLICT DO NOTHING followed by a read, so
    concurrent callers never create duplicates.

    Args:
        session: Database session
        name: Venue name
        sport: Sport played at the venue
        commit: Commit the transaction (False when called inside a larger unit of work)

    Returns:
        Venue dict

    Raises:
        ValueError: If name or sport is blank
    """
    name = (name or "").strip()
    sport = (sport or "").strip()
    if not name or not sport:
        raise ValueError("Missing name or sport")

    insert = _insert_for(session)
    stmt = (
        insert(Venue)
        .values(name=name, sport=sport)
        .on_conflict_do_nothing(index_elements=["name", "sport"])
    )
    await session.execute(stmt)

    result = await session.execute(
        select(Venue).where(Venue.name == name, Venue.sport == sport)
    )
    venue = result.scalar_one()
    if commit:
        await session.commit()
    return _venue_to_dict(venue)


def _venue_to_dict(venue: Venue) -> Dict:
    return {
        "id": venue.id,
        "name": venue.name,
        "sport": venue.sport,
        "created_at": venue.created_at.isoformat() if venue.created_at else None,
        "updated_at": venue.updated_at.isoformat() if venue.updated_at else None,
    }
