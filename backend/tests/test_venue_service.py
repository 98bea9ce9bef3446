"""
Tests for the venue directory.
"""
import pytest
from sqlalchemy import select, func

from backend.database.models import Venue
from backend.services import venue_service


class TestUpsertVenue:
    """Venues are unique per (name, sport)."""

    @pytest.mark.asyncio
    async def test_upsert_creates_then_returns_existing(self, db_session):
        first = await venue_service.upsert_venue(db_session, "Bishan Sports Hall", "Badminton")
        second = await venue_service.upsert_venue(db_session, "Bishan Sports Hall", "Badminton")

        assert first["id"] == second["id"]
        result = await db_session.execute(select(func.count()).select_from(Venue))
        assert result.scalar_one() == 1

    @pytest.mark.asyncio
    async def test_same_name_different_sport_is_separate(self, db_session):
        badminton = await venue_service.upsert_venue(db_session, "Bishan Sports Hall", "Badminton")
        basketball = await venue_service.upsert_venue(db_session, "Bishan Sports Hall", "Basketball")
        assert badminton["id"] != basketball["id"]

    @pytest.mark.asyncio
    async def test_upsert_strips_whitespace(self, db_session):
        venue = await venue_service.upsert_venue(db_session, "  Toa Payoh Hall ", " Badminton ")
        assert venue["name"] == "Toa Payoh Hall"
        assert venue["sport"] == "Badminton"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name,sport", [("", "Badminton"), ("Hall", ""), ("  ", "  ")])
    async def test_blank_name_or_sport_is_rejected(self, db_session, name, sport):
        with pytest.raises(ValueError, match="Missing name or sport"):
            await venue_service.upsert_venue(db_session, name, sport)


class TestListVenues:
    """Lookup by sport."""

    @pytest.mark.asyncio
    async def test_list_filters_by_sport_and_sorts_by_name(self, db_session):
        await venue_service.upsert_venue(db_session, "Yishun Hall", "Badminton")
        await venue_service.upsert_venue(db_session, "Ang Mo Kio Hall", "Badminton")
        await venue_service.upsert_venue(db_session, "Kallang Courts", "Tennis")

        venues = await venue_service.list_venues(db_session, "Badminton")
        assert [v["name"] for v in venues] == ["Ang Mo Kio Hall", "Yishun Hall"]

    @pytest.mark.asyncio
    async def test_unknown_sport_has_no_venues(self, db_session):
        assert await venue_service.list_venues(db_session, "Curling") == []
