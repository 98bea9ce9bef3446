"""Skill-tier catalog route handlers."""

from typing import List

from fastapi import APIRouter, HTTPException

from backend.models.schemas import SkillLevelResponse
from backend.utils.skill_levels import get_skill_levels_for_sport, is_known_sport

router = APIRouter()


@router.get("/skill-levels", response_model=List[SkillLevelResponse])
async def list_skill_levels(sport: str):
    """Get the ordered skill tiers for a sport."""
    if not is_known_sport(sport):
        raise HTTPException(status_code=404, detail=f"No skill levels for {sport}")
    return get_skill_levels_for_sport(sport)
