"""
Sport-specific skill tiers.

Each sport has an ordered list of tiers; a session's skill range is a pair of
tier names and a player fits the range when their tier's order falls between
the two bounds, inclusive.
"""

from typing import Dict, List, Optional

SKILL_LEVELS: Dict[str, List[Dict]] = {
    "Badminton": [
        {"name": "Low Beginner", "order": 1, "description": "Just for fun, learning basics"},
        {"name": "Mid Beginner", "order": 2, "description": "Know basic rules and strokes"},
        {"name": "High Beginner", "order": 3, "description": "Consistent rallies, good technique"},
        {"name": "Low Intermediate", "order": 4, "description": "Powerful smash, good backhand"},
        {"name": "Advanced", "order": 5, "description": "Strong tactical play, tournament level"},
        {"name": "Expert", "order": 6, "description": "Professional player, advanced techniques"},
    ],
    "Tennis": [
        {"name": "Beginner", "order": 1, "description": "Learning basic strokes and rules"},
        {"name": "Intermediate", "order": 2, "description": "Can rally consistently"},
        {"name": "Advanced", "order": 3, "description": "Strong groundstrokes and serves"},
        {"name": "Tournament", "order": 4, "description": "Competitive tournament player"},
        {"name": "Professional", "order": 5, "description": "High-level competitive play"},
    ],
    "Basketball": [
        {"name": "Casual", "order": 1, "description": "Just for fun and exercise"},
        {"name": "Recreational", "order": 2, "description": "Know basic rules and shooting"},
        {"name": "Intermediate", "order": 3, "description": "Good fundamentals and teamwork"},
        {"name": "Competitive", "order": 4, "description": "League or tournament experience"},
        {"name": "Elite", "order": 5, "description": "High-level competitive player"},
    ],
    "Table Tennis": [
        {"name": "Beginner", "order": 1, "description": "Learning basic strokes"},
        {"name": "Recreational", "order": 2, "description": "Can play basic rallies"},
        {"name": "Intermediate", "order": 3, "description": "Good spin and placement"},
        {"name": "Advanced", "order": 4, "description": "Tournament level play"},
        {"name": "Expert", "order": 5, "description": "Competitive club player"},
    ],
    "Squash": [
        {"name": "Beginner", "order": 1, "description": "Learning court movement and basic shots"},
        {"name": "Recreational", "order": 2, "description": "Can maintain rallies"},
        {"name": "Intermediate", "order": 3, "description": "Good court coverage and shot variety"},
        {"name": "Advanced", "order": 4, "description": "Strong tactical awareness"},
        {"name": "Expert", "order": 5, "description": "Competitive league player"},
    ],
    "Volleyball": [
        {"name": "Beginner", "order": 1, "description": "Learning basic skills"},
        {"name": "Recreational", "order": 2, "description": "Can serve and pass"},
        {"name": "Intermediate", "order": 3, "description": "Good team coordination"},
        {"name": "Competitive", "order": 4, "description": "League or tournament play"},
        {"name": "Elite", "order": 5, "description": "High-level competitive player"},
    ],
    "Football": [
        {"name": "Casual", "order": 1, "description": "Just for fun and fitness"},
        {"name": "Recreational", "order": 2, "description": "Know basic rules and skills"},
        {"name": "Intermediate", "order": 3, "description": "Good ball control and passing"},
        {"name": "Competitive", "order": 4, "description": "League or club experience"},
        {"name": "Elite", "order": 5, "description": "High-level competitive player"},
    ],
    "Swimming": [
        {"name": "Beginner", "order": 1, "description": "Learning basic strokes"},
        {"name": "Recreational", "order": 2, "description": "Can swim multiple strokes"},
        {"name": "Intermediate", "order": 3, "description": "Good technique and endurance"},
        {"name": "Advanced", "order": 4, "description": "Competitive swimming experience"},
        {"name": "Elite", "order": 5, "description": "High-level competitive swimmer"},
    ],
    "Running": [
        {"name": "Beginner", "order": 1, "description": "Starting running journey"},
        {"name": "Recreational", "order": 2, "description": "Regular casual running"},
        {"name": "Intermediate", "order": 3, "description": "Can run 5-10K comfortably"},
        {"name": "Advanced", "order": 4, "description": "Half marathon and beyond"},
        {"name": "Elite", "order": 5, "description": "Competitive racing"},
    ],
    "Cycling": [
        {"name": "Casual", "order": 1, "description": "Leisure cycling"},
        {"name": "Recreational", "order": 2, "description": "Regular short rides"},
        {"name": "Intermediate", "order": 3, "description": "Long distance cycling"},
        {"name": "Advanced", "order": 4, "description": "Competitive cycling"},
        {"name": "Elite", "order": 5, "description": "Racing and high performance"},
    ],
    "Gym/Fitness": [
        {"name": "Beginner", "order": 1, "description": "New to fitness training"},
        {"name": "Recreational", "order": 2, "description": "Regular gym goer"},
        {"name": "Intermediate", "order": 3, "description": "Good form and routine"},
        {"name": "Advanced", "order": 4, "description": "Serious training goals"},
        {"name": "Expert", "order": 5, "description": "Competitive or professional level"},
    ],
}


def get_skill_levels_for_sport(sport: str) -> List[Dict]:
    """Return the ordered tiers for a sport, or an empty list if the sport is unknown."""
    return SKILL_LEVELS.get(sport, [])


def is_known_sport(sport: str) -> bool:
    return sport in SKILL_LEVELS


def get_skill_level_order(level_name: str, sport: str) -> Optional[int]:
    """Order value of a tier within a sport, or None if the tier is not listed."""
    for level in get_skill_levels_for_sport(sport):
        if level["name"] == level_name:
            return level["order"]
    return None


def is_skill_level_in_range(target_level: str, range_start: str, range_end: str, sport: str) -> bool:
    """
    Check whether a tier falls within a session's skill range (inclusive).

    Returns False if any of the three tiers is not listed for the sport.
    """
    target_order = get_skill_level_order(target_level, sport)
    start_order = get_skill_level_order(range_start, sport)
    end_order = get_skill_level_order(range_end, sport)

    if target_order is None or start_order is None or end_order is None:
        return False

    return start_order <= target_order <= end_order


def format_skill_level_range(start_level: str, end_level: str) -> str:
    if start_level == end_level:
        return start_level
    return f"{start_level} - {end_level}"
