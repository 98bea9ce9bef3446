"""
Constants used across the session membership system.
"""

# Visibility window: sessions stay listed this long after they start
RECENT_START_GRACE_HOURS = 2

# Session capacity and fee bounds
MIN_MAX_PLAYERS = 2
DEFAULT_FEE = 0.0

# Fields exposed when a user is shown inside a session
PUBLIC_USER_FIELDS = ("id", "name", "avatar", "email")
