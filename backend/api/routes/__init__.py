"""
API routes - combined router from all domain modules.

Shared infrastructure (limiter, constants) lives here; every sub-router
imports what it needs from this package.
"""

import os

from fastapi import APIRouter, HTTPException
from slowapi import Limiter
from slowapi.util import get_remote_address

# ---------------------------------------------------------------------------
# Shared rate limiter
# ---------------------------------------------------------------------------
IS_TEST_ENV = os.getenv("ENV", "").lower() == "test"
limiter = Limiter(key_func=get_remote_address, enabled=not IS_TEST_ENV)

AUTH_RATE_LIMIT = "10/minute"

# ---------------------------------------------------------------------------
# Shared constants
# ---------------------------------------------------------------------------
INVALID_CREDENTIALS_RESPONSE = HTTPException(
    status_code=401, detail="Email or password is incorrect"
)

# ---------------------------------------------------------------------------
# Import sub-routers and combine
# ---------------------------------------------------------------------------
from backend.api.routes.auth import router as auth_router  # noqa: E402
from backend.api.routes.users import router as users_router  # noqa: E402
from backend.api.routes.sessions import router as sessions_router  # noqa: E402
from backend.api.routes.venues import router as venues_router  # noqa: E402
from backend.api.routes.skill_levels import router as skill_levels_router  # noqa: E402

router = APIRouter()
router.include_router(auth_router)
router.include_router(users_router)
router.include_router(sessions_router)
router.include_router(venues_router)
router.include_router(skill_levels_router)
