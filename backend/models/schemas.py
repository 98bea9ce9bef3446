"""
Pydantic models for API request/response validation.
"""

from typing import Optional, List
from pydantic import BaseModel, Field, model_validator


class HealthResponse(BaseModel):
    """Health check response."""

    status: str


# --- Auth ---


class RegisterRequest(BaseModel):
    """Request to register a new password account."""

    email: str
    password: str = Field(min_length=1)
    name: str = Field(min_length=1)


class LoginRequest(BaseModel):
    """Request to login with email and password."""

    email: str
    password: str


class GoogleAuthRequest(BaseModel):
    """Request to sign in with a Google identity."""

    email: str
    name: str
    google_id: str = Field(min_length=1)


class UserResponse(BaseModel):
    """User information response."""

    id: int
    email: str
    name: str
    avatar: Optional[str] = None
    profile_picture: Optional[str] = None
    google_id: Optional[str] = None
    auth_provider: str = "password"
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class AuthResponse(BaseModel):
    """Authentication response with JWT token."""

    token: str
    user: UserResponse


class UserUpdate(BaseModel):
    """Request to update user profile."""

    name: Optional[str] = None
    email: Optional[str] = None


class UserSummary(BaseModel):
    """Public view of a user, as shown to other users."""

    id: int
    name: str
    avatar: Optional[str] = None
    email: Optional[str] = None


# --- Venues ---


class VenueCreate(BaseModel):
    """Request to add a venue for a sport."""

    name: str
    sport: str


class VenueResponse(BaseModel):
    """Venue response."""

    id: int
    name: str
    sport: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


# --- Skill levels ---


class SkillLevelResponse(BaseModel):
    """One tier in a sport's skill ladder."""

    name: str
    order: int
    description: Optional[str] = None


# --- Sessions ---


class SessionCreate(BaseModel):
    """Request to create a session. The requester becomes the host."""

    sport: str = Field(min_length=1)
    venue: str = Field(min_length=1)
    court_number: Optional[str] = None
    start_date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    start_time: str = Field(pattern=r"^\d{2}:\d{2}$")
    end_date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    end_time: str = Field(pattern=r"^\d{2}:\d{2}$")
    skill_level_start: str = Field(min_length=1)
    skill_level_end: str = Field(min_length=1)
    max_players: int = Field(ge=2)
    fee: float = Field(default=0.0, ge=0)
    notes: Optional[str] = None
    count_host_in: bool = True

    @model_validator(mode="after")
    def validate_schedule(self):
        """Ensure the session does not end before it starts."""
        if (self.end_date, self.end_time) < (self.start_date, self.start_time):
            raise ValueError("Session cannot end before it starts")
        return self


class SessionBase(BaseModel):
    """Fields shared by every session response."""

    id: int
    sport: str
    venue: str
    court_number: Optional[str] = None
    start_date: Optional[str] = None
    start_time: Optional[str] = None
    end_date: Optional[str] = None
    end_time: Optional[str] = None
    skill_level_start: str
    skill_level_end: str
    skill_level_label: Optional[str] = None
    max_players: int
    fee: float = 0.0
    notes: Optional[str] = None
    count_host_in: bool = True
    host_id: int
    current_players: int
    is_full: bool
    is_upcoming: bool
    is_expired: bool
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class SessionResponse(SessionBase):
    """Session in a listing; participants are user ids."""

    participants: List[int] = []
    host_name: Optional[str] = None


class SessionDetailResponse(SessionBase):
    """Session with host and participants resolved to public user fields."""

    host: Optional[UserSummary] = None
    participants: List[UserSummary] = []


class UserSessionStats(BaseModel):
    """Counts of a user's hosted and joined sessions."""

    hosted: int
    joined: int
    total: int


class UserSessionsResponse(BaseModel):
    """A user's hosted and joined sessions."""

    hosted_sessions: List[SessionResponse]
    joined_sessions: List[SessionResponse]
    stats: UserSessionStats
