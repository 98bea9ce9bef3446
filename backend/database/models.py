"""
SQLAlchemy ORM models for the SportConnect session system.
"""

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Boolean,
    Float,
    DateTime,
    ForeignKey,
    UniqueConstraint,
    CheckConstraint,
    Index,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from backend.database.db import Base


class User(Base):
    """User accounts with email/password or Google authentication."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String, nullable=False, unique=True)
    name = Column(String, nullable=False)
    password_hash = Column(String, nullable=True)  # NULL for Google accounts
    google_id = Column(String, nullable=True, unique=True)
    avatar = Column(String, nullable=True)  # Avatar URL
    profile_picture = Column(String, nullable=True)  # Uploaded picture path
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    hosted_sessions = relationship("Session", back_populates="host")
    session_participations = relationship("SessionParticipant", back_populates="user")

    __table_args__ = (
        Index("idx_users_email", "email"),
        Index("idx_users_google_id", "google_id"),
    )


class Venue(Base):
    """Named places where a sport is played."""

    __tablename__ = "venues"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    sport = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("name", "sport", name="uq_venues_name_sport"),
        Index("idx_venues_sport", "sport"),
    )


class Session(Base):
    """Scheduled sports sessions that users can join."""

    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sport = Column(String, nullable=False)
    venue = Column(String, nullable=False)
    court_number = Column(String, nullable=True)
    # Schedule stored as wall-clock strings: YYYY-MM-DD and HH:MM
    start_date = Column(String, nullable=True)
    start_time = Column(String, nullable=True)
    end_date = Column(String, nullable=True)
    end_time = Column(String, nullable=True)
    skill_level_start = Column(String, nullable=False)
    skill_level_end = Column(String, nullable=False)
    max_players = Column(Integer, nullable=False)
    fee = Column(Float, nullable=False, default=0.0)
    notes = Column(Text, nullable=True)
    count_host_in = Column(Boolean, nullable=False, default=True)
    host_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    host = relationship("User", back_populates="hosted_sessions")
    participants = relationship(
        "SessionParticipant", back_populates="session", cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint("max_players >= 2", name="ck_sessions_max_players"),
        CheckConstraint("fee >= 0", name="ck_sessions_fee"),
        Index("idx_sessions_host", "host_id"),
        Index("idx_sessions_start", "start_date", "start_time"),
        Index("idx_sessions_sport", "sport"),
    )


class SessionParticipant(Base):
    """Users occupying a capacity slot in a session."""

    __tablename__ = "session_participants"

    id = Column(Integer, primary_key=True, autoincrement=True)
    session_id = Column(Integer, ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    joined_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    session = relationship("Session", back_populates="participants")
    user = relationship("User", back_populates="session_participations")

    __table_args__ = (
        UniqueConstraint("session_id", "user_id", name="uq_session_participants_session_user"),
        Index("idx_session_participants_session_id", "session_id"),
        Index("idx_session_participants_user_id", "user_id"),
    )
