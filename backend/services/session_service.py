"""
Session store and membership engine.

Handles creating sessions, joining and leaving them under the capacity and
host rules, host cancellation, and the read-side listings.

Join and leave lock the session row (SELECT ... FOR UPDATE) for the length of
the transaction so that concurrent requests against the same session are
checked one at a time. The participant insert is conditional on a free slot,
so capacity also holds on SQLite where the row lock is ignored. The unique
(session_id, user_id) constraint backs the duplicate check.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import select, delete, insert, literal
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import func

from backend.database.models import Session, SessionParticipant
from backend.services import user_service, venue_service, visibility_service
from backend.utils.constants import MIN_MAX_PLAYERS, DEFAULT_FEE
from backend.utils.datetime_utils import is_valid_date, is_valid_time, parse_session_datetime
from backend.utils.skill_levels import (
    format_skill_level_range,
    get_skill_level_order,
    is_known_sport,
    is_skill_level_in_range,
)

logger = logging.getLogger(__name__)


# --- Custom exceptions ---


class SessionNotFoundError(ValueError):
    """Raised when a session id does not match any session."""


class InvalidSessionError(ValueError):
    """Raised when a session draft is missing fields or malformed."""


class AlreadyJoinedError(ValueError):
    """Raised when a user joins a session they are already in."""


class SessionFullError(ValueError):
    """Raised when a session has no free slot."""


class HostCannotJoinError(ValueError):
    """Raised when the host tries to join their own session."""


class NotParticipantError(ValueError):
    """Raised when a user leaves a session they are not in."""


class HostSoleParticipantError(ValueError):
    """Raised when the host tries to leave while being the only participant."""


class NotSessionHostError(ValueError):
    """Raised when someone other than the host tries to cancel a session."""


# --- Create ---


def validate_session_draft(draft: Dict) -> Dict:
    """
    Validate and normalize a session draft.

    Args:
        draft: Raw session fields

    Returns:
        Normalized copy of the draft

    Raises:
        InvalidSessionError: On the first missing or malformed field
    """
    cleaned = dict(draft)

    for field in ("sport", "venue", "skill_level_start", "skill_level_end"):
        value = cleaned.get(field)
        if not isinstance(value, str) or not value.strip():
            raise InvalidSessionError(f"Missing {field}")
        cleaned[field] = value.strip()

    for field in ("start_date", "end_date"):
        if not is_valid_date(cleaned.get(field)):
            raise InvalidSessionError(f"{field} must be a date in YYYY-MM-DD format")
    for field in ("start_time", "end_time"):
        if not is_valid_time(cleaned.get(field)):
            raise InvalidSessionError(f"{field} must be a time in HH:MM format")

    start = parse_session_datetime(cleaned["start_date"], cleaned["start_time"])
    end = parse_session_datetime(cleaned["end_date"], cleaned["end_time"])
    if end < start:
        raise InvalidSessionError("Session cannot end before it starts")

    max_players = cleaned.get("max_players")
    if isinstance(max_players, bool) or not isinstance(max_players, int):
        raise InvalidSessionError("max_players must be a whole number")
    if max_players < MIN_MAX_PLAYERS:
        raise InvalidSessionError(f"max_players must be at least {MIN_MAX_PLAYERS}")

    fee = cleaned.get("fee")
    if fee is None:
        fee = DEFAULT_FEE
    if isinstance(fee, bool) or not isinstance(fee, (int, float)) or fee < 0:
        raise InvalidSessionError("fee must be a non-negative number")
    cleaned["fee"] = float(fee)

    sport = cleaned["sport"]
    if is_known_sport(sport):
        start_order = get_skill_level_order(cleaned["skill_level_start"], sport)
        end_order = get_skill_level_order(cleaned["skill_level_end"], sport)
        if start_order is None or end_order is None:
            raise InvalidSessionError(f"Unknown skill level for {sport}")
        if start_order > end_order:
            raise InvalidSessionError("skill_level_start must not be above skill_level_end")

    court_number = cleaned.get("court_number")
    cleaned["court_number"] = court_number.strip() if court_number and court_number.strip() else None
    notes = cleaned.get("notes")
    cleaned["notes"] = notes.strip() if notes and notes.strip() else None
    cleaned["count_host_in"] = bool(cleaned.get("count_host_in", True))

    return cleaned


async def create_session(session: AsyncSession, host_id: int, draft: Dict) -> Dict:
    """
    Create a session hosted by the requesting user.

    The host becomes the first participant when count_host_in is set. The
    venue is recorded in the venue directory for the session's sport.

    Args:
        session: Database session
        host_id: ID of the creating user
        draft: Session fields (see validate_session_draft)

    Returns:
        Created session dict with host and participants resolved

    Raises:
        InvalidSessionError: If the draft is invalid
    """
    data = validate_session_draft(draft)

    sess = Session(
        sport=data["sport"],
        venue=data["venue"],
        court_number=data["court_number"],
        start_date=data["start_date"],
        start_time=data["start_time"],
        end_date=data["end_date"],
        end_time=data["end_time"],
        skill_level_start=data["skill_level_start"],
        skill_level_end=data["skill_level_end"],
        max_players=data["max_players"],
        fee=data["fee"],
        notes=data["notes"],
        count_host_in=data["count_host_in"],
        host_id=host_id,
    )
    session.add(sess)
    await session.flush()

    if sess.count_host_in:
        session.add(SessionParticipant(session_id=sess.id, user_id=host_id))

    await venue_service.upsert_venue(session, data["venue"], data["sport"], commit=False)

    await session.commit()
    await session.refresh(sess)

    logger.info(
        f"Session {sess.id} created by user {host_id} "
        f"({sess.sport} at {sess.venue}, max {sess.max_players}, count_host_in={sess.count_host_in})"
    )
    return await _resolved_session_dict(session, sess)


# --- Reads ---


async def get_session(
    session: AsyncSession, session_id: int, now: Optional[datetime] = None
) -> Optional[Dict]:
    """Get one session with host and participants resolved, or None."""
    result = await session.execute(select(Session).where(Session.id == session_id))
    sess = result.scalar_one_or_none()
    if not sess:
        return None
    return await _resolved_session_dict(session, sess, now)


async def list_sessions(session: AsyncSession, now: Optional[datetime] = None) -> List[Dict]:
    """Relevant sessions, soonest start first."""
    result = await session.execute(
        select(Session).order_by(Session.start_date.asc(), Session.start_time.asc(), Session.id.asc())
    )
    sessions = await _session_dicts(session, result.scalars().all(), now)
    return visibility_service.sort_by_start(visibility_service.filter_relevant(sessions, now))


async def list_hosted_sessions(
    session: AsyncSession, host_id: int, now: Optional[datetime] = None
) -> List[Dict]:
    """The host's relevant sessions, latest start first."""
    result = await session.execute(select(Session).where(Session.host_id == host_id))
    sessions = await _session_dicts(session, result.scalars().all(), now)
    relevant = visibility_service.filter_relevant(sessions, now)
    return visibility_service.sort_by_start(relevant, descending=True)


async def list_joined_sessions(
    session: AsyncSession, user_id: int, now: Optional[datetime] = None
) -> List[Dict]:
    """Sessions the user participates in without hosting, soonest start first."""
    result = await session.execute(
        select(Session)
        .join(SessionParticipant, SessionParticipant.session_id == Session.id)
        .where(SessionParticipant.user_id == user_id, Session.host_id != user_id)
    )
    sessions = await _session_dicts(session, result.scalars().all(), now)
    return visibility_service.sort_by_start(sessions)


async def search_sessions(
    session: AsyncSession,
    query: Optional[str] = None,
    sport: Optional[str] = None,
    skill_level: Optional[str] = None,
    now: Optional[datetime] = None,
) -> List[Dict]:
    """
    Browse relevant sessions, closest start to now first.

    Args:
        session: Database session
        query: Case-insensitive text matched against venue, sport and host name
        sport: Exact sport filter
        skill_level: Only sessions whose skill range includes this tier
        now: Reference time (defaults to current time)

    Returns:
        List of session dicts with a host_name field
    """
    stmt = select(Session)
    if sport:
        stmt = stmt.where(Session.sport == sport)
    result = await session.execute(stmt)
    sessions = await _session_dicts(session, result.scalars().all(), now)

    hosts = await user_service.get_public_users(session, {s["host_id"] for s in sessions})
    for s in sessions:
        host = hosts.get(s["host_id"])
        s["host_name"] = host["name"] if host else None

    if query and query.strip():
        needle = query.strip().lower()
        sessions = [
            s for s in sessions
            if needle in s["venue"].lower()
            or needle in s["sport"].lower()
            or needle in (s["host_name"] or "").lower()
        ]

    if skill_level:
        sessions = [
            s for s in sessions
            if is_skill_level_in_range(
                skill_level, s["skill_level_start"], s["skill_level_end"], s["sport"]
            )
        ]

    relevant = visibility_service.filter_relevant(sessions, now)
    return visibility_service.sort_by_proximity(relevant, now)


async def get_user_session_summary(
    session: AsyncSession, user_id: int, now: Optional[datetime] = None
) -> Dict:
    """Hosted and joined sessions for a user, with counts."""
    result = await session.execute(select(Session).where(Session.host_id == user_id))
    hosted = visibility_service.sort_by_start(
        await _session_dicts(session, result.scalars().all(), now)
    )
    joined = await list_joined_sessions(session, user_id, now)
    return {
        "hosted_sessions": hosted,
        "joined_sessions": joined,
        "stats": {
            "hosted": len(hosted),
            "joined": len(joined),
            "total": len(hosted) + len(joined),
        },
    }


# --- Membership ---


async def join_session(session: AsyncSession, session_id: int, user_id: int) -> Dict:
    """
    Add a user to a session's participants.

    Checks, in order: session exists, user not already in, user is not the
    host, a slot is free.

    Returns:
        Updated session dict with host and participants resolved

    Raises:
        SessionNotFoundError, AlreadyJoinedError, HostCannotJoinError, SessionFullError
    """
    sess = await _lock_session(session, session_id)
    participant_ids = await _participant_ids(session, sess.id)

    if user_id in participant_ids:
        logger.info(f"User {user_id} rejected from session {session_id}: already joined")
        raise AlreadyJoinedError("Already joined")
    if user_id == sess.host_id:
        logger.info(f"User {user_id} rejected from session {session_id}: host cannot join")
        raise HostCannotJoinError("Host cannot join own session")
    if len(participant_ids) >= sess.max_players:
        logger.info(f"User {user_id} rejected from session {session_id}: session is full")
        raise SessionFullError("Session is full")

    # FOR UPDATE is a no-op on SQLite, so capacity is re-checked by the INSERT itself
    try:
        result = await session.execute(_conditional_join(sess, user_id))
    except IntegrityError:
        await session.rollback()
        raise AlreadyJoinedError("Already joined")
    if result.rowcount == 0:
        await session.rollback()
        logger.info(f"User {user_id} rejected from session {session_id}: session is full")
        raise SessionFullError("Session is full")

    sess.updated_at = func.now()
    await session.commit()
    await session.refresh(sess)

    logger.info(
        f"User {user_id} joined session {session_id} ({len(participant_ids) + 1}/{sess.max_players})"
    )
    return await _resolved_session_dict(session, sess)


async def leave_session(session: AsyncSession, session_id: int, user_id: int) -> Dict:
    """
    Remove a user from a session's participants.

    The host may leave only while someone else is still in the session.

    Returns:
        Updated session dict with host and participants resolved

    Raises:
        SessionNotFoundError, NotParticipantError, HostSoleParticipantError
    """
    sess = await _lock_session(session, session_id)
    participant_ids = await _participant_ids(session, sess.id)

    if user_id not in participant_ids:
        logger.info(f"User {user_id} rejected leaving session {session_id}: not a participant")
        raise NotParticipantError("Not a participant")
    if user_id == sess.host_id and len(participant_ids) == 1:
        logger.info(f"Host {user_id} rejected leaving session {session_id}: sole participant")
        raise HostSoleParticipantError(
            "Host cannot leave as the only participant; cancel the session instead"
        )

    await session.execute(
        delete(SessionParticipant).where(
            SessionParticipant.session_id == sess.id,
            SessionParticipant.user_id == user_id,
        )
    )
    sess.updated_at = func.now()
    await session.commit()
    await session.refresh(sess)

    logger.info(f"User {user_id} left session {session_id}")
    return await _resolved_session_dict(session, sess)


async def cancel_session(session: AsyncSession, session_id: int, user_id: int) -> None:
    """
    Delete a session. Only the host may cancel.

    Raises:
        SessionNotFoundError, NotSessionHostError
    """
    sess = await _lock_session(session, session_id)
    if sess.host_id != user_id:
        logger.info(f"User {user_id} denied cancelling session {session_id}: not the host")
        raise NotSessionHostError("Only the host can cancel this session")

    await session.execute(
        delete(SessionParticipant).where(SessionParticipant.session_id == session_id)
    )
    await session.execute(delete(Session).where(Session.id == session_id))
    await session.commit()

    logger.info(f"Session {session_id} cancelled by host {user_id}")


# --- Helpers ---


async def _lock_session(session: AsyncSession, session_id: int) -> Session:
    """Load a session row, locking it until the transaction ends."""
    result = await session.execute(
        select(Session).where(Session.id == session_id).with_for_update()
    )
    sess = result.scalar_one_or_none()
    if not sess:
        raise SessionNotFoundError("Session not found")
    return sess


def _conditional_join(sess: Session, user_id: int):
    """INSERT ... SELECT that adds the participant only while a slot is free."""
    occupied = (
        select(func.count())
        .select_from(SessionParticipant)
        .where(SessionParticipant.session_id == sess.id)
        .correlate(None)
        .scalar_subquery()
    )
    return insert(SessionParticipant.__table__).from_select(
        ["session_id", "user_id"],
        select(literal(sess.id), literal(user_id)).where(occupied < sess.max_players),
    )


async def _participant_ids(session: AsyncSession, session_id: int) -> List[int]:
    """Participant user ids in join order."""
    result = await session.execute(
        select(SessionParticipant.user_id)
        .where(SessionParticipant.session_id == session_id)
        .order_by(SessionParticipant.id.asc())
    )
    return list(result.scalars().all())


async def _participant_ids_for(session: AsyncSession, session_ids: List[int]) -> Dict[int, List[int]]:
    """Participant user ids for several sessions in one query."""
    participants: Dict[int, List[int]] = {sid: [] for sid in session_ids}
    if not session_ids:
        return participants
    result = await session.execute(
        select(SessionParticipant.session_id, SessionParticipant.user_id)
        .where(SessionParticipant.session_id.in_(session_ids))
        .order_by(SessionParticipant.id.asc())
    )
    for sid, uid in result.all():
        participants[sid].append(uid)
    return participants


async def _session_dicts(
    session: AsyncSession, sessions: List[Session], now: Optional[datetime] = None
) -> List[Dict]:
    participants = await _participant_ids_for(session, [s.id for s in sessions])
    return [_session_to_dict(s, participants[s.id], now) for s in sessions]


async def _resolved_session_dict(
    session: AsyncSession, sess: Session, now: Optional[datetime] = None
) -> Dict:
    """Session dict with host and participants expanded to public user fields."""
    participant_ids = await _participant_ids(session, sess.id)
    data = _session_to_dict(sess, participant_ids, now)
    users = await user_service.get_public_users(session, set(participant_ids) | {sess.host_id})
    data["host"] = users.get(sess.host_id)
    data["participants"] = user_service.users_in_order(users, participant_ids)
    return data


def _session_to_dict(sess: Session, participant_ids: List[int], now: Optional[datetime] = None) -> Dict:
    """Convert Session model to dict with bare participant ids and computed flags."""
    data = {
        "id": sess.id,
        "sport": sess.sport,
        "venue": sess.venue,
        "court_number": sess.court_number,
        "start_date": sess.start_date,
        "start_time": sess.start_time,
        "end_date": sess.end_date,
        "end_time": sess.end_time,
        "skill_level_start": sess.skill_level_start,
        "skill_level_end": sess.skill_level_end,
        "skill_level_label": format_skill_level_range(sess.skill_level_start, sess.skill_level_end),
        "max_players": sess.max_players,
        "fee": sess.fee,
        "notes": sess.notes,
        "count_host_in": sess.count_host_in,
        "host_id": sess.host_id,
        "participants": list(participant_ids),
        "current_players": len(participant_ids),
        "is_full": len(participant_ids) >= sess.max_players,
        "created_at": sess.created_at.isoformat() if sess.created_at else None,
        "updated_at": sess.updated_at.isoformat() if sess.updated_at else None,
    }
    return visibility_service.annotate(data, now)
