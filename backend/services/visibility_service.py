"""
Session visibility rules.

Decides whether a session belongs in default listings ("relevant") and
whether join/leave should still be offered ("expired"). A session is:

- upcoming: it starts after now
- recently started: it started within the last RECENT_START_GRACE_HOURS
- relevant: upcoming, recently started, or its start cannot be parsed
- expired: it started before now

A session that started a minute ago is therefore expired but still relevant.

Schedules are stored as YYYY-MM-DD / HH:MM strings in the application
timezone. ``now`` is truncated to the minute so comparisons agree with the
stored minute precision.
"""

from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple

from backend.utils.constants import RECENT_START_GRACE_HOURS
from backend.utils.datetime_utils import local_now, parse_session_datetime, to_local


def _reference_now(now: Optional[datetime]) -> datetime:
    current = to_local(now) if now is not None else local_now()
    return current.replace(second=0, microsecond=0)


def session_start(session: Dict) -> Optional[datetime]:
    """Start of a session dict as an aware datetime, or None if undatable."""
    return parse_session_datetime(session.get("start_date"), session.get("start_time"))


def is_upcoming(session: Dict, now: Optional[datetime] = None) -> bool:
    start = session_start(session)
    if start is None:
        return False
    return start > _reference_now(now)


def is_recently_started(session: Dict, now: Optional[datetime] = None) -> bool:
    start = session_start(session)
    if start is None:
        return False
    reference = _reference_now(now)
    return reference - timedelta(hours=RECENT_START_GRACE_HOURS) <= start <= reference


def is_relevant(session: Dict, now: Optional[datetime] = None) -> bool:
    """Fail-open: sessions without a usable start are always relevant."""
    if session_start(session) is None:
        return True
    return is_upcoming(session, now) or is_recently_started(session, now)


def is_expired(session: Dict, now: Optional[datetime] = None) -> bool:
    start = session_start(session)
    if start is None:
        return False
    return start < _reference_now(now)


def filter_relevant(sessions: List[Dict], now: Optional[datetime] = None) -> List[Dict]:
    reference = _reference_now(now)
    return [s for s in sessions if is_relevant(s, reference)]


def start_order_key(session: Dict) -> Tuple[str, str]:
    """Sort key on the raw schedule strings; missing parts sort first."""
    return (session.get("start_date") or "", session.get("start_time") or "")


def sort_by_start(sessions: List[Dict], descending: bool = False) -> List[Dict]:
    return sorted(sessions, key=start_order_key, reverse=descending)


def sort_by_proximity(sessions: List[Dict], now: Optional[datetime] = None) -> List[Dict]:
    """
    Order sessions by how close their start is to now, in either direction.

    Sessions without a usable start go last, keeping their relative order.
    """
    reference = _reference_now(now)

    def proximity(session: Dict) -> Tuple[int, float]:
        start = session_start(session)
        if start is None:
            return (1, 0.0)
        return (0, abs((start - reference).total_seconds()))

    return sorted(sessions, key=proximity)


def annotate(session: Dict, now: Optional[datetime] = None) -> Dict:
    """Add the computed is_upcoming / is_expired flags to a session dict."""
    reference = _reference_now(now)
    session["is_upcoming"] = is_upcoming(session, reference)
    session["is_expired"] = is_expired(session, reference)
    return session
