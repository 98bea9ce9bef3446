"""
User service layer for account database operations.
"""

from typing import Optional, Dict, List, Iterable
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func
from backend.database.models import User
from backend.utils.constants import PUBLIC_USER_FIELDS
import logging

logger = logging.getLogger(__name__)


class EmailAlreadyRegisteredError(ValueError):
    """Raised when an email address belongs to another account."""


class UserNotFoundError(ValueError):
    """Raised when a user id does not match any account."""


async def create_user(
    session: AsyncSession, email: str, name: str, password_hash: str
) -> int:
    """
    Create a new password-based user account.

    Args:
        session: Database session
        email: Normalized email address
        name: Display name
        password_hash: Hashed password

    Returns:
        User ID of the created user

    Raises:
        EmailAlreadyRegisteredError: If a user with this email already exists
    """
    if await get_user_by_email(session, email):
        raise EmailAlreadyRegisteredError(f"Email {email} is already registered")

    new_user = User(email=email, name=name.strip(), password_hash=password_hash)
    session.add(new_user)
    await session.flush()
    user_id = new_user.id
    await session.commit()

    logger.info(f"Created user {user_id}")
    return user_id


async def create_google_user(
    session: AsyncSession, email: str, google_id: str, name: str
) -> int:
    """
    Create a new user account via Google sign-in.

    Args:
        session: Database session
        email: Normalized email from Google
        google_id: Google's unique user identifier
        name: User's name from the Google profile

    Returns:
        User ID of the created user

    Raises:
        EmailAlreadyRegisteredError: If a user with this email already exists
    """
    if await get_user_by_email(session, email):
        raise EmailAlreadyRegisteredError(f"Email {email} is already registered")

    new_user = User(email=email, name=name.strip(), password_hash=None, google_id=google_id)
    session.add(new_user)
    await session.flush()
    user_id = new_user.id
    await session.commit()

    logger.info(f"Created Google user {user_id}")
    return user_id


async def link_google_id(session: AsyncSession, user_id: int, google_id: str) -> bool:
    """
    Link a Google ID to an existing account (auto-link on email match).

    Returns:
        True if a row was updated
    """
    result = await session.execute(
        update(User)
        .where(User.id == user_id)
        .values(google_id=google_id, updated_at=func.now())
    )
    await session.commit()
    return result.rowcount > 0


async def get_user_by_email(session: AsyncSession, email: str) -> Optional[Dict]:
    """
    Get user by email address.

    Args:
        session: Database session
        email: Email address (will be normalized to lowercase)

    Returns:
        User dictionary or None if not found
    """
    email = email.strip().lower() if email else None
    if not email:
        return None

    result = await session.execute(select(User).where(func.lower(User.email) == email).limit(1))
    user = result.scalar_one_or_none()
    return _user_to_dict(user) if user else None


async def get_user_by_id(session: AsyncSession, user_id: int) -> Optional[Dict]:
    """
    Get user by ID.

    Args:
        session: Database session
        user_id: User ID

    Returns:
        User dictionary or None if not found
    """
    result = await session.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    return _user_to_dict(user) if user else None


async def get_user_by_google_id(session: AsyncSession, google_id: str) -> Optional[Dict]:
    """Get user by Google ID."""
    result = await session.execute(select(User).where(User.google_id == google_id).limit(1))
    user = result.scalar_one_or_none()
    return _user_to_dict(user) if user else None


async def get_public_users(session: AsyncSession, user_ids: Iterable[int]) -> Dict[int, Dict]:
    """
    Load the display fields (id, name, avatar, email) for a set of users.

    Returns:
        Mapping of user id to public user dict; unknown ids are omitted
    """
    ids = set(user_ids)
    if not ids:
        return {}
    result = await session.execute(select(User).where(User.id.in_(ids)))
    return {user.id: public_user(_user_to_dict(user)) for user in result.scalars().all()}


async def update_user_profile(
    session: AsyncSession,
    user_id: int,
    name: Optional[str] = None,
    email: Optional[str] = None,
) -> Dict:
    """
    Update a user's name and/or email.

    Args:
        session: Database session
        user_id: User ID
        name: Optional new display name
        email: Optional new normalized email

    Returns:
        Updated user dictionary

    Raises:
        UserNotFoundError: If the user does not exist
        EmailAlreadyRegisteredError: If the email belongs to another account
    """
    result = await session.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise UserNotFoundError("User not found")

    if email and email != user.email:
        existing = await get_user_by_email(session, email)
        if existing and existing["id"] != user_id:
            raise EmailAlreadyRegisteredError(f"Email {email} is already registered")
        user.email = email

    if name and name.strip():
        user.name = name.strip()

    await session.commit()
    await session.refresh(user)
    return _user_to_dict(user)


def public_user(user: Dict) -> Dict:
    """Project a user dict down to the fields that may be shown to other users."""
    return {field: user.get(field) for field in PUBLIC_USER_FIELDS}


def _user_to_dict(user: User) -> Dict:
    """
    Convert a User ORM instance to a dictionary.

    Args:
        user: User ORM instance

    Returns:
        User dictionary
    """
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "password_hash": user.password_hash,
        "google_id": user.google_id,
        "avatar": user.avatar,
        "profile_picture": user.profile_picture,
        "auth_provider": "google" if user.google_id and not user.password_hash else "password",
        "created_at": user.created_at.isoformat() if user.created_at else None,
        "updated_at": user.updated_at.isoformat() if user.updated_at else None,
    }


def users_in_order(users_by_id: Dict[int, Dict], user_ids: List[int]) -> List[Dict]:
    """Order resolved users to match a list of ids, skipping ids that did not resolve."""
    return [users_by_id[uid] for uid in user_ids if uid in users_by_id]
