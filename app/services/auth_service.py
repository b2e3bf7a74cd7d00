from datetime import datetime, timezone
from typing import Optional
import logging
import uuid
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from app.database.connection import AsyncSessionLocal
from app.models.user import User, AgentProfile
from app.services.serializers import serialize_user
from app.utils.admin_whitelist import is_admin_email_allowed
from app.utils.exceptions import DuplicateResourceError, ValidationError
from app.utils.security import verify_password, get_password_hash

logger = logging.getLogger(__name__)


async def _load_user(session, user_id: str) -> Optional[User]:
    stmt = (
        select(User)
        .options(selectinload(User.agent_profile))
        .where(User.id == user_id)
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def register_user(name: str, email: str, password: str) -> dict:
    """Register a new user. Whitelisted emails get the admin role."""
    async with AsyncSessionLocal() as session:
        stmt = select(User).where(User.email == email.lower())
        result = await session.execute(stmt)
        if result.scalar_one_or_none():
            raise DuplicateResourceError("User", "email")

        user_id = str(uuid.uuid4())
        new_user = User(
            id=user_id,
            name=name,
            email=email.lower(),
            hashed_password=get_password_hash(password),
            role="admin" if is_admin_email_allowed(email) else "user",
            is_agent=False,
            is_active=True,
            last_login=datetime.now(timezone.utc),
        )

        session.add(new_user)
        await session.commit()

        user = await _load_user(session, user_id)
        logger.info(f"Registered user {user_id} with role {user.role}")
        return serialize_user(user)


async def authenticate_user(email: str, password: str) -> Optional[dict]:
    """Authenticate by email and password; stamps last_login on success"""
    async with AsyncSessionLocal() as session:
        stmt = select(User).where(User.email == email.lower())
        result = await session.execute(stmt)
        user = result.scalar_one_or_none()

        if not user:
            return None

        if not user.is_active:
            return None

        if not verify_password(password, user.hashed_password):
            return None

        user.last_login = datetime.now(timezone.utc)
        await session.commit()

        user = await _load_user(session, user.id)
        return serialize_user(user)


async def get_user_by_id(user_id: str) -> Optional[dict]:
    """Get user (with agent profile) by ID"""
    async with AsyncSessionLocal() as session:
        user = await _load_user(session, user_id)
        if not user:
            return None
        return serialize_user(user)


async def update_user_profile(user_id: str, update_data: dict) -> Optional[dict]:
    """Update name and/or email of the current user"""
    async with AsyncSessionLocal() as session:
        user = await _load_user(session, user_id)
        if not user:
            return None

        if "email" in update_data and update_data["email"].lower() != user.email:
            email_stmt = select(User).where(
                User.email == update_data["email"].lower(),
                User.id != user_id
            )
            email_result = await session.execute(email_stmt)
            if email_result.scalar_one_or_none():
                raise DuplicateResourceError("User", "email")
            user.email = update_data["email"].lower()

        if "name" in update_data:
            user.name = update_data["name"].strip()

        await session.commit()

        user = await _load_user(session, user_id)
        return serialize_user(user)


async def register_agent(user_id: str, agent_data: dict) -> Optional[dict]:
    """Attach an agent profile to an existing user and grant the agent role"""
    async with AsyncSessionLocal() as session:
        user = await _load_user(session, user_id)
        if not user:
            return None

        if user.is_agent or user.agent_profile is not None:
            raise ValidationError("User is already registered as an agent")

        license_number = agent_data.get("license_number")
        if license_number:
            license_stmt = select(AgentProfile).where(AgentProfile.license_number == license_number)
            license_result = await session.execute(license_stmt)
            if license_result.scalar_one_or_none():
                raise DuplicateResourceError("Agent", "license_number")

        address = agent_data.get("address") or {}
        user.agent_profile = AgentProfile(
            id=str(uuid.uuid4()),
            license_number=license_number or None,
            experience=agent_data.get("experience"),
            specializations=agent_data.get("specializations") or [],
            bio=agent_data.get("bio"),
            phone=agent_data.get("phone"),
            street=address.get("street"),
            city=address.get("city"),
            state=address.get("state"),
            zip_code=address.get("zip_code"),
            country=address.get("country"),
        )
        user.is_agent = True
        if user.role != "admin":
            user.role = "agent"

        await session.commit()

        user = await _load_user(session, user_id)
        logger.info(f"User {user_id} registered as agent")
        return serialize_user(user)
