from sqlalchemy import Column, String, Boolean, DateTime, Integer, Float, Text, JSON, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database.connection import Base


USER_ROLES = ("user", "agent", "admin")
SPECIALIZATIONS = ("residential", "commercial", "land", "luxury", "rental")


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True)
    name = Column(String(50), nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)
    hashed_password = Column(String, nullable=False)
    role = Column(String, nullable=False, default="user")  # 'user' | 'agent' | 'admin'
    is_agent = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    # Profile image for non-agent users (agents keep theirs on the agent profile)
    profile_image_public_id = Column(String, nullable=True)
    profile_image_url = Column(String, nullable=True)
    last_login = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    agent_profile = relationship(
        "AgentProfile",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )

    __mapper_args__ = {"eager_defaults": True}

    __table_args__ = (
        Index('idx_users_email_active', 'email', 'is_active'),
    )


class AgentProfile(Base):
    __tablename__ = "agent_profiles"

    id = Column(String, primary_key=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)
    license_number = Column(String, unique=True, nullable=True)  # NULLs never collide
    experience = Column(Integer, nullable=True)
    specializations = Column(JSON, nullable=False, default=list)
    bio = Column(String(500), nullable=True)
    phone = Column(String, nullable=True)
    street = Column(String, nullable=True)
    city = Column(String, nullable=True, index=True)
    state = Column(String, nullable=True)
    zip_code = Column(String, nullable=True)
    country = Column(String, nullable=True)
    profile_image_public_id = Column(String, nullable=True)
    profile_image_url = Column(String, nullable=True)
    rating_average = Column(Float, default=0.0, nullable=False, index=True)
    rating_count = Column(Integer, default=0, nullable=False)
    total_transactions = Column(Integer, default=0, nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="agent_profile")
    verification_documents = relationship(
        "VerificationDocument",
        back_populates="agent_profile",
        cascade="all, delete-orphan",
        order_by="VerificationDocument.uploaded_at",
    )

    __mapper_args__ = {"eager_defaults": True}


class AgentRating(Base):
    """Audit row for each submitted rating; the running average lives on AgentProfile"""
    __tablename__ = "agent_ratings"

    id = Column(String, primary_key=True)
    agent_profile_id = Column(String, ForeignKey("agent_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    rater_id = Column(String, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    rating = Column(Float, nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
