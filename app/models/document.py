from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database.connection import Base


DOCUMENT_TYPES = ("license", "id_proof", "certificate", "other")


class VerificationDocument(Base):
    __tablename__ = "verification_documents"

    id = Column(String, primary_key=True)
    agent_profile_id = Column(String, ForeignKey("agent_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    document_type = Column(String, nullable=False, default="other")
    file_name = Column(String, nullable=True)
    cloudinary_public_id = Column(String, unique=True, nullable=False)
    cloudinary_url = Column(String, nullable=False)
    uploaded_at = Column(DateTime(timezone=True), server_default=func.now())

    agent_profile = relationship("AgentProfile", back_populates="verification_documents")

    __mapper_args__ = {"eager_defaults": True}
