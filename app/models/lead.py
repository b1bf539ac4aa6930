"""Lead model for prospective patient inquiries."""
import enum
import uuid
from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime, Boolean, Enum, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from app.core.database import Base


class LeadSource(str, enum.Enum):
    """Lead source enum."""
    WEBSITE_FORM = "WEBSITE_FORM"
    CALLBACK_REQUEST = "CALLBACK_REQUEST"
    PHONE_INQUIRY = "PHONE_INQUIRY"
    WALK_IN = "WALK_IN"
    REFERRAL = "REFERRAL"
    SOCIAL_MEDIA = "SOCIAL_MEDIA"


class LeadStatus(str, enum.Enum):
    """Lead status enum."""
    NEW = "NEW"
    CONTACTED = "CONTACTED"
    INTERESTED = "INTERESTED"
    CONVERTED = "CONVERTED"
    LOST = "LOST"


class Lead(Base):
    """Lead model."""
    __tablename__ = "leads"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)
    email = Column(String(255), nullable=True)
    message = Column(Text, nullable=True)
    service_interest = Column(String(500), nullable=True)
    source = Column(Enum(LeadSource, name="lead_source_enum"), nullable=False, default=LeadSource.WEBSITE_FORM)
    status = Column(Enum(LeadStatus, name="lead_status_enum"), nullable=False, default=LeadStatus.NEW, index=True)
    assigned_to = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    follow_up_date = Column(DateTime, nullable=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="leads")


class ContactMessage(Base):
    """Message submitted through the public contact form."""
    __tablename__ = "contact_messages"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    subject = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
