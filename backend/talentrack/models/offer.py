"""
Offer models
"""
from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from talentrack.core.database import Base


OFFER_STATUSES = ("draft", "extended", "accepted", "declined", "rescinded")
OPEN_OFFER_STATUSES = ("draft", "extended")


class Offer(Base):
    """Employment offer made on an application"""
    
    __tablename__ = "offers"
    
    id = Column(Integer, primary_key=True, index=True)
    application_id = Column(Integer, ForeignKey("applications.id", ondelete="CASCADE"), nullable=False, index=True)
    
    # Terms
    salary = Column(Integer, nullable=False)  # Annual base, whole currency units
    currency = Column(String(3), default="USD", nullable=False)
    bonus = Column(Integer)
    equity = Column(String(100))
    start_date = Column(Date)
    expires_on = Column(Date)
    
    # Lifecycle
    status = Column(String(20), default="draft", nullable=False, index=True)
    extended_at = Column(DateTime(timezone=True))
    responded_at = Column(DateTime(timezone=True))
    decline_reason = Column(String(255))
    
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    
    # Relationships
    application = relationship("Application", back_populates="offers")
