"""
Candidate models
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from talentrack.core.database import Base


class Candidate(Base):
    """Candidate model"""
    
    __tablename__ = "candidates"
    
    id = Column(Integer, primary_key=True, index=True)
    
    # Personal information
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    phone = Column(String(50))
    location = Column(String(255))
    headline = Column(String(255))  # Current title / one-line summary
    
    # Links
    linkedin_url = Column(String(500))
    portfolio_url = Column(String(500))
    resume_url = Column(String(500))
    
    # Sourcing
    source = Column(String(100), index=True)  # referral, job_board, agency, career_site, sourced
    tags = Column(JSON)  # List of free-form tags
    notes = Column(Text)
    
    # Metadata
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    
    # Relationships
    created_by_user = relationship("User", back_populates="created_candidates")
    applications = relationship("Application", back_populates="candidate", cascade="all, delete-orphan")
    
    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
