"""
Interview scheduling and feedback models
"""
from datetime import timedelta

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from talentrack.core.database import Base


INTERVIEW_KINDS = ("phone", "video", "onsite", "technical")
INTERVIEW_STATUSES = ("scheduled", "completed", "cancelled", "no_show")
RECOMMENDATIONS = ("strong_no", "no", "yes", "strong_yes")


class Interview(Base):
    """Interview slot for an application"""
    
    __tablename__ = "interviews"
    
    id = Column(Integer, primary_key=True, index=True)
    application_id = Column(Integer, ForeignKey("applications.id", ondelete="CASCADE"), nullable=False, index=True)
    interviewer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    
    kind = Column(String(30), default="video", nullable=False)
    scheduled_at = Column(DateTime, nullable=False, index=True)  # naive UTC
    duration_minutes = Column(Integer, default=60, nullable=False)
    location = Column(String(500))  # Room or meeting URL
    
    status = Column(String(20), default="scheduled", nullable=False, index=True)
    cancel_reason = Column(String(255))
    
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    
    # Relationships
    application = relationship("Application", back_populates="interviews")
    interviewer = relationship("User", back_populates="interviews", foreign_keys=[interviewer_id])
    feedback = relationship(
        "InterviewFeedback",
        back_populates="interview",
        order_by="InterviewFeedback.id",
        cascade="all, delete-orphan",
    )
    
    __table_args__ = (
        Index("idx_interviewer_schedule", "interviewer_id", "scheduled_at"),
    )
    
    @property
    def ends_at(self):
        return self.scheduled_at + timedelta(minutes=self.duration_minutes)


class InterviewFeedback(Base):
    """Scorecard submitted after an interview"""
    
    __tablename__ = "interview_feedback"
    
    id = Column(Integer, primary_key=True, index=True)
    interview_id = Column(Integer, ForeignKey("interviews.id", ondelete="CASCADE"), nullable=False, index=True)
    reviewer_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    
    rating = Column(Integer, nullable=False)  # 1-5
    recommendation = Column(String(20), nullable=False)
    strengths = Column(Text)
    concerns = Column(Text)
    
    submitted_at = Column(DateTime(timezone=True), server_default=func.now())
    
    # Relationships
    interview = relationship("Interview", back_populates="feedback")
    reviewer = relationship("User")
    
    __table_args__ = (
        UniqueConstraint("interview_id", "reviewer_id", name="uq_feedback_interview_reviewer"),
    )
