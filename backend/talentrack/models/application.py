"""
Application models: a candidate's progress through one job's pipeline
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from talentrack.core.database import Base


APPLICATION_STATUSES = ("active", "rejected", "withdrawn", "hired")
EVENT_TYPES = ("applied", "stage_changed", "rejected", "withdrawn", "hired")


class Application(Base):
    """Candidate applying to a job"""
    
    __tablename__ = "applications"
    
    id = Column(Integer, primary_key=True, index=True)
    
    # Foreign keys
    candidate_id = Column(Integer, ForeignKey("candidates.id", ondelete="CASCADE"), nullable=False, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    stage_id = Column(Integer, ForeignKey("pipeline_stages.id", ondelete="SET NULL"), index=True)
    
    # Status
    status = Column(String(20), default="active", nullable=False, index=True)
    source = Column(String(100))
    cover_letter = Column(Text)
    rejection_reason = Column(String(255))
    
    # Timeline
    applied_at = Column(DateTime(timezone=True), server_default=func.now())
    stage_entered_at = Column(DateTime(timezone=True))
    hired_at = Column(DateTime(timezone=True))
    closed_at = Column(DateTime(timezone=True))
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"))
    
    # Relationships
    candidate = relationship("Candidate", back_populates="applications")
    job = relationship("Job", back_populates="applications")
    stage = relationship("PipelineStage", back_populates="applications")
    events = relationship(
        "ApplicationEvent",
        back_populates="application",
        order_by="ApplicationEvent.id",
        cascade="all, delete-orphan",
    )
    notes = relationship(
        "Note",
        back_populates="application",
        order_by="Note.id",
        cascade="all, delete-orphan",
    )
    interviews = relationship("Interview", back_populates="application", cascade="all, delete-orphan")
    offers = relationship("Offer", back_populates="application", cascade="all, delete-orphan")
    
    __table_args__ = (
        UniqueConstraint("candidate_id", "job_id", name="uq_application_candidate_job"),
    )
    
    @property
    def is_active(self) -> bool:
        return self.status == "active"
    
    @property
    def stage_name(self):
        return self.stage.name if self.stage is not None else None


class ApplicationEvent(Base):
    """Append-only history entry for an application"""
    
    __tablename__ = "application_events"
    
    id = Column(Integer, primary_key=True, index=True)
    application_id = Column(Integer, ForeignKey("applications.id", ondelete="CASCADE"), nullable=False, index=True)
    
    event_type = Column(String(50), nullable=False)
    # Stage names are copied so history survives stage deletion
    from_stage = Column(String(100))
    to_stage = Column(String(100))
    details = Column(JSON)
    
    actor_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    
    # Relationships
    application = relationship("Application", back_populates="events")


class Note(Base):
    """Recruiter note on an application"""
    
    __tablename__ = "application_notes"
    
    id = Column(Integer, primary_key=True, index=True)
    application_id = Column(Integer, ForeignKey("applications.id", ondelete="CASCADE"), nullable=False, index=True)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"))
    body = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    
    # Relationships
    application = relationship("Application", back_populates="notes")
    author = relationship("User")
