"""
Job requisition and hiring pipeline models
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON, Boolean, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from talentrack.core.database import Base


JOB_STATUSES = ("draft", "open", "on_hold", "filled", "closed")


class Job(Base):
    """Job requisition with its own ordered pipeline"""
    
    __tablename__ = "jobs"
    
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False, index=True)
    department = Column(String(255), index=True)
    location = Column(String(255))
    employment_type = Column(String(50))  # full-time, part-time, contract, internship
    remote_allowed = Column(Boolean, default=False)
    
    description = Column(Text)
    requirements = Column(JSON)  # List of requirement strings
    
    # Compensation band
    salary_min = Column(Integer)
    salary_max = Column(Integer)
    currency = Column(String(3), default="USD")
    
    openings = Column(Integer, default=1, nullable=False)
    
    # Lifecycle
    status = Column(String(20), default="draft", nullable=False, index=True)
    opened_at = Column(DateTime(timezone=True))
    closed_at = Column(DateTime(timezone=True))
    
    # Ownership
    hiring_manager_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"))
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    
    # Relationships
    stages = relationship(
        "PipelineStage",
        back_populates="job",
        order_by="PipelineStage.position",
        cascade="all, delete-orphan",
    )
    applications = relationship("Application", back_populates="job", cascade="all, delete-orphan")
    hiring_manager = relationship("User", back_populates="managed_jobs", foreign_keys=[hiring_manager_id])
    created_by_user = relationship("User", back_populates="created_jobs", foreign_keys=[created_by])


class PipelineStage(Base):
    """Ordered step of a job's hiring pipeline"""
    
    __tablename__ = "pipeline_stages"
    
    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(100), nullable=False)
    position = Column(Integer, nullable=False)  # 0-based, contiguous within a job
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    
    # Relationships
    job = relationship("Job", back_populates="stages")
    applications = relationship("Application", back_populates="stage")
    
    __table_args__ = (
        UniqueConstraint("job_id", "name", name="uq_stage_job_name"),
        Index("idx_stage_job_position", "job_id", "position"),
    )
