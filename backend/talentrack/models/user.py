"""
User and role models
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Boolean, Table
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from talentrack.core.database import Base


user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class Role(Base):
    """Role for role-based access control"""
    
    __tablename__ = "roles"
    
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), unique=True, nullable=False, index=True)  # admin, recruiter, hiring_manager, interviewer
    description = Column(String(255))
    permissions = Column(Text)  # JSON-encoded list of permission strings
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    
    users = relationship("User", secondary=user_roles, back_populates="roles")


class User(Base):
    """Recruiting team member"""
    
    __tablename__ = "users"
    
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    full_name = Column(String(255))
    
    is_active = Column(Boolean, default=True, nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)
    last_login = Column(DateTime(timezone=True))
    
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    
    # Relationships
    roles = relationship("Role", secondary=user_roles, back_populates="users")
    created_jobs = relationship("Job", back_populates="created_by_user", foreign_keys="Job.created_by")
    managed_jobs = relationship("Job", back_populates="hiring_manager", foreign_keys="Job.hiring_manager_id")
    created_candidates = relationship("Candidate", back_populates="created_by_user")
    interviews = relationship("Interview", back_populates="interviewer", foreign_keys="Interview.interviewer_id")
    audit_logs = relationship("AuditLog", back_populates="user")
    
    @property
    def role_names(self):
        return [role.name for role in self.roles]
    
    def has_role(self, *names: str) -> bool:
        """True if the user holds any of the given roles"""
        return any(role.name in names for role in self.roles)
