"""
Seed a development database with demo users, a job and candidates
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy.orm import Session
from talentrack.core.cache import invalidate_pattern
from talentrack.core.database import SessionLocal
from talentrack.core.logging_config import configure_logging
from talentrack.models.user import User, Role
from talentrack.models.job import Job
from talentrack.models.candidate import Candidate
from talentrack.auth.service import get_password_hash
from talentrack.jobs.schemas import JobCreate
from talentrack.jobs.service import create_job, change_job_status
from talentrack.applications.service import application_service
import structlog

logger = structlog.get_logger()

DEMO_USERS = [
    ("recruiter@talentrack.local", "recruiter123", "Demo Recruiter", "recruiter"),
    ("manager@talentrack.local", "manager123", "Demo Hiring Manager", "hiring_manager"),
    ("interviewer@talentrack.local", "interviewer123", "Demo Interviewer", "interviewer"),
]

DEMO_CANDIDATES = [
    ("Ada", "Byron", "ada.byron@example.com", "referral"),
    ("Grace", "Hopper", "grace.hopper@example.com", "career_site"),
    ("Alan", "Turing", "alan.turing@example.com", "job_board"),
]


def create_demo_users(db: Session):
    """Create demo users"""
    for email, password, full_name, role_name in DEMO_USERS:
        if db.query(User).filter(User.email == email).first():
            continue
        role = db.query(Role).filter(Role.name == role_name).first()
        user = User(
            email=email,
            hashed_password=get_password_hash(password),
            full_name=full_name,
            is_active=True,
            is_verified=True,
        )
        user.roles = [role] if role else []
        db.add(user)
        logger.info("demo_user_created", email=email)
    db.commit()


def create_demo_job(db: Session, recruiter: User) -> Job:
    """Create and open a demo job"""
    existing = db.query(Job).filter(Job.title == "Senior Backend Engineer").first()
    if existing:
        logger.info("demo_job_exists", job_id=existing.id)
        return existing
    
    job = create_job(
        db,
        JobCreate(
            title="Senior Backend Engineer",
            department="Engineering",
            location="Remote (EU)",
            employment_type="full-time",
            remote_allowed=True,
            description="Own the services behind our hiring workflow.",
            requirements=["Python", "PostgreSQL", "FastAPI", "5+ years backend experience"],
            salary_min=90000,
            salary_max=120000,
            currency="EUR",
            openings=2,
        ),
        recruiter,
    )
    return change_job_status(db, job, "open", recruiter)


def create_demo_applications(db: Session, job: Job, recruiter: User):
    """Create candidates and apply them to the demo job"""
    for first_name, last_name, email, source in DEMO_CANDIDATES:
        candidate = db.query(Candidate).filter(Candidate.email == email).first()
        if candidate is None:
            candidate = Candidate(
                first_name=first_name,
                last_name=last_name,
                email=email,
                source=source,
                created_by=recruiter.id,
            )
            db.add(candidate)
            db.commit()
        if any(application.job_id == job.id for application in candidate.applications):
            continue
        application_service.create(db, candidate_id=candidate.id, job_id=job.id, actor=recruiter)


def main():
    """Main function"""
    configure_logging()
    db: Session = SessionLocal()
    try:
        create_demo_users(db)
        recruiter = db.query(User).filter(User.email == DEMO_USERS[0][0]).one()
        job = create_demo_job(db, recruiter)
        create_demo_applications(db, job, recruiter)
        invalidate_pattern("pipeline:*")
        logger.info("demo_data_created", job_id=job.id)
    except Exception as e:
        logger.error("demo_data_creation_failed", error=str(e))
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
