"""
Initialize database with default roles and admin user
"""
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy.orm import Session
from talentrack.core.config import settings
from talentrack.core.database import SessionLocal, init_db
from talentrack.core.logging_config import configure_logging
from talentrack.models.user import User, Role
from talentrack.auth.service import ensure_default_roles, get_password_hash
import structlog

logger = structlog.get_logger()


def create_admin_user(db: Session):
    """Create the bootstrap admin user from ADMIN_EMAIL / ADMIN_PASSWORD"""
    admin_email = settings.ADMIN_EMAIL.lower()
    
    existing = db.query(User).filter(User.email == admin_email).first()
    if existing:
        logger.info("admin_user_exists", email=admin_email)
        return
    
    admin_role = db.query(Role).filter(Role.name == "admin").first()
    if not admin_role:
        logger.error("admin_role_not_found")
        return
    
    admin_user = User(
        email=admin_email,
        hashed_password=get_password_hash(settings.ADMIN_PASSWORD),
        full_name="Administrator",
        is_active=True,
        is_verified=True,
    )
    admin_user.roles = [admin_role]
    
    db.add(admin_user)
    db.commit()
    
    logger.info("admin_user_created", email=admin_email)


def main():
    """Main initialization function"""
    configure_logging()
    logger.info("initializing_database")
    
    init_db()
    
    db: Session = SessionLocal()
    try:
        ensure_default_roles(db)
        create_admin_user(db)
        logger.info("database_initialization_complete")
    except Exception as e:
        logger.error("database_initialization_failed", error=str(e))
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
