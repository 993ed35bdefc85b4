import logging
from typing import Optional

from sqlalchemy.orm import Session

from shared.core.config import settings
from shared.core.database import Base, SessionLocal, engine
from shared.helpers.password_generator import generate_temporary_password
from shared.models.users import Users
from shared.utils.enums import UserRole

logger = logging.getLogger(__name__)


def ensure_saas_admin(db: Session, email: str, password: Optional[str] = None) -> Users:
    """Create the platform admin account unless one with this email exists."""
    existing = db.query(Users).filter(Users.email == email.lower()).first()
    if existing:
        logger.info("SaaS admin already exists: %s", existing.email)
        return existing

    admin = Users(
        email=email.lower(),
        first_name="Platform",
        last_name="Admin",
        role=UserRole.SAAS_ADMIN,
        tenant_id=None,
        is_active=True,
    )
    admin.set_password(password or generate_temporary_password())
    db.add(admin)
    db.commit()
    db.refresh(admin)

    logger.info("SaaS admin created: %s", admin.email)
    return admin


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        if not settings.SAAS_ADMIN_PASSWORD:
            logger.warning("SAAS_ADMIN_PASSWORD not set, a random password will be stored")
        ensure_saas_admin(db, settings.SAAS_ADMIN_EMAIL, settings.SAAS_ADMIN_PASSWORD)
    except Exception:
        db.rollback()
        logger.exception("Error creating SaaS admin")
        raise
    finally:
        db.close()
