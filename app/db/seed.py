"""Database seeding helpers."""

import logging

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import get_password_hash
from app.services.user_service import create_user, get_user_by_username

logger = logging.getLogger(__name__)


def ensure_default_admin(db: Session) -> bool:
    """Ensure the configured admin account exists and is active, in development only.

    Returns:
        bool: True when the account existed before this call.
    """
    if settings.app_env != "dev":
        return False
    if not settings.admin_user or not settings.admin_pass:
        logger.info("[BOOTSTRAP] ADMIN_USER/ADMIN_PASS not set; skipping admin bootstrap")
        return False

    existing_admin = get_user_by_username(db, settings.admin_user)
    if existing_admin is not None:
        if not existing_admin.is_active:
            existing_admin.is_active = True
            db.commit()
            logger.info("[BOOTSTRAP] Admin exists but was inactive; account re-activated.")
        return True

    create_user(
        db=db,
        username=settings.admin_user,
        hashed_password=get_password_hash(settings.admin_pass),
        role="ADMIN",
        full_name="Administrator",
    )
    logger.warning("[BOOTSTRAP] Default admin account created: %s. Change its password.", settings.admin_user)
    return False
