import logging
from sqlalchemy.orm import Session

from shared.models.users import Users
from shared.utils.enums import UserRole
from ..schemas import authschemas
from .authservices import get_user_by_id

logger = logging.getLogger(__name__)

APPROVABLE_ROLES = (UserRole.LAB_ASSISTANT.value, UserRole.LAB_TECHNICIAN.value)


def get_pending_users(db: Session):
    pending = (
        db.query(Users)
        .filter(
            Users.is_approved == False,
            Users.role.in_(APPROVABLE_ROLES),
        )
        .order_by(Users.created_at.desc())
        .all()
    )
    return [authschemas.UserOut.model_validate(u) for u in pending]


def approve_user(db: Session, user_id: str) -> authschemas.UserOut:
    user = get_user_by_id(db, user_id)
    user.is_approved = True
    db.commit()
    db.refresh(user)

    logger.info("User %s approved", user.id)
    return authschemas.UserOut.model_validate(user)


def approve_or_reject_user(db: Session, user_id: str, approve: bool):
    if approve:
        return approve_user(db, user_id)

    user = get_user_by_id(db, user_id)
    db.delete(user)
    db.commit()

    logger.info("User %s rejected and removed", user_id)
    return None
