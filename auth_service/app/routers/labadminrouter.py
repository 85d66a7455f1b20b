from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from uuid import UUID
from shared.core import auth
from shared.core.database import get_auth_db as get_db
from shared.helpers.json_response_helper import list_response, success_response
from shared.utils.enums import UserRole
from ..schemas import authschemas
from ..services import userservices

router = APIRouter(prefix="/api/lab-admin",
                   tags=["Lab Admin"], dependencies=[Depends(auth.allow_roles(UserRole.LAB_ADMIN))])


@router.get("/pending-users")
def pending_users(db: Session = Depends(get_db)):
    return list_response(userservices.get_pending_users(db))


@router.put("/approve/{user_id}")
def approve_user(user_id: UUID, db: Session = Depends(get_db)):
    result = userservices.approve_user(db, str(user_id))
    return success_response(data=result, message="User approved successfully")


@router.put("/approve-reject/{user_id}")
def approve_or_reject_user(
        user_id: UUID,
        req: authschemas.ApprovalRequest,
        db: Session = Depends(get_db)):
    result = userservices.approve_or_reject_user(db, str(user_id), req.approve)
    message = "User approved successfully" if req.approve else "User rejected and removed"
    return success_response(data=result, message=message)
