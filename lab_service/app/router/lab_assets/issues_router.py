# app/routers/lab_assets/issues_router.py
from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from uuid import UUID

from shared.core.auth import validate_current_token
from shared.core.database import get_auth_db, get_lab_db as get_db
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import list_response, success_response
from ...crud.lab_assets import issues_crud as crud
from ...enum.lab_assets_enum import IssueSeverity, IssueStatus
from ...schemas.lab_assets.issues_schemas import (
    AttachmentCreate,
    IssueCreate,
    IssuesRequest,
    IssueStatusUpdate,
    TechnicianStats,
)

router = APIRouter(
    prefix="/api/issues",
    tags=["issues"],
    dependencies=[Depends(validate_current_token)]
)


@router.post("/", status_code=201)
def create_issue(
        issue: IssueCreate,
        db: Session = Depends(get_db),
        auth_db: Session = Depends(get_auth_db),
        current_user: UserToken = Depends(validate_current_token)):
    result = crud.create_issue(db, auth_db, issue, current_user)
    return success_response(data=result, message="Issue created successfully")


@router.get("/")
def get_issues(
        params: IssuesRequest = Depends(),
        db: Session = Depends(get_db),
        auth_db: Session = Depends(get_auth_db),
        current_user: UserToken = Depends(validate_current_token)):
    return list_response(crud.get_issues(db, auth_db, params, current_user))


@router.get("/stats/technician")
def get_technician_stats(
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(validate_current_token)):
    stats = TechnicianStats(**crud.get_technician_stats(db, current_user))
    return success_response(data=stats)


@router.get("/lab/{lab_id}")
def get_issues_by_lab(
        lab_id: str,
        status: Optional[IssueStatus] = None,
        severity: Optional[IssueSeverity] = None,
        db: Session = Depends(get_db),
        auth_db: Session = Depends(get_auth_db)):
    issues = crud.get_issues_by_lab(
        db, auth_db, lab_id,
        status.value if status else None,
        severity.value if severity else None)
    return list_response(issues)


@router.get("/{issue_id}")
def get_issue(
        issue_id: UUID,
        db: Session = Depends(get_db),
        auth_db: Session = Depends(get_auth_db)):
    return success_response(data=crud.serialize_issue(auth_db, crud.get_issue(db, issue_id)))


@router.patch("/{issue_id}/status")
def update_issue_status(
        issue_id: UUID,
        payload: IssueStatusUpdate,
        db: Session = Depends(get_db),
        auth_db: Session = Depends(get_auth_db),
        current_user: UserToken = Depends(validate_current_token)):
    result = crud.update_issue_status(db, auth_db, issue_id, payload, current_user)

    parts = []
    if payload.status:
        parts.append(f"status updated to {payload.status}")
    if payload.checklist is not None:
        parts.append("checklist updated")
    return success_response(data=result, message="Issue " + " and ".join(parts))


@router.patch("/{issue_id}/close")
def close_issue(
        issue_id: UUID,
        db: Session = Depends(get_db),
        auth_db: Session = Depends(get_auth_db),
        current_user: UserToken = Depends(validate_current_token)):
    result = crud.close_issue(db, auth_db, issue_id, current_user)
    return success_response(data=result, message="Issue closed successfully")


# ---------------- Attachments ----------------
@router.post("/{issue_id}/attachments")
def upload_attachment(
        issue_id: UUID,
        payload: AttachmentCreate,
        db: Session = Depends(get_db),
        auth_db: Session = Depends(get_auth_db),
        current_user: UserToken = Depends(validate_current_token)):
    result = crud.add_attachment(db, auth_db, issue_id, payload, current_user)
    return success_response(data=result, message="File uploaded successfully")


@router.get("/{issue_id}/attachments/{attachment_id}")
def download_attachment(issue_id: UUID, attachment_id: UUID, db: Session = Depends(get_db)):
    return success_response(data=crud.get_attachment(db, issue_id, attachment_id))


@router.delete("/{issue_id}/attachments/{attachment_id}")
def delete_attachment(
        issue_id: UUID,
        attachment_id: UUID,
        db: Session = Depends(get_db),
        auth_db: Session = Depends(get_auth_db)):
    result = crud.delete_attachment(db, auth_db, issue_id, attachment_id)
    return success_response(data=result, message="Attachment deleted successfully")
