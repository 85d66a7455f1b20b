# app/crud/lab_assets/issues_crud.py
import base64
import binascii
import logging
from datetime import datetime, timezone
from typing import Dict, Iterable, List
from uuid import UUID
from sqlalchemy import func, or_
from sqlalchemy.orm import Session, selectinload

from shared.core.exceptions import LabServiceError, NotFoundError, ValidationError
from shared.core.schemas import UserRef, UserToken
from shared.models.users import Users
from shared.utils.enums import UserRole
from ...enum.lab_assets_enum import IssueSeverity, IssueStatus, IssueViewType
from ...models.lab_assets.assets import Asset
from ...models.lab_assets.issues import Issue, IssueAttachment
from ...rules.issue_workflow import apply_issue_close, apply_issue_update, validate_issue_assignment
from ...schemas.lab_assets.assets_schemas import AssetRef
from ...schemas.lab_assets.issues_schemas import (
    AttachmentCreate,
    AttachmentDownload,
    AttachmentOut,
    IssueCreate,
    IssueOut,
    IssuesRequest,
    IssueStatusUpdate,
)

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ----------------------------------------------------------------------
# SERIALIZATION
# ----------------------------------------------------------------------

def _user_map(auth_db: Session, user_ids: Iterable) -> Dict[UUID, UserRef]:
    ids = {uid for uid in user_ids if uid is not None}
    if not ids:
        return {}
    users = auth_db.query(Users).filter(Users.id.in_(ids)).all()
    return {u.id: UserRef.model_validate(u) for u in users}


def serialize_issues(auth_db: Session, issues: List[Issue]) -> List[IssueOut]:
    users = _user_map(
        auth_db,
        [i.reported_by for i in issues] + [i.assigned_technician for i in issues],
    )

    results = []
    for issue in issues:
        data = {
            c.name: getattr(issue, c.name) for c in Issue.__table__.columns
        }
        data.update(
            asset=AssetRef.model_validate(issue.asset) if issue.asset else None,
            reported_by=users.get(issue.reported_by),
            assigned_technician=users.get(issue.assigned_technician),
            checklist=issue.checklist or [],
            attachments=[AttachmentOut.model_validate(a)
                         for a in issue.attachments],
        )
        results.append(IssueOut.model_validate(data))
    return results


def serialize_issue(auth_db: Session, issue: Issue) -> IssueOut:
    return serialize_issues(auth_db, [issue])[0]


# ----------------------------------------------------------------------
# FILTERS
# ----------------------------------------------------------------------

def build_issue_filters(auth_db: Session, params: IssuesRequest, current_user: UserToken):
    filters = []

    if params.status:
        filters.append(Issue.status == params.status)

    if params.severity:
        filters.append(Issue.severity == params.severity)

    if params.lab_id:
        filters.append(Issue.lab_id == params.lab_id)

    if params.assigned_technician:
        filters.append(Issue.assigned_technician ==
                       params.assigned_technician)

    if params.reported_by:
        filters.append(Issue.reported_by == params.reported_by)

    user_id = UUID(current_user.user_id)

    # Lab assistants see their own reports unless they ask for everything
    if current_user.role == UserRole.LAB_ASSISTANT.value:
        if params.view_type != IssueViewType.all.value:
            filters.append(Issue.reported_by == user_id)

    # Technicians see what is assigned to them or what they are skilled for
    if current_user.role == UserRole.LAB_TECHNICIAN.value:
        technician = auth_db.query(Users).filter(Users.id == user_id).first()
        skills = list(technician.skills or []) if technician else []

        if skills:
            filters.append(or_(
                Issue.assigned_technician == user_id,
                Issue.required_skill.in_(skills),
            ))
        else:
            filters.append(Issue.assigned_technician == user_id)

    return filters


def _issue_query(db: Session):
    return db.query(Issue).options(
        selectinload(Issue.asset),
        selectinload(Issue.attachments),
    )


# ----------------------------------------------------------------------
# QUERIES
# ----------------------------------------------------------------------

def get_issues(db: Session, auth_db: Session, params: IssuesRequest, current_user: UserToken) -> List[IssueOut]:
    issues = (
        _issue_query(db)
        .filter(*build_issue_filters(auth_db, params, current_user))
        .order_by(Issue.reported_at.desc())
        .all()
    )
    return serialize_issues(auth_db, issues)


def get_issues_by_lab(
        db: Session,
        auth_db: Session,
        lab_id: str,
        status: IssueStatus = None,
        severity: IssueSeverity = None) -> List[IssueOut]:
    filters = [Issue.lab_id == lab_id]
    if status:
        filters.append(Issue.status == status)
    if severity:
        filters.append(Issue.severity == severity)

    issues = (
        _issue_query(db)
        .filter(*filters)
        .order_by(Issue.reported_at.desc())
        .all()
    )
    return serialize_issues(auth_db, issues)


def get_issue(db: Session, issue_id: UUID) -> Issue:
    issue = _issue_query(db).filter(Issue.id == issue_id).first()
    if not issue:
        raise NotFoundError("Issue not found")
    return issue


def get_technician_stats(db: Session, current_user: UserToken) -> dict:
    scope = []
    if current_user.role == UserRole.LAB_TECHNICIAN.value:
        scope.append(Issue.assigned_technician == UUID(current_user.user_id))

    def count(*filters):
        return db.query(func.count(Issue.id)).filter(*filters).scalar() or 0

    return {
        "pending": count(*scope, Issue.status == IssueStatus.pending.value),
        "in_progress": count(*scope, Issue.status == IssueStatus.in_progress.value),
        "resolved": count(*scope, Issue.status == IssueStatus.resolved.value),
        "rejected": count(*scope, Issue.status == IssueStatus.rejected.value),
        "unassigned_pending": count(
            Issue.assigned_technician.is_(None),
            Issue.status == IssueStatus.pending.value,
        ),
    }


# ----------------------------------------------------------------------
# WRITES
# ----------------------------------------------------------------------

def create_issue(db: Session, auth_db: Session, payload: IssueCreate, current_user: UserToken) -> IssueOut:
    asset = db.query(Asset).filter(Asset.id == payload.asset_id).first()
    technician = auth_db.query(Users).filter(
        Users.id == payload.assigned_technician).first()

    validate_issue_assignment(asset, technician, payload.required_skill)

    issue = Issue(
        asset_id=asset.id,
        lab_id=asset.lab_location,
        reported_by=UUID(current_user.user_id),
        assigned_technician=technician.id,
        issue_type=payload.issue_type,
        description=payload.description,
        required_skill=payload.required_skill,
        severity=payload.severity or IssueSeverity.medium.value,
        status=IssueStatus.pending.value,
        checklist=[item.model_dump() for item in payload.checklist or []],
        reported_at=_now(),
    )
    db.add(issue)
    db.commit()
    db.refresh(issue)

    logger.info("Issue %s reported on asset %s, assigned to %s",
                issue.id, asset.id, technician.id)
    return serialize_issue(auth_db, issue)


def update_issue_status(
        db: Session,
        auth_db: Session,
        issue_id: UUID,
        payload: IssueStatusUpdate,
        current_user: UserToken) -> IssueOut:
    issue = get_issue(db, issue_id)

    checklist = None
    if payload.checklist is not None:
        checklist = [item.model_dump() for item in payload.checklist]

    try:
        apply_issue_update(
            issue,
            _now(),
            status=payload.status,
            checklist=checklist,
            technician_remarks=payload.technician_remarks,
            rejection_reason=payload.rejection_reason,
            acting_user_id=current_user.user_id,
        )
    except LabServiceError:
        db.rollback()
        raise

    db.commit()
    db.refresh(issue)
    return serialize_issue(auth_db, issue)


def close_issue(db: Session, auth_db: Session, issue_id: UUID, current_user: UserToken) -> IssueOut:
    issue = get_issue(db, issue_id)
    apply_issue_close(issue, current_user.user_id, _now())
    db.commit()
    db.refresh(issue)

    logger.info("Issue %s closed by %s", issue.id, current_user.user_id)
    return serialize_issue(auth_db, issue)


def _decode_attachment(data: str) -> bytes:
    # accept data URLs as sent by browsers
    if data.startswith("data:") and "," in data:
        data = data.split(",", 1)[1]
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Attachment data must be base64 encoded")


def add_attachment(
        db: Session,
        auth_db: Session,
        issue_id: UUID,
        payload: AttachmentCreate,
        current_user: UserToken) -> IssueOut:
    issue = get_issue(db, issue_id)
    file_data = _decode_attachment(payload.data)

    issue.attachments.append(IssueAttachment(
        filename=payload.filename,
        original_name=payload.original_name or payload.filename,
        mimetype=payload.mimetype,
        size=len(file_data),
        file_data=file_data,
        uploaded_by=UUID(current_user.user_id),
        uploaded_at=_now(),
    ))
    db.commit()
    db.refresh(issue)
    return serialize_issue(auth_db, issue)


def _get_attachment(db: Session, issue_id: UUID, attachment_id: UUID) -> IssueAttachment:
    get_issue(db, issue_id)
    attachment = db.query(IssueAttachment).filter(
        IssueAttachment.id == attachment_id,
        IssueAttachment.issue_id == issue_id,
    ).first()
    if not attachment:
        raise NotFoundError("Attachment not found")
    return attachment


def get_attachment(db: Session, issue_id: UUID, attachment_id: UUID) -> AttachmentDownload:
    attachment = _get_attachment(db, issue_id, attachment_id)
    return AttachmentDownload.model_validate({
        **AttachmentOut.model_validate(attachment).model_dump(),
        "data": base64.b64encode(attachment.file_data).decode("utf-8"),
    })


def delete_attachment(db: Session, auth_db: Session, issue_id: UUID, attachment_id: UUID) -> IssueOut:
    attachment = _get_attachment(db, issue_id, attachment_id)
    db.delete(attachment)
    db.commit()

    issue = get_issue(db, issue_id)
    db.refresh(issue)
    return serialize_issue(auth_db, issue)
