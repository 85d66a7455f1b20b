"""Issue lifecycle.

    pending -> accepted -> in_progress -> resolved -> closed
    pending -> rejected

Each ``*_at`` timestamp is written the first time the issue enters the
matching status and never again.  Closing is the only gated transition: the
issue must be resolved and, when the caller is known, the caller must be the
reporter.
"""
import logging
import uuid
from datetime import datetime
from typing import List, Optional

from shared.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from shared.utils.enums import UserRole
from ..enum.lab_assets_enum import IssueStatus

logger = logging.getLogger(__name__)

ISSUE_STATUSES = {s.value for s in IssueStatus}

STATUS_TIMESTAMPS = {
    IssueStatus.accepted.value: "accepted_at",
    IssueStatus.in_progress.value: "started_at",
    IssueStatus.resolved.value: "resolved_at",
    IssueStatus.closed.value: "closed_at",
}


def _same_user(left, right) -> bool:
    return left is not None and right is not None and str(left) == str(right)


def validate_issue_assignment(asset, technician, required_skill: str):
    if asset is None:
        raise NotFoundError("Asset not found")

    if technician is None:
        raise NotFoundError("Technician not found")

    if technician.role != UserRole.LAB_TECHNICIAN.value:
        raise ValidationError("Selected user is not a technician")

    if required_skill not in (technician.skills or []):
        raise ValidationError(
            "Selected technician does not have the required skill")


def _stamp_once(issue, status: str, now: datetime):
    field = STATUS_TIMESTAMPS.get(status)
    if field and getattr(issue, field) is None:
        setattr(issue, field, now)


def apply_issue_close(issue, acting_user_id, now: datetime):
    if acting_user_id is not None and not _same_user(issue.reported_by, acting_user_id):
        raise AuthorizationError("You can only close your own issues")

    if issue.status != IssueStatus.resolved.value:
        raise ValidationError("Only resolved issues can be closed")

    issue.status = IssueStatus.closed.value
    _stamp_once(issue, IssueStatus.closed.value, now)
    return issue


def apply_issue_update(
    issue,
    now: datetime,
    status: Optional[str] = None,
    checklist: Optional[List[dict]] = None,
    technician_remarks: Optional[str] = None,
    rejection_reason: Optional[str] = None,
    acting_user_id=None,
):
    if status is None and checklist is None:
        raise ValidationError(
            "Please provide new status or checklist update")

    if status is not None and status not in ISSUE_STATUSES:
        raise ValidationError("Invalid status")

    if status == IssueStatus.closed.value:
        apply_issue_close(issue, acting_user_id, now)

    if checklist is not None:
        issue.checklist = [dict(item) for item in checklist]

    if status is None or status == IssueStatus.closed.value:
        return issue

    old_status = issue.status
    if status == IssueStatus.rejected.value and old_status != IssueStatus.pending.value:
        logger.warning("Issue %s rejected from status %s",
                       getattr(issue, "id", None), old_status)

    issue.status = status
    _stamp_once(issue, status, now)

    if status == IssueStatus.accepted.value and issue.assigned_technician is None \
            and acting_user_id is not None:
        issue.assigned_technician = _as_uuid(acting_user_id)

    if status == IssueStatus.resolved.value and technician_remarks:
        issue.technician_remarks = technician_remarks

    if status == IssueStatus.rejected.value and rejection_reason:
        issue.rejection_reason = rejection_reason

    logger.info("Issue %s moved %s -> %s",
                getattr(issue, "id", None), old_status, status)
    return issue


def _as_uuid(value):
    return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))
