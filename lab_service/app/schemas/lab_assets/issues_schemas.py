# app/schemas/lab_assets/issues_schemas.py
from pydantic import BaseModel, Field
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from shared.core.schemas import UserRef
from shared.utils.enums import Skill
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel
from ..common_schemas import ChecklistItem
from ...enum.lab_assets_enum import IssueSeverity, IssueStatus, IssueType, IssueViewType
from .assets_schemas import AssetRef


class IssueCreate(EmptyStringModel):
    asset_id: UUID
    issue_type: IssueType
    description: str
    required_skill: Skill
    assigned_technician: UUID
    severity: Optional[IssueSeverity] = None
    checklist: Optional[List[ChecklistItem]] = None


class IssueStatusUpdate(EmptyStringModel):
    status: Optional[str] = None
    checklist: Optional[List[ChecklistItem]] = None
    technician_remarks: Optional[str] = None
    rejection_reason: Optional[str] = None


class IssuesRequest(EmptyStringModel):
    status: Optional[IssueStatus] = None
    severity: Optional[IssueSeverity] = None
    lab_id: Optional[str] = None
    assigned_technician: Optional[UUID] = None
    reported_by: Optional[UUID] = None
    view_type: Optional[IssueViewType] = None


class AttachmentCreate(EmptyStringModel):
    filename: str
    original_name: Optional[str] = None
    mimetype: Optional[str] = None
    # base64 payload, optionally as a data URL
    data: str = Field(..., min_length=1)


class AttachmentOut(BaseModel):
    id: UUID
    filename: str
    original_name: Optional[str] = None
    mimetype: Optional[str] = None
    size: Optional[int] = None
    uploaded_by: Optional[UUID] = None
    uploaded_at: datetime

    model_config = {"from_attributes": True}


class AttachmentDownload(AttachmentOut):
    data: str


class IssueOut(BaseModel):
    id: UUID
    asset_id: UUID
    asset: Optional[AssetRef] = None
    lab_id: str
    reported_by: Optional[UserRef] = None
    assigned_technician: Optional[UserRef] = None
    issue_type: str
    description: str
    required_skill: str
    severity: str
    status: str
    technician_remarks: Optional[str] = None
    rejection_reason: Optional[str] = None
    checklist: List[ChecklistItem] = []
    attachments: List[AttachmentOut] = []
    reported_at: datetime
    accepted_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TechnicianStats(BaseModel):
    pending: int
    in_progress: int
    resolved: int
    rejected: int
    unassigned_pending: int
