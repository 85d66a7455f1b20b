# app/schemas/lab_assets/maintenance_schemas.py
from pydantic import BaseModel, Field
from typing import List, Optional, Union
from uuid import UUID
from datetime import date, datetime

from shared.wrappers.empty_string_model_wrapper import EmptyStringModel
from ..common_schemas import ChecklistItem
from ...enum.lab_assets_enum import MaintenancePriority, MaintenanceStatus, MaintenanceType


class MaintenanceLogCreate(EmptyStringModel):
    asset_id: UUID
    maintenance_type: MaintenanceType
    checklist: Optional[List[Union[ChecklistItem, str]]] = None
    priority_level: Optional[MaintenancePriority] = None
    sent_to: Optional[str] = None
    expected_completion_date: Optional[date] = None
    remarks: Optional[str] = None


class MaintenanceComplete(EmptyStringModel):
    work_performed: Optional[str] = None
    completed_date: Optional[datetime] = None
    cost: Optional[float] = Field(None, ge=0)
    performed_by: Optional[str] = None
    remarks: Optional[str] = None
    calibration_result: Optional[str] = None
    next_calibration_due: Optional[date] = None


class MaintenanceStatusUpdate(EmptyStringModel):
    status: Optional[str] = None


class MaintenanceRequest(EmptyStringModel):
    status: Optional[MaintenanceStatus] = None
    asset_id: Optional[UUID] = None


class MaintenanceLogOut(BaseModel):
    id: UUID
    asset_id: UUID
    asset_name: str
    serial_number: Optional[str] = None
    lab_location: str
    maintenance_type: str
    checklist: List[ChecklistItem] = []
    priority_level: str
    reported_date: datetime
    sent_to: Optional[str] = None
    expected_completion_date: Optional[date] = None
    completed_date: Optional[datetime] = None
    work_performed: Optional[str] = None
    cost: Optional[float] = None
    performed_by: Optional[str] = None
    calibration_result: Optional[str] = None
    next_calibration_due: Optional[date] = None
    remarks: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class MaintenanceStats(BaseModel):
    total_logs: int
    pending: int
    in_progress: int
    completed: int
    assets_under_maintenance: int
    total_cost: float
