"""Maintenance work-order lifecycle.

    pending -> in_progress -> completed | rejected
    pending -> completed | rejected

Creating a log puts its asset under maintenance; completing it releases the
asset and records the maintenance date.  Both are two separate commits (log,
then asset) made by ``maintenance_crud``.
"""
import logging
from datetime import date, datetime
from typing import Any, Iterable, Optional

from shared.core.exceptions import ValidationError
from ..enum.lab_assets_enum import (
    REPAIR_MAINTENANCE_TYPES,
    AssetCondition,
    AssetStatus,
    CalibrationResult,
    MaintenanceStatus,
    MaintenanceType,
)
from .asset_rules import recompute_derived_fields

logger = logging.getLogger(__name__)

MAINTENANCE_STATUSES = {s.value for s in MaintenanceStatus}
CALIBRATION_RESULTS = {r.value for r in CalibrationResult}


def normalize_checklist(items: Optional[Iterable[Any]]) -> list[dict]:
    """Accept plain strings or {text, completed} items."""
    checklist = []
    for item in items or []:
        if isinstance(item, str):
            checklist.append({"text": item, "completed": False})
        else:
            if hasattr(item, "model_dump"):
                item = item.model_dump()
            checklist.append({
                "text": item.get("text"),
                "completed": bool(item.get("completed", False)),
            })

    if not checklist:
        raise ValidationError(
            "Please provide assetId, maintenanceType, and checklist with at least one item")
    return checklist


def snapshot_asset(log, asset):
    log.asset_id = asset.id
    log.asset_name = asset.asset_name or "Unknown Asset"
    log.serial_number = asset.serial_number
    log.lab_location = asset.lab_location or "Unknown"
    return log


def mark_asset_under_maintenance(asset, today: date):
    asset.status = AssetStatus.under_maintenance.value
    return recompute_derived_fields(asset, today)


def apply_completion(
    log,
    now: datetime,
    work_performed: Optional[str],
    completed_date: Optional[datetime] = None,
    cost: Optional[float] = None,
    performed_by: Optional[str] = None,
    remarks: Optional[str] = None,
    calibration_result: Optional[str] = None,
    next_calibration_due: Optional[date] = None,
):
    if not work_performed:
        raise ValidationError("Please provide work performed details")

    is_calibration = log.maintenance_type == MaintenanceType.calibration.value
    if is_calibration:
        if not calibration_result:
            raise ValidationError(
                "Calibration result is required for calibration maintenance")
        calibration_result = calibration_result.lower()
        if calibration_result not in CALIBRATION_RESULTS:
            raise ValidationError(
                "Calibration result must be passed, failed, or partial")

    log.completed_date = completed_date or now
    log.work_performed = work_performed
    log.cost = cost or 0
    log.performed_by = performed_by
    log.remarks = remarks
    log.status = MaintenanceStatus.completed.value

    if is_calibration:
        log.calibration_result = calibration_result
        log.next_calibration_due = next_calibration_due

    return log


def release_asset_after_completion(asset, log, today: date):
    """Return the asset to service.

    Breakdown completions also reset the condition to good; preventive and
    calibration work leave it untouched.
    """
    asset.status = AssetStatus.available.value
    if log.maintenance_type in REPAIR_MAINTENANCE_TYPES:
        asset.condition = AssetCondition.good.value

    completed = log.completed_date
    asset.last_maintenance_date = completed.date() if isinstance(
        completed, datetime) else completed

    return recompute_derived_fields(asset, today)


def apply_status(log, status: Optional[str]):
    # No completion checks and no asset side effect on this path
    if not status or status not in MAINTENANCE_STATUSES:
        raise ValidationError(
            "Invalid status. Must be pending, in_progress, completed, or rejected")

    if status == MaintenanceStatus.completed.value and log.work_performed is None:
        logger.warning(
            "Maintenance log %s marked completed without completion details",
            getattr(log, "id", None))

    log.status = status
    return log
