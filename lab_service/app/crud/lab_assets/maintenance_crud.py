# app/crud/lab_assets/maintenance_crud.py
import logging
from datetime import date, datetime, timedelta, timezone
from typing import List
from uuid import UUID
from sqlalchemy import and_, exists, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shared.core.exceptions import LabServiceError, NotFoundError
from ...enum.lab_assets_enum import (
    OPEN_MAINTENANCE_STATUSES,
    AssetStatus,
    MaintenancePriority,
    MaintenanceStatus,
    MaintenanceType,
)
from ...models.lab_assets.assets import Asset
from ...models.lab_assets.maintenance_logs import MaintenanceLog
from ...rules.maintenance_workflow import (
    apply_completion,
    apply_status,
    mark_asset_under_maintenance,
    normalize_checklist,
    release_asset_after_completion,
    snapshot_asset,
)
from ...schemas.lab_assets.maintenance_schemas import (
    MaintenanceComplete,
    MaintenanceLogCreate,
    MaintenanceLogOut,
    MaintenanceRequest,
)

logger = logging.getLogger(__name__)

CALIBRATION_ALERT_DAYS = 7


class AssetSyncError(LabServiceError):
    """The maintenance log was committed but its asset could not be updated."""
    http_status = 500


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ----------------------------------------------------------------------
# FILTERS
# ----------------------------------------------------------------------

def calibration_due_filters(today: date, days: int = CALIBRATION_ALERT_DAYS):
    return [
        MaintenanceLog.maintenance_type == MaintenanceType.calibration.value,
        MaintenanceLog.status == MaintenanceStatus.completed.value,
        MaintenanceLog.next_calibration_due.isnot(None),
        MaintenanceLog.next_calibration_due >= today,
        MaintenanceLog.next_calibration_due <= today + timedelta(days=days),
    ]


def overdue_filters(today: date):
    return [
        MaintenanceLog.status.in_(OPEN_MAINTENANCE_STATUSES),
        MaintenanceLog.expected_completion_date.isnot(None),
        MaintenanceLog.expected_completion_date < today,
    ]


def stranded_asset_filters():
    open_log = exists().where(and_(
        MaintenanceLog.asset_id == Asset.id,
        MaintenanceLog.status.in_(OPEN_MAINTENANCE_STATUSES),
    ))
    return [
        Asset.status == AssetStatus.under_maintenance.value,
        ~open_log,
    ]


def build_maintenance_filters(params: MaintenanceRequest):
    filters = []
    if params.status:
        filters.append(MaintenanceLog.status == params.status)
    if params.asset_id:
        filters.append(MaintenanceLog.asset_id == params.asset_id)
    return filters


# ----------------------------------------------------------------------
# QUERIES
# ----------------------------------------------------------------------

def get_maintenance_logs(db: Session, params: MaintenanceRequest) -> List[MaintenanceLog]:
    return (
        db.query(MaintenanceLog)
        .filter(*build_maintenance_filters(params))
        .order_by(MaintenanceLog.reported_date.desc())
        .all()
    )


def get_maintenance_by_asset(db: Session, asset_id: UUID) -> List[MaintenanceLog]:
    return (
        db.query(MaintenanceLog)
        .filter(MaintenanceLog.asset_id == asset_id)
        .order_by(MaintenanceLog.reported_date.desc())
        .all()
    )


def get_maintenance_log(db: Session, log_id: UUID) -> MaintenanceLog:
    log = db.query(MaintenanceLog).filter(MaintenanceLog.id == log_id).first()
    if not log:
        raise NotFoundError("Maintenance record not found")
    return log


def get_calibration_due(db: Session, today: date = None) -> List[MaintenanceLog]:
    today = today or _now().date()
    return (
        db.query(MaintenanceLog)
        .filter(*calibration_due_filters(today))
        .order_by(MaintenanceLog.next_calibration_due.asc())
        .all()
    )


def get_overdue(db: Session, today: date = None) -> List[MaintenanceLog]:
    today = today or _now().date()
    return (
        db.query(MaintenanceLog)
        .filter(*overdue_filters(today))
        .order_by(MaintenanceLog.reported_date.asc())
        .all()
    )


def get_stranded_assets(db: Session) -> List[Asset]:
    return (
        db.query(Asset)
        .filter(*stranded_asset_filters())
        .order_by(Asset.updated_at.asc())
        .all()
    )


def get_maintenance_stats(db: Session) -> dict:
    def count(*filters):
        return db.query(func.count(MaintenanceLog.id)).filter(*filters).scalar() or 0

    total_cost = db.query(
        func.coalesce(func.sum(MaintenanceLog.cost), 0)).scalar()
    under_maintenance = db.query(func.count(Asset.id)).filter(
        Asset.status == AssetStatus.under_maintenance.value).scalar()

    return {
        "total_logs": count(),
        "pending": count(MaintenanceLog.status == MaintenanceStatus.pending.value),
        "in_progress": count(MaintenanceLog.status == MaintenanceStatus.in_progress.value),
        "completed": count(MaintenanceLog.status == MaintenanceStatus.completed.value),
        "assets_under_maintenance": under_maintenance or 0,
        "total_cost": float(total_cost or 0),
    }


# ----------------------------------------------------------------------
# WRITES
# ----------------------------------------------------------------------

def _sync_asset(db: Session, asset: Asset, log: MaintenanceLog, apply):
    """Second write of a log/asset pair; the log is already committed."""
    try:
        apply()
        db.commit()
    except (LabServiceError, SQLAlchemyError) as exc:
        db.rollback()
        logger.error(
            "Maintenance log %s committed but asset %s was not updated: %s",
            log.id, asset.id, exc)
        raise AssetSyncError(
            f"Maintenance record saved but asset '{asset.asset_name}' could not be updated")


def create_maintenance_log(db: Session, payload: MaintenanceLogCreate) -> MaintenanceLog:
    checklist = normalize_checklist(payload.checklist)

    asset = db.query(Asset).filter(Asset.id == payload.asset_id).first()
    if not asset:
        raise NotFoundError("Asset not found")

    log = MaintenanceLog(
        maintenance_type=payload.maintenance_type,
        checklist=checklist,
        priority_level=payload.priority_level or MaintenancePriority.medium.value,
        sent_to=payload.sent_to,
        expected_completion_date=payload.expected_completion_date,
        remarks=payload.remarks,
        reported_date=_now(),
        status=MaintenanceStatus.pending.value,
        cost=0,
    )
    snapshot_asset(log, asset)

    db.add(log)
    db.commit()
    db.refresh(log)
    logger.info("Maintenance log %s (%s) created for asset %s",
                log.id, log.maintenance_type, asset.id)

    today = _now().date()
    _sync_asset(db, asset, log,
                lambda: mark_asset_under_maintenance(asset, today))
    logger.info("Asset %s moved to under_maintenance", asset.id)

    db.refresh(log)
    return log


def complete_maintenance(db: Session, log_id: UUID, payload: MaintenanceComplete) -> MaintenanceLog:
    log = get_maintenance_log(db, log_id)
    now = _now()

    apply_completion(
        log,
        now,
        work_performed=payload.work_performed,
        completed_date=payload.completed_date,
        cost=payload.cost,
        performed_by=payload.performed_by,
        remarks=payload.remarks,
        calibration_result=payload.calibration_result,
        next_calibration_due=payload.next_calibration_due,
    )
    db.commit()
    db.refresh(log)
    logger.info("Maintenance log %s completed", log.id)

    asset = db.query(Asset).filter(Asset.id == log.asset_id).first()
    if asset is None:
        logger.warning("Asset %s for maintenance log %s no longer exists",
                       log.asset_id, log.id)
        return log

    _sync_asset(db, asset, log,
                lambda: release_asset_after_completion(asset, log, now.date()))
    logger.info("Asset %s released after maintenance %s", asset.id, log.id)

    db.refresh(log)
    return log


def update_maintenance_status(db: Session, log_id: UUID, status: str) -> MaintenanceLog:
    log = get_maintenance_log(db, log_id)
    apply_status(log, status)
    db.commit()
    db.refresh(log)
    return log


def delete_maintenance_log(db: Session, log_id: UUID) -> MaintenanceLogOut:
    log = get_maintenance_log(db, log_id)
    deleted = MaintenanceLogOut.model_validate(log)
    db.delete(log)
    db.commit()
    logger.info("Maintenance log %s deleted", log_id)
    return deleted
