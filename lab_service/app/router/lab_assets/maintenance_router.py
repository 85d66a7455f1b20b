# app/routers/lab_assets/maintenance_router.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from uuid import UUID

from shared.core.auth import validate_current_token
from shared.core.database import get_lab_db as get_db
from shared.helpers.json_response_helper import list_response, success_response
from ...crud.lab_assets import maintenance_crud as crud
from ...schemas.lab_assets.assets_schemas import AssetOut
from ...schemas.lab_assets.maintenance_schemas import (
    MaintenanceComplete,
    MaintenanceLogCreate,
    MaintenanceLogOut,
    MaintenanceRequest,
    MaintenanceStats,
    MaintenanceStatusUpdate,
)

router = APIRouter(
    prefix="/api/maintenance",
    tags=["maintenance"],
    dependencies=[Depends(validate_current_token)]
)


def _out(logs):
    return [MaintenanceLogOut.model_validate(log) for log in logs]


@router.post("/", status_code=201)
def create_maintenance(payload: MaintenanceLogCreate, db: Session = Depends(get_db)):
    log = crud.create_maintenance_log(db, payload)
    return success_response(data=MaintenanceLogOut.model_validate(log),
                            message="Maintenance request created successfully")


@router.get("/")
def get_maintenance_logs(params: MaintenanceRequest = Depends(), db: Session = Depends(get_db)):
    return list_response(_out(crud.get_maintenance_logs(db, params)))


@router.get("/stats")
def get_maintenance_stats(db: Session = Depends(get_db)):
    return success_response(data=MaintenanceStats(**crud.get_maintenance_stats(db)))


# ---------------- Alerts ----------------
@router.get("/alerts/calibration-due")
def calibration_due_alerts(db: Session = Depends(get_db)):
    logs = _out(crud.get_calibration_due(db))
    return list_response(logs, message=f"{len(logs)} calibration(s) due within 7 days")


@router.get("/alerts/overdue")
def overdue_alerts(db: Session = Depends(get_db)):
    logs = _out(crud.get_overdue(db))
    return list_response(logs, message=f"{len(logs)} maintenance request(s) overdue")


@router.get("/alerts/stranded-assets")
def stranded_assets(db: Session = Depends(get_db)):
    assets = [AssetOut.model_validate(a) for a in crud.get_stranded_assets(db)]
    return list_response(assets, message=f"{len(assets)} asset(s) under maintenance without an open maintenance record")


@router.get("/asset/{asset_id}")
def get_maintenance_by_asset(asset_id: UUID, db: Session = Depends(get_db)):
    logs = _out(crud.get_maintenance_by_asset(db, asset_id))
    if not logs:
        return list_response(logs, message="No maintenance records found for this asset")
    return list_response(logs)


@router.get("/{log_id}")
def get_maintenance_log(log_id: UUID, db: Session = Depends(get_db)):
    return success_response(data=MaintenanceLogOut.model_validate(crud.get_maintenance_log(db, log_id)))


@router.patch("/{log_id}/complete")
def complete_maintenance(log_id: UUID, payload: MaintenanceComplete, db: Session = Depends(get_db)):
    log = crud.complete_maintenance(db, log_id, payload)
    return success_response(data=MaintenanceLogOut.model_validate(log),
                            message="Maintenance marked as completed successfully")


@router.patch("/{log_id}/status")
def update_maintenance_status(log_id: UUID, payload: MaintenanceStatusUpdate, db: Session = Depends(get_db)):
    log = crud.update_maintenance_status(db, log_id, payload.status)
    return success_response(data=MaintenanceLogOut.model_validate(log),
                            message="Maintenance status updated successfully")


@router.delete("/{log_id}")
def delete_maintenance_log(log_id: UUID, db: Session = Depends(get_db)):
    deleted = crud.delete_maintenance_log(db, log_id)
    return success_response(data=deleted, message="Maintenance record deleted successfully")
