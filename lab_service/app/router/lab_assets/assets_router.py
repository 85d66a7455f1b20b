# app/routers/lab_assets/assets_router.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from uuid import UUID

from shared.core.auth import validate_current_token
from shared.core.database import get_lab_db as get_db
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import list_response, success_response
from ...crud.lab_assets import assets_crud as crud
from ...schemas.lab_assets.assets_schemas import (
    AssetCreate,
    AssetDashboardStats,
    AssetOut,
    AssetQuantityUpdate,
    AssetsRequest,
    AssetStatusUpdate,
    AssetUpdate,
    MaintenanceCycleUpdate,
)

router = APIRouter(
    prefix="/api/assets",
    tags=["assets"],
    dependencies=[Depends(validate_current_token)]
)


def _out(assets):
    return [AssetOut.model_validate(a) for a in assets]


@router.post("/", status_code=201)
def create_asset(
        asset: AssetCreate,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(validate_current_token)):
    result = crud.create_asset(db, asset, current_user.name)
    return success_response(data=AssetOut.model_validate(result), message="Asset added successfully")


@router.get("/")
def get_assets(params: AssetsRequest = Depends(), db: Session = Depends(get_db)):
    return list_response(_out(crud.get_assets(db, params)))


@router.get("/stats/dashboard")
def get_dashboard_stats(db: Session = Depends(get_db)):
    stats = AssetDashboardStats(**crud.get_dashboard_stats(db))
    return success_response(data=stats)


# ---------------- Alerts ----------------
@router.get("/alerts/low-stock")
def low_stock_alerts(db: Session = Depends(get_db)):
    return list_response(_out(crud.get_low_stock_assets(db)))


@router.get("/alerts/warranty-expiring")
def warranty_expiring_alerts(db: Session = Depends(get_db)):
    return list_response(_out(crud.get_warranty_expiring_assets(db)))


@router.get("/alerts/maintenance-due-soon")
def maintenance_due_soon_alerts(db: Session = Depends(get_db)):
    assets = _out(crud.get_maintenance_due_soon(db))
    return list_response(assets, message=f"{len(assets)} asset(s) due for maintenance within 7 days")


@router.get("/alerts/maintenance-overdue")
def maintenance_overdue_alerts(db: Session = Depends(get_db)):
    assets = _out(crud.get_maintenance_overdue(db))
    return list_response(assets, message=f"{len(assets)} asset(s) overdue for maintenance")


@router.get("/location/{lab_location}")
def get_assets_by_location(lab_location: str, db: Session = Depends(get_db)):
    return list_response(_out(crud.get_assets_by_location(db, lab_location)))


@router.get("/{asset_id}")
def get_asset(asset_id: UUID, db: Session = Depends(get_db)):
    return success_response(data=AssetOut.model_validate(crud.get_asset_by_id(db, asset_id)))


@router.put("/{asset_id}")
def update_asset(
        asset_id: UUID,
        asset_update: AssetUpdate,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(validate_current_token)):
    result = crud.update_asset(db, asset_id, asset_update, current_user.name)
    return success_response(data=AssetOut.model_validate(result), message="Asset updated successfully")


@router.patch("/{asset_id}/status")
def update_asset_status(asset_id: UUID, payload: AssetStatusUpdate, db: Session = Depends(get_db)):
    result = crud.update_asset_status(db, asset_id, payload.status)
    return success_response(data=AssetOut.model_validate(result), message="Asset status updated successfully")


@router.patch("/{asset_id}/quantity")
def update_asset_quantity(asset_id: UUID, payload: AssetQuantityUpdate, db: Session = Depends(get_db)):
    result = crud.update_asset_quantity(db, asset_id, payload.quantity_change)
    return success_response(data=AssetOut.model_validate(result), message="Asset quantity updated successfully")


@router.patch("/{asset_id}/maintenance-cycle")
def set_maintenance_cycle(asset_id: UUID, payload: MaintenanceCycleUpdate, db: Session = Depends(get_db)):
    result = crud.update_maintenance_cycle(db, asset_id, payload.maintenance_cycle_days)
    return success_response(data=AssetOut.model_validate(result), message="Maintenance cycle updated successfully")


# ---------------- Delete Asset ----------------
@router.delete("/{asset_id}")
def delete_asset(asset_id: UUID, db: Session = Depends(get_db)):
    crud.delete_asset(db, asset_id)
    return success_response(message="Asset deleted successfully")
