# app/crud/lab_assets/assets_crud.py
import logging
from datetime import date, datetime, timedelta, timezone
from typing import List
from uuid import UUID
from sqlalchemy import distinct, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shared.core.exceptions import NotFoundError, ValidationError
from shared.helpers.json_response_helper import error_response
from ...enum.lab_assets_enum import AssetCondition, AssetSortBy, AssetStatus, AssetType
from ...models.lab_assets.assets import Asset
from ...rules.asset_rules import (
    apply_maintenance_cycle,
    apply_quantity_change,
    recompute_derived_fields,
)
from ...schemas.lab_assets.assets_schemas import AssetCreate, AssetsRequest, AssetUpdate

logger = logging.getLogger(__name__)

MAINTENANCE_DUE_SOON_DAYS = 7


def _today() -> date:
    return datetime.now(timezone.utc).date()


# ----------------------------------------------------------------------
# FILTERS
# ----------------------------------------------------------------------

# stored flags are kept current by recompute_derived_fields on every write
def low_stock_filters():
    return [
        Asset.asset_type == AssetType.consumable.value,
        Asset.is_low_stock.is_(True),
    ]


def warranty_expiring_filters():
    return [Asset.is_warranty_expiring.is_(True)]


def maintenance_due_soon_filters(today: date, days: int = MAINTENANCE_DUE_SOON_DAYS):
    return [
        Asset.asset_type == AssetType.non_consumable.value,
        Asset.status != AssetStatus.under_maintenance.value,
        Asset.next_maintenance_due.isnot(None),
        Asset.next_maintenance_due >= today,
        Asset.next_maintenance_due <= today + timedelta(days=days),
    ]


def maintenance_overdue_filters(today: date):
    return [
        Asset.asset_type == AssetType.non_consumable.value,
        Asset.status != AssetStatus.under_maintenance.value,
        Asset.next_maintenance_due.isnot(None),
        Asset.next_maintenance_due < today,
    ]


def search_filter(term: str):
    pattern = f"%{term}%"
    return or_(
        Asset.asset_name.ilike(pattern),
        Asset.serial_number.ilike(pattern),
    )


def build_asset_filters(params: AssetsRequest):
    filters = []

    if params.search:
        filters.append(search_filter(params.search))

    if params.lab_location:
        filters.append(Asset.lab_location == params.lab_location)

    if params.category:
        filters.append(Asset.category == params.category)

    if params.status:
        filters.append(Asset.status == params.status)

    return filters


def asset_ordering(sort_by):
    if sort_by == AssetSortBy.warranty_expiring.value:
        return [Asset.warranty_expiry_date.asc()]
    if sort_by == AssetSortBy.low_stock.value:
        return [Asset.quantity.asc()]
    return [Asset.created_at.desc()]


# ----------------------------------------------------------------------
# QUERIES
# ----------------------------------------------------------------------

def get_assets(db: Session, params: AssetsRequest) -> List[Asset]:
    return (
        db.query(Asset)
        .filter(*build_asset_filters(params))
        .order_by(*asset_ordering(params.sort_by))
        .all()
    )


def get_asset_by_id(db: Session, asset_id: UUID) -> Asset:
    asset = db.query(Asset).filter(Asset.id == asset_id).first()
    if not asset:
        raise NotFoundError("Asset not found")
    return asset


def get_assets_by_location(db: Session, lab_location: str) -> List[Asset]:
    return (
        db.query(Asset)
        .filter(Asset.lab_location == lab_location)
        .order_by(Asset.asset_name.asc())
        .all()
    )


def get_low_stock_assets(db: Session) -> List[Asset]:
    return (
        db.query(Asset)
        .filter(*low_stock_filters())
        .order_by(Asset.quantity.asc())
        .all()
    )


def get_warranty_expiring_assets(db: Session) -> List[Asset]:
    return (
        db.query(Asset)
        .filter(*warranty_expiring_filters())
        .order_by(Asset.warranty_expiry_date.asc())
        .all()
    )


def get_maintenance_due_soon(db: Session, today: date = None) -> List[Asset]:
    return (
        db.query(Asset)
        .filter(*maintenance_due_soon_filters(today or _today()))
        .order_by(Asset.next_maintenance_due.asc())
        .all()
    )


def get_maintenance_overdue(db: Session, today: date = None) -> List[Asset]:
    return (
        db.query(Asset)
        .filter(*maintenance_overdue_filters(today or _today()))
        .order_by(Asset.next_maintenance_due.asc())
        .all()
    )


def get_dashboard_stats(db: Session) -> dict:
    def count(*filters):
        return db.query(func.count(Asset.id)).filter(*filters).scalar() or 0

    categories = [
        row[0] for row in db.query(distinct(Asset.category))
        .order_by(Asset.category).all()
    ]
    lab_locations = [
        row[0] for row in db.query(distinct(Asset.lab_location))
        .order_by(Asset.lab_location).all()
    ]

    return {
        "total_assets": count(),
        "available_assets": count(Asset.status == AssetStatus.available.value),
        "in_use_assets": count(Asset.status == AssetStatus.in_use.value),
        "under_maintenance_assets": count(
            Asset.status == AssetStatus.under_maintenance.value),
        "low_stock_assets": count(*low_stock_filters()),
        "warranty_expiring_assets": count(*warranty_expiring_filters()),
        "categories": categories,
        "lab_locations": lab_locations,
    }


# ----------------------------------------------------------------------
# WRITES
# ----------------------------------------------------------------------

def _ensure_unique_serial(db: Session, asset: Asset):
    if asset.asset_type == AssetType.consumable.value or not asset.serial_number:
        return

    filters = [
        Asset.asset_type == AssetType.non_consumable.value,
        Asset.serial_number == asset.serial_number,
    ]
    if asset.id is not None:
        filters.append(Asset.id != asset.id)

    if db.query(Asset.id).filter(*filters).first():
        raise ValidationError(
            f"Asset with serial number '{asset.serial_number}' already exists")


def _commit_asset(db: Session, asset: Asset) -> Asset:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.exception("Integrity error while saving asset %s", asset.id)
        return error_response(message="Duplicate asset found", http_status=400)
    db.refresh(asset)
    return asset


def create_asset(db: Session, payload: AssetCreate, user_name: str = None) -> Asset:
    data = payload.model_dump(exclude_none=True)
    asset = Asset(**data)

    # column defaults only apply on flush; the derived fields need them now
    if asset.quantity is None:
        asset.quantity = 1
    if asset.min_quantity is None:
        asset.min_quantity = 0
    asset.status = asset.status or AssetStatus.available.value
    asset.condition = asset.condition or AssetCondition.good.value
    asset.is_low_stock = False
    asset.is_warranty_expiring = False
    asset.last_updated_by = user_name

    if asset.asset_type == AssetType.consumable.value:
        asset.serial_number = None

    recompute_derived_fields(asset, _today())
    _ensure_unique_serial(db, asset)

    db.add(asset)
    asset = _commit_asset(db, asset)
    logger.info("Asset %s (%s) created in %s", asset.id,
                asset.asset_name, asset.lab_location)
    return asset


def update_asset(db: Session, asset_id: UUID, payload: AssetUpdate, user_name: str = None) -> Asset:
    asset = get_asset_by_id(db, asset_id)

    update_data = payload.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(asset, field, value)

    if user_name and "last_updated_by" not in update_data:
        asset.last_updated_by = user_name

    if asset.asset_type == AssetType.consumable.value:
        asset.serial_number = None

    try:
        recompute_derived_fields(asset, _today())
        _ensure_unique_serial(db, asset)
    except ValidationError:
        db.rollback()
        raise

    return _commit_asset(db, asset)


def update_asset_status(db: Session, asset_id: UUID, status: str) -> Asset:
    if not status:
        raise ValidationError("Please provide a status")

    asset = get_asset_by_id(db, asset_id)
    old_status = asset.status
    asset.status = status
    recompute_derived_fields(asset, _today())
    asset = _commit_asset(db, asset)
    logger.info("Asset %s status %s -> %s", asset.id, old_status, status)
    return asset


def update_asset_quantity(db: Session, asset_id: UUID, quantity_change) -> Asset:
    if quantity_change is None:
        raise ValidationError("Please provide quantity change")

    asset = get_asset_by_id(db, asset_id)
    try:
        apply_quantity_change(asset, quantity_change, _today())
    except ValidationError:
        db.rollback()
        raise
    return _commit_asset(db, asset)


def update_maintenance_cycle(db: Session, asset_id: UUID, cycle_days) -> Asset:
    asset = get_asset_by_id(db, asset_id)
    try:
        apply_maintenance_cycle(asset, cycle_days, _today())
    except ValidationError:
        db.rollback()
        raise
    return _commit_asset(db, asset)


def delete_asset(db: Session, asset_id: UUID) -> bool:
    asset = get_asset_by_id(db, asset_id)
    db.delete(asset)
    db.commit()
    logger.info("Asset %s deleted", asset_id)
    return True
