"""Derived-field engine for assets.

Every asset write path calls :func:`recompute_derived_fields` right before
committing, whichever fields the caller touched.  The functions here work on
any object exposing the ``Asset`` attributes, never touch the session, and
take ``today`` explicitly so the rules can be exercised for any date.
"""
import logging
from datetime import date, timedelta
from typing import Optional

from shared.core.exceptions import ValidationError
from ..enum.lab_assets_enum import AssetType

logger = logging.getLogger(__name__)

DAYS_PER_MONTH = 30
DAYS_PER_YEAR = 365
MIN_MAINTENANCE_CYCLE_DAYS = 30
WARRANTY_ALERT_DAYS = 30

CONSUMABLE_CYCLE_MESSAGE = "Maintenance cycles can only be set for non-consumable assets"
MIN_CYCLE_MESSAGE = f"Maintenance cycle must be at least {MIN_MAINTENANCE_CYCLE_DAYS} days"


def is_consumable(asset) -> bool:
    return asset.asset_type == AssetType.consumable.value


def cycle_days_from_units(months: Optional[int], years: Optional[int]) -> Optional[int]:
    """Approximate a month/year cycle in days; None below the minimum."""
    total_days = (months or 0) * DAYS_PER_MONTH + (years or 0) * DAYS_PER_YEAR
    if total_days >= MIN_MAINTENANCE_CYCLE_DAYS:
        return total_days
    return None


def warranty_expiring(expiry: date, today: date) -> bool:
    return today <= expiry <= today + timedelta(days=WARRANTY_ALERT_DAYS)


def recompute_derived_fields(asset, today: date):
    # 1. month/year input -> days
    if asset.maintenance_cycle_days is None and (
            asset.maintenance_cycle_months or asset.maintenance_cycle_years):
        derived = cycle_days_from_units(
            asset.maintenance_cycle_months, asset.maintenance_cycle_years)
        if derived is not None:
            asset.maintenance_cycle_days = derived

    # 2. cycles belong to non-consumables only
    if asset.maintenance_cycle_days is not None:
        if is_consumable(asset):
            raise ValidationError(CONSUMABLE_CYCLE_MESSAGE)
        if asset.maintenance_cycle_days < MIN_MAINTENANCE_CYCLE_DAYS:
            raise ValidationError(MIN_CYCLE_MESSAGE)

    cycle = asset.maintenance_cycle_days

    # 3. first due date when nothing has been recorded yet
    if cycle and asset.next_maintenance_due is None and asset.last_maintenance_date is None:
        asset.next_maintenance_due = today + timedelta(days=cycle)

    # 4. recurrence from the last maintenance always wins
    if asset.last_maintenance_date is not None and cycle:
        asset.next_maintenance_due = asset.last_maintenance_date + \
            timedelta(days=cycle)

    # 5. low stock
    asset.is_low_stock = bool(
        is_consumable(asset)
        and (asset.quantity or 0) < (asset.min_quantity or 0)
    )

    # 6. warranty; left as-is when no expiry date is recorded
    if asset.warranty_expiry_date is not None:
        asset.is_warranty_expiring = warranty_expiring(
            asset.warranty_expiry_date, today)

    return asset


def apply_quantity_change(asset, quantity_change: int, today: date):
    new_quantity = (asset.quantity or 0) + quantity_change
    if new_quantity < 0:
        raise ValidationError("Quantity cannot be negative")

    asset.quantity = new_quantity
    return recompute_derived_fields(asset, today)


def apply_maintenance_cycle(asset, cycle_days: Optional[int], today: date):
    """Set or clear an asset's maintenance cycle (the maintenance-cycle patch)."""
    if is_consumable(asset):
        raise ValidationError(CONSUMABLE_CYCLE_MESSAGE)

    if cycle_days is not None and cycle_days < MIN_MAINTENANCE_CYCLE_DAYS:
        raise ValidationError(MIN_CYCLE_MESSAGE)

    asset.maintenance_cycle_days = cycle_days
    # days are now authoritative; stale month/year input would re-derive them
    asset.maintenance_cycle_months = None
    asset.maintenance_cycle_years = None

    if cycle_days and asset.last_maintenance_date is None:
        asset.next_maintenance_due = today + timedelta(days=cycle_days)

    if not cycle_days:
        asset.next_maintenance_due = None

    logger.info("Maintenance cycle for asset %s set to %s days",
                getattr(asset, "id", None), cycle_days)
    return recompute_derived_fields(asset, today)
