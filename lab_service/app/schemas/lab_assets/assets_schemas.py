# app/schemas/lab_assets/assets_schemas.py
from pydantic import BaseModel, Field
from typing import List, Optional
from uuid import UUID
from datetime import date, datetime

from shared.wrappers.empty_string_model_wrapper import EmptyStringModel
from ...enum.lab_assets_enum import AssetCondition, AssetSortBy, AssetStatus, AssetType


class AssetBase(EmptyStringModel):
    asset_name: str
    category: str
    asset_type: AssetType
    brand: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    quantity: Optional[int] = Field(None, ge=0)
    min_quantity: Optional[int] = Field(None, ge=0)
    lab_location: str
    purchase_date: Optional[date] = None
    purchase_cost: Optional[float] = Field(None, ge=0)
    warranty_expiry_date: Optional[date] = None
    status: Optional[AssetStatus] = None
    condition: Optional[AssetCondition] = None
    supplier: Optional[str] = None
    invoice_number: Optional[str] = None
    invoice_image: Optional[str] = None
    notes: Optional[str] = None
    maintenance_cycle_days: Optional[int] = None
    maintenance_cycle_months: Optional[int] = Field(None, gt=0)
    maintenance_cycle_years: Optional[int] = Field(None, gt=0)
    last_maintenance_date: Optional[date] = None


class AssetCreate(AssetBase):
    pass


class AssetUpdate(EmptyStringModel):
    asset_name: Optional[str] = None
    category: Optional[str] = None
    asset_type: Optional[AssetType] = None
    brand: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    quantity: Optional[int] = Field(None, ge=0)
    min_quantity: Optional[int] = Field(None, ge=0)
    lab_location: Optional[str] = None
    purchase_date: Optional[date] = None
    purchase_cost: Optional[float] = Field(None, ge=0)
    warranty_expiry_date: Optional[date] = None
    status: Optional[AssetStatus] = None
    condition: Optional[AssetCondition] = None
    supplier: Optional[str] = None
    invoice_number: Optional[str] = None
    invoice_image: Optional[str] = None
    notes: Optional[str] = None
    last_updated_by: Optional[str] = None
    maintenance_cycle_days: Optional[int] = None
    maintenance_cycle_months: Optional[int] = Field(None, gt=0)
    maintenance_cycle_years: Optional[int] = Field(None, gt=0)
    last_maintenance_date: Optional[date] = None
    next_maintenance_due: Optional[date] = None


class AssetStatusUpdate(EmptyStringModel):
    status: Optional[AssetStatus] = None


class AssetQuantityUpdate(BaseModel):
    quantity_change: Optional[int] = None


class MaintenanceCycleUpdate(BaseModel):
    maintenance_cycle_days: Optional[int] = None


class AssetsRequest(EmptyStringModel):
    search: Optional[str] = None
    lab_location: Optional[str] = None
    category: Optional[str] = None
    status: Optional[AssetStatus] = None
    sort_by: Optional[AssetSortBy] = None


class AssetOut(BaseModel):
    id: UUID
    asset_name: str
    category: str
    asset_type: str
    brand: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    quantity: int
    min_quantity: int
    lab_location: str
    purchase_date: Optional[date] = None
    purchase_cost: Optional[float] = None
    warranty_expiry_date: Optional[date] = None
    status: str
    condition: str
    supplier: Optional[str] = None
    invoice_number: Optional[str] = None
    invoice_image: Optional[str] = None
    notes: Optional[str] = None
    last_updated_by: Optional[str] = None
    maintenance_cycle_days: Optional[int] = None
    maintenance_cycle_months: Optional[int] = None
    maintenance_cycle_years: Optional[int] = None
    last_maintenance_date: Optional[date] = None
    next_maintenance_due: Optional[date] = None
    is_low_stock: bool
    is_warranty_expiring: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class AssetRef(BaseModel):
    id: UUID
    asset_name: str
    serial_number: Optional[str] = None
    lab_location: str

    model_config = {"from_attributes": True}


class AssetDashboardStats(BaseModel):
    total_assets: int
    available_assets: int
    in_use_assets: int
    under_maintenance_assets: int
    low_stock_assets: int
    warranty_expiring_assets: int
    categories: List[str]
    lab_locations: List[str]
