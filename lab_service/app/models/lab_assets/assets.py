# app/models/lab_assets/assets.py
import uuid
from sqlalchemy import Boolean, Column, Integer, String, Date, Numeric, Text, TIMESTAMP, Uuid
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from shared.core.database import Base
from ...enum.lab_assets_enum import AssetCondition, AssetStatus


class Asset(Base):
    __tablename__ = "assets"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    asset_name = Column(String(200), nullable=False, index=True)
    # e.g. Electronics, Mechanical, Computer, Civil, Tools
    category = Column(String(120), nullable=False, index=True)
    asset_type = Column(String(24), nullable=False)
    brand = Column(String(128))
    model = Column(String(128))
    # unique among non-consumables, checked in assets_crud
    serial_number = Column(String(128), index=True)
    quantity = Column(Integer, nullable=False, default=1)
    min_quantity = Column(Integer, nullable=False, default=0)
    lab_location = Column(String(200), nullable=False, index=True)
    purchase_date = Column(Date)
    purchase_cost = Column(Numeric(14, 2))
    warranty_expiry_date = Column(Date, index=True)
    status = Column(String(24), nullable=False,
                    default=AssetStatus.available.value, index=True)
    condition = Column(String(24), nullable=False,
                       default=AssetCondition.good.value)
    supplier = Column(String(200))
    invoice_number = Column(String(64))
    invoice_image = Column(Text)  # base64 payload, stored opaque
    notes = Column(Text)
    last_updated_by = Column(String(200))

    # Maintenance cycle
    maintenance_cycle_days = Column(Integer, nullable=True)
    maintenance_cycle_months = Column(Integer, nullable=True)
    maintenance_cycle_years = Column(Integer, nullable=True)
    last_maintenance_date = Column(Date, nullable=True)
    next_maintenance_due = Column(Date, nullable=True, index=True)

    # Derived on every write by rules.asset_rules
    is_low_stock = Column(Boolean, nullable=False, default=False)
    is_warranty_expiring = Column(Boolean, nullable=False, default=False)

    created_at = Column(TIMESTAMP(timezone=True),
                        server_default=func.now(), nullable=False)
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(
    ), onupdate=func.now(), nullable=False)

    issues = relationship("Issue", back_populates="asset",
                          cascade="all, delete-orphan")
    maintenance_logs = relationship(
        "MaintenanceLog", back_populates="asset", cascade="all, delete-orphan")
