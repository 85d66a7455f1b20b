# app/models/lab_assets/maintenance_logs.py
import uuid
from sqlalchemy import JSON, TIMESTAMP, Column, Date, ForeignKey, Index, Numeric, String, Text, Uuid, func
from sqlalchemy.orm import relationship

from shared.core.database import Base
from ...enum.lab_assets_enum import MaintenancePriority, MaintenanceStatus


class MaintenanceLog(Base):
    __tablename__ = "maintenance_logs"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    asset_id = Column(Uuid(as_uuid=True), ForeignKey(
        "assets.id", ondelete="CASCADE"), nullable=False)

    # Snapshot of the asset at creation time; never refreshed
    asset_name = Column(String(200), nullable=False)
    serial_number = Column(String(128))
    lab_location = Column(String(200), nullable=False)

    maintenance_type = Column(String(24), nullable=False)
    checklist = Column(JSON, nullable=False, default=list)
    priority_level = Column(String(16), nullable=False,
                            default=MaintenancePriority.medium.value)
    reported_date = Column(TIMESTAMP(timezone=True), nullable=False)
    # "Internal Technician" or a vendor name
    sent_to = Column(String(200))
    expected_completion_date = Column(Date)

    # Completion details
    completed_date = Column(TIMESTAMP(timezone=True))
    work_performed = Column(Text)
    cost = Column(Numeric(14, 2), default=0)
    performed_by = Column(String(200))
    calibration_result = Column(String(16))
    next_calibration_due = Column(Date)
    remarks = Column(Text)

    status = Column(String(24), nullable=False,
                    default=MaintenanceStatus.pending.value)

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    asset = relationship("Asset", back_populates="maintenance_logs")

    __table_args__ = (
        Index("ix_maintenance_asset_status", "asset_id", "status"),
        Index("ix_maintenance_reported", "reported_date"),
        Index("ix_maintenance_next_calibration", "next_calibration_due"),
    )
