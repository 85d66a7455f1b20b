import uuid
from sqlalchemy import JSON, TIMESTAMP, Column, String, Uuid, func

from shared.core.database import Base


class Lab(Base):
    __tablename__ = "labs"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    lab_number = Column(String(64), nullable=False)
    lab_type = Column(String(120), nullable=False)
    lab_assets = Column(JSON, nullable=False, default=list)
    created_by = Column(Uuid(as_uuid=True), nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())


class AssetCategory(Base):
    __tablename__ = "asset_categories"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(120), nullable=False, unique=True)
    created_by = Column(Uuid(as_uuid=True), nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
