import logging
from typing import List
from uuid import UUID
from sqlalchemy import func
from sqlalchemy.orm import Session

from shared.core.exceptions import ValidationError
from ..models.labs import AssetCategory, Lab
from ..schemas.labs_schemas import AssetCategoryCreate, LabCreate

logger = logging.getLogger(__name__)


def get_labs(db: Session) -> List[Lab]:
    return db.query(Lab).order_by(Lab.name.asc()).all()


def create_lab(db: Session, payload: LabCreate, created_by: str) -> Lab:
    lab = Lab(
        name=payload.name,
        lab_number=payload.lab_number,
        lab_type=payload.lab_type,
        lab_assets=[a for a in payload.lab_assets or [] if a],
        created_by=UUID(created_by),
    )
    db.add(lab)
    db.commit()
    db.refresh(lab)
    logger.info("Lab %s (%s) created", lab.name, lab.lab_number)
    return lab


def get_asset_categories(db: Session) -> List[AssetCategory]:
    return db.query(AssetCategory).order_by(AssetCategory.name.asc()).all()


def create_asset_category(db: Session, payload: AssetCategoryCreate, created_by: str) -> AssetCategory:
    existing = db.query(AssetCategory).filter(
        func.lower(AssetCategory.name) == payload.name.lower()
    ).first()
    if existing:
        raise ValidationError(f"Category '{payload.name}' already exists")

    category = AssetCategory(name=payload.name, created_by=UUID(created_by))
    db.add(category)
    db.commit()
    db.refresh(category)
    return category
