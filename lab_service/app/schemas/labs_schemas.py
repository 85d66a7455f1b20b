from pydantic import BaseModel
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from shared.wrappers.empty_string_model_wrapper import EmptyStringModel


class LabCreate(EmptyStringModel):
    name: str
    lab_number: str
    lab_type: str
    lab_assets: Optional[List[Optional[str]]] = None


class LabOut(BaseModel):
    id: UUID
    name: str
    lab_number: str
    lab_type: str
    lab_assets: List[str] = []
    created_by: UUID
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class AssetCategoryCreate(EmptyStringModel):
    name: str


class AssetCategoryOut(BaseModel):
    id: UUID
    name: str
    created_by: UUID
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
