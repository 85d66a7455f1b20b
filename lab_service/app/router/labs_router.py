from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import allow_roles, validate_current_token
from shared.core.database import get_lab_db as get_db
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import list_response, success_response
from shared.utils.enums import UserRole
from ..crud import labs_crud as crud
from ..schemas.labs_schemas import AssetCategoryCreate, AssetCategoryOut, LabCreate, LabOut

router = APIRouter(
    prefix="/api/labs",
    tags=["labs"],
    dependencies=[Depends(validate_current_token)]
)

require_lab_admin = allow_roles(UserRole.LAB_ADMIN)


@router.post("/", status_code=201)
def create_lab(
        lab: LabCreate,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(require_lab_admin)):
    result = crud.create_lab(db, lab, current_user.user_id)
    return success_response(data=LabOut.model_validate(result), message="Lab created successfully")


@router.get("/")
def get_labs(db: Session = Depends(get_db)):
    return list_response([LabOut.model_validate(lab) for lab in crud.get_labs(db)])


@router.post("/asset-categories", status_code=201)
def create_asset_category(
        category: AssetCategoryCreate,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(require_lab_admin)):
    result = crud.create_asset_category(db, category, current_user.user_id)
    return success_response(data=AssetCategoryOut.model_validate(result), message="Category created successfully")


@router.get("/asset-categories")
def get_asset_categories(db: Session = Depends(get_db)):
    return list_response([AssetCategoryOut.model_validate(c) for c in crud.get_asset_categories(db)])
