from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from shared.core import auth
from shared.core.database import get_auth_db as get_db
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import list_response, success_response
from ..schemas import authschemas
from ..services import authservices

router = APIRouter(prefix="/api/auth", tags=["Lab Auth"])


@router.post("/signup", status_code=201)
def signup(req: authschemas.SignupRequest, db: Session = Depends(get_db)):
    result = authservices.signup(db, req)
    return success_response(data=result, message="User registered successfully")


@router.post("/login")
def login(req: authschemas.LoginRequest, db: Session = Depends(get_db)):
    result = authservices.login(db, req)
    return success_response(data=result, message="Login successful")


@router.get("/me")
def me(
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(auth.validate_current_token)):
    return success_response(data=authservices.current_user(db, current_user))


@router.get("/technicians/by-skill", dependencies=[Depends(auth.validate_current_token)])
def technicians_by_skill(skill: Optional[str] = None, db: Session = Depends(get_db)):
    return list_response(authservices.technicians_by_skill(db, skill))


@router.patch("/update-skills")
def update_skills(
        req: authschemas.SkillsUpdateRequest,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(auth.validate_current_token)):
    result = authservices.update_skills(db, current_user, req)
    return success_response(data=result, message="Skills updated successfully")
