import logging
from fastapi import status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shared.core import auth
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import error_response
from shared.models.users import Users
from shared.utils.enums import UserRole, canonical_role
from ..schemas import authschemas

logger = logging.getLogger(__name__)


def _authentication_response(user: Users) -> authschemas.AuthenticationResponse:
    return authschemas.AuthenticationResponse(
        token=auth.token_for_user(user),
        user=authschemas.UserOut.model_validate(user),
    )


def get_user_by_id(db: Session, user_id: str) -> Users:
    user = db.query(Users).filter(Users.id == auth._as_uuid(user_id)).first()
    if not user:
        return error_response(message="User not found",
                              http_status=status.HTTP_404_NOT_FOUND)
    return user


#### SIGNUP / LOGIN ###

def signup(db: Session, req: authschemas.SignupRequest) -> authschemas.AuthenticationResponse:
    email = req.email.lower()

    try:
        role = canonical_role(req.role)
    except ValueError:
        return error_response(message=f"Invalid role '{req.role}'")

    if db.query(Users).filter(Users.email == email).first():
        logger.warning("Signup rejected, email %s already registered", email)
        return error_response(message="User already exists with this email")

    user = Users(
        name=f"{req.first_name} {req.last_name}",
        first_name=req.first_name,
        last_name=req.last_name,
        email=email,
        role=role.value,
        lab=req.lab or "",
        department=req.department,
        skills=[],
        is_active=True,
        is_approved=False,
    )
    user.set_password(req.password)

    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return error_response(message="User already exists with this email")
    db.refresh(user)

    logger.info("User %s registered with role %s", user.id, user.role)
    return _authentication_response(user)


def login(db: Session, req: authschemas.LoginRequest) -> authschemas.AuthenticationResponse:
    user = db.query(Users).filter(Users.email == req.email.lower()).first()
    if not user:
        return error_response(message="User not found",
                              http_status=status.HTTP_404_NOT_FOUND)

    role = canonical_role(user.role)
    if not user.is_approved and role != UserRole.LAB_ADMIN:
        logger.info("Login blocked for unapproved user %s", user.id)
        return error_response(message="Your account is not approved yet.",
                              http_status=status.HTTP_403_FORBIDDEN)

    if not user.verify_password(req.password):
        logger.warning("Invalid credentials for user %s", user.id)
        return error_response(message="Invalid credentials")

    # older records carry legacy admin spellings
    if user.role != role.value:
        user.role = role.value
        db.commit()
        db.refresh(user)

    return _authentication_response(user)


def current_user(db: Session, user: UserToken) -> authschemas.UserOut:
    return authschemas.UserOut.model_validate(get_user_by_id(db, user.user_id))


#### TECHNICIANS ###

def technicians_by_skill(db: Session, skill: str):
    if not skill:
        return error_response(message="Skill parameter is required")

    technicians = (
        db.query(Users)
        .filter(
            Users.role == UserRole.LAB_TECHNICIAN.value,
            Users.is_active == True,
        )
        .order_by(Users.name.asc())
        .all()
    )
    # skills is a JSON list; membership is checked here to stay dialect neutral
    return [
        authschemas.UserOut.model_validate(t)
        for t in technicians if t.has_skill(skill)
    ]


def update_skills(db: Session, user: UserToken, req: authschemas.SkillsUpdateRequest) -> authschemas.UserOut:
    db_user = get_user_by_id(db, user.user_id)

    if canonical_role(db_user.role) != UserRole.LAB_TECHNICIAN:
        return error_response(message="Only technicians can update skills",
                              http_status=status.HTTP_403_FORBIDDEN)

    # keep the submitted order, drop repeats
    db_user.skills = list(dict.fromkeys(req.skills))
    db.commit()
    db.refresh(db_user)

    logger.info("Technician %s skills set to %s", db_user.id, db_user.skills)
    return authschemas.UserOut.model_validate(db_user)
