import logging
import uuid
from datetime import datetime, timedelta, timezone
from fastapi import Depends, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from shared.models.users import Users
from shared.core.config import settings
from shared.helpers.json_response_helper import error_response
from shared.core.schemas import UserToken
from shared.core.database import get_auth_db as get_db
from shared.utils.enums import canonical_role

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def create_access_token(data: dict, expires_minutes: int | None = None):
    payload = data.copy()
    expires = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes or settings.JWT_EXPIRE_MINUTES)
    payload['exp'] = expires

    return jwt.encode(payload, settings.JWT_SECRET,
                      algorithm=settings.JWT_ALGORITHM)


def token_for_user(user: Users) -> str:
    return create_access_token({
        "user_id": str(user.id),
        "role": user.role,
        "name": user.name,
        "email": user.email,
    })


def verify_token(token: str) -> UserToken:
    """Verify and decode a JWT token."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET,
                             algorithms=[settings.JWT_ALGORITHM])
        return UserToken(**payload)
    except (JWTError, ValueError):
        return error_response(
            message="Invalid or expired token",
            http_status=status.HTTP_401_UNAUTHORIZED
        )


def validate_current_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db)
) -> UserToken:
    if credentials is None or credentials.scheme.lower() != "bearer":
        return error_response(
            message="Not authenticated",
            http_status=status.HTTP_401_UNAUTHORIZED
        )

    user_data = verify_token(credentials.credentials)

    user = db.query(Users).filter(Users.id == _as_uuid(user_data.user_id)).first()

    if not user:
        return error_response(
            message="User not found",
            http_status=status.HTTP_401_UNAUTHORIZED
        )

    if not user.is_active:
        return error_response(
            message="User is not active. Access denied",
            http_status=status.HTTP_403_FORBIDDEN
        )

    # role on the stored account is authoritative over the token claim
    user_data.role = canonical_role(user.role).value
    return user_data


def allow_roles(*roles):
    allowed = {r.value if hasattr(r, "value") else r for r in roles}

    def _checker(current_user: UserToken = Depends(validate_current_token)):
        if current_user.role not in allowed:
            logger.info("User %s with role %s denied (needs one of %s)",
                        current_user.user_id, current_user.role, sorted(allowed))
            return error_response(
                message="Access forbidden for your role",
                http_status=status.HTTP_403_FORBIDDEN
            )
        return current_user

    return _checker


def _as_uuid(value: str):
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return error_response(
            message="Invalid token structure",
            http_status=status.HTTP_401_UNAUTHORIZED
        )
