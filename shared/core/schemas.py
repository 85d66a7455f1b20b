from pydantic import BaseModel
from typing import Any, Generic, Optional, TypeVar
from uuid import UUID

# Shared properties
T = TypeVar("T")


class UserToken(BaseModel):
    user_id: str
    role: str
    name: Optional[str] = None
    email: Optional[str] = None
    exp: Optional[int] = None


class JsonOutResult(BaseModel, Generic[T]):
    success: bool
    message: Optional[str] = None
    data: Optional[T] = None
    count: Optional[int] = None
    error: Optional[str] = None


class UserRef(BaseModel):
    """Populated user reference embedded in lab-service responses."""
    id: UUID
    name: str
    email: Optional[str] = None
    role: str
    lab: Optional[str] = None

    model_config = {"from_attributes": True}


def envelope(**kwargs: Any) -> dict:
    """Serialize a JsonOutResult, dropping unset optional keys."""
    return JsonOutResult(**kwargs).model_dump(mode="json", exclude_none=True)
