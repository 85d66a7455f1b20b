from pydantic import BaseModel, EmailStr, Field, model_validator
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from shared.utils.enums import Skill
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel


# -------- Signup / Login --------

class SignupRequest(EmptyStringModel):
    first_name: str
    last_name: str
    email: EmailStr
    password: str = Field(..., min_length=6)
    confirm_password: str
    role: str
    lab: Optional[str] = None
    department: Optional[str] = None

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class LoginRequest(EmptyStringModel):
    email: EmailStr
    password: str


# -------- Technicians --------

class SkillsUpdateRequest(BaseModel):
    skills: List[Skill] = Field(..., min_length=1)

    model_config = {"use_enum_values": True}


# -------- Lab admin --------

class ApprovalRequest(BaseModel):
    approve: bool


# -------Common----------

class UserOut(BaseModel):
    id: UUID
    name: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: str
    role: str
    lab: Optional[str] = None
    department: Optional[str] = None
    skills: List[str] = []
    is_active: bool
    is_approved: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class AuthenticationResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserOut
