import uuid
from sqlalchemy import JSON, TIMESTAMP, Boolean, Column, String, Uuid, func
from passlib.context import CryptContext

from ..core.database import AuthBase
from ..utils.enums import UserRole

bcrypt_context = CryptContext(schemes=['bcrypt'], deprecated='auto')


class Users(AuthBase):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    email = Column(String(200), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)

    role = Column(String(32), nullable=False, index=True,
                  default=UserRole.LAB_ASSISTANT.value)
    lab = Column(String(120), nullable=True, default="")
    department = Column(String(120), nullable=True)
    # only meaningful for lab_technician
    skills = Column(JSON, nullable=False, default=list)

    is_active = Column(Boolean, nullable=False, default=True)
    is_approved = Column(Boolean, nullable=False, default=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    def set_password(self, password: str):
        self.password_hash = bcrypt_context.hash(password)

    def verify_password(self, password: str) -> bool:
        return bcrypt_context.verify(password, self.password_hash)

    def has_skill(self, skill: str) -> bool:
        return skill in (self.skills or [])
