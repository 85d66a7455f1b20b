from enum import Enum


class UserRole(str, Enum):
    LAB_ASSISTANT = "lab_assistant"
    LAB_TECHNICIAN = "lab_technician"
    LAB_ADMIN = "lab_admin"


# Spellings still present in older user records
LEGACY_ROLE_ALIASES = {
    "admin": UserRole.LAB_ADMIN,
    "labAdmin": UserRole.LAB_ADMIN,
}


def canonical_role(value: str) -> UserRole:
    """Map a stored or submitted role string onto the canonical enum."""
    if value in LEGACY_ROLE_ALIASES:
        return LEGACY_ROLE_ALIASES[value]
    return UserRole(value)


class Skill(str, Enum):
    PRINTER_REPAIR = "printer_repair"
    COMPUTER = "computer"
    ELECTRONICS = "electronics"
    MECHANICAL = "mechanical"
    CALIBRATION = "calibration"
    CIVIL = "civil"
