from enum import Enum


class AssetType(str, Enum):

    consumable = "consumable"
    non_consumable = "non-consumable"


class AssetStatus(str, Enum):

    available = "available"
    in_use = "in_use"
    under_maintenance = "under_maintenance"
    disposed = "disposed"


class AssetCondition(str, Enum):

    excellent = "excellent"
    good = "good"
    fair = "fair"
    damaged = "damaged"


class AssetSortBy(str, Enum):

    warranty_expiring = "warrantyExpiring"
    low_stock = "lowStock"


class IssueType(str, Enum):

    preventive = "preventive"
    breakdown = "breakdown"
    calibration = "calibration"


class IssueSeverity(str, Enum):

    low = "low"
    medium = "medium"
    high = "high"


class IssueStatus(str, Enum):

    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"
    in_progress = "in_progress"
    resolved = "resolved"
    closed = "closed"


class IssueViewType(str, Enum):

    my = "my"
    all = "all"


class MaintenanceType(str, Enum):

    preventive = "preventive"
    breakdown = "breakdown"
    calibration = "calibration"


# breakdown work orders are the repair jobs that restore an asset's condition
REPAIR_MAINTENANCE_TYPES = {MaintenanceType.breakdown.value}


class MaintenancePriority(str, Enum):

    low = "low"
    medium = "medium"
    high = "high"


class MaintenanceStatus(str, Enum):

    pending = "pending"
    in_progress = "in_progress"
    completed = "completed"
    rejected = "rejected"


OPEN_MAINTENANCE_STATUSES = (
    MaintenanceStatus.pending.value,
    MaintenanceStatus.in_progress.value,
)


class CalibrationResult(str, Enum):

    passed = "passed"
    failed = "failed"
    partial = "partial"
