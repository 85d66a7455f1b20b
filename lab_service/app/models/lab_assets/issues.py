import uuid
from sqlalchemy import JSON, TIMESTAMP, Column, ForeignKey, Index, Integer, LargeBinary, String, Text, Uuid, func
from sqlalchemy.orm import relationship

from shared.core.database import Base
from ...enum.lab_assets_enum import IssueSeverity, IssueStatus


class Issue(Base):
    __tablename__ = "issues"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    asset_id = Column(Uuid(as_uuid=True), ForeignKey(
        "assets.id", ondelete="CASCADE"), nullable=False)
    # lab location of the asset when the issue was reported
    lab_id = Column(String(200), nullable=False)

    # users live in the auth database: plain UUIDs, no FK
    reported_by = Column(Uuid(as_uuid=True), nullable=False)
    assigned_technician = Column(Uuid(as_uuid=True), nullable=True)

    issue_type = Column(String(24), nullable=False)
    description = Column(Text, nullable=False)
    required_skill = Column(String(32), nullable=False)
    severity = Column(String(16), nullable=False,
                      default=IssueSeverity.medium.value)
    status = Column(String(24), nullable=False,
                    default=IssueStatus.pending.value)

    technician_remarks = Column(Text)
    rejection_reason = Column(Text)
    checklist = Column(JSON, nullable=False, default=list)

    reported_at = Column(TIMESTAMP(timezone=True), nullable=False)
    accepted_at = Column(TIMESTAMP(timezone=True))
    started_at = Column(TIMESTAMP(timezone=True))
    resolved_at = Column(TIMESTAMP(timezone=True))
    closed_at = Column(TIMESTAMP(timezone=True))

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    asset = relationship("Asset", back_populates="issues")
    attachments = relationship(
        "IssueAttachment",
        back_populates="issue",
        cascade="all, delete-orphan",
        order_by="IssueAttachment.uploaded_at",
    )

    __table_args__ = (
        Index("ix_issue_status", "status"),
        Index("ix_issue_lab", "lab_id"),
        Index("ix_issue_reported_by", "reported_by"),
        Index("ix_issue_assigned", "assigned_technician"),
        Index("ix_issue_reported_at", "reported_at"),
    )


class IssueAttachment(Base):
    __tablename__ = "issue_attachments"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    issue_id = Column(Uuid(as_uuid=True), ForeignKey(
        "issues.id", ondelete="CASCADE"), nullable=False, index=True)
    filename = Column(String(255), nullable=False)
    original_name = Column(String(255))
    mimetype = Column(String(120))
    size = Column(Integer)
    file_data = Column(LargeBinary, nullable=False)
    uploaded_by = Column(Uuid(as_uuid=True), nullable=True)
    uploaded_at = Column(TIMESTAMP(timezone=True), nullable=False)

    issue = relationship("Issue", back_populates="attachments")
