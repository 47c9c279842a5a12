# app/infrastructure/database/models.py

from sqlalchemy import JSON, Boolean, Column, DateTime, Index, String, Text
from sqlalchemy.dialects.postgresql import JSONB

from app.infrastructure.database.session import Base

# JSONB on PostgreSQL, plain JSON elsewhere; Python None is stored as SQL NULL.
JSONDocument = JSON(none_as_null=True).with_variant(JSONB(none_as_null=True), "postgresql")


class AuditLogRow(Base):
    """Append-only audit trail. Rows are inserted once and never updated or deleted here."""

    __tablename__ = "audit_logs"

    id = Column(String(36), primary_key=True)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)

    actor_user_id = Column(String, nullable=False, index=True)
    actor_role = Column(String(64), nullable=False)
    branch_id = Column(String, nullable=True, index=True)

    action = Column(String(32), nullable=False, index=True)
    entity_type = Column(String(64), nullable=False, index=True)
    entity_id = Column(String, nullable=True)

    summary_key = Column(String, nullable=False)
    summary_params = Column(JSONDocument, nullable=True)
    before_data = Column(JSONDocument, nullable=True)
    after_data = Column(JSONDocument, nullable=True)
    metadata_ = Column("metadata", JSONDocument, nullable=True)

    ip_address = Column(String(64), nullable=True)
    ip_masked = Column(String(64), nullable=True)
    user_agent = Column(Text, nullable=False)
    device_name = Column(String(64), nullable=False)
    os_name = Column(String(64), nullable=False)
    browser_name = Column(String(64), nullable=False)
    is_mobile = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("ix_audit_logs_created_at_id", "created_at", "id"),
        Index("ix_audit_logs_branch_created_at", "branch_id", "created_at"),
    )


class ProfileRow(Base):
    """User profile owned by the surrounding application: role label and branch binding."""

    __tablename__ = "profiles"

    id = Column(String, primary_key=True)
    full_name = Column(String, nullable=True)
    role = Column(String(64), nullable=True)
    branch_id = Column(String, nullable=True, index=True)


class BranchRow(Base):
    """Branch display names, joined into audit reads."""

    __tablename__ = "branches"

    id = Column(String, primary_key=True)
    branch_name = Column(String, nullable=False)
