"""SQLAlchemy table definitions - dialect-agnostic (works with SQLite and PostgreSQL)."""

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
)

metadata = MetaData()

# ============================================================================
# USERS TABLE
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", String, primary_key=True),
    Column("username", String(150), nullable=False, unique=True),
    Column("firstname", String, nullable=False),
    Column("lastname", String, nullable=False),
    Column("phone", String, nullable=False),
    Column("email", String, nullable=False),
    Column("image_url", String, nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)

Index("idx_users_lastname", users_table.c.lastname)


# ============================================================================
# ROLES TABLE (which role names exist; capabilities come from the policy table)
# ============================================================================
roles_table = Table(
    "roles",
    metadata,
    Column("name", String(64), primary_key=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
)


# ============================================================================
# ROLE ASSIGNMENTS TABLE
# ============================================================================
role_assignments_table = Table(
    "role_assignments",
    metadata,
    Column("id", String, primary_key=True),
    Column("user_id", String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("role", String(64), ForeignKey("roles.name"), nullable=False),
    Column("assigned_by", String, nullable=True),
    Column("assigned_at", DateTime(timezone=True), nullable=False),
    UniqueConstraint("user_id", "role", name="uq_role_assignments_user_role"),
)

Index("idx_role_assignments_user_id", role_assignments_table.c.user_id)
Index("idx_role_assignments_role", role_assignments_table.c.role)


# ============================================================================
# ACTIVITY LOGS TABLE
# ============================================================================
activity_logs_table = Table(
    "activity_logs",
    metadata,
    Column("id", String, primary_key=True),
    Column("user", String, nullable=False),
    Column("action", String, nullable=False),
    Column("details", Text, nullable=False),
    Column("severity", String(16), nullable=False),  # Severity as string
    Column("timestamp", DateTime(timezone=True), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)

Index("idx_activity_logs_timestamp", activity_logs_table.c.timestamp)
Index("idx_activity_logs_severity", activity_logs_table.c.severity)
