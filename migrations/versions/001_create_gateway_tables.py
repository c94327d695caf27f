"""Create gateway tables.

Revision ID: 001
Revises:
Create Date: 2026-10-17 00:00:00

Creates the tables backing server-side sessions, users, passkeys and the
audit log. Flask-Session runs ``create_all`` when the application starts,
so tables that already exist are left alone.
"""
from alembic import op
import sqlalchemy as sa

# Revision identifiers
revision = "001"
down_revision = None
branch_labels = None
depends_on = None

AUDIT_ACTIONS = (
    "USER_LOGOUT",
    "SESSION_BOOTSTRAP",
    "WEBAUTHN_REGISTER_INITIATED",
    "WEBAUTHN_REGISTER_COMPLETED",
    "WEBAUTHN_REGISTER_FAILED",
    "WEBAUTHN_LOGIN_INITIATED",
    "WEBAUTHN_LOGIN_SUCCESS",
    "WEBAUTHN_LOGIN_FAILED",
    "WEBAUTHN_CREDENTIAL_DELETED",
    "WEBAUTHN_CREDENTIAL_RENAMED",
)


def _missing(table_name):
    return not sa.inspect(op.get_bind()).has_table(table_name)


def upgrade():
    """Create sessions, users, credentials and audit_logs."""
    if _missing("sessions"):
        # Layout of the Flask-Session SQLAlchemy backend
        op.create_table(
            "sessions",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("session_id", sa.String(255), unique=True),
            sa.Column("data", sa.LargeBinary()),
            sa.Column("expiry", sa.DateTime()),
        )

    if _missing("users"):
        op.create_table(
            "users",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("username", sa.String(255), nullable=False),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
            sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        )
        op.create_index("ix_users_username", "users", ["username"], unique=True)

    if _missing("credentials"):
        op.create_table(
            "credentials",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
            sa.Column("credential_id", sa.LargeBinary(1023), nullable=False),
            sa.Column("credential_data", sa.LargeBinary(), nullable=False),
            sa.Column("sign_count", sa.Integer(), nullable=False),
            sa.Column("backed_up", sa.Boolean(), nullable=False),
            sa.Column("name", sa.String(100), nullable=False),
            sa.Column("last_used_at", sa.DateTime(timezone=True), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
            sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
            sa.UniqueConstraint("credential_id", name="uix_credential_id"),
        )
        op.create_index("ix_credentials_user_id", "credentials", ["user_id"])

    if _missing("audit_logs"):
        op.create_table(
            "audit_logs",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=True),
            sa.Column("username", sa.String(255), nullable=True),
            sa.Column("action", sa.Enum(*AUDIT_ACTIONS, name="auditaction"), nullable=False),
            sa.Column("resource_type", sa.String(50), nullable=True),
            sa.Column("resource_id", sa.String(255), nullable=True),
            sa.Column("ip_address", sa.String(45), nullable=True),
            sa.Column("user_agent", sa.Text(), nullable=True),
            sa.Column("request_id", sa.String(64), nullable=True),
            sa.Column("extra_data", sa.JSON(), nullable=True),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("success", sa.Boolean(), nullable=False),
            sa.Column("error_message", sa.Text(), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
            sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        )
        op.create_index("ix_audit_logs_user_id", "audit_logs", ["user_id"])
        op.create_index("ix_audit_logs_username", "audit_logs", ["username"])
        op.create_index("ix_audit_logs_action", "audit_logs", ["action"])
        op.create_index("ix_audit_logs_request_id", "audit_logs", ["request_id"])
        op.create_index("idx_audit_user_action", "audit_logs", ["user_id", "action"])


def downgrade():
    """Drop the gateway tables."""
    op.drop_table("audit_logs")
    op.drop_table("credentials")
    op.drop_table("users")
    op.drop_table("sessions")
    sa.Enum(name="auditaction").drop(op.get_bind(), checkfirst=True)
