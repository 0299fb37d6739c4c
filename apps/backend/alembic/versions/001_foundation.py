"""
============================================================
TARJETA CRC (Class / Responsibilities / Collaborators)
============================================================
Class: 001_foundation (Alembic Migration)

Responsibilities:
  - Crear el esquema completo desde cero (migración fundacional).
  - Definir tablas, constraints e índices del registro de sujetos.

Collaborators:
  - PostgreSQL 14+
  - Alembic (framework de migraciones)
  - infrastructure/repositories/postgres/* (usan este esquema como contrato)

Policy:
  - Esta es una migración BASELINE.
  - Convención de nombres (constraints / indexes):
      pk_<tabla>                         - Primary keys
      uq_<tabla>_<col>                   - Unique constraints
      ix_<tabla>_<col>                   - Indexes
      fk_<tabla>_<col>__<ref_tabla>      - Foreign keys
============================================================
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001_foundation"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Crea el esquema fundacional.

    Orden:
      1) Centers
      2) Identity (users + memberships)
      3) Subjects
      4) Audit logs
    """

    # =========================================================
    # 1) CENTERS
    # =========================================================
    op.create_table(
        "centers",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.PrimaryKeyConstraint("id", name="pk_centers"),
    )

    # =========================================================
    # 2) IDENTITY
    # =========================================================
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    # Memberships: se administran fuera de este servicio; aquí solo se leen.
    op.create_table(
        "user_centers",
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("center_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.PrimaryKeyConstraint("user_id", "center_id", name="pk_user_centers"),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            name="fk_user_centers_user_id__users",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["center_id"],
            ["centers.id"],
            name="fk_user_centers_center_id__centers",
            ondelete="CASCADE",
        ),
    )

    # =========================================================
    # 3) SUBJECTS
    # =========================================================
    op.create_table(
        "subjects",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("number", sa.String(50), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("birth_date", sa.Date, nullable=False),
        sa.Column("center_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.PrimaryKeyConstraint("id", name="pk_subjects"),
        # Unicidad global de number (backstop de la validación en casos de uso).
        sa.UniqueConstraint("number", name="uq_subjects_number"),
        sa.ForeignKeyConstraint(
            ["center_id"],
            ["centers.id"],
            name="fk_subjects_center_id__centers",
            ondelete="RESTRICT",
        ),
    )
    op.create_index("ix_subjects_center_id", "subjects", ["center_id"])

    # =========================================================
    # 4) AUDIT LOGS
    # =========================================================
    op.create_table(
        "audit_logs",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        # Desempate estable para entradas creadas en la misma transacción.
        sa.Column("seq", sa.BigInteger, sa.Identity(always=True), nullable=False),
        sa.Column("subject_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("action", sa.String(16), nullable=False),
        sa.Column(
            "diff",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.PrimaryKeyConstraint("id", name="pk_audit_logs"),
        sa.CheckConstraint(
            "action IN ('CREATE', 'UPDATE', 'DELETE')", name="ck_audit_logs_action"
        ),
        # La historia sobrevive al borrado: la referencia directa pasa a NULL
        # y el id queda en diff->>'subject_id'.
        sa.ForeignKeyConstraint(
            ["subject_id"],
            ["subjects.id"],
            name="fk_audit_logs_subject_id__subjects",
            ondelete="SET NULL",
        ),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            name="fk_audit_logs_user_id__users",
            ondelete="SET NULL",
        ),
    )
    op.create_index("ix_audit_logs_subject_id", "audit_logs", ["subject_id"])
    op.create_index("ix_audit_logs_created_at", "audit_logs", ["created_at"])
    op.execute(
        "CREATE INDEX ix_audit_logs_diff_subject_id "
        "ON audit_logs ((diff->>'subject_id'))"
    )
    op.execute(
        "CREATE INDEX ix_audit_logs_diff_number ON audit_logs ((diff->>'number'))"
    )
    op.execute(
        "CREATE INDEX ix_audit_logs_diff_number_new "
        "ON audit_logs ((diff->'number'->>'new'))"
    )


def downgrade() -> None:
    op.drop_table("audit_logs")
    op.drop_table("subjects")
    op.drop_table("user_centers")
    op.drop_table("users")
    op.drop_table("centers")
