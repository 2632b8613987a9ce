"""Initial schema for stored evaluations

Revision ID: 001_initial
Revises:
Create Date: 2026-10-18

"""

import typing as t

from alembic import op
from sqlalchemy import func as f
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.schema import Column
from sqlalchemy.types import JSON, DateTime, Integer, String

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | t.Sequence[str] | None = None
depends_on: str | t.Sequence[str] | None = None

JSONType = JSON().with_variant(JSONB(), "postgresql")


def upgrade() -> None:
    op.create_table(
        "evaluation_test",
        Column("evaluation_id", String(22), primary_key=True),
        Column("assessment_id", String, nullable=False),
        Column("student_id", String, nullable=False),
        Column("score", Integer, nullable=False),
        Column("performance", String, nullable=False),
        Column("student_answers", JSONType, nullable=False),
        Column("detailed_feedback", JSONType, nullable=False),
        Column("recommendations", JSONType, nullable=True),
        Column("metadata", JSONType, nullable=False),
        Column("total_marks", Integer, nullable=False),
        Column("benchmark_score", Integer, nullable=False),
        Column("create_time", DateTime(timezone=True), server_default=f.now(), nullable=False),
    )
    op.create_index("ix_evaluation_test_assessment_id", "evaluation_test", ["assessment_id"])
    op.create_index("ix_evaluation_test_student_id", "evaluation_test", ["student_id"])


def downgrade() -> None:
    op.drop_index("ix_evaluation_test_student_id", table_name="evaluation_test")
    op.drop_index("ix_evaluation_test_assessment_id", table_name="evaluation_test")
    op.drop_table("evaluation_test")
