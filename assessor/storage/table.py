import datetime
import typing as t

from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, MappedAsDataclass

from assessor.model import BenchmarkScore, EvaluationID, TotalMarks

from .type import EvaluationIDType, JSONType


class base(MappedAsDataclass, DeclarativeBase):
    type_annotation_map = {
        EvaluationID: EvaluationIDType(),
        datetime.datetime: DateTime(timezone=True),
    }


metadata = base.metadata


class evaluation_test(base):
    __tablename__ = "evaluation_test"

    evaluation_id: Mapped[EvaluationID] = mapped_column(primary_key=True)
    # first id of a multi-assessment submission
    assessment_id: Mapped[str] = mapped_column(index=True)
    student_id: Mapped[str] = mapped_column(index=True)
    score: Mapped[int]
    performance: Mapped[str]

    student_answers: Mapped[list[t.Any] | dict[str, t.Any]] = mapped_column(JSONType)
    detailed_feedback: Mapped[dict[str, t.Any]] = mapped_column(JSONType, default_factory=dict)
    recommendations: Mapped[dict[str, t.Any] | None] = mapped_column(JSONType, default=None)
    metadata_: Mapped[dict[str, t.Any]] = mapped_column("metadata", JSONType, default_factory=dict)

    total_marks: Mapped[int] = mapped_column(default=TotalMarks)
    benchmark_score: Mapped[int] = mapped_column(default=BenchmarkScore)

    create_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now())
