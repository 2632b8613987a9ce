from __future__ import annotations

import typing as t

import sqlalchemy as sqla

from assessor.core import di
from assessor.model import BenchmarkScore, Evaluation, EvaluationID, EvaluationMetadata, FeedbackItem, \
    ImprovementRecommendation, TotalMarks

from . import Session
from .table import evaluation_test


def get(
    evaluation_id: EvaluationID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> Evaluation | None:
    stmt = sqla.select(evaluation_test.__table__).where(evaluation_test.evaluation_id == evaluation_id)
    row = session.execute(stmt).mappings().one_or_none()
    return Evaluation(**row) if row else None


def find(
    *,
    student_id: str | None = None,
    assessment_id: str | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[Evaluation, ...]:
    """Find stored evaluations, newest first."""
    stmt = sqla.select(evaluation_test.__table__).order_by(evaluation_test.create_time.desc())
    if student_id is not None:
        stmt = stmt.where(evaluation_test.student_id == student_id)
    if assessment_id is not None:
        stmt = stmt.where(evaluation_test.assessment_id == assessment_id)

    rows = session.execute(stmt).mappings().all()
    return tuple(Evaluation(**row) for row in rows)


def create(
    *,
    assessment_id: str,
    student_id: str,
    student_answers: list[t.Any] | dict[str, t.Any],
    score: int,
    performance: str,
    detailed_feedback: dict[str, FeedbackItem],
    recommendations: ImprovementRecommendation | None,
    metadata: EvaluationMetadata,
    total_marks: int = TotalMarks,
    benchmark_score: int = BenchmarkScore,
    session: Session = di.Provide["storage.persistent.session"],
) -> Evaluation:
    """Insert one evaluation row and return it as stored.

    A single insert; failures propagate to the caller.
    """
    evaluation_id = EvaluationID()
    values: dict[str, t.Any] = dict(
        evaluation_id=evaluation_id,
        assessment_id=assessment_id,
        student_id=student_id,
        student_answers=student_answers,
        score=score,
        performance=performance,
        detailed_feedback={k: v.model_dump(mode="json") for k, v in detailed_feedback.items()},
        recommendations=recommendations.model_dump(mode="json") if recommendations is not None else None,
        metadata=metadata.model_dump(mode="json"),
        total_marks=total_marks,
        benchmark_score=benchmark_score,
    )

    session.execute(sqla.insert(evaluation_test.__table__).values(**values))
    session.flush()
    result = get(evaluation_id, session=session)
    assert result is not None
    return result
