"""Tests for assessor.storage.evaluation module."""

from __future__ import annotations

import typing as t

from sqlalchemy.orm import Session

from assessor.model import Evaluation, EvaluationID, EvaluationMetadata, FeedbackItem, IndividualEvaluation
from assessor.storage import evaluation as eval_storage


class TestCreate(object):
    """Tests for eval_storage.create()."""

    def test_create_returns_stored_row(self, db_session: Session) -> None:
        """create() stores the evaluation with the fixed marks and benchmark."""
        item = FeedbackItem(
            question="2 + 2 = ?",
            question_type="FillBlanks",
            student_answer="4",
            correct_answer="4",
            is_correct=True,
            explanation='✅ Correct! Answer: "4"',
            points=2,
            max_points=2,
        )
        individual = IndividualEvaluation(
            assessment_id="7",
            score=100,
            feedback={"1": item},
            total_questions=1,
            correct_answers=1,
        )

        with db_session.begin():
            evaluation = eval_storage.create(
                assessment_id="7",
                student_id="s-1",
                student_answers={"7": ["4"]},
                score=100,
                performance="Good",
                detailed_feedback={"A7_1": item},
                recommendations=None,
                metadata=EvaluationMetadata(assessment_ids=["7"], individual_scores=[individual]),
                session=db_session,
            )

        assert isinstance(evaluation.evaluation_id, EvaluationID)
        assert evaluation.assessment_id == "7"
        assert evaluation.student_answers == {"7": ["4"]}
        assert evaluation.total_marks == 100
        assert evaluation.benchmark_score == 75
        assert evaluation.detailed_feedback == {"A7_1": item}
        assert evaluation.recommendations is None
        assert evaluation.metadata.individual_scores == [individual]
        assert evaluation.create_time is not None

    def test_feedback_is_stored_in_camel_case(
        self,
        db_session: Session,
        evaluation_factory: t.Callable[..., Evaluation],
    ) -> None:
        """Stored JSON keeps the wire format's camelCase keys."""
        import sqlalchemy as sqla

        from assessor.storage.table import evaluation_test

        evaluation = evaluation_factory()

        with db_session.begin():
            stmt = sqla.select(evaluation_test.__table__.c.detailed_feedback).where(
                evaluation_test.evaluation_id == evaluation.evaluation_id
            )
            stored = db_session.execute(stmt).scalar_one()

        assert "isCorrect" in stored["A101_1"]
        assert "studentAnswer" in stored["A101_1"]


class TestGet(object):
    """Tests for eval_storage.get()."""

    def test_get_by_evaluation_id(
        self,
        db_session: Session,
        evaluation_factory: t.Callable[..., Evaluation],
    ) -> None:
        evaluation = evaluation_factory()

        with db_session.begin():
            result = eval_storage.get(evaluation.evaluation_id, session=db_session)

        assert result is not None
        assert result.evaluation_id == evaluation.evaluation_id
        assert result.recommendations is not None
        assert result.recommendations.focus_areas == ["Arithmetic"]

    def test_get_nonexistent_returns_none(self, db_session: Session) -> None:
        """get() returns None for an unknown evaluation ID."""
        with db_session.begin():
            result = eval_storage.get(EvaluationID(), session=db_session)

        assert result is None


class TestFind(object):
    """Tests for eval_storage.find()."""

    def test_filter_by_student(
        self,
        db_session: Session,
        evaluation_factory: t.Callable[..., Evaluation],
    ) -> None:
        mine = evaluation_factory(student_id="alice")
        evaluation_factory(student_id="bob")

        with db_session.begin():
            result = eval_storage.find(student_id="alice", session=db_session)

        assert [e.evaluation_id for e in result] == [mine.evaluation_id]

    def test_filter_by_assessment(
        self,
        db_session: Session,
        evaluation_factory: t.Callable[..., Evaluation],
    ) -> None:
        first = evaluation_factory(assessment_id="1", student_id="carol")
        second = evaluation_factory(assessment_id="1", student_id="dave")
        evaluation_factory(assessment_id="2", student_id="carol")

        with db_session.begin():
            result = eval_storage.find(assessment_id="1", session=db_session)

        assert {e.evaluation_id for e in result} == {first.evaluation_id, second.evaluation_id}

    def test_no_match(self, db_session: Session) -> None:
        with db_session.begin():
            assert eval_storage.find(student_id="nobody", session=db_session) == ()
