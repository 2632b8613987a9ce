"""Pytest fixtures for assessor integration tests.

This module provides fixtures for testing API endpoints against a real
database connection. The test environment uses an in-memory SQLite database;
tests run within a transaction that is rolled back after each test.

Usage:
    def test_get_evaluation(client: TestClient, evaluation_factory):
        evaluation = evaluation_factory()
        response = client.get(f"/api/evaluations/{evaluation.evaluation_id}")
        assert response.status_code == 200
"""

from __future__ import annotations

import os
import typing as t
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pydantic as p
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from langchain_core.messages import AIMessage
from sqlalchemy.orm import Session

import assessor
from assessor.core import AssessorContainer
from assessor.lib import json
from assessor.llm.evaluation import ShortAnswerGrade
from assessor.model import DeploymentEnvironment, Evaluation, EvaluationMetadata, FeedbackItem, \
    ImprovementRecommendation, PrioritizedTopics, TopicMastery
from assessor.storage import evaluation as eval_storage
from assessor.storage.table import metadata


@pytest.fixture(scope="session")
def container() -> t.Generator[AssessorContainer]:
    """Boot the DI container for the test session.

    Uses the Test environment, whose storage is an in-memory SQLite
    database; the schema is created directly from the table models.
    """
    ct = AssessorContainer()
    root = Path(os.path.dirname(assessor.__file__)).parent

    AssessorContainer.boot(
        ct,
        debug=True,
        env=DeploymentEnvironment.Test,
        config_root=p.FileUrl(f"file://{root}/config"),
        override=(),
    )
    metadata.create_all(ct.storage().persistent().engine())

    yield ct

    ct.shutdown_resources()


@pytest.fixture(scope="session")
def app(container: AssessorContainer) -> FastAPI:
    """Create the FastAPI application for testing."""
    from assessor.core.config.web import AssessorWebSettings
    from assessor.web.assessor.main import _create_app  # pyright: ignore[reportPrivateUsage]

    container.wire(
        modules=[
            "assessor.web.assessor.main",
            "assessor.web.assessor.route.evaluation",
        ]
    )

    return _create_app(
        config=AssessorWebSettings(**container.config.web.assessor()),
        env=DeploymentEnvironment.Test,
        root_path=t.cast(Path, container.root()),
    )


@pytest.fixture
def db_session(container: AssessorContainer) -> t.Generator[Session]:
    """Provide a database session wrapped in a transaction.

    Uses join_transaction_mode="create_savepoint" so that session.begin()
    in the code under test creates savepoints, and everything is rolled
    back when the test ends.
    """
    engine = container.storage().persistent().engine()

    connection = engine.connect()
    transaction = connection.begin()

    session = Session(
        bind=connection,
        autobegin=False,
        join_transaction_mode="create_savepoint",
    )

    yield session

    session.close()
    transaction.rollback()
    connection.close()


def recommendation_json(**overrides: t.Any) -> str:
    data: dict[str, t.Any] = {
        "focusAreas": ["Photosynthesis"],
        "studyTips": ["Draw the light and dark reactions as a diagram"],
        "conceptsToReview": ["Chlorophyll"],
        "strengths": ["Plant cell structure"],
        "overallAnalysis": "Solid grasp of structure, weaker on processes.",
        "topicAnalysis": [{"topic": "Photosynthesis", "mastery": 40, "comment": "Revisit the inputs"}],
        "prioritizedTopics": {"critical": ["Photosynthesis"], "needsWork": [], "good": [], "excellent": []},
    }
    data.update(overrides)
    return json.dumps(data)


@pytest.fixture
def grading_model() -> MagicMock:
    """Chat model whose structured grading call awards full marks."""
    model = MagicMock()
    structured = MagicMock()
    structured.ainvoke = AsyncMock(return_value=ShortAnswerGrade(score=5, feedback="Complete and accurate."))
    model.with_structured_output.return_value = structured
    model.ainvoke = AsyncMock(return_value=AIMessage(content="Score: 5/5\nFeedback: Complete and accurate."))
    return model


@pytest.fixture
def recommendation_model() -> MagicMock:
    """Chat model returning a well-formed recommendation."""
    model = MagicMock()
    model.ainvoke = AsyncMock(return_value=AIMessage(content=recommendation_json()))
    return model


@pytest.fixture
def client(
    app: FastAPI,
    container: AssessorContainer,
    db_session: Session,
    grading_model: MagicMock,
    recommendation_model: MagicMock,
) -> t.Generator[TestClient]:
    """Provide a TestClient with database session and chat model overrides.

    API requests use the same transactional session as the test, and the
    mock chat models in place of real providers.
    """
    container.storage().persistent().session.override(db_session)
    container.llm().grading_model.override(grading_model)
    container.llm().recommendation_model.override(recommendation_model)

    with TestClient(app) as test_client:
        yield test_client

    container.llm().recommendation_model.reset_override()
    container.llm().grading_model.reset_override()
    container.storage().persistent().session.reset_override()


@pytest.fixture
def evaluation_factory(db_session: Session) -> t.Callable[..., Evaluation]:
    """Factory fixture for storing evaluations with sensible defaults.

    Stored evaluations are removed by the transaction rollback.
    """

    def create_evaluation(
        assessment_id: str = "101",
        student_id: str = "student-1",
        score: int = 80,
        performance: str = "Good",
    ) -> Evaluation:
        feedback = {
            f"A{assessment_id}_1": FeedbackItem(
                question="2 + 2 = ?",
                question_type="MCQ",
                student_answer="4",
                correct_answer="4",
                is_correct=True,
                explanation='✅ Correct! You selected "4"',
                options={"A": "3", "B": "4"},
                points=2,
                max_points=2,
            )
        }
        recommendation = ImprovementRecommendation(
            focus_areas=["Arithmetic"],
            study_tips=["Practice daily"],
            concepts_to_review=[],
            strengths=["Addition"],
            overall_analysis=f"Score: {score}%.",
            topic_analysis=[TopicMastery(topic="Arithmetic", mastery=score, comment="Good")],
            prioritized_topics=PrioritizedTopics(good=["Arithmetic"]),
        )

        with db_session.begin():
            return eval_storage.create(
                assessment_id=assessment_id,
                student_id=student_id,
                student_answers=["B"],
                score=score,
                performance=performance,
                detailed_feedback=feedback,
                recommendations=recommendation,
                metadata=EvaluationMetadata(assessment_ids=[assessment_id], recommendations=recommendation),
                session=db_session,
            )

    return create_evaluation
