"""Integration tests for the evaluation API."""

from __future__ import annotations

import typing as t
from unittest import mock
from unittest.mock import AsyncMock, MagicMock

import sqlalchemy.exc
from fastapi.testclient import TestClient

from assessor.model import Evaluation, EvaluationID

Questions: list[dict[str, t.Any]] = [
    {
        "question": "Which planet is known as the red planet?",
        "questionType": "MCQ",
        "options": ["Venus", "Mars", "Jupiter"],
        "correctAnswer": "B",
        "assessmentId": "101",
    },
    {
        "question": "The sun is a star.",
        "questionType": "TrueFalse",
        "correctAnswer": True,
        "assessmentId": "101",
    },
    {
        "question": "Explain why we have seasons.",
        "questionType": "Short Answer",
        "modelAnswer": "The tilt of the Earth's axis changes how directly sunlight arrives.",
        "assessmentId": "102",
    },
]


def submission(**overrides: t.Any) -> dict[str, t.Any]:
    body: dict[str, t.Any] = {
        "assessment_id": "101,102",
        "student_id": "student-42",
        "student_answers": {"101": ["B", "true"], "102": ["The axis is tilted."]},
        "questions": Questions,
    }
    body.update(overrides)
    return body


class TestEvaluate(object):
    """Tests for POST /api/evaluate."""

    def test_evaluate_and_store(self, client: TestClient) -> None:
        """A submission is scored, stored and returned with its breakdown."""
        response = client.post("/api/evaluate", json=submission())

        assert response.status_code == 200
        data = response.json()
        assert data["evaluation_id"].startswith("eval$")
        assert data["assessment_id"] == "101"
        assert data["student_id"] == "student-42"
        assert data["score"] == 100
        assert data["total_marks"] == 100
        assert data["benchmark_score"] == 75
        assert data["performance"] == "Good"
        assert data["all_assessment_ids"] == ["101", "102"]
        assert len(data["individual_evaluations"]) == 2
        assert set(data["detailed_feedback"]) == {"A101_1", "A101_2", "A102_1"}
        assert data["detailed_feedback"]["A101_1"]["isCorrect"] is True
        assert data["detailed_feedback"]["A102_1"]["explanation"].startswith("✅ ")
        assert data["recommendations"]["focusAreas"] == ["Photosynthesis"]
        assert data["metadata"]["assessment_ids"] == ["101", "102"]

        stored = client.get(f"/api/evaluations/{data['evaluation_id']}")
        assert stored.status_code == 200
        assert stored.json()["score"] == 100

    def test_needs_improvement(self, client: TestClient, grading_model: MagicMock) -> None:
        """Scores below the benchmark are labelled Needs Improvement."""
        response = client.post(
            "/api/evaluate",
            json=submission(student_answers={"101": ["A", "false"], "102": [""]}),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["score"] == 0
        assert data["performance"] == "Needs Improvement"
        assert data["detailed_feedback"]["A102_1"]["studentAnswer"] == "No answer provided"
        grading_model.with_structured_output.assert_not_called()

    def test_flat_answer_list(self, client: TestClient) -> None:
        """A single assessment may submit its answers as a plain list."""
        response = client.post(
            "/api/evaluate",
            json=submission(assessment_id="101", student_answers=["B", True], questions=Questions[:2]),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["score"] == 100
        assert len(data["individual_evaluations"]) == 1

    def test_repeated_assessment_id(self, client: TestClient) -> None:
        """Repeating an id in the list scores that assessment once."""
        response = client.post(
            "/api/evaluate",
            json=submission(assessment_id="101,102,101", student_answers=["B", "true", "The axis is tilted."]),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["all_assessment_ids"] == ["101", "102"]
        assert [e["assessment_id"] for e in data["individual_evaluations"]] == ["101", "102"]
        assert data["individual_evaluations"][0]["score"] == 100
        assert data["score"] == 100
        assert set(data["detailed_feedback"]) == {"A101_1", "A101_2", "A102_1"}

    def test_numeric_assessment_id(self, client: TestClient) -> None:
        response = client.post(
            "/api/evaluate",
            json=submission(assessment_id=101, student_answers=["B", True], questions=Questions[:2]),
        )

        assert response.status_code == 200
        assert response.json()["assessment_id"] == "101"

    def test_recommendation_failure_uses_fallback(self, client: TestClient, recommendation_model: MagicMock) -> None:
        """A failing recommendation call does not fail the request."""
        recommendation_model.ainvoke = AsyncMock(side_effect=RuntimeError("model unavailable"))

        response = client.post("/api/evaluate", json=submission())

        assert response.status_code == 200
        assert "Score: 100%." in response.json()["recommendations"]["overallAnalysis"]

    def test_missing_assessment_id(self, client: TestClient) -> None:
        """Missing assessment_id is rejected."""
        body = submission()
        del body["assessment_id"]

        response = client.post("/api/evaluate", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "Missing required fields"}

    def test_missing_student_id(self, client: TestClient) -> None:
        response = client.post("/api/evaluate", json=submission(student_id=""))

        assert response.status_code == 400
        assert response.json() == {"error": "Missing required fields"}

    def test_missing_answers(self, client: TestClient) -> None:
        response = client.post("/api/evaluate", json=submission(student_answers=None))

        assert response.status_code == 400
        assert response.json() == {"error": "Missing required fields"}

    def test_storage_failure(self, client: TestClient) -> None:
        """Persistence errors are reported as a 500 with details."""
        with mock.patch(
            "assessor.storage.evaluation.create",
            side_effect=sqlalchemy.exc.OperationalError("INSERT", {}, Exception("disk full")),
        ):
            response = client.post("/api/evaluate", json=submission())

        assert response.status_code == 500
        data = response.json()
        assert data["error"] == "Failed to store evaluation"
        assert "disk full" in data["details"]

    def test_unexpected_failure(self, client: TestClient) -> None:
        """Other errors are reported as an internal server error."""
        with mock.patch(
            "assessor.llm.evaluation.EvaluationPipeline.evaluate",
            side_effect=ValueError("bad input"),
        ):
            response = client.post("/api/evaluate", json=submission())

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error", "details": "bad input"}


class TestListEvaluations(object):
    """Tests for GET /api/evaluations."""

    def test_list_by_student(self, client: TestClient, evaluation_factory: t.Callable[..., Evaluation]) -> None:
        mine = evaluation_factory(student_id="erin")
        evaluation_factory(student_id="frank")

        response = client.get("/api/evaluations", params={"student_id": "erin"})

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["evaluations"][0]["evaluation_id"] == str(mine.evaluation_id)


class TestGetEvaluation(object):
    """Tests for GET /api/evaluations/{evaluation_id}."""

    def test_get(self, client: TestClient, evaluation_factory: t.Callable[..., Evaluation]) -> None:
        evaluation = evaluation_factory(assessment_id="55")

        response = client.get(f"/api/evaluations/{evaluation.evaluation_id}")

        assert response.status_code == 200
        data = response.json()
        assert data["assessment_id"] == "55"
        assert data["all_assessment_ids"] == ["55"]
        assert data["detailed_feedback"]["A55_1"]["studentAnswer"] == "4"

    def test_not_found(self, client: TestClient) -> None:
        response = client.get(f"/api/evaluations/{EvaluationID()}")

        assert response.status_code == 404

    def test_malformed_id(self, client: TestClient) -> None:
        response = client.get("/api/evaluations/not-an-id")

        assert response.status_code == 404
