"""Tests for the `assessor evaluate` command."""

from __future__ import annotations

import json
import typing as t
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from click.testing import CliRunner

from assessor.core import AssessorContainer

Submission = {
    "assessment_id": "7,8,7",
    "student_id": "student-3",
    "student_answers": {"7": ["Paris"], "8": ["A cell wall protects the cell."]},
    "questions": [
        {"question": "Capital of France?", "questionType": "FillBlanks", "answer": "Paris", "assessmentId": "7"},
        {
            "question": "What does a cell wall do?",
            "questionType": "ShortAnswer",
            "modelAnswer": "It supports and protects the cell.",
            "assessmentId": "8",
        },
    ],
}


@pytest.fixture
def evaluate_command(
    container: AssessorContainer,
    grading_model: MagicMock,
    recommendation_model: MagicMock,
) -> t.Generator[t.Any]:
    from assessor.cli.evaluate import evaluate

    container.wire(modules=["assessor.cli.evaluate"])
    container.llm().grading_model.override(grading_model)
    container.llm().recommendation_model.override(recommendation_model)

    yield evaluate

    container.llm().recommendation_model.reset_override()
    container.llm().grading_model.reset_override()


class TestEvaluateCommand(object):
    def test_prints_evaluation(self, evaluate_command: t.Any, tmp_path: Path) -> None:
        """The pipeline output is printed as JSON, one evaluation per distinct assessment."""
        path = tmp_path / "submission.json"
        path.write_text(json.dumps(Submission), encoding="utf8")

        result = CliRunner().invoke(evaluate_command, [str(path)])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["assessment_ids"] == ["7", "8"]
        assert [e["score"] for e in data["individual_evaluations"]] == [100, 100]
        assert data["score"] == 100
        assert data["performance"] == "Good"
        assert data["detailed_feedback"]["A8_1"]["isCorrect"] is True
        assert data["recommendations"]["focusAreas"] == ["Photosynthesis"]

    def test_reads_stdin(self, evaluate_command: t.Any) -> None:
        result = CliRunner().invoke(evaluate_command, ["-"], input=json.dumps(Submission))

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["score"] == 100

    def test_incomplete_submission(self, evaluate_command: t.Any) -> None:
        body = {k: v for k, v in Submission.items() if k != "student_id"}

        result = CliRunner().invoke(evaluate_command, ["-"], input=json.dumps(body))

        assert result.exit_code == 1
        assert "student_id" in result.output

    def test_invalid_json(self, evaluate_command: t.Any) -> None:
        result = CliRunner().invoke(evaluate_command, ["-"], input="{not json")

        assert result.exit_code == 1
        assert "invalid submission" in result.output
