"""Tests for assessor.lib.json."""

from __future__ import annotations

import datetime
import decimal

from assessor.lib import json
from assessor.model import FeedbackItem, Performance


class TestDumps(object):
    def test_models_use_wire_names(self) -> None:
        item = FeedbackItem(question="q", student_answer="a", is_correct=True, explanation="✅ ok")

        data = json.loads(json.dumps({"A1_1": item}))

        assert data["A1_1"]["isCorrect"] is True
        assert data["A1_1"]["studentAnswer"] == "a"

    def test_scalars(self) -> None:
        data = json.loads(
            json.dumps({
                "performance": Performance.NeedsImprovement,
                "score": decimal.Decimal("63"),
                "mean": decimal.Decimal("62.5"),
                "at": datetime.datetime(2024, 5, 1, 12, 30, tzinfo=datetime.UTC),
            })
        )

        assert data == {
            "performance": "Needs Improvement",
            "score": 63,
            "mean": 62.5,
            "at": "2024-05-01T12:30:00+00:00",
        }


class TestFastAPIJSONResponse(object):
    def test_keeps_marks_unescaped(self) -> None:
        response = json.FastAPIJSONResponse({"explanation": "✅ Correct!"})

        assert response.body.decode("utf-8") == '{"explanation":"✅ Correct!"}'
