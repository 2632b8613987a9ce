"""Tests for assessor.lib.logging.ExtraFormatter."""

from __future__ import annotations

import json
import logging

import colorlog

from assessor.lib.logging import ExtraFormatter


def record(msg: str, **extra: object) -> logging.LogRecord:
    rec = logging.LogRecord("assessor.llm.evaluation.scorer", logging.WARNING, __file__, 1, msg, None, None)
    rec.__dict__.update(extra)
    return rec


def formatter(**kwargs: object) -> ExtraFormatter:
    return ExtraFormatter(colorlog.ColoredFormatter, "%(levelname)s %(message)s", indent=False, no_color=True, **kwargs)


class TestExtraFormatter(object):
    def test_no_extra(self) -> None:
        assert formatter().format(record("evaluated submission")) == "WARNING evaluated submission"

    def test_extra_appended_as_json(self) -> None:
        line = formatter().format(record("evaluated submission", assessment_ids=["1", "2"], score=64))

        assert line.startswith("WARNING evaluated submission {")
        assert json.loads(line[line.index("{") :]) == {"assessment_ids": ["1", "2"], "score": 64}

    def test_long_values_are_clipped(self) -> None:
        line = formatter(max_value_length=20).format(record("failed to grade", question="Explain " * 40))

        question = json.loads(line[line.index("{") :])["question"]
        assert len(question) == 20
        assert question.endswith("…")
