"""View models for evaluation requests and results."""

from __future__ import annotations

import typing as t

import pydantic as p

from assessor.model import BaseModel, Evaluation, IndividualEvaluation, Question


class EvaluateRequest(BaseModel):
    """A student's submission for one or more assessments.

    Required fields are optional here so that their absence is reported as
    a 400 by the route rather than a validation error.
    """

    assessment_id: str | None = None  # comma-separated for several assessments
    student_id: str | None = None
    student_answers: list[t.Any] | dict[str, list[t.Any]] | None = None
    questions: list[Question] = []

    @p.field_validator("assessment_id", "student_id", mode="before")
    @classmethod
    def coerce_id(cls, v: t.Any) -> t.Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @p.field_validator("questions", mode="before")
    @classmethod
    def coerce_questions(cls, v: t.Any) -> t.Any:
        return [] if v is None else v

    @property
    def is_complete(self) -> bool:
        return bool(self.assessment_id and self.assessment_id.strip() and self.student_id) and (
            self.student_answers is not None
        )


class EvaluationResponse(Evaluation):
    """The stored evaluation, with the per-assessment breakdown."""

    individual_evaluations: list[IndividualEvaluation]
    all_assessment_ids: list[str]


class EvaluationListResponse(BaseModel):
    evaluations: list[Evaluation]
    total: int


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None
