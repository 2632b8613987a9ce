import typing as t

import pydantic as p

from .base import CamelCaseModel

class Question(CamelCaseModel):
    """A question as produced by the content generators.

    `question_type` is kept as the raw tag; unrecognized or missing tags are
    resolved at scoring time.
    """

    question: str = ""
    question_type: str | None = None
    options: list[t.Any] | dict[str, t.Any] | None = None
    correct_answer: t.Any = None
    answer: t.Any = None
    model_answer: str | None = None
    explanation: str | None = None
    assessment_id: str | None = None

    @p.field_validator("assessment_id", mode="before")
    @classmethod
    def coerce_assessment_id(cls, v: t.Any) -> t.Any:
        if isinstance(v, int | float) and not isinstance(v, bool):
            return str(int(v)) if float(v).is_integer() else str(v)
        return v
