"""LLM grading of free-text (short answer and descriptive) responses."""

from __future__ import annotations

import logging
import re as regex
import typing as t

import annotated_types as ant
import jinja2
import pydantic as p
from langchain_core.exceptions import OutputParserException
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage

from assessor.model import Question

from .errors import GradingError
from .parsing import get_content_str

logger = logging.getLogger(__name__)

MaxScore = 5
ScoreLine = regex.compile(r"Score:\s*(\d+)\s*/\s*5", regex.IGNORECASE)
ScoreLineWithBreak = regex.compile(r"Score:\s*\d+\s*/\s*5[^\S\n]*\n?", regex.IGNORECASE)
FeedbackLabel = regex.compile(r"Feedback:\s*", regex.IGNORECASE)


class ShortAnswerGrade(p.BaseModel):
    """Grade for one free-text answer, on a 0 to 5 scale."""

    score: t.Annotated[int, ant.Ge(0), ant.Le(MaxScore)] = p.Field(
        description="Points awarded: accuracy of key concepts (0-2) + completeness (0-2) + clear communication (0-1)"
    )
    feedback: str = p.Field(description="Brief explanation of the grade addressed to the student")

    @p.field_validator("score", mode="before")
    @classmethod
    def clamp_score(cls, v: t.Any) -> t.Any:
        if isinstance(v, int | float) and not isinstance(v, bool):
            return max(0, min(MaxScore, int(v)))
        return v


def reference_answer(question: Question) -> str | None:
    """The answer a grader compares against: model answer, else correct answer, else fill-in answer."""
    for candidate in (question.model_answer, question.correct_answer, question.answer):
        if candidate not in (None, ""):
            return str(candidate)
    return None


def parse_graded_text(text: str) -> ShortAnswerGrade:
    """Parse a `Score: X/5` / `Feedback: ...` completion.

    A missing score line yields 0 points; the score line and the `Feedback:`
    label are removed from the stored feedback.
    """
    match = ScoreLine.search(text)
    score = int(match.group(1)) if match else 0
    feedback = FeedbackLabel.sub("", ScoreLineWithBreak.sub("", text, count=1), count=1).strip()
    return ShortAnswerGrade(score=score, feedback=feedback)


async def grade_short_answer(
    question: Question,
    answer: str,
    model: BaseChatModel,
    env: jinja2.Environment,
) -> ShortAnswerGrade:
    """Grade one free-text answer out of 5 points.

    Structured output is requested when the model supports it; a response
    which does not fit the schema, or a model without structured output, is
    graded from the plain `Score: X/5` text instead.

    Args:
        question: The question being answered
        answer: The student's non-empty answer
        model: LLM used for grading
        env: Jinja2 environment for prompts

    Returns:
        ShortAnswerGrade with the awarded points and feedback text

    Raises:
        GradingError: the model returned nothing usable
    """
    template = env.get_template("evaluation/grade_short_answer.j2")
    prompt = template.render(
        question=question.question,
        reference_answer=reference_answer(question),
        answer=answer,
        max_score=MaxScore,
    )
    messages = [
        SystemMessage(
            content=(
                "You are an expert teacher evaluating student answers. Grade strictly against the rubric "
                "and keep feedback brief."
            )
        ),
        HumanMessage(content=prompt),
    ]

    try:
        # LangChain's with_structured_output has incomplete types, so we cast the result
        structured_model = model.with_structured_output(ShortAnswerGrade)  # pyright: ignore[reportUnknownVariableType]
    except NotImplementedError:
        structured_model = None

    if structured_model is not None:
        try:
            result = await structured_model.ainvoke(messages)  # pyright: ignore[reportUnknownVariableType]
            if isinstance(result, ShortAnswerGrade):
                return result
            return ShortAnswerGrade.model_validate(result)
        except (OutputParserException, p.ValidationError) as e:
            logger.warning(f"structured grading response rejected, falling back to text: {e}")

    response = await model.ainvoke(messages)
    text = get_content_str(response.content)
    if not text.strip():
        raise GradingError("grading model returned an empty response")
    return parse_graded_text(text)
