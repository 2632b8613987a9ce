"""Improvement recommendations drawn from a scored evaluation."""

from __future__ import annotations

import logging
import typing as t

import jinja2
import pydantic as p
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage

from assessor.model import BenchmarkScore, FeedbackItem, ImprovementRecommendation, PrioritizedTopics, Question

from .errors import RecommendationError
from .parsing import get_content_str, parse_json_object

logger = logging.getLogger(__name__)

RequiredFields: tuple[str, ...] = (
    "focusAreas",
    "studyTips",
    "conceptsToReview",
    "strengths",
    "overallAnalysis",
    "topicAnalysis",
    "prioritizedTopics",
)


def fallback_recommendation(score: int, benchmark: int = BenchmarkScore) -> ImprovementRecommendation:
    """Canned recommendation used whenever the model response cannot be used.

    Only `overallAnalysis` depends on the input.
    """
    if score >= benchmark:
        comparison = f"This meets the benchmark of {benchmark}%; keep consolidating what you know."
    else:
        comparison = f"This is below the benchmark of {benchmark}%; focus on the areas listed to close the gap."

    return ImprovementRecommendation(
        focus_areas=[
            "Review the questions you answered incorrectly",
            "Strengthen understanding of core concepts",
        ],
        study_tips=[
            "Revisit your study material for each incorrect answer",
            "Practice with similar questions regularly",
            "Ask your teacher to clarify concepts you find difficult",
        ],
        concepts_to_review=["Concepts from the questions answered incorrectly"],
        strengths=["Completed the assessment"],
        overall_analysis=f"Score: {score}%. {comparison}",
        topic_analysis=[],
        prioritized_topics=PrioritizedTopics(),
    )


def parse_recommendation(text: str) -> ImprovementRecommendation:
    """Validate a model response as an ImprovementRecommendation.

    Raises:
        RecommendationError: the response is not a complete, usable recommendation
    """
    try:
        data = parse_json_object(text)
    except ValueError as e:
        raise RecommendationError(str(e)) from e

    if missing := [f for f in RequiredFields if f not in data]:
        raise RecommendationError(f"recommendation is missing fields: {', '.join(missing)}")

    try:
        recommendation = ImprovementRecommendation.model_validate(data)
    except p.ValidationError as e:
        raise RecommendationError(f"recommendation is malformed: {e}") from e

    if not recommendation.focus_areas or not recommendation.study_tips:
        raise RecommendationError("recommendation has no focus areas or study tips")
    return recommendation


async def generate_recommendations(
    questions: t.Sequence[Question],
    feedback: t.Mapping[str, FeedbackItem],
    score: int,
    model: BaseChatModel,
    env: jinja2.Environment,
    *,
    benchmark: int = BenchmarkScore,
) -> ImprovementRecommendation:
    """Ask the model for study recommendations, degrading to a canned set on any failure.

    Args:
        questions: Every question of the evaluated assessments
        feedback: Combined per-question feedback
        score: Overall score, 0 to 100
        model: LLM used for recommendations
        env: Jinja2 environment for prompts
        benchmark: Score considered satisfactory

    Returns:
        ImprovementRecommendation, never raising
    """
    try:
        template = env.get_template("evaluation/recommend_improvements.j2")
        prompt = template.render(
            questions=[q.question for q in questions],
            feedback=[
                {
                    "key": key,
                    "question": item.question,
                    "question_type": item.question_type,
                    "student_answer": item.student_answer,
                    "correct_answer": item.correct_answer,
                    "is_correct": item.is_correct,
                    "points": item.points,
                    "max_points": item.max_points,
                }
                for key, item in feedback.items()
            ],
            score=score,
            benchmark=benchmark,
            required_fields=RequiredFields,
        )
        messages = [
            SystemMessage(
                content=(
                    "You are an expert educational analyst. Respond only with a valid JSON object, "
                    "no markdown formatting."
                )
            ),
            HumanMessage(content=prompt),
        ]
        response = await model.ainvoke(messages)
        return parse_recommendation(get_content_str(response.content))
    except RecommendationError as e:
        logger.warning(f"unusable recommendation response, using fallback: {e}")
    except Exception:
        logger.exception("recommendation generation failed, using fallback")

    return fallback_recommendation(score, benchmark)
