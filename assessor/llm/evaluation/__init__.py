"""Evaluation pipeline for automated assessment scoring."""

from .errors import EvaluationError, GradingError, RecommendationError
from .orchestrator import combine_feedback, evaluate_assessments, overall_score, split_assessment_ids
from .pipeline import EvaluationOutput, EvaluationPipeline, performance_for
from .recommendation import fallback_recommendation, generate_recommendations
from .scorer import score_answers
from .short_answer import grade_short_answer, ShortAnswerGrade

__all__ = [
    "EvaluationPipeline",
    "EvaluationOutput",
    "EvaluationError",
    "GradingError",
    "RecommendationError",
    "combine_feedback",
    "evaluate_assessments",
    "fallback_recommendation",
    "generate_recommendations",
    "grade_short_answer",
    "overall_score",
    "performance_for",
    "score_answers",
    "split_assessment_ids",
    "ShortAnswerGrade",
]
