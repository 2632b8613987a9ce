"""Evaluation pipeline orchestrator."""

from __future__ import annotations

import functools
import logging
import typing as t

import jinja2
from langchain_core.language_models import BaseChatModel

from assessor.model import BenchmarkScore, EvaluationMetadata, FeedbackItem, ImprovementRecommendation, \
    IndividualEvaluation, Performance, Question

from .orchestrator import combine_feedback, evaluate_assessments, overall_score, StudentAnswers
from .recommendation import generate_recommendations
from .short_answer import grade_short_answer

logger = logging.getLogger(__name__)


class EvaluationOutput(t.TypedDict):
    """Complete output from the evaluation pipeline."""

    assessment_ids: list[str]
    individual_evaluations: list[IndividualEvaluation]
    score: int
    performance: Performance
    detailed_feedback: dict[str, FeedbackItem]
    recommendations: ImprovementRecommendation
    metadata: EvaluationMetadata


def performance_for(score: int, benchmark: int = BenchmarkScore) -> Performance:
    return Performance.Good if score >= benchmark else Performance.NeedsImprovement


class EvaluationPipeline:
    """Evaluates a student's submission across one or more assessments.

    The pipeline:
    1. Scores every assessment concurrently, grading free-text answers with the grading model
    2. Averages the per-assessment scores into the overall score
    3. Merges per-question feedback under assessment-prefixed keys
    4. Asks the recommendation model for study recommendations
    """

    def __init__(
        self,
        grading_model: BaseChatModel,
        recommendation_model: BaseChatModel,
        env: jinja2.Environment,
        benchmark: int = BenchmarkScore,
    ) -> None:
        """Initialize the pipeline.

        Args:
            grading_model: LLM grading short answer and descriptive questions
            recommendation_model: LLM writing improvement recommendations
            env: Jinja2 environment for prompt templates
            benchmark: Score at or above which performance is "Good"
        """
        self._grading_model = grading_model
        self._recommendation_model = recommendation_model
        self._env = env
        self._benchmark = benchmark

    async def evaluate(
        self,
        assessment_ids: t.Sequence[str],
        questions: t.Sequence[Question],
        student_answers: StudentAnswers,
    ) -> EvaluationOutput:
        """Run the full evaluation pipeline.

        Args:
            assessment_ids: Assessments submitted, in order
            questions: Questions of every assessment, tagged with `assessmentId`
            student_answers: Answers grouped by assessment id, or one flat list

        Returns:
            EvaluationOutput with all evaluation results
        """
        assessment_ids = list(dict.fromkeys(assessment_ids))
        grader = functools.partial(grade_short_answer, model=self._grading_model, env=self._env)
        evaluations = await evaluate_assessments(assessment_ids, questions, student_answers, grader=grader)

        score = overall_score(evaluations)
        feedback = combine_feedback(evaluations)

        recommendations = await generate_recommendations(
            questions,
            feedback,
            score,
            self._recommendation_model,
            self._env,
            benchmark=self._benchmark,
        )

        logger.info(
            "evaluated submission",
            extra={
                "assessment_ids": list(assessment_ids),
                "scores": [e.score for e in evaluations],
                "score": score,
            },
        )

        return EvaluationOutput(
            assessment_ids=list(assessment_ids),
            individual_evaluations=evaluations,
            score=score,
            performance=performance_for(score, self._benchmark),
            detailed_feedback=feedback,
            recommendations=recommendations,
            metadata=EvaluationMetadata(
                assessment_ids=list(assessment_ids),
                individual_scores=evaluations,
                recommendations=recommendations,
            ),
        )
