"""Scoring of several assessments submitted together."""

from __future__ import annotations

import asyncio
import decimal
import logging
import typing as t

from assessor.model import FeedbackItem, IndividualEvaluation, Question

from .scorer import Grader, round_half_up, score_answers

logger = logging.getLogger(__name__)

StudentAnswers = t.Mapping[str, t.Sequence[t.Any]] | t.Sequence[t.Any]


def split_assessment_ids(assessment_id: str) -> list[str]:
    """Split a comma-separated id list, dropping blanks and repeats; first-seen order is kept."""
    return list(dict.fromkeys(s.strip() for s in str(assessment_id).split(",") if s.strip()))


def group_questions(questions: t.Iterable[Question]) -> dict[str, list[Question]]:
    grouped: dict[str, list[Question]] = {}
    for question in questions:
        grouped.setdefault(question.assessment_id or "", []).append(question)
    return grouped


def answers_for(
    assessment_ids: t.Sequence[str],
    questions_by_assessment: t.Mapping[str, t.Sequence[Question]],
    student_answers: StudentAnswers,
) -> dict[str, list[t.Any]]:
    """Partition the submitted answers among the assessments.

    A mapping is taken as already grouped by assessment id. A flat list is
    consumed in order, each assessment taking as many answers as it has
    questions.
    """
    if isinstance(student_answers, t.Mapping):
        return {aid: list(student_answers.get(aid, ())) for aid in assessment_ids}

    if isinstance(student_answers, str | bytes):
        raise TypeError("student answers must be a list or a mapping of assessment id to list")

    flat = list(student_answers)
    if len(assessment_ids) > 1:
        logger.warning(
            "answers for several assessments given as one list, splitting by question count",
            extra={"assessment_ids": list(assessment_ids), "answers": len(flat)},
        )

    partition: dict[str, list[t.Any]] = {}
    offset = 0
    for aid in assessment_ids:
        n = len(questions_by_assessment.get(aid, ()))
        partition[aid] = flat[offset : offset + n]
        offset += n
    return partition


async def evaluate_assessments(
    assessment_ids: t.Sequence[str],
    questions: t.Sequence[Question],
    student_answers: StudentAnswers,
    *,
    grader: Grader,
) -> list[IndividualEvaluation]:
    """Score every assessment concurrently.

    Args:
        assessment_ids: Assessments to score, in submission order
        questions: Questions of all assessments, tagged with `assessmentId`
        student_answers: Answers grouped by assessment id, or one flat list
        grader: Grades free-text answers

    Returns:
        One IndividualEvaluation per distinct assessment id, in first-seen order
    """
    assessment_ids = list(dict.fromkeys(assessment_ids))
    by_assessment = group_questions(questions)
    answers = answers_for(assessment_ids, by_assessment, student_answers)

    for aid in assessment_ids:
        if aid not in by_assessment:
            logger.warning("no questions submitted for assessment", extra={"assessment_id": aid})

    async def evaluate_one(aid: str) -> IndividualEvaluation:
        result = await score_answers(by_assessment.get(aid, []), answers[aid], grader=grader)
        return IndividualEvaluation(
            assessment_id=aid,
            score=result.score,
            feedback=result.feedback,
            total_questions=result.total_questions,
            correct_answers=result.correct_answers,
        )

    return list(await asyncio.gather(*(evaluate_one(aid) for aid in assessment_ids)))


def overall_score(evaluations: t.Sequence[IndividualEvaluation]) -> int:
    """Half-up rounded mean of the per-assessment scores; 0 with no assessments."""
    if not evaluations:
        return 0
    total = sum(decimal.Decimal(e.score) for e in evaluations)
    return round_half_up(total / len(evaluations))


def combine_feedback(evaluations: t.Sequence[IndividualEvaluation]) -> dict[str, FeedbackItem]:
    """Merge per-assessment feedback, keying each item as `A<assessment id>_<question number>`."""
    combined: dict[str, FeedbackItem] = {}
    for evaluation in evaluations:
        for key, item in evaluation.feedback.items():
            combined[f"A{evaluation.assessment_id}_{key}"] = item
    return combined
