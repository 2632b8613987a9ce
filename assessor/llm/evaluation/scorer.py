"""Per-question scoring of one assessment."""

from __future__ import annotations

import decimal
import logging
import typing as t

from assessor.model import AssessmentEvaluation, FeedbackItem, Question, QuestionType

from .short_answer import MaxScore, reference_answer, ShortAnswerGrade

logger = logging.getLogger(__name__)

Grader = t.Callable[[Question, str], t.Awaitable[ShortAnswerGrade]]

NoAnswer = "No answer"
NoCorrectAnswer = "No correct answer"

QuestionTags: dict[str, QuestionType] = {qt.value: qt for qt in QuestionType} | {
    "Short Answer": QuestionType.ShortAnswer,
}


def resolve_question_type(question: Question) -> QuestionType | None:
    """Resolve the question's type from its tag, inferring it when the tag is absent.

    Returns None for a tag which names no known type.
    """
    if question.question_type:
        return QuestionTags.get(question.question_type.strip())

    if question.options:
        return QuestionType.MCQ
    if isinstance(question.correct_answer, bool):
        return QuestionType.TrueFalse
    if question.answer not in (None, ""):
        return QuestionType.FillBlanks
    return QuestionType.ShortAnswer


def is_blank(value: t.Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def round_half_up(value: decimal.Decimal | float | int) -> int:
    """Round to the nearest integer, with halves rounded up (not to even)."""
    return int(decimal.Decimal(str(value)).quantize(decimal.Decimal(1), rounding=decimal.ROUND_HALF_UP))


def percentage(earned: int, maximum: int) -> int:
    """`earned / maximum` as a whole percentage; 0 when nothing could be earned."""
    if maximum <= 0:
        return 0
    return round_half_up(decimal.Decimal(earned) * 100 / decimal.Decimal(maximum))


def normalize_options(options: list[t.Any] | dict[str, t.Any] | None) -> dict[str, str]:
    """Normalize MCQ options to an ordered label -> text mapping.

    A list is labelled by position, `A` for the first entry.
    """
    if not options:
        return {}
    if isinstance(options, dict):
        return {str(k): str(v) for k, v in options.items()}
    return {chr(ord("A") + i): str(v) for i, v in enumerate(options)}


def option_label(value: t.Any, options: dict[str, str]) -> str | None:
    """Find the label of the option a raw answer refers to.

    Answers may be given as a label (any case), a zero-based index (int or
    digit string) or the option text itself.
    """
    if is_blank(value) or isinstance(value, bool) or not options:
        return None

    s = str(value).strip()
    if s in options:
        return s

    folded = s.casefold()
    for label in options:
        if label.casefold() == folded:
            return label

    if isinstance(value, int) or s.isdigit():
        index = int(s)
        labels = list(options)
        if 0 <= index < len(labels):
            return labels[index]
        return None

    for label, text in options.items():
        if text.strip().casefold() == folded:
            return label
    return None


def normalize_bool(value: t.Any) -> bool | None:
    """`True`/`False` or the strings `"true"`/`"false"` in any case; anything else is None."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return {"true": True, "false": False}.get(value.strip().casefold())
    return None


def score_mcq(question: Question, answer: t.Any) -> FeedbackItem:
    options = normalize_options(question.options)
    max_points = QuestionType.MCQ.points

    if options:
        selected_label = option_label(answer, options)
        correct_label = option_label(question.correct_answer, options)
        is_correct = selected_label is not None and selected_label == correct_label
        selected = options[selected_label] if selected_label else (NoAnswer if is_blank(answer) else str(answer))
        if correct_label:
            correct = options[correct_label]
        elif is_blank(question.correct_answer):
            correct = NoCorrectAnswer
        else:
            correct = str(question.correct_answer)
    else:
        # no options to resolve against, compare the raw answers
        selected = NoAnswer if is_blank(answer) else str(answer)
        correct = NoCorrectAnswer if is_blank(question.correct_answer) else str(question.correct_answer)
        is_correct = not is_blank(answer) and selected.strip().casefold() == correct.strip().casefold()

    return FeedbackItem(
        question=question.question,
        question_type=QuestionType.MCQ.value,
        student_answer=selected,
        correct_answer=correct,
        is_correct=is_correct,
        explanation=(
            f'✅ Correct! You selected "{selected}"'
            if is_correct
            else f'❌ Incorrect. You selected "{selected}". The correct answer is "{correct}"'
        ),
        options=options or None,
        points=max_points if is_correct else 0,
        max_points=max_points,
    )


def score_true_false(question: Question, answer: t.Any) -> FeedbackItem:
    max_points = QuestionType.TrueFalse.points
    given = normalize_bool(answer)
    expected = normalize_bool(question.correct_answer)
    is_correct = given is not None and given == expected

    given_s = str(given).lower() if given is not None else NoAnswer
    expected_s = str(expected).lower() if expected is not None else NoCorrectAnswer
    return FeedbackItem(
        question=question.question,
        question_type=QuestionType.TrueFalse.value,
        student_answer=given_s,
        correct_answer=expected_s,
        is_correct=is_correct,
        explanation=(
            f"✅ Correct! The statement is {expected_s}"
            if is_correct
            else f"❌ Incorrect. You answered {given_s}, but the statement is {expected_s}"
        ),
        points=max_points if is_correct else 0,
        max_points=max_points,
    )


def score_fill_blanks(question: Question, answer: t.Any) -> FeedbackItem:
    max_points = QuestionType.FillBlanks.points
    expected = question.answer if not is_blank(question.answer) else question.correct_answer

    given_s = NoAnswer if is_blank(answer) else str(answer)
    expected_s = NoCorrectAnswer if is_blank(expected) else str(expected)
    is_correct = (
        not is_blank(answer)
        and not is_blank(expected)
        and str(answer).strip().casefold() == str(expected).strip().casefold()
    )
    return FeedbackItem(
        question=question.question,
        question_type=QuestionType.FillBlanks.value,
        student_answer=given_s,
        correct_answer=expected_s,
        is_correct=is_correct,
        explanation=(
            f'✅ Correct! Answer: "{expected_s}"'
            if is_correct
            else f'❌ Incorrect. You wrote: "{given_s}". Correct answer: "{expected_s}"'
        ),
        points=max_points if is_correct else 0,
        max_points=max_points,
    )


async def score_free_text(question: Question, qtype: QuestionType, answer: t.Any, grader: Grader) -> FeedbackItem:
    max_points = qtype.points
    correct = reference_answer(question) or NoCorrectAnswer

    # 0 and False count as unanswered
    if is_blank(answer) or (isinstance(answer, int | float) and not answer):
        return FeedbackItem(
            question=question.question,
            question_type=qtype.value,
            student_answer="No answer provided",
            correct_answer=correct,
            is_correct=False,
            explanation="No answer provided",
            points=0,
            max_points=max_points,
        )

    answer_s = str(answer)
    try:
        grade = await grader(question, answer_s)
    except Exception:
        logger.exception("failed to grade free-text answer", extra={"question": question.question})
        return FeedbackItem(
            question=question.question,
            question_type=qtype.value,
            student_answer="Error",
            correct_answer="Error",
            is_correct=False,
            explanation="Error evaluating answer",
            points=0,
            max_points=max_points,
        )

    full_marks = grade.score == MaxScore
    return FeedbackItem(
        question=question.question,
        question_type=qtype.value,
        student_answer=answer_s,
        correct_answer=correct,
        is_correct=full_marks,
        explanation=f"✅ {grade.feedback}" if full_marks else grade.feedback,
        points=grade.score,
        max_points=max_points,
    )


async def score_question(question: Question, answer: t.Any, grader: Grader) -> FeedbackItem:
    """Score a single answer; failures become a zero-point item rather than an error."""
    qtype = resolve_question_type(question)
    try:
        match qtype:
            case QuestionType.MCQ:
                return score_mcq(question, answer)
            case QuestionType.TrueFalse:
                return score_true_false(question, answer)
            case QuestionType.FillBlanks:
                return score_fill_blanks(question, answer)
            case QuestionType.ShortAnswer | QuestionType.Descriptive:
                return await score_free_text(question, qtype, answer, grader)
            case None:
                return FeedbackItem(
                    question=question.question,
                    question_type=question.question_type,
                    student_answer="Unknown",
                    correct_answer="Unknown",
                    is_correct=False,
                    explanation="Unknown question type",
                )
    except Exception:
        logger.exception("failed to score question", extra={"question": question.question})
        return FeedbackItem(
            question=question.question,
            question_type=qtype.value if qtype else question.question_type,
            student_answer="Error",
            correct_answer="Error",
            is_correct=False,
            explanation="Error in evaluation",
            max_points=qtype.points if qtype else 0,
        )


async def score_answers(
    questions: t.Sequence[Question],
    answers: t.Sequence[t.Any],
    *,
    grader: Grader,
) -> AssessmentEvaluation:
    """Score one assessment's answers, matched to questions by position.

    Args:
        questions: The assessment's questions, in order
        answers: The student's answers; missing trailing answers count as unanswered
        grader: Grades free-text answers out of 5 points

    Returns:
        AssessmentEvaluation with feedback keyed by 1-based question number
    """
    feedback: dict[str, FeedbackItem] = {}
    for i, question in enumerate(questions):
        answer = answers[i] if i < len(answers) else None
        feedback[str(i + 1)] = await score_question(question, answer, grader)

    earned = sum(item.points for item in feedback.values())
    maximum = sum(item.max_points for item in feedback.values())
    return AssessmentEvaluation(
        score=percentage(earned, maximum),
        total_questions=len(questions),
        correct_answers=sum(1 for item in feedback.values() if item.is_correct),
        earned_points=earned,
        max_points=maximum,
        feedback=feedback,
    )
