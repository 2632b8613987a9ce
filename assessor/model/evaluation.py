import typing as t

from .base import BaseModel, CamelCaseModel, WithCtime
from .id import EvaluationID
from .recommendation import ImprovementRecommendation

BenchmarkScore = 75
TotalMarks = 100


class FeedbackItem(CamelCaseModel):  # Not timestamped, embedded in Evaluation
    question: str
    question_type: str | None = None
    student_answer: str
    correct_answer: str | None = None
    is_correct: bool
    explanation: str
    options: dict[str, str] | None = None
    points: int = 0
    max_points: int = 0


class AssessmentEvaluation(CamelCaseModel):
    """Scored result of one assessment's questions."""

    score: int
    total_questions: int
    correct_answers: int
    earned_points: int
    max_points: int
    feedback: dict[str, FeedbackItem]


class IndividualEvaluation(BaseModel):
    assessment_id: str
    score: int
    feedback: dict[str, FeedbackItem]
    total_questions: int
    correct_answers: int


class EvaluationMetadata(BaseModel):
    assessment_ids: list[str] = []
    individual_scores: list[IndividualEvaluation] = []
    recommendations: ImprovementRecommendation | None = None


class Evaluation(WithCtime, BaseModel):
    evaluation_id: EvaluationID
    assessment_id: str
    student_id: str
    student_answers: t.Any = None
    score: int
    total_marks: int = TotalMarks
    benchmark_score: int = BenchmarkScore
    performance: str
    detailed_feedback: dict[str, FeedbackItem] = {}
    recommendations: ImprovementRecommendation | None = None
    metadata: EvaluationMetadata = EvaluationMetadata()
