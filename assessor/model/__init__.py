__all__ = [
    # Base
    "BaseModel",
    "CamelCaseModel",
    "WithCtime",
    # Enums
    "DeploymentEnvironment",
    "Performance",
    "QuestionType",
    # ID Types
    "EvaluationID",
    # Questions
    "Question",
    # Evaluation
    "AssessmentEvaluation",
    "BenchmarkScore",
    "Evaluation",
    "EvaluationMetadata",
    "FeedbackItem",
    "IndividualEvaluation",
    "TotalMarks",
    # Recommendation
    "ImprovementRecommendation",
    "PrioritizedTopics",
    "TopicMastery",
]

from .base import BaseModel, CamelCaseModel, WithCtime
from .enum import DeploymentEnvironment, Performance, QuestionType
from .evaluation import AssessmentEvaluation, BenchmarkScore, Evaluation, EvaluationMetadata, FeedbackItem, \
    IndividualEvaluation, TotalMarks
from .id import EvaluationID
from .question import Question
from .recommendation import ImprovementRecommendation, PrioritizedTopics, TopicMastery
