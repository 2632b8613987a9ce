"""View models for the evaluation API."""

__all__ = [
    "ErrorResponse",
    "EvaluateRequest",
    "EvaluationListResponse",
    "EvaluationResponse",
]

from .evaluation import ErrorResponse, EvaluateRequest, EvaluationListResponse, EvaluationResponse
