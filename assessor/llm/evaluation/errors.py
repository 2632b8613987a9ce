"""Errors raised inside the evaluation pipeline.

None of these reach the HTTP caller: each is caught at the granularity it
affects and replaced by a degraded result.
"""


class EvaluationError(Exception):
    pass


class GradingError(EvaluationError):
    """A free-text answer could not be graded."""


class RecommendationError(EvaluationError):
    """The recommendation response was unusable."""
