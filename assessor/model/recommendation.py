import typing as t

import annotated_types as ant

from .base import CamelCaseModel


class TopicMastery(CamelCaseModel):
    topic: str
    mastery: t.Annotated[int, ant.Ge(0), ant.Le(100)]
    comment: str


class PrioritizedTopics(CamelCaseModel):
    critical: list[str] = []
    needs_work: list[str] = []
    good: list[str] = []
    excellent: list[str] = []


class ImprovementRecommendation(CamelCaseModel):
    focus_areas: list[str]
    study_tips: list[str]
    concepts_to_review: list[str]
    strengths: list[str]
    overall_analysis: str
    topic_analysis: list[TopicMastery]
    prioritized_topics: PrioritizedTopics
