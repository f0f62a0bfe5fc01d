"""Summary metrics derived from the question bank."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from ..schemas import UNCATEGORIZED, Question

# Fixed business constants, not calibrated against real results.
POINTS_PER_WEIGHT = 10
MINUTES_PER_QUESTION = 2
MIN_TOTAL_MINUTES = 5
MIN_CATEGORY_MINUTES = 3
MAX_EXPECTED_AVERAGE = 100
MIN_EXPECTED_AVERAGE = 40


@dataclass(slots=True)
class CategoryBreakdown:
    count: int
    estimated_minutes: int
    points: int


@dataclass(slots=True)
class AssessmentAggregates:
    """Aggregate view recomputed on every bank mutation."""

    total_points: int
    total_questions: int
    estimated_minutes: int
    expected_average_score_percent: int
    categories: dict[str, CategoryBreakdown] = field(default_factory=dict)


class AggregateCalculator:
    """Pure function of the current bank and category list."""

    def compute(
        self,
        questions: Iterable[Question],
        categories: Iterable[str] = (),
    ) -> AssessmentAggregates:
        items = list(questions)
        total_questions = len(items)

        counts: dict[str, int] = {name: 0 for name in categories}
        for question in items:
            name = question.category or UNCATEGORIZED
            counts[name] = counts.get(name, 0) + 1

        return AssessmentAggregates(
            total_points=sum(question.weight for question in items) * POINTS_PER_WEIGHT,
            total_questions=total_questions,
            estimated_minutes=max(MIN_TOTAL_MINUTES, round(total_questions * MINUTES_PER_QUESTION)),
            expected_average_score_percent=max(
                MIN_EXPECTED_AVERAGE, MAX_EXPECTED_AVERAGE - total_questions
            ),
            categories={name: self.breakdown(count) for name, count in counts.items()},
        )

    @staticmethod
    def breakdown(count: int) -> CategoryBreakdown:
        return CategoryBreakdown(
            count=count,
            estimated_minutes=max(MIN_CATEGORY_MINUTES, round(count * MINUTES_PER_QUESTION)),
            points=count * POINTS_PER_WEIGHT,
        )


__all__ = [
    "AggregateCalculator",
    "AssessmentAggregates",
    "CategoryBreakdown",
    "MINUTES_PER_QUESTION",
    "MIN_CATEGORY_MINUTES",
    "MIN_EXPECTED_AVERAGE",
    "MIN_TOTAL_MINUTES",
    "POINTS_PER_WEIGHT",
]
