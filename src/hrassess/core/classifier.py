"""Tag-based question categorization."""

from __future__ import annotations

from typing import Iterable, Mapping

from ..schemas import UNCATEGORIZED, Question


def classify(question_text: str, tag_sets: Mapping[str, Iterable[str]]) -> str:
    """Return the first category whose tags occur in the question text.

    Categories are scanned in mapping order and the first hit wins, even when
    a later category matches more tags. Matching is case-insensitive substring
    containment; empty tags never match.
    """
    text = (question_text or "").lower()
    for category, tags in tag_sets.items():
        for tag in tags:
            needle = str(tag).lower()
            if needle and needle in text:
                return category
    return UNCATEGORIZED


class HeuristicClassifier:
    """Assigns categories to freshly generated questions."""

    method = "tag_substring"

    def classify(self, question_text: str, tag_sets: Mapping[str, Iterable[str]]) -> str:
        return classify(question_text, tag_sets)

    def categorize(
        self,
        questions: Iterable[Question],
        tag_sets: Mapping[str, Iterable[str]],
    ) -> list[Question]:
        frozen = {name: [str(tag) for tag in tags] for name, tags in tag_sets.items()}
        return [
            question.model_copy(update={"category": classify(question.prompt, frozen)})
            for question in questions
        ]


__all__ = ["HeuristicClassifier", "classify"]
