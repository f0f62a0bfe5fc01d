"""Ordered question bank and its mutation API.

The bank is driven by an editor that may race edits against deletes, so every
lookup miss (unknown id, out-of-range option index) is a silent no-op.
"""

from __future__ import annotations

import uuid
from collections import Counter
from typing import Any, Callable, Iterable, Iterator, Literal, Mapping

from ..schemas import UNCATEGORIZED, Question

InsertMode = Literal["replace", "append"]

EDITABLE_FIELDS: frozenset[str] = frozenset(
    {"kind", "prompt", "options", "weight", "difficulty", "category"}
)


def new_question_id(prefix: str = "q") -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


class QuestionBank:
    """Single source of truth for authored questions."""

    def __init__(
        self,
        questions: Iterable[Question] | None = None,
        *,
        id_factory: Callable[[str], str] | None = None,
    ) -> None:
        self._questions: list[Question] = []
        self._id_factory = id_factory or new_question_id
        if questions:
            self.insert_batch(questions, "append")

    def insert_batch(self, questions: Iterable[Question], mode: InsertMode = "replace") -> list[Question]:
        if mode not in ("replace", "append"):
            raise ValueError(f"Unsupported insert mode: {mode!r}")
        if mode == "replace":
            self._questions = []
        taken = {question.id for question in self._questions}
        for question in questions:
            copy = question.model_copy(deep=True)
            if copy.id in taken:
                copy = copy.model_copy(update={"id": self._id_factory("q")})
            taken.add(copy.id)
            self._questions.append(copy)
        return self.questions()

    def insert_manual(
        self,
        partial: Mapping[str, Any] | None = None,
        *,
        difficulty: str = "intermediate",
    ) -> Question:
        """Append a blank text question with a fresh id."""
        data: dict[str, Any] = {
            "kind": "text",
            "prompt": "",
            "options": [],
            "weight": 1,
            "difficulty": difficulty,
            "category": UNCATEGORIZED,
        }
        data.update({key: value for key, value in (partial or {}).items() if key in EDITABLE_FIELDS})
        data["id"] = self._id_factory("manual")
        question = Question.model_validate(data)
        self._questions.append(question)
        return question.model_copy(deep=True)

    def update_field(self, question_id: str, field: str, value: Any) -> list[Question]:
        if field not in EDITABLE_FIELDS:
            raise ValueError(f"Unknown question field: {field!r}")
        index = self._index(question_id)
        if index is None:
            return self.questions()
        data = self._questions[index].model_dump(mode="python")
        data[field] = value
        self._questions[index] = Question.model_validate(data)
        return self.questions()

    def add_option(self, question_id: str, value: str = "") -> list[Question]:
        index = self._index(question_id)
        if index is None or self._questions[index].kind != "multiple_choice":
            return self.questions()
        question = self._questions[index]
        self._questions[index] = question.model_copy(update={"options": [*question.options, value]})
        return self.questions()

    def update_option(self, question_id: str, option_index: int, value: str) -> list[Question]:
        index = self._index(question_id)
        if index is None:
            return self.questions()
        options = list(self._questions[index].options)
        if not 0 <= option_index < len(options):
            return self.questions()
        options[option_index] = value
        self._questions[index] = self._questions[index].model_copy(update={"options": options})
        return self.questions()

    def remove_option(self, question_id: str, option_index: int) -> list[Question]:
        index = self._index(question_id)
        if index is None:
            return self.questions()
        options = list(self._questions[index].options)
        if not 0 <= option_index < len(options):
            return self.questions()
        del options[option_index]
        self._questions[index] = self._questions[index].model_copy(update={"options": options})
        return self.questions()

    def remove(self, question_id: str) -> list[Question]:
        self._questions = [q for q in self._questions if q.id != question_id]
        return self.questions()

    def clear(self) -> None:
        self._questions = []

    def get(self, question_id: str) -> Question | None:
        index = self._index(question_id)
        return None if index is None else self._questions[index].model_copy(deep=True)

    def questions(self) -> list[Question]:
        return [question.model_copy(deep=True) for question in self._questions]

    def snapshot(self) -> list[dict[str, Any]]:
        return [question.model_dump(mode="json") for question in self._questions]

    def category_counts(self) -> dict[str, int]:
        return dict(Counter(question.category or UNCATEGORIZED for question in self._questions))

    def _index(self, question_id: str) -> int | None:
        for idx, question in enumerate(self._questions):
            if question.id == question_id:
                return idx
        return None

    def __len__(self) -> int:
        return len(self._questions)

    def __iter__(self) -> Iterator[Question]:
        return iter(self.questions())


__all__ = ["EDITABLE_FIELDS", "InsertMode", "QuestionBank", "new_question_id"]
