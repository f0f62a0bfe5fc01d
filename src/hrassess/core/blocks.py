"""Block outline builder and assessment templates."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from ..errors import TemplateNotFound
from ..schemas import AssessmentBlock, AssessmentTemplate
from .bank import new_question_id

BUILTIN_TEMPLATES: tuple[AssessmentTemplate, ...] = (
    AssessmentTemplate(
        id="tpl_fe_senior",
        name="Frontend Senior (React)",
        description="Balanced MCQ, coding and debugging tasks focused on React/JS/TS.",
        tags=["React", "TypeScript", "Debugging"],
        blocks=[
            {"kind": "multiple_choice", "label": "React/TS MCQ", "duration": 15, "weight": 5, "difficulty": "intermediate"},
            {"kind": "code", "label": "React Coding", "duration": 30, "weight": 8, "difficulty": "advanced"},
            {"kind": "debugging", "label": "Bug Fixing", "duration": 20, "weight": 6, "difficulty": "intermediate"},
        ],
    ),
    AssessmentTemplate(
        id="tpl_be_java",
        name="Backend Senior (Java)",
        description="Java, Spring, architecture and debugging focus.",
        tags=["Java", "Spring", "Architecture"],
        blocks=[
            {"kind": "multiple_choice", "label": "Java/Spring MCQ", "duration": 15, "weight": 5, "difficulty": "intermediate"},
            {"kind": "architecture", "label": "System Design", "duration": 25, "weight": 7, "difficulty": "advanced"},
            {"kind": "debugging", "label": "Log Analysis", "duration": 15, "weight": 5, "difficulty": "intermediate"},
        ],
    ),
    AssessmentTemplate(
        id="tpl_fullstack_mid",
        name="Fullstack Mid",
        description="Fullstack tasks with moderate coding and MCQ.",
        tags=["Node", "React", "REST"],
        blocks=[
            {"kind": "multiple_choice", "label": "Web MCQ", "duration": 12, "weight": 4, "difficulty": "beginner"},
            {"kind": "code", "label": "API Coding", "duration": 25, "weight": 6, "difficulty": "intermediate"},
        ],
    ),
)


class TemplateCatalog:
    """Built-in templates plus any loaded from configuration."""

    def __init__(
        self,
        extra: Iterable[AssessmentTemplate | Mapping[str, Any]] | None = None,
        *,
        include_builtin: bool = True,
    ) -> None:
        self._templates: dict[str, AssessmentTemplate] = {}
        if include_builtin:
            for template in BUILTIN_TEMPLATES:
                self._templates[template.id] = template
        for item in extra or []:
            template = AssessmentTemplate.model_validate(item)
            self._templates[template.id] = template

    def get(self, template_id: str) -> AssessmentTemplate:
        try:
            return self._templates[template_id]
        except KeyError as exc:
            raise TemplateNotFound(f"Unknown template: {template_id!r}") from exc

    def templates(self) -> list[AssessmentTemplate]:
        return list(self._templates.values())


class BlockOutline:
    """Append-only outline of structure groupings (MCQ, Coding, ...)."""

    def __init__(self) -> None:
        self._blocks: list[AssessmentBlock] = []

    def add(
        self,
        *,
        kind: str,
        label: str,
        duration: int,
        weight: int = 1,
        difficulty: str = "intermediate",
    ) -> AssessmentBlock:
        block = AssessmentBlock(
            id=new_question_id("block"),
            kind=kind,
            label=label,
            duration=duration,
            weight=weight,
            difficulty=difficulty,
        )
        self._blocks.append(block)
        return block

    def extend_from_template(self, template: AssessmentTemplate) -> list[AssessmentBlock]:
        return [self.add(**block.model_dump()) for block in template.blocks]

    def blocks(self) -> list[AssessmentBlock]:
        return [block.model_copy() for block in self._blocks]

    def total_minutes(self) -> int:
        return sum(block.duration for block in self._blocks)

    def __len__(self) -> int:
        return len(self._blocks)


__all__ = ["BUILTIN_TEMPLATES", "BlockOutline", "TemplateCatalog"]
