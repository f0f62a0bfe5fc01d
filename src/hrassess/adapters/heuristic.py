"""Offline stand-ins used when no AI endpoint is configured."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog
from rapidfuzz import fuzz

FALLBACK_SKILLS: tuple[str, ...] = (
    "JavaScript",
    "TypeScript",
    "React",
    "Node.js",
    "HTML",
    "CSS",
    "SQL",
    "Python",
    "Java",
    "AWS",
    "Docker",
    "Kubernetes",
    "CI/CD",
    "Testing",
    "Leadership",
    "Communication",
)

CATEGORY_KEYWORDS: dict[str, tuple[str, ...]] = {
    "Technical": (
        "react", "node", "javascript", "typescript", "java", "python",
        "aws", "docker", "kubernetes", "sql", "html", "css",
    ),
    "Functional": ("product", "qa", "scrum", "kanban", "pm"),
    "Soft skills": ("communication", "leadership", "team", "collaboration", "ownership", "problem"),
    "Language": ("english", "french", "spanish", "german"),
}


@dataclass
class HeuristicExtractionConfig:
    """Thresholds for vocabulary matching."""

    min_similarity: float = 90.0
    default_duration: int = 45
    fallback_count: int = 6


class HeuristicExtractionService:
    """Keyword-based analysis speaking the extraction service protocol."""

    def __init__(self, *, config: HeuristicExtractionConfig | None = None) -> None:
        self._config = config or HeuristicExtractionConfig()
        self._logger = structlog.get_logger(__name__)

    def analyze(self, payload: dict[str, Any]) -> dict[str, Any]:
        text = str(payload.get("text") or "")
        prefer_types = payload.get("preferTypes") or []
        lowered = text.lower()

        skills = [skill for skill in FALLBACK_SKILLS if self._mentions(lowered, skill.lower())]
        categories = {
            name: [skill for skill in skills if any(key in skill.lower() for key in keywords)]
            for name, keywords in CATEGORY_KEYWORDS.items()
        }
        self._logger.debug("heuristic.analyzed", matched=len(skills))

        return {
            "skills": skills or list(FALLBACK_SKILLS[: self._config.fallback_count]),
            "types": list(prefer_types) or ["technical"],
            "duration": self._config.default_duration,
            "difficulty": "intermediate",
            "languages": ["English"],
            "tags": [],
            "categories": categories,
        }

    def _mentions(self, text: str, skill: str) -> bool:
        if skill in text:
            return True
        if len(skill) <= 3:
            return False
        return fuzz.partial_ratio(skill, text) >= self._config.min_similarity


class MockGenerationService:
    """Canned question sets keyed by assessment type."""

    MOCK_ANSWER = "Example answer (mock). Configure an AI endpoint for reference answers."

    def generate(self, payload: dict[str, Any]) -> dict[str, Any]:
        assessment_type = payload.get("assessmentType") or "technical"
        level = payload.get("skillLevel") or "intermediate"
        role = str(payload.get("jobTitle") or "Software Engineer").lower()

        if assessment_type == "technical":
            questions = [
                {
                    "type": "multiple_choice",
                    "question": f"What is the most important consideration when designing a scalable {role} solution?",
                    "options": ["Performance optimization", "Code readability", "Security measures", "All of the above"],
                    "weight": 3,
                },
                {
                    "type": "text",
                    "question": f"Describe your approach to handling error scenarios in a {role} application.",
                    "weight": 4,
                },
                {
                    "type": "code",
                    "question": "Write a function that efficiently finds the maximum element in an array.",
                    "weight": 5,
                },
            ]
        elif assessment_type == "personality":
            questions = [
                {"type": "rating", "question": "I prefer to work independently rather than in a team.", "weight": 2},
                {
                    "type": "multiple_choice",
                    "question": "When facing a challenging deadline, you typically:",
                    "options": ["Plan meticulously", "Adapt as needed", "Seek team input", "Focus on priorities"],
                    "weight": 3,
                },
            ]
        else:
            questions = [
                {
                    "type": "multiple_choice",
                    "question": "If A > B and B > C, which statement is always true?",
                    "options": ["A = C", "A > C", "C > A", "Cannot determine"],
                    "weight": 3,
                },
                {
                    "type": "text",
                    "question": "Solve this pattern: 2, 4, 8, 16, ? - Explain your reasoning.",
                    "weight": 4,
                },
            ]
        for question in questions:
            question["difficulty"] = level
        return {"questions": questions}

    def answer(self, payload: dict[str, Any]) -> dict[str, Any]:
        return {"answer": self.MOCK_ANSWER}


__all__ = [
    "CATEGORY_KEYWORDS",
    "FALLBACK_SKILLS",
    "HeuristicExtractionConfig",
    "HeuristicExtractionService",
    "MockGenerationService",
]
