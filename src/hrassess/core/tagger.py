"""Category name to tag set mapping."""

from __future__ import annotations

from typing import Any, Iterable, Mapping


def normalize_tag_map(raw: Mapping[str, Any] | None) -> dict[str, list[str]]:
    """Trim names and tags, drop empties and de-duplicate case-sensitively.

    Category order follows the input mapping; the classifier relies on it.
    """
    normalized: dict[str, list[str]] = {}
    for name, tags in (raw or {}).items():
        category = str(name).strip()
        if not category:
            continue
        bucket = normalized.setdefault(category, [])
        if isinstance(tags, str):
            tags = [tags]
        for tag in tags or []:
            value = str(tag).strip()
            if value and value not in bucket:
                bucket.append(value)
    return normalized


class CategoryTagger:
    """User-curated tag sets steering generation and classification."""

    def __init__(self, initial: Mapping[str, Iterable[str]] | None = None) -> None:
        self._tags: dict[str, list[str]] = normalize_tag_map(initial)

    def replace_all(self, new_map: Mapping[str, Iterable[str]] | None) -> dict[str, list[str]]:
        self._tags = normalize_tag_map(new_map)
        return self.as_dict()

    def add_category(self, name: str) -> None:
        category = (name or "").strip()
        if category:
            self._tags.setdefault(category, [])

    def add_tag(self, category: str, tag: str) -> list[str]:
        name = (category or "").strip()
        value = (tag or "").strip()
        if not name:
            return []
        if not value:
            return list(self._tags.get(name, []))
        bucket = self._tags.setdefault(name, [])
        if value not in bucket:
            bucket.append(value)
        return list(bucket)

    def remove_tag(self, category: str, tag: str) -> list[str]:
        bucket = self._tags.get(category)
        if bucket is None:
            return []
        if tag in bucket:
            bucket.remove(tag)
        return list(bucket)

    def categories(self) -> list[str]:
        return list(self._tags)

    def tags(self, category: str) -> list[str]:
        return list(self._tags.get(category, []))

    def focus_areas(self) -> list[str]:
        """Flattened unique tags across all categories."""
        seen: list[str] = []
        for bucket in self._tags.values():
            for tag in bucket:
                if tag not in seen:
                    seen.append(tag)
        return seen

    def brief(self) -> str:
        return " | ".join(f"{name}: {', '.join(tags)}" for name, tags in self._tags.items() if tags)

    def as_dict(self) -> dict[str, list[str]]:
        return {name: list(tags) for name, tags in self._tags.items()}

    def __contains__(self, category: object) -> bool:
        return category in self._tags

    def __len__(self) -> int:
        return len(self._tags)


__all__ = ["CategoryTagger", "normalize_tag_map"]
