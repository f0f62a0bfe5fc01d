from __future__ import annotations

import pytest
from pydantic import ValidationError

from hrassess.core import BUILTIN_TEMPLATES, BlockOutline, TemplateCatalog
from hrassess.errors import TemplateNotFound


def test_catalog_contains_builtin_templates():
    catalog = TemplateCatalog()

    assert [item.id for item in catalog.templates()] == [item.id for item in BUILTIN_TEMPLATES]
    assert catalog.get("tpl_be_java").tags == ["Java", "Spring", "Architecture"]


def test_catalog_accepts_extra_templates_and_overrides():
    catalog = TemplateCatalog(
        [
            {
                "id": "tpl_data",
                "name": "Data Engineer",
                "blocks": [{"kind": "code", "label": "SQL", "duration": 20}],
            }
        ],
        include_builtin=False,
    )

    assert [item.id for item in catalog.templates()] == ["tpl_data"]
    assert catalog.get("tpl_data").blocks[0].weight == 1


def test_unknown_template_raises():
    with pytest.raises(TemplateNotFound):
        TemplateCatalog().get("tpl_missing")


def test_outline_appends_blocks_and_totals_minutes():
    outline = BlockOutline()

    first = outline.add(kind="multiple_choice", label="MCQ", duration=10, weight=2)
    outline.add(kind="code", label="Coding", duration=25, difficulty="advanced")

    assert first.id.startswith("block_")
    assert [block.label for block in outline.blocks()] == ["MCQ", "Coding"]
    assert outline.total_minutes() == 35
    assert len(outline) == 2


def test_outline_extends_from_template():
    outline = BlockOutline()
    template = TemplateCatalog().get("tpl_fe_senior")

    added = outline.extend_from_template(template)

    assert [block.kind for block in added] == ["multiple_choice", "code", "debugging"]
    assert outline.total_minutes() == 65


def test_outline_rejects_invalid_blocks():
    outline = BlockOutline()

    with pytest.raises(ValidationError):
        outline.add(kind="essay", label="Essay", duration=10)
    with pytest.raises(ValidationError):
        outline.add(kind="code", label="Zero", duration=0)
    assert len(outline) == 0
