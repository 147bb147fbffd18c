from __future__ import annotations

import pytest
from pydantic import ValidationError

from grove.errors import MalformedRecordError
from grove.templates import (
    Cell,
    Stage,
    TreeTemplate,
    builtin_templates,
    decode_template,
    decode_templates,
    encode_template,
    encode_templates,
)
from grove.templates.codec import decode_cell, encode_cell

GREEN = Cell(bg=(30, 110, 0))
BARK = Cell(bg=(50, 30, 0), fg=(255, 255, 255), symbol="#")


def make_stage(cell: Cell, height: int = 2, width: int = 3) -> Stage:
    return Stage(rows=tuple(tuple(cell for _ in range(width)) for _ in range(height)))


def make_template(name: str = "oak", stages: int = 3) -> TreeTemplate:
    return TreeTemplate(
        name=name,
        default_duration=25,
        default_label="deep work",
        stages=tuple(make_stage(GREEN if i % 2 else BARK) for i in range(stages)),
    )


def test_builtins_are_well_formed() -> None:
    templates = builtin_templates()

    assert [t.name for t in templates] == ["default", "default-2", "default-3"]
    for template in templates:
        assert template.stage_count == 4
        assert template.dimensions == (5, 5)
        assert template.default_duration == 20
        assert template.default_label == "standard"
        assert template.cost() <= template.default_duration


def test_template_rejects_bad_names_and_shapes() -> None:
    with pytest.raises(ValidationError):
        TreeTemplate(name="oak/1", stages=(make_stage(GREEN),))
    with pytest.raises(ValidationError):
        TreeTemplate(name="   ", stages=(make_stage(GREEN),))
    with pytest.raises(ValidationError):
        TreeTemplate(name="oak", stages=())
    with pytest.raises(ValidationError):
        TreeTemplate(name="oak", stages=(make_stage(GREEN), make_stage(GREEN, width=4)))
    with pytest.raises(ValidationError):
        TreeTemplate(name="oak", default_duration=0, stages=(make_stage(GREEN),))
    with pytest.raises(ValidationError):
        Stage(rows=((GREEN, GREEN), (GREEN,)))


def test_cell_validates_colours_and_symbol() -> None:
    with pytest.raises(ValidationError):
        Cell(bg=(256, 0, 0))
    with pytest.raises(ValidationError):
        Cell(symbol="ab")


def test_templates_are_immutable() -> None:
    template = make_template()
    with pytest.raises(ValidationError):
        template.name = "elm"  # type: ignore[misc]

    renamed = template.renamed("elm")

    assert renamed.name == "elm"
    assert template.name == "oak"
    assert renamed.stages == template.stages


def test_cost_grows_with_colour() -> None:
    plain = TreeTemplate(name="plain", stages=(Stage(rows=((Cell(),),)),))
    red_bg = TreeTemplate(name="red", stages=(Stage(rows=((Cell(bg=(255, 0, 0)),),)),))
    vivid = TreeTemplate(
        name="vivid",
        stages=(Stage(rows=((Cell(bg=(255, 0, 0), fg=(0, 0, 255), symbol="*"),),)),),
    )

    assert plain.cost() == 15
    assert red_bg.cost() == 75
    assert vivid.cost() == 115


def test_cost_uses_final_stage() -> None:
    default, _, apples = builtin_templates()

    assert default.cost() == 15
    assert apples.cost() == 20


def test_cell_token_layout() -> None:
    token = encode_cell(Cell(bg=(30, 110, 0), fg=(255, 0, 0), symbol="o"))

    assert token == "1e6e00ff0000o"
    assert decode_cell(token) == Cell(bg=(30, 110, 0), fg=(255, 0, 0), symbol="o")
    with pytest.raises(ValueError):
        decode_cell("zz6e00ff0000o")


def test_template_line_roundtrip() -> None:
    template = make_template()
    line = encode_template(template)

    assert "\n" not in line
    assert decode_template(line) == template


def test_builtin_lines_roundtrip_with_space_symbols() -> None:
    text = encode_templates(builtin_templates())

    assert len(text.splitlines()) == 3
    assert decode_templates(text).templates == builtin_templates()


def test_decode_skips_comments_and_blank_lines() -> None:
    text = "# shared by a friend\n\n" + encode_template(make_template()) + "\n\n"

    result = decode_templates(text)

    assert [t.name for t in result.templates] == ["oak"]
    assert result.errors == []


def test_decode_reports_malformed_line_number() -> None:
    text = encode_template(make_template()) + "\n{name: broken}\n"

    with pytest.raises(MalformedRecordError) as excinfo:
        decode_templates(text)

    assert excinfo.value.line_number == 2
    assert "stages" in str(excinfo.value)


def test_decode_ignore_errors_keeps_good_lines() -> None:
    text = "\n".join(
        [
            encode_template(make_template("oak")),
            "not: [valid",
            "{name: bad/name, stages: [[['1e6e00000000 ']]]}",
            encode_template(make_template("elm")),
        ]
    )

    result = decode_templates(text, ignore_errors=True)

    assert [t.name for t in result.templates] == ["oak", "elm"]
    assert [error.line_number for error in result.errors] == [2, 3]
