"""Line-oriented exchange format for tree templates.

Every template occupies exactly one line: a YAML flow mapping such as::

    {name: oak, duration: 20, label: standard, stages: [[['1e6e00000000 ', ...], ...], ...]}

A cell token is twelve hex digits (background then foreground RGB) followed
by the cell's symbol. Blank lines and lines starting with ``#`` are ignored,
so a collection file is simply the concatenation of its templates' lines.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator

import yaml
from pydantic import ValidationError

from ..errors import MalformedRecordError
from .models import Cell, Stage, TreeTemplate

logger = logging.getLogger(__name__)

_HEX_DIGITS = set("0123456789abcdefABCDEF")


@dataclass(slots=True)
class DecodeResult:
    """Templates parsed from a stream plus the per-line errors that were skipped."""

    templates: list[TreeTemplate] = field(default_factory=list)
    errors: list[MalformedRecordError] = field(default_factory=list)


def encode_cell(cell: Cell) -> str:
    return "".join(f"{channel:02x}" for channel in (*cell.bg, *cell.fg)) + cell.symbol


def decode_cell(token: Any) -> Cell:
    if not isinstance(token, str) or len(token) != 13 or not set(token[:12]) <= _HEX_DIGITS:
        raise ValueError(f"Bad cell token {token!r}")
    channels = [int(token[offset : offset + 2], 16) for offset in range(0, 12, 2)]
    return Cell(bg=tuple(channels[:3]), fg=tuple(channels[3:]), symbol=token[12])


def encode_stage(stage: Stage) -> list[list[str]]:
    return [[encode_cell(cell) for cell in row] for row in stage.rows]


def decode_stage(rows: Any) -> Stage:
    if not isinstance(rows, list) or not all(isinstance(row, list) for row in rows):
        raise ValueError("A stage must be a list of rows of cell tokens")
    return Stage(rows=tuple(tuple(decode_cell(token) for token in row) for row in rows))


def dump_line(document: dict[str, Any]) -> str:
    """Serialize a mapping as a single-line YAML flow mapping."""

    return yaml.safe_dump(
        document,
        default_flow_style=True,
        sort_keys=False,
        allow_unicode=True,
        width=float("inf"),
    ).strip()


def load_line(line: str, *, line_number: int | None = None) -> dict[str, Any]:
    """Parse one line of the exchange format into a mapping."""

    try:
        document = yaml.safe_load(line)
    except yaml.YAMLError as exc:
        raise MalformedRecordError(f"invalid YAML: {exc}", line_number=line_number) from exc
    if not isinstance(document, dict):
        raise MalformedRecordError("expected a mapping", line_number=line_number)
    return document


def iter_lines(text: str) -> Iterator[tuple[int, str]]:
    """Yield ``(line_number, line)`` for every non-blank, non-comment line."""

    for number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        yield number, line


def encode_template(template: TreeTemplate) -> str:
    return dump_line(
        {
            "name": template.name,
            "duration": template.default_duration,
            "label": template.default_label,
            "stages": [encode_stage(stage) for stage in template.stages],
        }
    )


def decode_template(line: str, *, line_number: int | None = None) -> TreeTemplate:
    document = load_line(line, line_number=line_number)
    missing = {"name", "stages"} - document.keys()
    if missing:
        raise MalformedRecordError(
            f"missing field(s): {', '.join(sorted(missing))}", line_number=line_number
        )
    try:
        stages = tuple(decode_stage(rows) for rows in document["stages"] or [])
        return TreeTemplate(
            name=str(document["name"]),
            default_duration=document.get("duration", 20),
            default_label=str(document.get("label", "standard")),
            stages=stages,
        )
    except (TypeError, ValueError, ValidationError) as exc:
        raise MalformedRecordError(str(exc), line_number=line_number) from exc


def encode_templates(templates: Iterable[TreeTemplate]) -> str:
    lines = [encode_template(template) for template in templates]
    return "".join(line + "\n" for line in lines)


def decode_templates(text: str, *, ignore_errors: bool = False) -> DecodeResult:
    """Parse every template line in ``text``.

    With ``ignore_errors`` a malformed line is logged and skipped; otherwise
    the first malformed line aborts the whole decode.
    """

    result = DecodeResult()
    for number, line in iter_lines(text):
        try:
            result.templates.append(decode_template(line, line_number=number))
        except MalformedRecordError as exc:
            if not ignore_errors:
                raise
            logger.warning("Skipping malformed tree: %s", exc)
            result.errors.append(exc)
    return result


__all__ = [
    "DecodeResult",
    "decode_cell",
    "decode_stage",
    "decode_template",
    "decode_templates",
    "dump_line",
    "encode_cell",
    "encode_stage",
    "encode_template",
    "encode_templates",
    "iter_lines",
    "load_line",
]
