"""Append-only history of growth sessions."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Protocol

from pydantic import ValidationError

from ..errors import GroveError, MalformedRecordError
from ..templates.codec import decode_stage, dump_line, encode_stage, iter_lines, load_line
from ..timespec import format_duration, parse_duration
from .files import append_line, read_text
from .models import Outcome, SessionRecord

logger = logging.getLogger(__name__)


class HistorySink(Protocol):
    """Protocol for the minimal history API the growth engine needs."""

    def append(self, record: SessionRecord) -> None:
        ...


def encode_record(record: SessionRecord) -> str:
    document: dict[str, Any] = {
        "tree": record.tree_name,
        "label": record.label,
        "start": record.start_time.isoformat(timespec="seconds"),
        "duration": format_duration(record.duration),
        "outcome": record.outcome.value,
    }
    if record.art is not None:
        document["art"] = encode_stage(record.art)
    return dump_line(document)


def _parse_start(value: Any) -> datetime:
    if isinstance(value, datetime):
        start = value
    else:
        start = datetime.fromisoformat(str(value))
    if start.tzinfo is None:
        start = start.astimezone()
    return start


def decode_record(line: str, *, line_number: int | None = None) -> SessionRecord:
    document = load_line(line, line_number=line_number)
    missing = {"tree", "label", "start", "duration"} - document.keys()
    if missing:
        raise MalformedRecordError(
            f"missing field(s): {', '.join(sorted(missing))}", line_number=line_number
        )
    try:
        art = document.get("art")
        return SessionRecord(
            tree_name=str(document["tree"]),
            label=str(document["label"]),
            start_time=_parse_start(document["start"]),
            duration=parse_duration(str(document["duration"])),
            outcome=Outcome(document.get("outcome", Outcome.COMPLETED.value)),
            art=decode_stage(art) if art is not None else None,
        )
    except (GroveError, TypeError, ValueError, ValidationError) as exc:
        raise MalformedRecordError(str(exc), line_number=line_number) from exc


class HistoryStore:
    """File-backed history: one encoded session record per line."""

    def __init__(self, path: Path, *, ignore_errors: bool = False) -> None:
        self._path = Path(path)
        self._ignore_errors = ignore_errors
        self.errors: list[MalformedRecordError] = []

    @property
    def path(self) -> Path:
        return self._path

    def append(self, record: SessionRecord) -> None:
        append_line(self._path, encode_record(record))
        logger.info(
            "Recorded %s session of '%s' (%s)",
            record.outcome.value,
            record.tree_name,
            record.label,
        )

    def load(self) -> list[SessionRecord]:
        """Load every record in insertion order.

        Malformed lines are fatal unless the store was opened with
        ``ignore_errors``, in which case they are logged and collected in
        :attr:`errors`.
        """

        text = read_text(self._path)
        self.errors = []
        if not text:
            return []

        records: list[SessionRecord] = []
        for number, line in iter_lines(text):
            try:
                records.append(decode_record(line, line_number=number))
            except MalformedRecordError as exc:
                if not self._ignore_errors:
                    raise
                logger.warning("Skipping malformed history entry: %s", exc)
                self.errors.append(exc)
        return records


__all__ = ["HistorySink", "HistoryStore", "decode_record", "encode_record"]
