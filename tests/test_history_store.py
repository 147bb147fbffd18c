from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from grove.errors import MalformedRecordError
from grove.storage import HistoryStore, Outcome, SessionRecord
from grove.storage.history import decode_record, encode_record
from grove.templates import default_template

START = datetime(2026, 10, 18, 9, 30, tzinfo=timezone(timedelta(hours=2)))


def make_record(label: str = "focus", outcome: Outcome = Outcome.COMPLETED, **kwargs) -> SessionRecord:
    defaults = dict(
        tree_name="default",
        label=label,
        start_time=START,
        duration=80,
        outcome=outcome,
        art=default_template().final_stage,
    )
    defaults.update(kwargs)
    return SessionRecord(**defaults)


def test_record_line_format() -> None:
    line = encode_record(make_record(art=None))

    assert "\n" not in line
    assert "2026-10-18T09:30:00+02:00" in line
    assert "01:20" in line
    assert decode_record(line) == make_record(art=None)


def test_missing_history_is_empty(tmp_path: Path) -> None:
    store = HistoryStore(tmp_path / "history.yaml")

    assert store.load() == []


def test_append_preserves_order_and_loads_twice(tmp_path: Path) -> None:
    store = HistoryStore(tmp_path / "history.yaml")
    first = make_record("a")
    second = make_record("b", Outcome.ABORTED, start_time=START + timedelta(hours=1))

    store.append(first)
    store.append(second)

    assert store.load() == [first, second]
    assert HistoryStore(store.path).load() == [first, second]


def test_append_never_rewrites_existing_lines(tmp_path: Path) -> None:
    store = HistoryStore(tmp_path / "history.yaml")
    store.append(make_record("a"))
    before = store.path.read_text(encoding="utf-8")

    store.append(make_record("b"))

    assert store.path.read_text(encoding="utf-8").startswith(before)


def test_malformed_history_line_is_fatal_by_default(tmp_path: Path) -> None:
    store = HistoryStore(tmp_path / "history.yaml")
    store.append(make_record("a"))
    with open(store.path, "a", encoding="utf-8") as f:
        f.write("{tree: default, label: b, start: yesterday, duration: '00:20'}\n")

    with pytest.raises(MalformedRecordError) as excinfo:
        store.load()
    assert excinfo.value.line_number == 2


def test_malformed_history_line_skipped_when_ignoring(tmp_path: Path) -> None:
    path = tmp_path / "history.yaml"
    good = make_record("a")
    HistoryStore(path).append(good)
    with open(path, "a", encoding="utf-8") as f:
        f.write("[not, a, mapping]\n")

    store = HistoryStore(path, ignore_errors=True)

    assert store.load() == [good]
    assert len(store.errors) == 1
