"""Storage abstractions for Grove."""

from .collection_file import load_collection, save_collection
from .history import HistorySink, HistoryStore
from .models import Outcome, SessionRecord

__all__ = [
    "HistorySink",
    "HistoryStore",
    "Outcome",
    "SessionRecord",
    "load_collection",
    "save_collection",
]
