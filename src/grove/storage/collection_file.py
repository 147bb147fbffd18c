"""Whole-file persistence for the tree collection."""

from __future__ import annotations

import logging
from pathlib import Path

from ..collection import CollisionPolicy, TreeCollection
from ..templates.codec import decode_templates, encode_templates
from .files import atomic_write_text, read_text

logger = logging.getLogger(__name__)


def load_collection(path: Path, *, ignore_errors: bool = False) -> TreeCollection:
    """Load the collection stored at ``path``.

    A missing file yields a collection seeded with the built-in trees.
    Duplicate names in the file are merged with the rename policy so no
    entry is lost.
    """

    text = read_text(path)
    if text is None:
        logger.debug("No collection at %s; seeding built-in trees", path)
        return TreeCollection.with_builtins()

    decoded = decode_templates(text, ignore_errors=ignore_errors)
    collection = TreeCollection()
    report = collection.import_templates(decoded.templates, policy=CollisionPolicy.RENAME)
    for old, new in report.renamed:
        logger.warning("Duplicate tree '%s' in %s loaded as '%s'", old, path, new)
    return collection


def save_collection(path: Path, collection: TreeCollection) -> None:
    atomic_write_text(path, encode_templates(collection))


__all__ = ["load_collection", "save_collection"]
