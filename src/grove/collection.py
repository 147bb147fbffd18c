"""The user's collection of tree templates."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator

from .errors import NameCollisionError, NotFoundError
from .templates.builtin import builtin_templates
from .templates.models import TreeTemplate

logger = logging.getLogger(__name__)


class CollisionPolicy(str, Enum):
    RENAME = "rename"
    REJECT = "reject"


class ListOrder(str, Enum):
    ALL = "all"
    HEAD = "head"
    TAIL = "tail"
    RANDOM = "random"


@dataclass(slots=True)
class ImportReport:
    """Outcome of merging incoming templates into a collection."""

    merged: list[str] = field(default_factory=list)
    renamed: list[tuple[str, str]] = field(default_factory=list)
    rejected: list[str] = field(default_factory=list)
    errors: list[NameCollisionError] = field(default_factory=list)

    @property
    def merged_count(self) -> int:
        return len(self.merged)


@dataclass(slots=True)
class ExportResult:
    templates: list[TreeTemplate]
    missing: list[str] = field(default_factory=list)


class TreeCollection:
    """Ordered mapping of unique tree names to templates."""

    def __init__(self, templates: Iterable[TreeTemplate] | None = None) -> None:
        self._trees: dict[str, TreeTemplate] = {}
        for template in templates or []:
            if template.name in self._trees:
                raise NameCollisionError(template.name)
            self._trees[template.name] = template

    @classmethod
    def with_builtins(cls) -> "TreeCollection":
        return cls(builtin_templates())

    def __len__(self) -> int:
        return len(self._trees)

    def __iter__(self) -> Iterator[TreeTemplate]:
        return iter(list(self._trees.values()))

    def __contains__(self, name: object) -> bool:
        return name in self._trees

    @property
    def names(self) -> list[str]:
        return list(self._trees)

    def lookup(self, name: str) -> TreeTemplate | None:
        return self._trees.get(name)

    def require(self, name: str) -> TreeTemplate:
        template = self._trees.get(name)
        if template is None:
            raise NotFoundError(f"Failed to find tree '{name}' in the collection")
        return template

    def list(
        self,
        order: ListOrder = ListOrder.ALL,
        limit: int | None = None,
        *,
        rng: random.Random | None = None,
    ) -> list[TreeTemplate]:
        """Return templates in collection order, or a head/tail/random subset.

        A ``limit`` larger than the collection yields every template.
        """

        templates = list(self._trees.values())
        if order is ListOrder.ALL or limit is None:
            if order is ListOrder.RANDOM:
                (rng or random.Random()).shuffle(templates)
            return templates
        if limit < 0:
            raise ValueError("limit must be >= 0")

        count = min(limit, len(templates))
        if order is ListOrder.HEAD:
            return templates[:count]
        if order is ListOrder.TAIL:
            return templates[len(templates) - count :]
        return (rng or random.Random()).sample(templates, count)

    def _free_name(self, name: str) -> str:
        suffix = 1
        while f"{name}-{suffix}" in self._trees:
            suffix += 1
        return f"{name}-{suffix}"

    def import_templates(
        self,
        incoming: Iterable[TreeTemplate],
        policy: CollisionPolicy = CollisionPolicy.REJECT,
    ) -> ImportReport:
        """Merge ``incoming`` into the collection.

        Free names are inserted unchanged. Occupied names are renamed to the
        first free ``name-k`` (k >= 1) under ``RENAME`` or skipped and
        reported under ``REJECT``; the rest of the batch always proceeds.
        """

        report = ImportReport()
        for template in incoming:
            name = template.name
            if name in self._trees:
                if policy is CollisionPolicy.REJECT:
                    error = NameCollisionError(name)
                    logger.warning("Rejected tree: %s", error)
                    report.rejected.append(name)
                    report.errors.append(error)
                    continue
                new_name = self._free_name(name)
                report.renamed.append((name, new_name))
                template = template.renamed(new_name)
                name = new_name
            self._trees[name] = template
            report.merged.append(name)
        logger.info(
            "Imported %d tree(s), renamed %d, rejected %d",
            report.merged_count,
            len(report.renamed),
            len(report.rejected),
        )
        return report

    def export(self, names: Iterable[str] | None = None) -> ExportResult:
        """Return the named templates (all of them when ``names`` is None)."""

        if names is None:
            return ExportResult(templates=list(self._trees.values()))
        result = ExportResult(templates=[])
        for name in names:
            template = self._trees.get(name)
            if template is None:
                result.missing.append(name)
            else:
                result.templates.append(template)
        return result

    def erase(self, names: Iterable[str]) -> int:
        removed = 0
        for name in names:
            if self._trees.pop(name, None) is not None:
                removed += 1
        return removed


__all__ = [
    "CollisionPolicy",
    "ExportResult",
    "ImportReport",
    "ListOrder",
    "TreeCollection",
]
