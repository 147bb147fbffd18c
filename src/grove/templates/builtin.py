"""Trees shipped with Grove, seeded into a fresh collection."""

from __future__ import annotations

from .models import Cell, Stage, TreeTemplate

DEFAULT_TREE_NAME = "default"

_PALETTE = {
    ".": Cell(),
    "G": Cell(bg=(30, 110, 0)),
    "B": Cell(bg=(50, 30, 0)),
    "o": Cell(bg=(30, 110, 0), fg=(255, 0, 0), symbol="o"),
}

_SEED = (".....", ".....", ".....", ".....", "..B..")
_SPROUT = (".....", ".....", ".....", "..G..", "..B..")

_ART: dict[str, tuple[tuple[str, ...], ...]] = {
    "default": (
        _SEED,
        _SPROUT,
        (".....", ".....", ".GGG.", "..B..", "..B.."),
        (".....", ".GGG.", "GGGGG", "..B..", "..B.."),
    ),
    "default-2": (
        _SEED,
        _SPROUT,
        (".....", "..G..", ".GGG.", ".GGG.", "..B.."),
        ("..G..", ".GGG.", ".GGG.", "GGGGG", "..B.."),
    ),
    "default-3": (
        _SEED,
        _SPROUT,
        (".....", "..G..", ".GGG.", "..B..", "..B.."),
        ("..G..", ".GGo.", "ooGGo", "..B..", "..B.."),
    ),
}


def _stage(art: tuple[str, ...]) -> Stage:
    return Stage(rows=tuple(tuple(_PALETTE[key] for key in line) for line in art))


def builtin_templates() -> list[TreeTemplate]:
    """Return fresh copies of the built-in trees, ``default`` first."""

    return [
        TreeTemplate(name=name, stages=tuple(_stage(art) for art in stages))
        for name, stages in _ART.items()
    ]


def default_template() -> TreeTemplate:
    return builtin_templates()[0]


__all__ = ["DEFAULT_TREE_NAME", "builtin_templates", "default_template"]
