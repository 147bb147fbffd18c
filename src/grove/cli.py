"""Command line interface for Grove."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.text import Text

from . import __version__
from .collection import CollisionPolicy, ListOrder, TreeCollection
from .config import GroveSettings, get_settings
from .errors import GroveError, InvalidDurationError, StorageError
from .growth import GrowthEngine, PlainDisplay, RichDisplay, grow, resolve_template
from .rendering import render_art
from .stats import (
    GraphMetric,
    GraphUnit,
    StatsFilter,
    TimeWindow,
    apply_filters,
    bucket_records,
    layout_grid,
    render_graph,
    render_grid,
    render_listing,
)
from .storage import HistoryStore, Outcome, load_collection, save_collection
from .storage.files import atomic_write_text, read_text
from .templates.codec import decode_templates, encode_template, encode_templates
from .templates.models import NAME_PATTERN
from .timespec import format_duration, parse_duration, parse_grid_spec

console = Console(highlight=False, markup=False)
err_console = Console(stderr=True, highlight=False, markup=False)

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Configure root logging for the Grove CLI."""

    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
    )


def _label_arg(value: str) -> str:
    label = value.strip()
    if not label or not NAME_PATTERN.match(label):
        raise argparse.ArgumentTypeError(
            "Illegal characters in label name; use letters, digits, spaces, '-' or '_'"
        )
    return label


def _count_arg(value: str) -> int:
    try:
        count = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected a number, got {value!r}") from exc
    if count < 0:
        raise argparse.ArgumentTypeError("count must be >= 0")
    return count


def _load_collection(args: argparse.Namespace, settings: GroveSettings) -> TreeCollection:
    return load_collection(settings.collection_path, ignore_errors=args.ignore_errors)


# -------------------------
# Commands
# -------------------------

def cmd_grow(args: argparse.Namespace, settings: GroveSettings) -> int:
    collection = _load_collection(args, settings)
    template = resolve_template(collection, args.tree, fallback=settings.default_tree)

    duration = parse_duration(args.duration) if args.duration else template.default_duration
    cost = template.cost()
    if settings.enforce_tree_cost and duration < cost:
        raise InvalidDurationError(
            f"This tree is too expensive. It needs more time ({format_duration(cost)}) to grow."
        )

    display = PlainDisplay(console) if args.no_display else RichDisplay(console)
    engine = GrowthEngine(
        template,
        history=HistoryStore(settings.history_path),
        display=display,
        duration=duration,
        label=args.label,
        show_frames=not args.no_display,
        interval=settings.sample_interval,
    )
    record = grow(engine)

    if record.outcome is Outcome.COMPLETED:
        console.print(
            f"Your tree '{record.tree_name}' has grown! "
            f"({format_duration(record.duration)}, {record.label})"
        )
        return 0
    console.print(f"Your tree '{record.tree_name}' died ;( The attempt was recorded.")
    return 130


def cmd_import(args: argparse.Namespace, settings: GroveSettings) -> int:
    if args.file:
        text = read_text(Path(args.file))
        if text is None:
            raise StorageError(f"Failed to read {args.file}: no such file")
    elif args.trees:
        text = "\n".join(args.trees)
    else:
        args.parser.error("give trees in their shareable format or use -f FILE")

    decoded = decode_templates(text, ignore_errors=args.ignore_errors)
    collection = _load_collection(args, settings)
    policy = CollisionPolicy.RENAME if args.name_change else CollisionPolicy.REJECT
    report = collection.import_templates(decoded.templates, policy=policy)
    save_collection(settings.collection_path, collection)

    console.print(f"Loaded {report.merged_count} trees in total:")
    for name in report.merged:
        console.print(name)
    for old, new in report.renamed:
        console.print(f"renamed '{old}' -> '{new}'")

    if args.error:
        for error in [*decoded.errors, *report.errors]:
            err_console.print(f"Failed to add tree: {error}")
    if report.rejected:
        err_console.print(
            f"Skipped {len(report.rejected)} tree(s) with duplicate names; "
            "use -n to rename them instead"
        )
    return 0


def cmd_export(args: argparse.Namespace, settings: GroveSettings) -> int:
    if not args.all and not args.names:
        args.parser.error("give tree names or use -a to export everything")

    collection = _load_collection(args, settings)
    result = collection.export(None if args.all else args.names)
    for name in result.missing:
        err_console.print(f"No tree named '{name}' in the collection")

    payload = encode_templates(result.templates)
    if args.to_file:
        atomic_write_text(Path(args.to_file), payload)
        console.print(f"Exported {len(result.templates)} tree(s) to {args.to_file}")
    else:
        sys.stdout.write(payload)
    return 1 if result.missing else 0


def cmd_list(args: argparse.Namespace, settings: GroveSettings) -> int:
    collection = _load_collection(args, settings)
    if args.head is not None:
        order, limit = ListOrder.HEAD, args.head
    elif args.tail is not None:
        order, limit = ListOrder.TAIL, args.tail
    elif args.random is not None:
        order, limit = ListOrder.RANDOM, args.random
    else:
        order, limit = ListOrder.ALL, None

    positions = {name: index for index, name in enumerate(collection.names, start=1)}
    for template in collection.list(order, limit):
        if args.export:
            sys.stdout.write(encode_template(template) + "\n")
            continue
        console.print(f"{positions[template.name]}) {template.name}")
        if not args.no_draw:
            console.print(render_art(template, template.stage_count - 1))
    return 0


def cmd_erase(args: argparse.Namespace, settings: GroveSettings) -> int:
    collection = _load_collection(args, settings)
    for name in args.names:
        if name not in collection:
            err_console.print(f"No tree named '{name}' in the collection")
    removed = collection.erase(args.names)
    save_collection(settings.collection_path, collection)
    console.print(f"Erased {removed} tree(s)")
    return 0


def cmd_stats(args: argparse.Namespace, settings: GroveSettings) -> int:
    history = HistoryStore(settings.history_path, ignore_errors=args.ignore_errors)
    filters = StatsFilter(
        label=args.filter,
        window=TimeWindow.parse(args.time) if args.time else None,
        count=args.count,
        include_aborted=args.include_aborted,
    )
    records = apply_filters(history.load(), filters)

    grid_value = args.grid
    if grid_value is None and not args.graph and not args.no_forest:
        grid_value = settings.stats_grid

    if grid_value:
        spec = parse_grid_spec(grid_value)
        arts = [record.art for record in records if record.art is not None]
        tree_size = (
            max(art.dimensions[0] for art in arts),
            max(art.dimensions[1] for art in arts),
        ) if arts else (5, 5)
        grid = layout_grid(records, spec, area=console.size, tree_size=tree_size)
        for line in render_grid(grid, tree_size=tree_size):
            console.print(line)
        return 0

    if args.graph:
        metric = GraphMetric(args.metric)
        buckets = bucket_records(
            records,
            GraphUnit.parse(args.graph),
            metric=metric,
            date_format=args.format,
        )
        for line in render_graph(buckets, width=console.size.width, metric=metric):
            console.print(line)
        return 0

    for line in render_listing(records, args.format or settings.date_format):
        console.print(line)
    return 0


# -------------------------
# Parser
# -------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grove",
        description="Grow a tree while you focus. Abandon the session and it dies.",
    )
    parser.add_argument("-V", "--version", action="version", version=f"grove {__version__}")
    parser.add_argument("--data-dir", help="Directory holding trees.yaml and history.yaml")
    parser.add_argument(
        "--log-level",
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        help="Override GROVE_LOG_LEVEL",
    )
    parser.add_argument(
        "--ignore-errors",
        action="store_true",
        help="Skip malformed trees or history entries with a warning instead of failing",
    )
    sub = parser.add_subparsers(dest="cmd")

    p_grow = sub.add_parser("grow", help="Grow a tree")
    p_grow.add_argument("-d", "--duration", metavar="TIME", help="Growth time as HH:MM (default: the tree's)")
    p_grow.add_argument("-l", "--label", type=_label_arg, help="Label this session for stats")
    p_grow.add_argument("-t", "--tree", help="Name of the tree to grow")
    p_grow.add_argument(
        "-n",
        "--no-display",
        action="store_true",
        help="Do not draw the growing tree, print progress messages instead",
    )
    p_grow.set_defaults(func=cmd_grow)

    p_import = sub.add_parser("import", help="Add trees to your collection")
    p_import.add_argument("trees", nargs="*", metavar="TREE", help="Trees in their shareable format")
    p_import.add_argument("-f", "--file", help="Import every tree listed in FILE")
    p_import.add_argument(
        "-n",
        "--name-change",
        action="store_true",
        help="Rename trees whose name is taken (tree -> tree-1) instead of skipping them",
    )
    p_import.add_argument("-e", "--error", action="store_true", help="Show why each tree failed")
    p_import.set_defaults(func=cmd_import, parser=p_import)

    p_export = sub.add_parser("export", help="Share trees with other people")
    p_export.add_argument("names", nargs="*", metavar="NAME")
    p_export.add_argument("-a", "--all", action="store_true", help="Export every tree")
    p_export.add_argument("-f", "--to-file", metavar="FILE", help="Write the trees to FILE")
    p_export.set_defaults(func=cmd_export, parser=p_export)

    p_list = sub.add_parser("list", help="List the trees in your collection")
    which = p_list.add_mutually_exclusive_group()
    which.add_argument("-H", "--head", type=_count_arg, metavar="COUNT", help="First COUNT trees")
    which.add_argument("-T", "--tail", type=_count_arg, metavar="COUNT", help="Last COUNT trees")
    which.add_argument("-r", "--random", type=_count_arg, metavar="COUNT", help="COUNT random trees")
    p_list.add_argument("-n", "--no-draw", action="store_true", help="Only print the names")
    p_list.add_argument("-e", "--export", action="store_true", help="Print the shareable format")
    p_list.set_defaults(func=cmd_list)

    p_erase = sub.add_parser("erase", help="Remove trees from your collection")
    p_erase.add_argument("names", nargs="+", metavar="NAME")
    p_erase.set_defaults(func=cmd_erase)

    p_stats = sub.add_parser("stats", help="Show the trees you have grown")
    view = p_stats.add_mutually_exclusive_group()
    view.add_argument("-g", "--grid", metavar="GRID", help="Grid size as RxC, or 'whole'")
    view.add_argument(
        "-n",
        "--no-forest",
        action="store_true",
        help="Do not draw the trees in a grid, even when GROVE_STATS_GRID is set",
    )
    view.add_argument(
        "-G",
        "--graph",
        metavar="UNIT",
        help="Graph per time unit: daily, weekly, monthly or yearly",
    )
    p_stats.add_argument("-f", "--filter", metavar="LABEL", help="Only trees with this label")
    p_stats.add_argument("-c", "--count", type=_count_arg, metavar="AMOUNT", help="Only the last AMOUNT trees")
    p_stats.add_argument(
        "-t",
        "--time",
        metavar="TIME",
        help="today, yesterday, this-week, this-month or this-year",
    )
    p_stats.add_argument("-F", "--format", metavar="FORMAT", help="strftime pattern for dates")
    p_stats.add_argument(
        "--include-aborted",
        action="store_true",
        help="Also count trees that died",
    )
    p_stats.add_argument(
        "--metric",
        choices=[metric.value for metric in GraphMetric],
        default=GraphMetric.DURATION.value,
        help="Graph total minutes (default) or number of sessions",
    )
    p_stats.set_defaults(func=cmd_stats)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return

    settings = get_settings()
    if args.data_dir:
        settings = settings.model_copy(update={"data_dir": Path(args.data_dir).expanduser().resolve()})
    configure_logging(args.log_level or settings.log_level)
    logger.debug("Using data directory %s", settings.data_dir)

    try:
        exit_code = args.func(args, settings)
    except GroveError as exc:
        err_console.print(Text.assemble(("error: ", "bold red"), str(exc)))
        raise SystemExit(1)
    if exit_code:
        raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
