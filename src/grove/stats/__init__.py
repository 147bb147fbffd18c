"""Statistics over the session history: filters, grid and graph views."""

from .filters import StatsFilter, TimeWindow, apply_filters, window_bounds
from .graph import Bucket, GraphMetric, GraphUnit, bucket_records
from .grid import Grid, grid_dimensions, layout_grid
from .render import render_graph, render_grid, render_listing

__all__ = [
    "Bucket",
    "GraphMetric",
    "GraphUnit",
    "Grid",
    "StatsFilter",
    "TimeWindow",
    "apply_filters",
    "bucket_records",
    "grid_dimensions",
    "layout_grid",
    "render_graph",
    "render_grid",
    "render_listing",
    "window_bounds",
]
