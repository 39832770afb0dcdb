"""
Chart Data Builder

Aggregates normalized points into a chart-type-specific payload:
labeled series for most charts, a node/edge graph for network charts.
"""

from typing import Optional, Sequence

import numpy as np
import polars as pl

from config import get_settings
from core.logging_config import visualization_logger as logger
from core.models import (
    ChartPayload, ChartType, DataPoint, NetworkEdge, NetworkNode,
    NetworkPayload, SeriesDataset, SeriesPayload,
)
from core.parsing import format_date_label

COLOR_PALETTE = (
    "#8B5CF6", "#3B82F6", "#10B981", "#F59E0B", "#EF4444",
    "#8B5A5A", "#6366F1", "#06B6D4", "#84CC16", "#F97316",
)

# Hex alpha suffix for translucent area fills
AREA_FILL_ALPHA = "30"


def palette_color(index: int) -> str:
    return COLOR_PALETTE[index % len(COLOR_PALETTE)]


class ChartDataBuilder:
    """Dispatches on chart type; unsupported types render as bar charts."""

    def __init__(self):
        self.settings = get_settings()

    def build(
        self,
        chart_type: ChartType,
        points: Sequence[DataPoint],
        rng: Optional[np.random.Generator] = None,
    ) -> ChartPayload:
        if chart_type == ChartType.PIE:
            return self.build_pie(points)
        if chart_type == ChartType.BAR:
            return self.build_bar(points)
        if chart_type in (ChartType.LINE, ChartType.AREA):
            return self.build_line(points, filled=chart_type == ChartType.AREA)
        if chart_type == ChartType.SCATTER:
            return self.build_scatter(points)
        if chart_type == ChartType.NETWORK:
            return self.build_network(points, rng=rng)

        logger.debug(f"No dedicated builder for {chart_type.value}, rendering as bar")
        return self.build_bar(points)

    def _group_sum(self, points: Sequence[DataPoint]) -> tuple[tuple[str, ...], tuple[float, ...]]:
        """Sum y per distinct x label, keeping first-seen label order."""
        df = pl.DataFrame(
            {
                "label": [str(p.x) for p in points],
                "value": [p.y for p in points],
            },
            schema={"label": pl.Utf8, "value": pl.Float64},
        )
        grouped = df.group_by("label", maintain_order=True).agg(pl.col("value").sum())
        return tuple(grouped["label"].to_list()), tuple(grouped["value"].to_list())

    def build_pie(self, points: Sequence[DataPoint]) -> SeriesPayload:
        labels, data = self._group_sum(points)
        return SeriesPayload(
            labels=labels,
            datasets=(
                SeriesDataset(
                    label="Distribution",
                    data=data,
                    background_color=tuple(palette_color(i) for i in range(len(labels))),
                ),
            ),
        )

    def build_bar(self, points: Sequence[DataPoint]) -> SeriesPayload:
        labels, data = self._group_sum(points)
        return SeriesPayload(
            labels=labels,
            datasets=(
                SeriesDataset(
                    label="Values",
                    data=data,
                    background_color=COLOR_PALETTE[0],
                    border_color=COLOR_PALETTE[0],
                    border_width=1,
                ),
            ),
        )

    def build_line(self, points: Sequence[DataPoint], filled: bool = False) -> SeriesPayload:
        # Points arrive already sorted when the x axis is temporal
        labels = tuple(
            format_date_label(p.parsed_date) if p.parsed_date else str(p.x)
            for p in points
        )
        return SeriesPayload(
            labels=labels,
            datasets=(
                SeriesDataset(
                    label="Trend",
                    data=tuple(p.y for p in points),
                    background_color=COLOR_PALETTE[0] + AREA_FILL_ALPHA if filled else "transparent",
                    border_color=COLOR_PALETTE[0],
                    border_width=2,
                    fill=filled,
                ),
            ),
        )

    def build_scatter(self, points: Sequence[DataPoint]) -> SeriesPayload:
        return SeriesPayload(
            labels=tuple(str(p.x) for p in points),
            datasets=(
                SeriesDataset(
                    label="Data Points",
                    data=tuple(p.y for p in points),
                    background_color=COLOR_PALETTE[0],
                    border_color=COLOR_PALETTE[0],
                ),
            ),
        )

    def build_network(
        self,
        points: Sequence[DataPoint],
        rng: Optional[np.random.Generator] = None,
    ) -> NetworkPayload:
        """
        One node per distinct x value, edges within a sliding window.

        Edge strength is a uniform draw on [0, 10), not a measure derived
        from the data. Pass a seeded generator (or set PIPELINE_NETWORK_SEED)
        for reproducible graphs.
        """
        pipeline = self.settings.pipeline
        if rng is None:
            rng = np.random.default_rng(pipeline.network_seed)

        nodes: list[NetworkNode] = []
        seen: set[str] = set()
        for point in points:
            node_id = str(point.x)
            if node_id in seen:
                continue
            seen.add(node_id)
            nodes.append(NetworkNode(
                id=node_id,
                label=node_id,
                value=point.y,
                group=str(point.group),
                color=palette_color(len(nodes)),
            ))

        edges: list[NetworkEdge] = []
        for i in range(len(nodes) - 1):
            for j in range(i + 1, min(len(nodes), i + 1 + pipeline.network_edge_window)):
                strength = float(rng.uniform(0.0, 10.0))
                if strength > pipeline.network_edge_threshold:
                    edges.append(NetworkEdge(
                        source=nodes[i].id,
                        target=nodes[j].id,
                        value=strength,
                        label=f"{strength:.1f}",
                    ))

        logger.debug(f"Network graph: {len(nodes)} nodes, {len(edges)} edges")
        return NetworkPayload(nodes=tuple(nodes), edges=tuple(edges))


# Global instance
chart_data_builder = ChartDataBuilder()
