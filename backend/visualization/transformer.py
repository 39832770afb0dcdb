"""
Data Transformer

Maps raw dataset rows onto normalized (x, y, group) points following a
chart config, with a fallback extraction when the axes are not usable.
"""

from typing import Sequence

import numpy as np

from core.logging_config import visualization_logger as logger
from core.models import (
    ChartConfig, DataPoint, Dataset, SummaryStatistics, TransformedData,
)
from core.parsing import is_temporal_column, parse_dates, parse_numeric

NO_DATA_POINT = DataPoint(x="No Data", y=0.0, group="default")
UNKNOWN_CATEGORY = "Unknown"


def summarize(values: Sequence[float]) -> SummaryStatistics:
    """Summary statistics over finite values; all zero for an empty input."""
    if len(values) == 0:
        return SummaryStatistics()
    arr = np.asarray(values, dtype=np.float64)
    return SummaryStatistics(
        count=int(arr.size),
        sum=float(arr.sum()),
        average=float(arr.mean()),
        min=float(arr.min()),
        max=float(arr.max()),
        std=float(arr.std()),
    )


class DataTransformer:
    """Builds the point list a chart builder consumes."""

    def transform(self, dataset: Dataset, config: ChartConfig) -> TransformedData:
        x_col = dataset.column(config.x_axis)
        y_col = dataset.column(config.y_axis)

        if not config.has_axes or x_col is None or y_col is None:
            logger.info(
                f"Axes unavailable (x={config.x_axis}, y={config.y_axis}), using fallback extraction"
            )
            points = self._fallback_points(dataset)
            return self._finish(points, is_fallback=True)

        temporal = is_temporal_column(x_col)
        rows = dataset.rows
        dates = parse_dates([row.get(x_col.name) for row in rows]) if temporal else [None] * len(rows)

        points = []
        dropped = 0
        for row, parsed_date in zip(rows, dates):
            y = parse_numeric(row.get(y_col.name))
            if y is None or (temporal and parsed_date is None):
                dropped += 1
                continue

            x = parsed_date.isoformat() if temporal else row.get(x_col.name)
            group = row.get(config.group_by) if config.group_by else "default"
            points.append(DataPoint(x=x, y=y, group=group, parsed_date=parsed_date))

        if dropped:
            logger.debug(f"Dropped {dropped} of {dataset.row_count} rows with unparseable values")

        if temporal:
            # list.sort is stable, so equal timestamps keep row order
            points.sort(key=lambda p: p.parsed_date)

        return self._finish(points, is_fallback=False)

    def _fallback_points(self, dataset: Dataset) -> list[DataPoint]:
        categorical = dataset.categorical_columns
        if categorical:
            column = categorical[0].name
            counts: dict[str, int] = {}
            for row in dataset.rows:
                value = row.get(column)
                key = str(value) if value not in (None, "") else UNKNOWN_CATEGORY
                counts[key] = counts.get(key, 0) + 1
            return [DataPoint(x=k, y=float(v), group="count") for k, v in counts.items()]

        numeric = dataset.numeric_columns
        if numeric:
            column = numeric[0].name
            points = []
            for index, row in enumerate(dataset.rows):
                y = parse_numeric(row.get(column))
                if y is not None:
                    points.append(DataPoint(x=str(index), y=y))
            return points

        return []

    def _finish(self, points: list[DataPoint], is_fallback: bool) -> TransformedData:
        summary = summarize([p.y for p in points])
        if not points:
            logger.warning("No data points survived transformation, emitting sentinel")
            return TransformedData(
                points=(NO_DATA_POINT,),
                summary=summary,
                is_fallback=is_fallback,
                is_empty=True,
            )
        return TransformedData(points=tuple(points), summary=summary, is_fallback=is_fallback)


# Global instance
data_transformer = DataTransformer()
