"""
Chart Insight Generator

Short natural-language observations computed from a finished chart
payload. One rule set per chart type; ratios with a zero denominator
omit the dependent insight instead of printing NaN or Infinity.
"""

import math

import numpy as np
from numba import jit
from scipy import stats as scipy_stats

from config import get_settings
from core.logging_config import insights_logger as logger
from core.models import ChartType, ProcessedVisualization, SeriesPayload


@jit(nopython=True, cache=True)
def _mean_abs_diff_numba(arr: np.ndarray) -> float:
    """Numba-accelerated mean absolute first difference."""
    n = len(arr)
    total = 0.0
    for i in range(1, n):
        total += abs(arr[i] - arr[i - 1])
    return total / (n - 1)


def format_value(value: float) -> str:
    """Integers without decimals, everything else to two places."""
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"


class ChartInsightGenerator:
    """Rule-based observations for pie, bar, line and scatter charts."""

    def __init__(self):
        self.settings = get_settings()

    def generate(self, visualization: ProcessedVisualization, is_empty: bool = False) -> list[str]:
        """
        Generate insights for a built visualization.

        Network payloads, sentinel "No Data" payloads and chart types
        without a rule set produce nothing.
        """
        payload = visualization.chart_data
        if payload is None or is_empty:
            return []
        return self.for_payload(visualization.type, payload)

    def for_payload(self, chart_type: ChartType, payload: SeriesPayload) -> list[str]:
        labels = list(payload.labels)
        data = np.asarray(payload.primary_series, dtype=np.float64)
        if data.size == 0:
            return []

        if chart_type == ChartType.PIE:
            insights = self.analyze_pie(labels, data)
        elif chart_type == ChartType.BAR:
            insights = self.analyze_bar(labels, data)
        elif chart_type == ChartType.LINE:
            insights = self.analyze_line(data)
        elif chart_type == ChartType.SCATTER:
            insights = self.analyze_scatter(data)
        else:
            insights = []

        logger.debug(f"{len(insights)} insights for {chart_type.value} chart")
        return insights

    def analyze_pie(self, labels: list[str], data: np.ndarray) -> list[str]:
        total = float(data.sum())
        if total == 0:
            return []

        insights = []
        max_index = int(np.argmax(data))
        max_share = data[max_index] / total * 100
        insights.append(
            f"{labels[max_index]} represents the largest segment at {max_share:.1f}% of the total."
        )

        top3_share = np.sort(data)[::-1][:3].sum() / total * 100
        if round(top3_share, 1) > self.settings.pipeline.concentration_threshold:
            insights.append(
                f"High concentration: Top 3 segments account for {top3_share:.1f}% of the total."
            )
        return insights

    def analyze_bar(self, labels: list[str], data: np.ndarray) -> list[str]:
        max_index = int(np.argmax(data))
        min_index = int(np.argmin(data))
        average = float(data.mean())
        above = int((data > average).sum())
        return [
            f"Highest value: {labels[max_index]} ({format_value(data[max_index])})",
            f"Lowest value: {labels[min_index]} ({format_value(data[min_index])})",
            f"{above} out of {data.size} categories are above average ({average:.1f}).",
        ]

    def analyze_line(self, data: np.ndarray) -> list[str]:
        if data.size < 2:
            return []

        insights = []
        first, last = float(data[0]), float(data[-1])
        if first != 0:
            change = round((last - first) / abs(first) * 100, 1)
            if change > 0:
                insights.append(f"Positive trend: {change:.1f}% increase from start to end.")
            elif change < 0:
                insights.append(f"Negative trend: {abs(change):.1f}% decrease from start to end.")
            else:
                insights.append("Flat trend: no net change from start to end.")

        value_range = float(data.max() - data.min())
        volatility = _mean_abs_diff_numba(data)
        if volatility > value_range * self.settings.pipeline.volatility_ratio:
            insights.append("High volatility detected in the data series.")
        return insights

    def analyze_scatter(self, data: np.ndarray) -> list[str]:
        if data.size < 3:
            return []

        insights = []
        std = float(data.std())
        multiplier = self.settings.pipeline.outlier_std_multiplier
        if std > 0 and math.isfinite(std):
            z_scores = scipy_stats.zscore(data)
            outliers = int((np.abs(z_scores) > multiplier).sum())
            if outliers > 0:
                insights.append(
                    f"{outliers} potential outliers detected "
                    f"(beyond {multiplier:g} standard deviations)."
                )

        insights.append(f"Data spread: Standard deviation of {std:.2f}.")
        return insights


# Global instance
chart_insight_generator = ChartInsightGenerator()
