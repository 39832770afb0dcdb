"""
Graph Insight Analyzer

Plain-language answers to common questions about a dataset
(connections, patterns, groups, outliers), computed straight from the
rows rather than from a chart.
"""

from collections import Counter
from typing import Optional

import numpy as np
from numba import jit

from core.logging_config import insights_logger as logger
from core.models import Dataset, GraphInsight
from core.parsing import parse_numeric

# Question fragments -> analyses to run
CONNECTION_KEYWORDS = ("connect", "relation")
PATTERN_KEYWORDS = ("pattern", "trend")
GROUP_KEYWORDS = ("group", "cluster", "similar")
OUTLIER_KEYWORDS = ("outlier", "unusual", "anomal")


@jit(nopython=True, cache=True)
def _quartiles_numba(arr: np.ndarray) -> tuple[float, float, float]:
    """Numba-accelerated floor-index Q1, median and Q3."""
    sorted_arr = np.sort(arr)
    n = len(sorted_arr)
    return sorted_arr[int(n * 0.25)], sorted_arr[n // 2], sorted_arr[int(n * 0.75)]


def _category(value) -> str:
    return str(value) if value not in (None, "") else "Unknown"


def _pct(part: int, whole: int) -> str:
    return f"{part / whole * 100:.1f}"


class GraphInsightAnalyzer:
    """Keyword-driven selection of simple dataset-level analyses."""

    def analyze(self, dataset: Dataset, question: str) -> list[GraphInsight]:
        text = question.lower()
        insights: list[GraphInsight] = []

        if any(k in text for k in CONNECTION_KEYWORDS):
            insights.extend(self.analyze_connections(dataset))
        if any(k in text for k in PATTERN_KEYWORDS):
            insights.extend(self.analyze_patterns(dataset))
        if any(k in text for k in GROUP_KEYWORDS):
            insights.extend(self.analyze_groups(dataset))
        if any(k in text for k in OUTLIER_KEYWORDS):
            insights.extend(self.analyze_outliers(dataset))

        # Nothing specific asked: offer a general mix
        if not insights:
            insights.extend(self.analyze_groups(dataset))
            insights.extend(self.analyze_patterns(dataset))
            insights.extend(self.analyze_outliers(dataset))

        insights.sort(key=lambda i: i.confidence, reverse=True)
        logger.debug(f"Generated {len(insights)} graph insights")
        return insights

    def _first_numeric_values(self, dataset: Dataset) -> tuple[Optional[str], np.ndarray]:
        numeric = dataset.numeric_columns
        if not numeric:
            return None, np.empty(0, dtype=np.float64)
        column = numeric[0].name
        values = [parse_numeric(row.get(column)) for row in dataset.rows]
        return column, np.asarray([v for v in values if v is not None], dtype=np.float64)

    def analyze_connections(self, dataset: Dataset) -> list[GraphInsight]:
        categorical = dataset.categorical_columns
        if len(categorical) < 2 or dataset.row_count == 0:
            return []

        first, second = categorical[0].name, categorical[1].name
        pairs = Counter(
            f"{_category(row.get(first))} -> {_category(row.get(second))}"
            for row in dataset.rows
        )
        top_pairs = pairs.most_common(3)
        return [GraphInsight(
            type="connections",
            question="What items are most connected in your data?",
            answer=(
                f"I found strong relationships between {first} and {second}. Several items "
                f"appear together frequently, showing clear connection patterns."
            ),
            details=tuple(f"{pair} (appears {count} times)" for pair, count in top_pairs),
            actionable=(
                "These connections suggest natural groupings in your data. Consider organizing "
                "or analyzing items based on these relationships."
            ),
            confidence=0.8,
        )]

    def analyze_patterns(self, dataset: Dataset) -> list[GraphInsight]:
        column, values = self._first_numeric_values(dataset)
        if column is None or values.size <= 10:
            return []

        q1, median, q3 = _quartiles_numba(values)
        high = int((values > q3).sum())
        low = int((values < q1).sum())
        normal = int(values.size) - high - low
        if high >= values.size * 0.1:
            return []

        return [GraphInsight(
            type="patterns",
            question="Are there any patterns in my data?",
            answer=(
                f"Yes! Most of your {column} values follow a consistent pattern. About "
                f"{_pct(normal, values.size)}% of your data stays within the normal range."
            ),
            details=(
                f"Normal range: {q1:.1f} - {q3:.1f}",
                f"Typical value: {median:.1f}",
                f"{normal} out of {values.size} values follow the main pattern",
            ),
            actionable=(
                f"This consistency is good! Focus on the {high} values outside the normal "
                f"range - they might need special attention."
            ),
            confidence=0.7,
        )]

    def analyze_groups(self, dataset: Dataset) -> list[GraphInsight]:
        categorical = dataset.categorical_columns
        if not categorical:
            return []

        column = categorical[0].name
        groups = Counter(_category(row.get(column)) for row in dataset.rows)
        if len(groups) <= 1:
            return []

        total = dataset.row_count
        ranked = groups.most_common()
        largest_name, largest_count = ranked[0]
        return [GraphInsight(
            type="groups",
            question="What groups exist in my data?",
            answer=(
                f"I found {len(ranked)} distinct groups in your {column}. The largest group is "
                f"\"{largest_name}\" with {_pct(largest_count, total)}% of your data."
            ),
            details=tuple(
                f"{name}: {count} items ({_pct(count, total)}%)" for name, count in ranked[:3]
            ),
            actionable=(
                "You can use these natural groupings to organize, filter, or analyze your "
                "data more effectively."
            ),
            confidence=0.9,
        )]

    def analyze_outliers(self, dataset: Dataset) -> list[GraphInsight]:
        column, values = self._first_numeric_values(dataset)
        if column is None or values.size <= 5:
            return []

        q1, _, q3 = _quartiles_numba(values)
        iqr = q3 - q1
        lower, upper = q1 - 1.5 * iqr, q3 + 1.5 * iqr
        outliers = values[(values < lower) | (values > upper)]
        if outliers.size == 0 or outliers.size >= values.size * 0.1:
            return []

        return [GraphInsight(
            type="outliers",
            question="Are there any unusual data points I should investigate?",
            answer=(
                f"Yes! I found {outliers.size} unusual values in your {column} that stand out "
                f"significantly from the rest."
            ),
            details=tuple(
                f"{value:g} ({'much higher' if value > upper else 'much lower'} than normal)"
                for value in outliers[:3]
            ),
            actionable=(
                "These outliers might be data entry errors, special cases, or important "
                "discoveries. Review them to determine if they need correction or further "
                "investigation."
            ),
            confidence=0.8,
        )]


# Global instance
graph_insight_analyzer = GraphInsightAnalyzer()
