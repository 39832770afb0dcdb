"""
Visualization Selector

Maps an intent to candidate chart types and narrows them with an
ordered decision list over the dataset shape.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Mapping, Optional

from config import get_settings
from core.logging_config import visualization_logger as logger
from core.models import ChartType, Dataset, IntentCategory

CANDIDATE_CHARTS: Mapping[IntentCategory, tuple[ChartType, ...]] = MappingProxyType({
    IntentCategory.TREND_ANALYSIS: (ChartType.LINE, ChartType.AREA),
    IntentCategory.COMPARISON: (ChartType.BAR, ChartType.LINE),
    IntentCategory.DISTRIBUTION: (ChartType.PIE, ChartType.TREEMAP, ChartType.BAR),
    IntentCategory.CORRELATION: (ChartType.SCATTER, ChartType.HEATMAP),
    IntentCategory.ANOMALY_DETECTION: (ChartType.SCATTER, ChartType.LINE),
    IntentCategory.PERFORMANCE_METRICS: (ChartType.GAUGE, ChartType.BAR),
    IntentCategory.RELATIONSHIP_MAPPING: (ChartType.NETWORK, ChartType.HEATMAP),
    IntentCategory.FORECASTING: (ChartType.LINE, ChartType.AREA),
    IntentCategory.SEGMENTATION: (ChartType.PIE, ChartType.TREEMAP, ChartType.BAR),
    IntentCategory.RISK_ASSESSMENT: (ChartType.HEATMAP, ChartType.GAUGE, ChartType.BAR),
})


@dataclass(frozen=True)
class DataShape:
    """The dataset characteristics the selection rules look at."""

    row_count: int
    numeric_columns: int
    categorical_columns: int

    @classmethod
    def of(cls, dataset: Dataset) -> "DataShape":
        return cls(
            row_count=dataset.row_count,
            numeric_columns=len(dataset.numeric_columns),
            categorical_columns=len(dataset.categorical_columns),
        )


@dataclass(frozen=True)
class SelectionRule:
    name: str
    chart: ChartType
    applies: Callable[[DataShape], bool]


def _default_rules(network_min_rows: int) -> tuple[SelectionRule, ...]:
    # Evaluated top to bottom; a rule only fires if its chart is a candidate.
    return (
        SelectionRule("network_for_many_rows", ChartType.NETWORK,
                      lambda s: s.row_count > network_min_rows),
        SelectionRule("scatter_for_two_numerics", ChartType.SCATTER,
                      lambda s: s.numeric_columns >= 2),
        SelectionRule("pie_for_categories", ChartType.PIE,
                      lambda s: s.categorical_columns >= 1),
    )


class VisualizationSelector:
    """First-match decision list; falls back to the intent's first candidate."""

    def __init__(self, rules: Optional[tuple[SelectionRule, ...]] = None):
        if rules is None:
            rules = _default_rules(get_settings().pipeline.network_min_rows)
        self.rules = rules

    def candidates(self, intent: IntentCategory) -> tuple[ChartType, ...]:
        return CANDIDATE_CHARTS[intent]

    def explain(self, intent: IntentCategory, dataset: Dataset) -> tuple[ChartType, str]:
        """Return the selected chart and the name of the rule that chose it."""
        candidates = self.candidates(intent)
        shape = DataShape.of(dataset)
        for rule in self.rules:
            if rule.chart in candidates and rule.applies(shape):
                return rule.chart, rule.name
        return candidates[0], "first_candidate"

    def select(self, intent: IntentCategory, dataset: Dataset) -> ChartType:
        chart, rule = self.explain(intent, dataset)
        logger.debug(f"Selected {chart.value} for {intent.value} via {rule}")
        return chart


# Global instance
visualization_selector = VisualizationSelector()
