"""
Business Impact Assessor

Priority, a rough financial-impact figure and fixed stakeholder /
timeframe lookups keyed by intent.
"""

import math
from types import MappingProxyType

from config import get_settings
from core.models import (
    BusinessImpact, IntentCategory, Priority, QuestionAnalysis, TransformedData,
)

CRITICAL_INTENTS = frozenset({
    IntentCategory.RISK_ASSESSMENT,
    IntentCategory.ANOMALY_DETECTION,
})
HIGH_PRIORITY_INTENTS = frozenset({
    IntentCategory.PERFORMANCE_METRICS,
    IntentCategory.TREND_ANALYSIS,
})

DEFAULT_TIMEFRAME = "1-2 months"
TIMEFRAMES = MappingProxyType({
    IntentCategory.RISK_ASSESSMENT: "Immediate action required",
    IntentCategory.ANOMALY_DETECTION: "1-2 weeks",
    IntentCategory.PERFORMANCE_METRICS: "1 month",
    IntentCategory.TREND_ANALYSIS: "2-3 months",
    IntentCategory.FORECASTING: "3-6 months",
})

DEFAULT_STAKEHOLDERS = ("Manager", "Executive Team")
STAKEHOLDERS = MappingProxyType({
    IntentCategory.RISK_ASSESSMENT: ("Risk Manager", "Executive Team", "Compliance Officer"),
    IntentCategory.PERFORMANCE_METRICS: ("Operations Manager", "Department Head", "Executive Team"),
    IntentCategory.TREND_ANALYSIS: ("Strategy Team", "Marketing Manager", "CEO"),
    IntentCategory.FORECASTING: ("Planning Team", "Finance Director", "Executive Team"),
    IntentCategory.COMPARISON: ("Operations Manager", "Team Leaders", "Executive Team"),
})


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_financial_impact(amount: int) -> str:
    if amount >= 1000:
        return f"${amount / 1000:.1f}K potential impact"
    return f"${amount} potential impact"


class BusinessImpactAssessor:
    """Heuristic business framing for a visualization; not a real valuation."""

    def __init__(self):
        self.settings = get_settings()

    def priority(self, analysis: QuestionAnalysis) -> Priority:
        if analysis.intent in CRITICAL_INTENTS:
            return Priority.CRITICAL
        if (
            analysis.intent in HIGH_PRIORITY_INTENTS
            or analysis.confidence > self.settings.pipeline.high_priority_confidence
        ):
            return Priority.HIGH
        return Priority.MEDIUM

    def financial_impact(self, transformed: TransformedData) -> int:
        """points x average x coefficient, rounded half up. 0 if the estimate overflows."""
        summary = transformed.summary
        coefficient = self.settings.pipeline.financial_impact_coefficient
        estimate = summary.count * summary.average * coefficient
        if not math.isfinite(estimate):
            return 0
        return _round_half_up(estimate)

    def assess(self, analysis: QuestionAnalysis, transformed: TransformedData) -> BusinessImpact:
        return BusinessImpact(
            priority=self.priority(analysis),
            financial_impact=format_financial_impact(self.financial_impact(transformed)),
            timeframe=TIMEFRAMES.get(analysis.intent, DEFAULT_TIMEFRAME),
            stakeholders=STAKEHOLDERS.get(analysis.intent, DEFAULT_STAKEHOLDERS),
        )


# Global instance
business_impact_assessor = BusinessImpactAssessor()
