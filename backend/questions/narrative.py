"""
Narrative Templates

Fixed per-intent sentences describing what an analysis is for.
"""

from types import MappingProxyType
from typing import Sequence

from core.models import IntentCategory

FALLBACK_SUBJECT = "the available business data"

BUSINESS_CONTEXT_TEMPLATES = MappingProxyType({
    IntentCategory.TREND_ANALYSIS: "Analyzing temporal patterns in {subject} to identify growth opportunities and potential risks.",
    IntentCategory.COMPARISON: "Comparative analysis of {subject} to identify top performers and optimization opportunities.",
    IntentCategory.DISTRIBUTION: "Understanding the composition and allocation of {subject} across different segments.",
    IntentCategory.CORRELATION: "Investigating relationships between {subject} to uncover insights for strategic decision-making.",
    IntentCategory.ANOMALY_DETECTION: "Identifying unusual patterns in {subject} that may indicate opportunities or risks.",
    IntentCategory.PERFORMANCE_METRICS: "Evaluating key performance indicators for {subject} to assess business health.",
    IntentCategory.RELATIONSHIP_MAPPING: "Mapping connections and dependencies between {subject} to optimize operations.",
    IntentCategory.FORECASTING: "Predicting future trends in {subject} to support strategic planning.",
    IntentCategory.SEGMENTATION: "Grouping {subject} into meaningful segments for targeted strategies.",
    IntentCategory.RISK_ASSESSMENT: "Assessing potential risks and vulnerabilities in {subject} operations.",
})

EXECUTIVE_SUMMARY_TEMPLATE = (
    "Business Intelligence Analysis: {question}\n\n"
    "This {intent} focuses on {subject} to provide actionable insights for "
    "strategic decision-making. The analysis will help identify opportunities "
    "for optimization, risk mitigation, and performance improvement."
)


def _subject(entities: Sequence[str], limit: int = 0) -> str:
    chosen = list(entities[:limit]) if limit else list(entities)
    return ", ".join(chosen) if chosen else FALLBACK_SUBJECT


def business_context(intent: IntentCategory, entities: Sequence[str]) -> str:
    return BUSINESS_CONTEXT_TEMPLATES[intent].format(subject=_subject(entities))


def executive_summary(question: str, intent: IntentCategory, entities: Sequence[str]) -> str:
    return EXECUTIVE_SUMMARY_TEMPLATE.format(
        question=question,
        intent=intent.label,
        subject=_subject(entities, limit=3),
    )
