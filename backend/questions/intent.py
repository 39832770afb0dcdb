"""
Intent Classifier

Deterministic keyword scoring of a question against per-intent triggers.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

from core.logging_config import question_logger as logger
from core.models import IntentCategory

DEFAULT_INTENT = IntentCategory.PERFORMANCE_METRICS

BASE_CONFIDENCE = 0.3
CONFIDENCE_PER_MATCH = 0.2
MAX_CONFIDENCE = 0.9

# Iteration order follows IntentCategory declaration order.
INTENT_TRIGGERS: Mapping[IntentCategory, tuple[str, ...]] = MappingProxyType({
    IntentCategory.TREND_ANALYSIS: (
        "trend", "over time", "historical", "growth", "decline", "pattern",
        "change", "evolution", "progression", "development", "timeline",
    ),
    IntentCategory.COMPARISON: (
        "compare", "vs", "versus", "difference", "best", "worst", "top",
        "bottom", "highest", "lowest", "better", "worse", "rank",
    ),
    IntentCategory.DISTRIBUTION: (
        "distribution", "spread", "breakdown", "composition", "share",
        "percentage", "proportion", "mix", "allocation", "split",
    ),
    IntentCategory.CORRELATION: (
        "correlation", "relationship", "related", "connected", "impact",
        "influence", "affect", "dependency", "association", "link",
    ),
    IntentCategory.ANOMALY_DETECTION: (
        "outlier", "anomaly", "unusual", "strange", "unexpected", "irregular",
        "deviation", "abnormal", "exception", "odd", "suspicious",
    ),
    IntentCategory.PERFORMANCE_METRICS: (
        "performance", "kpi", "metric", "score", "rating", "efficiency",
        "productivity", "effectiveness", "success", "achievement",
    ),
    IntentCategory.RELATIONSHIP_MAPPING: (
        "network", "connections", "relationships", "interactions", "flows",
        "dependencies", "hierarchy", "structure", "ecosystem", "map",
    ),
    IntentCategory.FORECASTING: (
        "predict", "forecast", "future", "projection", "estimate", "expect",
        "anticipate", "outlook", "prospect", "tendency", "likelihood",
    ),
    IntentCategory.SEGMENTATION: (
        "segment", "group", "cluster", "category", "type", "classification",
        "division", "partition", "bucket", "cohort", "demographics",
    ),
    IntentCategory.RISK_ASSESSMENT: (
        "risk", "threat", "danger", "vulnerability", "exposure", "hazard",
        "concern", "issue", "problem", "challenge", "compliance",
    ),
})


@dataclass(frozen=True)
class IntentResult:
    """Winning intent and how sure we are about it."""

    intent: IntentCategory
    confidence: float
    matched_triggers: tuple[str, ...]
    scores: Mapping[IntentCategory, int]

    def to_dict(self) -> dict[str, Any]:
        return {
            "intent": self.intent.value,
            "confidence": round(self.confidence, 2),
            "matched_triggers": list(self.matched_triggers),
            "scores": {k.value: v for k, v in self.scores.items()},
        }


class IntentClassifier:
    """
    Keyword-scoring intent classifier.

    Each trigger counts once if it occurs anywhere in the lower-cased
    question. The strictly highest score wins; on ties the intent declared
    first keeps the lead, and no matches at all fall back to
    performance_metrics.
    """

    def __init__(self, triggers: Mapping[IntentCategory, tuple[str, ...]] = INTENT_TRIGGERS):
        self.triggers = triggers

    def matches(self, question: str, intent: IntentCategory) -> tuple[str, ...]:
        text = question.lower()
        return tuple(t for t in self.triggers[intent] if t in text)

    def classify(self, question: str) -> IntentResult:
        text = question.lower()
        scores = {
            intent: sum(1 for t in triggers if t in text)
            for intent, triggers in self.triggers.items()
        }

        best_intent = DEFAULT_INTENT
        best_score = 0
        for intent, score in scores.items():
            if score > best_score:
                best_intent, best_score = intent, score

        matched = self.matches(text, best_intent)
        confidence = min(MAX_CONFIDENCE, BASE_CONFIDENCE + CONFIDENCE_PER_MATCH * len(matched))

        logger.debug(
            f"Intent {best_intent.value} (score={best_score}, confidence={confidence:.2f}, "
            f"triggers={list(matched)})"
        )
        return IntentResult(
            intent=best_intent,
            confidence=confidence,
            matched_triggers=matched,
            scores=MappingProxyType(scores),
        )


# Global instance
intent_classifier = IntentClassifier()
