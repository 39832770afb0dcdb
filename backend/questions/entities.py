"""
Entity Extractor

Finds which columns and business terms a question is about.
Plain substring matching; no tokenisation or stemming.
"""

import re
from dataclasses import dataclass
from typing import Any, Optional

from core.models import ColumnDescriptor, Dataset

BUSINESS_TERMS = (
    "customer", "product", "revenue", "sales", "marketing", "employee",
    "order", "campaign", "lead", "conversion", "profit", "cost",
    "user", "transaction", "inventory", "quality", "performance",
)

METRIC_KEYWORDS = (
    "total", "sum", "average", "count", "max", "min", "rate", "percentage",
)

# Scan order matters: the first match wins
TIMEFRAMES = (
    "daily", "weekly", "monthly", "quarterly", "yearly",
    "last week", "last month", "last year",
)

_CAMEL_BOUNDARY = re.compile(r"([A-Z])")


@dataclass(frozen=True)
class ExtractedEntities:
    entities: tuple[str, ...]
    metrics: tuple[str, ...]
    dimensions: tuple[str, ...]
    timeframe: Optional[str]

    def to_dict(self) -> dict[str, Any]:
        return {
            "entities": list(self.entities),
            "metrics": list(self.metrics),
            "dimensions": list(self.dimensions),
            "timeframe": self.timeframe,
        }


def _dedupe(values) -> tuple[str, ...]:
    return tuple(dict.fromkeys(values))


def name_variants(column: ColumnDescriptor) -> tuple[str, ...]:
    """Lower-cased spellings of a column name that may appear in a question."""
    lowered = column.name.lower()
    camel_split = _CAMEL_BOUNDARY.sub(r" \1", column.name).lower().strip()
    return _dedupe((lowered, lowered.replace("_", " "), camel_split))


class EntityExtractor:
    """Matches a question against column names and a business vocabulary."""

    def extract(self, question: str, dataset: Dataset) -> ExtractedEntities:
        text = question.lower()
        return ExtractedEntities(
            entities=self.extract_entities(text, dataset),
            metrics=self.extract_metrics(text, dataset),
            dimensions=self.extract_dimensions(text, dataset),
            timeframe=self.extract_timeframe(text),
        )

    def extract_entities(self, question: str, dataset: Dataset) -> tuple[str, ...]:
        text = question.lower()
        found = [
            column.name
            for column in dataset.columns
            if any(variant and variant in text for variant in name_variants(column))
        ]
        found.extend(term for term in BUSINESS_TERMS if term in text)
        return _dedupe(found)

    def extract_metrics(self, question: str, dataset: Dataset) -> tuple[str, ...]:
        """
        Numeric columns relevant to the question.

        Any generic metric keyword pulls in every numeric column, not only
        the one it refers to.
        """
        text = question.lower()
        any_keyword = any(k in text for k in METRIC_KEYWORDS)
        return _dedupe(
            column.name
            for column in dataset.numeric_columns
            if any_keyword or column.name.lower() in text
        )

    def extract_dimensions(self, question: str, dataset: Dataset) -> tuple[str, ...]:
        text = question.lower()
        return _dedupe(
            column.name
            for column in dataset.dimension_columns
            if column.name.lower() in text
        )

    def extract_timeframe(self, question: str) -> Optional[str]:
        text = question.lower()
        for timeframe in TIMEFRAMES:
            if timeframe in text:
                return timeframe
        return None


# Global instance
entity_extractor = EntityExtractor()
