"""
Pipeline Data Model

Immutable records passed between the question-to-visualization stages.
Every artifact is a frozen dataclass with a ``to_dict`` for JSON output.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Union


class SemanticType(str, Enum):
    """Semantic type of a dataset column, supplied by the caller."""

    NUMERIC = "numeric"
    CATEGORICAL = "categorical"
    TEMPORAL = "temporal"
    TEXT = "text"


class IntentCategory(str, Enum):
    """Analytical intent of a question. Declaration order is the tie-break order."""

    TREND_ANALYSIS = "trend_analysis"
    COMPARISON = "comparison"
    DISTRIBUTION = "distribution"
    CORRELATION = "correlation"
    ANOMALY_DETECTION = "anomaly_detection"
    PERFORMANCE_METRICS = "performance_metrics"
    RELATIONSHIP_MAPPING = "relationship_mapping"
    FORECASTING = "forecasting"
    SEGMENTATION = "segmentation"
    RISK_ASSESSMENT = "risk_assessment"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")


class ChartType(str, Enum):
    """Chart types the selector may recommend."""

    LINE = "line"
    BAR = "bar"
    PIE = "pie"
    SCATTER = "scatter"
    HEATMAP = "heatmap"
    NETWORK = "network"
    TREEMAP = "treemap"
    FUNNEL = "funnel"
    GAUGE = "gauge"
    AREA = "area"


class Aggregation(str, Enum):
    SUM = "sum"
    COUNT = "count"
    AVERAGE = "average"
    MAX = "max"
    MIN = "min"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# ============================================================
# Dataset
# ============================================================

@dataclass(frozen=True)
class ColumnDescriptor:
    """A named column with its semantic type."""

    name: str
    semantic_type: SemanticType

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "semantic_type": self.semantic_type.value}


ColumnSpec = Union[ColumnDescriptor, Mapping[str, Any], tuple[str, str]]


def _to_descriptor(column: ColumnSpec) -> ColumnDescriptor:
    if isinstance(column, ColumnDescriptor):
        return column
    if isinstance(column, Mapping):
        semantic = column.get("semantic_type", column.get("type"))
        return ColumnDescriptor(name=str(column["name"]), semantic_type=SemanticType(semantic))
    name, semantic = column
    return ColumnDescriptor(name=str(name), semantic_type=SemanticType(semantic))


@dataclass(frozen=True)
class Dataset:
    """
    Read-only tabular input: ordered rows plus column descriptors.

    Rows are mappings from column name to a scalar. Values are never
    type-checked here; parsing happens during transformation.
    """

    columns: tuple[ColumnDescriptor, ...]
    rows: tuple[Mapping[str, Any], ...] = ()

    @classmethod
    def from_records(
        cls,
        rows: Iterable[Mapping[str, Any]],
        columns: Iterable[ColumnSpec],
    ) -> "Dataset":
        """Build a dataset from plain dicts and ``(name, type)`` pairs or dicts."""
        return cls(
            columns=tuple(_to_descriptor(c) for c in columns),
            rows=tuple(dict(r) for r in rows),
        )

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def column(self, name: Optional[str]) -> Optional[ColumnDescriptor]:
        for col in self.columns:
            if col.name == name:
                return col
        return None

    def columns_of(self, *types: SemanticType) -> list[ColumnDescriptor]:
        return [c for c in self.columns if c.semantic_type in types]

    @property
    def numeric_columns(self) -> list[ColumnDescriptor]:
        return self.columns_of(SemanticType.NUMERIC)

    @property
    def categorical_columns(self) -> list[ColumnDescriptor]:
        """Strictly categorical columns (text columns excluded)."""
        return self.columns_of(SemanticType.CATEGORICAL)

    @property
    def dimension_columns(self) -> list[ColumnDescriptor]:
        """Categorical and text columns."""
        return self.columns_of(SemanticType.CATEGORICAL, SemanticType.TEXT)

    @property
    def temporal_columns(self) -> list[ColumnDescriptor]:
        return self.columns_of(SemanticType.TEMPORAL)


# ============================================================
# Question analysis and visualization spec
# ============================================================

@dataclass(frozen=True)
class QuestionAnalysis:
    """Result of analyzing one question against one dataset."""

    original_question: str
    intent: IntentCategory
    confidence: float
    entities: tuple[str, ...]
    metrics: tuple[str, ...]
    dimensions: tuple[str, ...]
    timeframe: Optional[str]
    suggested_visualization: ChartType
    business_context: str
    executive_summary: str

    @property
    def primary_entity(self) -> Optional[str]:
        return self.entities[0] if self.entities else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "original_question": self.original_question,
            "intent": self.intent.value,
            "confidence": round(self.confidence, 2),
            "entities": list(self.entities),
            "metrics": list(self.metrics),
            "dimensions": list(self.dimensions),
            "timeframe": self.timeframe,
            "suggested_visualization": self.suggested_visualization.value,
            "business_context": self.business_context,
            "executive_summary": self.executive_summary,
        }


@dataclass(frozen=True)
class ChartConfig:
    """Axis and aggregation configuration for a chart."""

    x_axis: Optional[str] = None
    y_axis: Optional[str] = None
    group_by: Optional[str] = None
    aggregation: Aggregation = Aggregation.SUM
    color_by: Optional[str] = None
    size: Optional[str] = None

    @property
    def has_axes(self) -> bool:
        return bool(self.x_axis) and bool(self.y_axis)

    def to_dict(self) -> dict[str, Any]:
        return {
            "x_axis": self.x_axis,
            "y_axis": self.y_axis,
            "group_by": self.group_by,
            "aggregation": self.aggregation.value,
            "color_by": self.color_by,
            "size": self.size,
        }


@dataclass(frozen=True)
class VisualizationSpec:
    """Concrete chart recommendation derived from an analysis."""

    type: ChartType
    title: str
    description: str
    data_transformation: str
    chart_config: ChartConfig
    insights: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()

    def with_chart_config(self, **changes: Any) -> "VisualizationSpec":
        """Return a copy with chart config fields overridden (e.g. aggregation)."""
        return replace(self, chart_config=replace(self.chart_config, **changes))

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "title": self.title,
            "description": self.description,
            "data_transformation": self.data_transformation,
            "chart_config": self.chart_config.to_dict(),
            "insights": list(self.insights),
            "recommendations": list(self.recommendations),
        }


# ============================================================
# Transformation
# ============================================================

@dataclass(frozen=True)
class DataPoint:
    """A normalized (x, y, group) tuple."""

    x: Any
    y: float
    group: Any = "default"
    parsed_date: Optional[datetime] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "group": self.group,
            "parsed_date": self.parsed_date.isoformat() if self.parsed_date else None,
        }


@dataclass(frozen=True)
class SummaryStatistics:
    """Summary of the surviving y values. All zero when there are none."""

    count: int = 0
    sum: float = 0.0
    average: float = 0.0
    min: float = 0.0
    max: float = 0.0
    std: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "sum": round(self.sum, 4),
            "average": round(self.average, 4),
            "min": round(self.min, 4),
            "max": round(self.max, 4),
            "std": round(self.std, 4),
        }


@dataclass(frozen=True)
class TransformedData:
    """Output of the data transformer."""

    points: tuple[DataPoint, ...]
    summary: SummaryStatistics
    is_fallback: bool = False
    is_empty: bool = False  # points holds only the "No Data" sentinel

    @property
    def real_points(self) -> tuple[DataPoint, ...]:
        return () if self.is_empty else self.points


# ============================================================
# Chart payloads (tagged union on ``kind``)
# ============================================================

@dataclass(frozen=True)
class SeriesDataset:
    label: str
    data: tuple[float, ...]
    background_color: Union[str, tuple[str, ...], None] = None
    border_color: Optional[str] = None
    border_width: Optional[int] = None
    fill: Optional[bool] = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"label": self.label, "data": list(self.data)}
        if self.background_color is not None:
            result["background_color"] = (
                list(self.background_color)
                if isinstance(self.background_color, tuple)
                else self.background_color
            )
        if self.border_color is not None:
            result["border_color"] = self.border_color
        if self.border_width is not None:
            result["border_width"] = self.border_width
        if self.fill is not None:
            result["fill"] = self.fill
        return result


@dataclass(frozen=True)
class SeriesPayload:
    """Labeled series for pie, bar, line, area and scatter charts."""

    labels: tuple[str, ...]
    datasets: tuple[SeriesDataset, ...]
    kind: str = field(default="series", init=False)

    @property
    def primary_series(self) -> tuple[float, ...]:
        return self.datasets[0].data if self.datasets else ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "labels": list(self.labels),
            "datasets": [d.to_dict() for d in self.datasets],
        }


@dataclass(frozen=True)
class NetworkNode:
    id: str
    label: str
    value: float
    group: Optional[str] = None
    color: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "value": self.value,
            "group": self.group,
            "color": self.color,
        }


@dataclass(frozen=True)
class NetworkEdge:
    source: str
    target: str
    value: float
    label: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "from": self.source,
            "to": self.target,
            "value": round(self.value, 4),
            "label": self.label,
        }


@dataclass(frozen=True)
class NetworkPayload:
    """Node/edge graph for relationship charts."""

    nodes: tuple[NetworkNode, ...]
    edges: tuple[NetworkEdge, ...]
    kind: str = field(default="network", init=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }


ChartPayload = Union[SeriesPayload, NetworkPayload]


# ============================================================
# Processed visualization
# ============================================================

@dataclass(frozen=True)
class KeyMetrics:
    """Headline statistics for the analyzed column."""

    analyzed_column: str
    total_data_points: int
    average: float
    maximum: float
    minimum: float
    total: float
    variation: float  # coefficient of variation, percent

    def to_dict(self) -> dict[str, Any]:
        col = self.analyzed_column
        return {
            "totalDataPoints": self.total_data_points,
            f"Average {col}": self.average,
            f"Maximum {col}": self.maximum,
            f"Minimum {col}": self.minimum,
            f"Total {col}": self.total,
            f"Variation ({col})": self.variation,
            "analyzedColumn": col,
        }


@dataclass(frozen=True)
class BusinessImpact:
    priority: Priority
    financial_impact: str
    timeframe: str
    stakeholders: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "priority": self.priority.value,
            "financial_impact": self.financial_impact,
            "timeframe": self.timeframe,
            "stakeholders": list(self.stakeholders),
        }


@dataclass(frozen=True)
class VisualizationMetadata:
    total_data_points: int
    key_metrics: KeyMetrics
    insights: tuple[str, ...]
    recommendations: tuple[str, ...]
    confidence: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_data_points": self.total_data_points,
            "key_metrics": self.key_metrics.to_dict(),
            "insights": list(self.insights),
            "recommendations": list(self.recommendations),
            "confidence": round(self.confidence, 2),
        }


@dataclass(frozen=True)
class ProcessedVisualization:
    """Terminal artifact handed to the renderer."""

    id: str
    type: ChartType
    title: str
    description: str
    payload: ChartPayload
    metadata: VisualizationMetadata
    business_impact: BusinessImpact

    @property
    def chart_data(self) -> Optional[SeriesPayload]:
        return self.payload if isinstance(self.payload, SeriesPayload) else None

    @property
    def network_data(self) -> Optional[NetworkPayload]:
        return self.payload if isinstance(self.payload, NetworkPayload) else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "title": self.title,
            "description": self.description,
            "payload": self.payload.to_dict(),
            "metadata": self.metadata.to_dict(),
            "business_impact": self.business_impact.to_dict(),
        }


# ============================================================
# Graph insights and sessions
# ============================================================

@dataclass(frozen=True)
class GraphInsight:
    """Plain-language answer to a common question about the dataset."""

    type: str  # connections, patterns, groups, outliers
    question: str
    answer: str
    details: tuple[str, ...]
    actionable: str
    confidence: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "question": self.question,
            "answer": self.answer,
            "details": list(self.details),
            "actionable": self.actionable,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class AnalyticsSession:
    """One question answered end to end."""

    id: str
    question: str
    analysis: QuestionAnalysis
    spec: VisualizationSpec
    visualization: ProcessedVisualization
    graph_insights: tuple[GraphInsight, ...]
    created_at: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "question": self.question,
            "analysis": self.analysis.to_dict(),
            "spec": self.spec.to_dict(),
            "visualization": self.visualization.to_dict(),
            "graph_insights": [g.to_dict() for g in self.graph_insights],
            "created_at": self.created_at,
        }
