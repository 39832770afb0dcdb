"""
Visualization Spec Generator

Turns a question analysis into a concrete chart specification:
title, description, axis configuration and template text blocks.
"""

from types import MappingProxyType

from core.logging_config import visualization_logger as logger
from core.models import (
    Aggregation, ChartConfig, ChartType, Dataset, IntentCategory,
    QuestionAnalysis, VisualizationSpec,
)

DEFAULT_PRIMARY_ENTITY = "Business Metrics"

TITLE_TEMPLATES = MappingProxyType({
    IntentCategory.TREND_ANALYSIS: "{entity} Trends Over Time",
    IntentCategory.COMPARISON: "{entity} Performance Comparison",
    IntentCategory.DISTRIBUTION: "{entity} Distribution Analysis",
    IntentCategory.CORRELATION: "{entity} Relationship Analysis",
    IntentCategory.ANOMALY_DETECTION: "{entity} Anomaly Detection",
    IntentCategory.PERFORMANCE_METRICS: "{entity} Performance Dashboard",
    IntentCategory.RELATIONSHIP_MAPPING: "{entity} Network Analysis",
    IntentCategory.FORECASTING: "{entity} Forecast Analysis",
    IntentCategory.SEGMENTATION: "{entity} Segmentation Analysis",
    IntentCategory.RISK_ASSESSMENT: "{entity} Risk Assessment",
})

INTENT_INSIGHTS = MappingProxyType({
    IntentCategory.TREND_ANALYSIS: "Temporal patterns indicate opportunities for growth optimization.",
    IntentCategory.COMPARISON: "Performance variations suggest areas for improvement and best practice sharing.",
    IntentCategory.RISK_ASSESSMENT: "Risk factors identified require immediate attention and mitigation strategies.",
})

RECOMMENDATIONS = MappingProxyType({
    IntentCategory.TREND_ANALYSIS: (
        "Monitor key trend indicators regularly",
        "Implement predictive analytics for early trend detection",
        "Develop strategies to capitalize on positive trends",
    ),
    IntentCategory.COMPARISON: (
        "Focus resources on top-performing areas",
        "Investigate root causes of performance differences",
        "Implement best practices across all segments",
    ),
    IntentCategory.DISTRIBUTION: (
        "Optimize resource allocation based on distribution patterns",
        "Identify opportunities for portfolio rebalancing",
        "Address underperforming segments",
    ),
    IntentCategory.CORRELATION: (
        "Leverage strong correlations for strategic planning",
        "Investigate unexpected relationships for innovation opportunities",
        "Monitor key relationships for early warning signals",
    ),
    IntentCategory.ANOMALY_DETECTION: (
        "Investigate root causes of anomalies immediately",
        "Implement automated anomaly monitoring",
        "Develop response protocols for future anomalies",
    ),
    IntentCategory.PERFORMANCE_METRICS: (
        "Set performance benchmarks and targets",
        "Implement regular performance review cycles",
        "Develop improvement action plans for underperforming areas",
    ),
    IntentCategory.RELATIONSHIP_MAPPING: (
        "Optimize network connections and dependencies",
        "Identify key influencers and leverage their impact",
        "Strengthen critical relationships and reduce single points of failure",
    ),
    IntentCategory.FORECASTING: (
        "Use forecasts for strategic planning and resource allocation",
        "Implement scenario planning based on predictions",
        "Monitor actual vs predicted performance for model improvement",
    ),
    IntentCategory.SEGMENTATION: (
        "Develop targeted strategies for each segment",
        "Allocate resources based on segment potential",
        "Create personalized approaches for high-value segments",
    ),
    IntentCategory.RISK_ASSESSMENT: (
        "Implement immediate risk mitigation strategies",
        "Develop comprehensive risk management framework",
        "Establish regular risk monitoring and reporting",
    ),
})


class SpecGenerator:
    """Builds a VisualizationSpec from an analysis and the dataset's columns."""

    def generate(self, analysis: QuestionAnalysis, dataset: Dataset) -> VisualizationSpec:
        spec = VisualizationSpec(
            type=analysis.suggested_visualization,
            title=self.title(analysis),
            description=self.description(analysis),
            data_transformation=self.data_transformation(analysis),
            chart_config=self.chart_config(analysis, dataset),
            insights=self.insights(analysis, dataset),
            recommendations=RECOMMENDATIONS[analysis.intent],
        )
        logger.info(f"Spec '{spec.title}' ({spec.type.value}): {spec.chart_config.to_dict()}")
        return spec

    def title(self, analysis: QuestionAnalysis) -> str:
        entity = analysis.primary_entity or DEFAULT_PRIMARY_ENTITY
        return TITLE_TEMPLATES[analysis.intent].format(entity=entity)

    def description(self, analysis: QuestionAnalysis) -> str:
        return (
            f"{analysis.business_context} This visualization provides insights "
            f"based on the question: \"{analysis.original_question}\""
        )

    def data_transformation(self, analysis: QuestionAnalysis) -> str:
        dimensions = ", ".join(analysis.dimensions) or "category"
        metrics = ", ".join(analysis.metrics) or "default measures"
        return f"Data aggregated by {dimensions} with metrics: {metrics}"

    def chart_config(self, analysis: QuestionAnalysis, dataset: Dataset) -> ChartConfig:
        """
        Pick axes from the dataset's columns.

        Scatter charts plot the first two numeric columns against each
        other. Otherwise a categorical x axis (also used for grouping) is
        preferred. Datasets with no categorical column but a temporal and
        a numeric one get a time x axis, so trend questions over
        date-only data plot dates instead of falling back to row
        indexes. Aggregation is always sum.
        """
        numeric = dataset.numeric_columns
        categorical = dataset.categorical_columns
        temporal = dataset.temporal_columns

        x_axis = y_axis = group_by = None
        if analysis.suggested_visualization == ChartType.SCATTER and len(numeric) >= 2:
            x_axis, y_axis = numeric[0].name, numeric[1].name
        elif categorical and numeric:
            x_axis, y_axis = categorical[0].name, numeric[0].name
            group_by = categorical[0].name
        elif temporal and numeric:
            x_axis, y_axis = temporal[0].name, numeric[0].name

        return ChartConfig(
            x_axis=x_axis,
            y_axis=y_axis,
            group_by=group_by,
            aggregation=Aggregation.SUM,
            color_by=analysis.dimensions[0] if analysis.dimensions else None,
        )

    def insights(self, analysis: QuestionAnalysis, dataset: Dataset) -> tuple[str, ...]:
        covered = ", ".join(analysis.entities) or "all available columns"
        lines = [
            f"Analysis based on {dataset.row_count} data points covering {covered}.",
            f"{analysis.intent.label.capitalize()} reveals key patterns for business optimization.",
            f"Confidence level: {round(analysis.confidence * 100)}% based on question analysis.",
        ]
        extra = INTENT_INSIGHTS.get(analysis.intent)
        if extra:
            lines.append(extra)
        return tuple(lines)


# Global instance
spec_generator = SpecGenerator()
