"""
Visualization Engine

Entry point for the rendering half of the pipeline:
(analysis, spec, dataset) -> ProcessedVisualization.
"""

import time
from dataclasses import replace
from typing import Optional
from uuid import uuid4

import numpy as np

from core.logging_config import visualization_logger as logger
from core.models import (
    Dataset, KeyMetrics, ProcessedVisualization, QuestionAnalysis,
    TransformedData, VisualizationMetadata, VisualizationSpec,
)
from insights.business_impact import BusinessImpactAssessor, business_impact_assessor
from insights.chart_insights import ChartInsightGenerator, chart_insight_generator
from visualization.chart_builder import ChartDataBuilder, chart_data_builder
from visualization.transformer import DataTransformer, data_transformer


def _visualization_id() -> str:
    return f"viz-{int(time.time() * 1000)}-{uuid4().hex[:9]}"


class VisualizationEngine:
    """Transforms data, builds the chart payload and attaches metadata."""

    def __init__(
        self,
        transformer: DataTransformer = data_transformer,
        builder: ChartDataBuilder = chart_data_builder,
        insight_generator: ChartInsightGenerator = chart_insight_generator,
        impact_assessor: BusinessImpactAssessor = business_impact_assessor,
    ):
        self.transformer = transformer
        self.builder = builder
        self.insight_generator = insight_generator
        self.impact_assessor = impact_assessor

    def generate_visualization(
        self,
        analysis: QuestionAnalysis,
        spec: VisualizationSpec,
        dataset: Dataset,
        rng: Optional[np.random.Generator] = None,
    ) -> ProcessedVisualization:
        """
        Build a renderable visualization for a spec.

        Args:
            analysis: Analysis the spec was derived from
            spec: Chart specification (may have been overridden by the caller)
            dataset: Source rows and columns
            rng: Generator for network edge strengths (settings seed if None)

        Returns:
            ProcessedVisualization whose metadata insights are the spec's
            template insights followed by data-driven chart insights
        """
        logger.info(f"Generating {spec.type.value} visualization '{spec.title}'")

        transformed = self.transformer.transform(dataset, spec.chart_config)
        payload = self.builder.build(spec.type, transformed.points, rng=rng)

        metadata = VisualizationMetadata(
            total_data_points=dataset.row_count,
            key_metrics=self.key_metrics(transformed, spec),
            insights=spec.insights,
            recommendations=spec.recommendations,
            confidence=analysis.confidence,
        )
        visualization = ProcessedVisualization(
            id=_visualization_id(),
            type=spec.type,
            title=spec.title,
            description=spec.description,
            payload=payload,
            metadata=metadata,
            business_impact=self.impact_assessor.assess(analysis, transformed),
        )

        chart_insights = self.insight_generator.generate(visualization, is_empty=transformed.is_empty)
        if chart_insights:
            metadata = replace(metadata, insights=metadata.insights + tuple(chart_insights))
            visualization = replace(visualization, metadata=metadata)

        logger.success(
            f"Visualization {visualization.id}: {transformed.summary.count} points, "
            f"priority={visualization.business_impact.priority.value}"
        )
        return visualization

    def key_metrics(self, transformed: TransformedData, spec: VisualizationSpec) -> KeyMetrics:
        config = spec.chart_config
        column = config.y_axis or config.x_axis or "value"
        summary = transformed.summary
        variation = summary.std / summary.average * 100 if summary.average else 0.0
        return KeyMetrics(
            analyzed_column=column,
            total_data_points=summary.count,
            average=round(summary.average, 2),
            maximum=round(summary.max, 2),
            minimum=round(summary.min, 2),
            total=round(summary.sum, 2),
            variation=round(variation, 2),
        )


# Global instance
visualization_engine = VisualizationEngine()
