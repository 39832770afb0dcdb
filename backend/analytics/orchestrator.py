"""
Analytics Orchestrator

Answers one question end to end: analysis, spec, visualization and
dataset-level graph insights, bundled as an AnalyticsSession.
"""

import time
from typing import Optional
from uuid import uuid4

import numpy as np

from core.logging_config import question_logger as logger
from core.models import AnalyticsSession, Dataset
from insights.graph_insights import GraphInsightAnalyzer, graph_insight_analyzer
from questions.processor import QuestionProcessor, question_processor
from visualization.engine import VisualizationEngine, visualization_engine


class AnalyticsOrchestrator:
    """
    Runs the pipeline stages in order.

    Flow:
    1. Analyze the question (intent, entities, suggested chart)
    2. Generate the visualization spec
    3. Build the visualization (data, payload, insights, impact)
    4. Add dataset-level graph insights
    """

    def __init__(
        self,
        processor: QuestionProcessor = question_processor,
        engine: VisualizationEngine = visualization_engine,
        graph_analyzer: GraphInsightAnalyzer = graph_insight_analyzer,
    ):
        self.processor = processor
        self.engine = engine
        self.graph_analyzer = graph_analyzer
        self.logger = logger

    def run(
        self,
        question: str,
        dataset: Dataset,
        seed: Optional[int] = None,
    ) -> AnalyticsSession:
        """
        Answer a question about a dataset.

        Raises:
            ValueError: if the question is blank
        """
        question = question.strip()
        if not question:
            raise ValueError("Question must not be empty")

        start_time = time.time()
        self.logger.info("=== ANALYTICS PIPELINE STARTED ===")

        self.logger.info("STEP 1: Analyzing question...")
        analysis = self.processor.analyze_question(question, dataset)

        self.logger.info("STEP 2: Generating visualization spec...")
        spec = self.processor.generate_visualization_spec(analysis, dataset)

        self.logger.info("STEP 3: Building visualization...")
        rng = np.random.default_rng(seed) if seed is not None else None
        visualization = self.engine.generate_visualization(analysis, spec, dataset, rng=rng)

        self.logger.info("STEP 4: Generating graph insights...")
        graph_insights = self.graph_analyzer.analyze(dataset, question)

        elapsed = (time.time() - start_time) * 1000
        self.logger.success(f"=== ANALYTICS PIPELINE COMPLETE in {elapsed:.0f}ms ===")

        return AnalyticsSession(
            id=f"session-{uuid4().hex[:16]}",
            question=question,
            analysis=analysis,
            spec=spec,
            visualization=visualization,
            graph_insights=tuple(graph_insights),
            created_at=time.time(),
        )


# Global instance
analytics_orchestrator = AnalyticsOrchestrator()
