"""
Question Processor

Entry point for the analysis half of the pipeline:
question -> QuestionAnalysis -> VisualizationSpec.
"""

from core.logging_config import question_logger as logger
from core.models import Dataset, QuestionAnalysis, VisualizationSpec
from questions.entities import EntityExtractor, entity_extractor
from questions.intent import IntentClassifier, intent_classifier
from questions.narrative import business_context, executive_summary
from visualization.selector import VisualizationSelector, visualization_selector
from visualization.spec_generator import SpecGenerator, spec_generator


class QuestionProcessor:
    """
    Classifies a question, extracts the columns it refers to and
    recommends a chart for it.

    Stateless apart from the read-only lookup tables held by its
    collaborators, so one instance can serve any number of callers.
    """

    def __init__(
        self,
        classifier: IntentClassifier = intent_classifier,
        extractor: EntityExtractor = entity_extractor,
        selector: VisualizationSelector = visualization_selector,
        generator: SpecGenerator = spec_generator,
    ):
        self.classifier = classifier
        self.extractor = extractor
        self.selector = selector
        self.generator = generator

    def analyze_question(self, question: str, dataset: Dataset) -> QuestionAnalysis:
        logger.info(f"Analyzing question: {question!r}")
        logger.debug(f"Dataset: {dataset.row_count} rows x {len(dataset.columns)} columns")

        intent_result = self.classifier.classify(question)
        extracted = self.extractor.extract(question, dataset)
        suggested = self.selector.select(intent_result.intent, dataset)

        analysis = QuestionAnalysis(
            original_question=question,
            intent=intent_result.intent,
            confidence=intent_result.confidence,
            entities=extracted.entities,
            metrics=extracted.metrics,
            dimensions=extracted.dimensions,
            timeframe=extracted.timeframe,
            suggested_visualization=suggested,
            business_context=business_context(intent_result.intent, extracted.entities),
            executive_summary=executive_summary(question, intent_result.intent, extracted.entities),
        )
        logger.success(
            f"Intent={analysis.intent.value} confidence={analysis.confidence:.2f} "
            f"chart={analysis.suggested_visualization.value} entities={list(analysis.entities)}"
        )
        return analysis

    def generate_visualization_spec(
        self,
        analysis: QuestionAnalysis,
        dataset: Dataset,
    ) -> VisualizationSpec:
        return self.generator.generate(analysis, dataset)


# Global instance
question_processor = QuestionProcessor()
