"""
Test Question Analysis

Unit tests for intent classification, entity extraction and chart selection.
"""

import pytest

from core.models import ChartType, Dataset, IntentCategory, SemanticType
from questions.entities import EntityExtractor, name_variants
from questions.intent import IntentClassifier
from questions.processor import QuestionProcessor
from visualization.selector import CANDIDATE_CHARTS, VisualizationSelector


@pytest.fixture
def classifier():
    return IntentClassifier()


@pytest.fixture
def extractor():
    return EntityExtractor()


@pytest.fixture
def selector():
    return VisualizationSelector()


@pytest.fixture
def sales_dataset():
    """Mixed-type dataset with a camelCase and a snake_case column."""
    return Dataset.from_records(
        rows=[
            {"order_date": "2024-01-01", "totalRevenue": 100, "region": "East", "units": 3, "notes": "ok"},
            {"order_date": "2024-01-02", "totalRevenue": 250, "region": "West", "units": 5, "notes": ""},
        ],
        columns=[
            ("order_date", "temporal"),
            ("totalRevenue", "numeric"),
            ("region", "categorical"),
            ("units", "numeric"),
            ("notes", "text"),
        ],
    )


def _dataset(row_count: int, columns: list[tuple[str, str]]) -> Dataset:
    rows = [{name: i for name, _ in columns} for i in range(row_count)]
    return Dataset.from_records(rows, columns)


class TestIntentClassifier:
    def test_trend_question(self, classifier):
        """Trend keywords select trend analysis."""
        result = classifier.classify("show me the trend in revenue over time")

        assert result.intent == IntentCategory.TREND_ANALYSIS
        assert set(result.matched_triggers) == {"trend", "over time"}
        assert result.confidence == pytest.approx(0.7)

    def test_comparison_question(self, classifier):
        result = classifier.classify("compare sales by region")

        assert result.intent == IntentCategory.COMPARISON
        assert result.confidence == pytest.approx(0.5)

    def test_no_matches_defaults_to_performance_metrics(self, classifier):
        """Questions without any trigger fall back to the default intent."""
        result = classifier.classify("hello world")

        assert result.intent == IntentCategory.PERFORMANCE_METRICS
        assert result.confidence == pytest.approx(0.3)
        assert result.matched_triggers == ()

    def test_tie_goes_to_first_declared_intent(self, classifier):
        """trend_analysis is declared before comparison."""
        result = classifier.classify("compare the trend")

        assert result.scores[IntentCategory.TREND_ANALYSIS] == 1
        assert result.scores[IntentCategory.COMPARISON] == 1
        assert result.intent == IntentCategory.TREND_ANALYSIS

    def test_confidence_saturates(self, classifier):
        result = classifier.classify("trend growth decline pattern change over time")

        assert result.intent == IntentCategory.TREND_ANALYSIS
        assert result.confidence == pytest.approx(0.9)

    def test_repeated_trigger_counts_once(self, classifier):
        result = classifier.classify("risk risk risk")

        assert result.intent == IntentCategory.RISK_ASSESSMENT
        assert result.scores[IntentCategory.RISK_ASSESSMENT] == 1

    def test_case_insensitive(self, classifier):
        result = classifier.classify("Show our KPI")

        assert result.intent == IntentCategory.PERFORMANCE_METRICS
        assert result.confidence == pytest.approx(0.5)

    @pytest.mark.parametrize("question", [
        "", "what is our revenue", "predict future sales and forecast risk",
        "outlier anomaly unusual strange unexpected irregular deviation",
    ])
    def test_confidence_bounds_and_determinism(self, classifier, question):
        first = classifier.classify(question)
        second = classifier.classify(question)

        assert 0.3 <= first.confidence <= 0.9
        assert (first.intent, first.confidence) == (second.intent, second.confidence)


class TestEntityExtractor:
    def test_name_variants(self):
        from core.models import ColumnDescriptor

        variants = name_variants(ColumnDescriptor("totalRevenue", SemanticType.NUMERIC))
        assert "total revenue" in variants
        assert "totalrevenue" in variants

        variants = name_variants(ColumnDescriptor("order_date", SemanticType.TEMPORAL))
        assert "order date" in variants

    def test_entities_metrics_dimensions(self, extractor, sales_dataset):
        result = extractor.extract("What is the total revenue by region", sales_dataset)

        assert result.entities == ("totalRevenue", "region", "revenue")
        # "total" is a generic metric keyword, so every numeric column is included
        assert result.metrics == ("totalRevenue", "units")
        assert result.dimensions == ("region",)
        assert result.timeframe is None

    def test_text_columns_are_dimensions(self, extractor, sales_dataset):
        result = extractor.extract("monthly units for notes last month", sales_dataset)

        assert result.dimensions == ("notes",)
        assert result.metrics == ("units",)

    def test_timeframe_scan_order(self, extractor):
        assert extractor.extract_timeframe("monthly numbers for last month") == "monthly"
        assert extractor.extract_timeframe("numbers for last year") == "last year"
        assert extractor.extract_timeframe("numbers") is None

    def test_entities_deduplicated(self, extractor):
        dataset = Dataset.from_records([], [("revenue", "numeric")])
        result = extractor.extract("revenue revenue", dataset)

        assert result.entities == ("revenue",)

    @pytest.mark.parametrize("question", [
        "total sales", "region", "count of notes by region", "nothing relevant",
    ])
    def test_metrics_and_dimensions_respect_types(self, extractor, sales_dataset, question):
        result = extractor.extract(question, sales_dataset)

        numeric = {c.name for c in sales_dataset.numeric_columns}
        dimensions = {c.name for c in sales_dataset.dimension_columns}
        assert set(result.metrics) <= numeric
        assert set(result.dimensions) <= dimensions


class TestVisualizationSelector:
    def test_scatter_for_correlation(self, selector):
        dataset = _dataset(5, [("a", "numeric"), ("b", "numeric")])

        assert selector.select(IntentCategory.CORRELATION, dataset) == ChartType.SCATTER

    def test_network_needs_more_than_twenty_rows(self, selector):
        columns = [("a", "categorical"), ("b", "numeric")]

        assert selector.explain(IntentCategory.RELATIONSHIP_MAPPING, _dataset(21, columns)) == (
            ChartType.NETWORK, "network_for_many_rows"
        )
        # below the threshold no rule fires; network is still the first candidate
        assert selector.explain(IntentCategory.RELATIONSHIP_MAPPING, _dataset(20, columns)) == (
            ChartType.NETWORK, "first_candidate"
        )

    def test_pie_for_categorical_distribution(self, selector):
        dataset = _dataset(3, [("region", "categorical"), ("sales", "numeric")])

        chart, rule = selector.explain(IntentCategory.DISTRIBUTION, dataset)
        assert chart == ChartType.PIE
        assert rule == "pie_for_categories"

    def test_text_columns_do_not_count_as_categorical(self, selector):
        dataset = _dataset(3, [("notes", "text"), ("sales", "numeric")])

        chart, rule = selector.explain(IntentCategory.SEGMENTATION, dataset)
        assert chart == ChartType.PIE
        assert rule == "first_candidate"

    def test_comparison_uses_bar(self, selector):
        dataset = _dataset(2, [("region", "categorical"), ("sales", "numeric")])

        assert selector.select(IntentCategory.COMPARISON, dataset) == ChartType.BAR

    def test_precedence_network_before_scatter(self):
        """Rules only fire for charts the intent allows."""
        selector = VisualizationSelector()
        dataset = _dataset(30, [("a", "numeric"), ("b", "numeric")])

        assert selector.select(IntentCategory.RELATIONSHIP_MAPPING, dataset) == ChartType.NETWORK
        assert selector.select(IntentCategory.CORRELATION, dataset) == ChartType.SCATTER

    @pytest.mark.parametrize("intent", list(IntentCategory))
    def test_selection_stays_within_candidates(self, selector, intent):
        shapes = [
            _dataset(0, []),
            _dataset(50, [("a", "numeric"), ("b", "numeric"), ("c", "categorical")]),
            _dataset(5, [("c", "categorical")]),
            _dataset(25, [("t", "temporal"), ("a", "numeric")]),
        ]
        for dataset in shapes:
            assert selector.select(intent, dataset) in CANDIDATE_CHARTS[intent]


class TestQuestionProcessor:
    def test_analyze_question(self, sales_dataset):
        processor = QuestionProcessor()
        analysis = processor.analyze_question("Compare total revenue by region", sales_dataset)

        assert analysis.original_question == "Compare total revenue by region"
        assert analysis.intent == IntentCategory.COMPARISON
        assert analysis.suggested_visualization == ChartType.BAR
        assert analysis.primary_entity == "totalRevenue"
        assert "totalRevenue, region, revenue" in analysis.business_context
        assert analysis.executive_summary.startswith(
            "Business Intelligence Analysis: Compare total revenue by region"
        )
        assert "This comparison focuses on totalRevenue, region, revenue" in analysis.executive_summary

    def test_analysis_without_entities_uses_fallback_subject(self):
        dataset = Dataset.from_records([], [("x", "numeric")])
        analysis = QuestionProcessor().analyze_question("hello world", dataset)

        assert analysis.entities == ()
        assert "the available business data" in analysis.business_context
        assert analysis.to_dict()["intent"] == "performance_metrics"
