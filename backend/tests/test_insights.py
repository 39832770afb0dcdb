"""
Test Insight Generation

Unit tests for chart insights, business impact and graph insights.
"""

import numpy as np
import pytest

from core.models import (
    ChartType, Dataset, IntentCategory, Priority, QuestionAnalysis,
    SeriesDataset, SeriesPayload, SummaryStatistics, TransformedData,
)
from insights.business_impact import BusinessImpactAssessor, format_financial_impact
from insights.chart_insights import ChartInsightGenerator, format_value
from insights.graph_insights import GraphInsightAnalyzer


def make_analysis(intent: IntentCategory, confidence: float = 0.5) -> QuestionAnalysis:
    return QuestionAnalysis(
        original_question="question",
        intent=intent,
        confidence=confidence,
        entities=(),
        metrics=(),
        dimensions=(),
        timeframe=None,
        suggested_visualization=ChartType.BAR,
        business_context="",
        executive_summary="",
    )


def make_transformed(count: int, average: float) -> TransformedData:
    return TransformedData(
        points=(),
        summary=SummaryStatistics(count=count, sum=count * average, average=average),
    )


def series(labels, data) -> SeriesPayload:
    return SeriesPayload(
        labels=tuple(labels),
        datasets=(SeriesDataset(label="Values", data=tuple(float(v) for v in data)),),
    )


@pytest.fixture
def generator():
    return ChartInsightGenerator()


@pytest.fixture
def assessor():
    return BusinessImpactAssessor()


@pytest.fixture
def graph_analyzer():
    return GraphInsightAnalyzer()


class TestFormatting:
    def test_format_value(self):
        assert format_value(300.0) == "300"
        assert format_value(1234567.0) == "1,234,567"
        assert format_value(12.5) == "12.50"

    def test_format_financial_impact(self):
        assert format_financial_impact(60) == "$60 potential impact"
        assert format_financial_impact(999) == "$999 potential impact"
        assert format_financial_impact(5000) == "$5.0K potential impact"
        assert format_financial_impact(12345) == "$12.3K potential impact"


class TestPieInsights:
    def test_largest_segment_and_concentration(self, generator):
        insights = generator.for_payload(ChartType.PIE, series(["A", "B", "C"], [60, 30, 10]))

        assert insights == [
            "A represents the largest segment at 60.0% of the total.",
            "High concentration: Top 3 segments account for 100.0% of the total.",
        ]

    def test_no_concentration_for_even_split(self, generator):
        insights = generator.for_payload(ChartType.PIE, series("ABCDE", [20] * 5))

        assert len(insights) == 1
        assert "20.0%" in insights[0]

    def test_zero_total_is_skipped(self, generator):
        assert generator.for_payload(ChartType.PIE, series(["A", "B"], [0, 0])) == []


class TestBarInsights:
    def test_extremes_and_above_average(self, generator):
        insights = generator.for_payload(ChartType.BAR, series(["East", "West"], [100, 300]))

        assert insights == [
            "Highest value: West (300)",
            "Lowest value: East (100)",
            "1 out of 2 categories are above average (200.0).",
        ]


class TestLineInsights:
    def test_positive_trend(self, generator):
        insights = generator.for_payload(ChartType.LINE, series(["a", "b", "c"], [100, 150, 200]))

        assert insights[0] == "Positive trend: 100.0% increase from start to end."

    def test_negative_trend(self, generator):
        insights = generator.for_payload(ChartType.LINE, series(["a", "b"], [200, 100]))

        assert insights[0] == "Negative trend: 50.0% decrease from start to end."

    def test_flat_trend_without_volatility(self, generator):
        insights = generator.for_payload(ChartType.LINE, series(["a", "b", "c"], [5, 5, 5]))

        assert insights == ["Flat trend: no net change from start to end."]

    def test_zero_start_omits_percent_change(self, generator):
        insights = generator.for_payload(ChartType.LINE, series(["a", "b"], [0, 10]))

        assert not any("trend:" in i for i in insights)
        assert "High volatility detected in the data series." in insights

    def test_volatility(self, generator):
        insights = generator.for_payload(
            ChartType.LINE, series("abcdef", [10, 50, 10, 50, 10, 50])
        )

        assert "High volatility detected in the data series." in insights

    def test_single_point(self, generator):
        assert generator.for_payload(ChartType.LINE, series(["a"], [1])) == []


class TestScatterInsights:
    def test_outlier_and_spread(self, generator):
        insights = generator.for_payload(
            ChartType.SCATTER, series(map(str, range(11)), [10] * 10 + [100])
        )

        assert insights == [
            "1 potential outliers detected (beyond 2 standard deviations).",
            "Data spread: Standard deviation of 25.87.",
        ]

    def test_constant_values_only_report_spread(self, generator):
        insights = generator.for_payload(ChartType.SCATTER, series("abc", [5, 5, 5]))

        assert insights == ["Data spread: Standard deviation of 0.00."]

    def test_too_few_points(self, generator):
        assert generator.for_payload(ChartType.SCATTER, series("ab", [1, 2])) == []


class TestOtherCharts:
    @pytest.mark.parametrize("chart_type", [ChartType.AREA, ChartType.HEATMAP, ChartType.GAUGE])
    def test_no_rules(self, generator, chart_type):
        assert generator.for_payload(chart_type, series("ab", [1, 2])) == []


class TestBusinessImpact:
    @pytest.mark.parametrize("intent, confidence, expected", [
        (IntentCategory.RISK_ASSESSMENT, 0.3, Priority.CRITICAL),
        (IntentCategory.ANOMALY_DETECTION, 0.3, Priority.CRITICAL),
        (IntentCategory.TREND_ANALYSIS, 0.3, Priority.HIGH),
        (IntentCategory.PERFORMANCE_METRICS, 0.3, Priority.HIGH),
        (IntentCategory.DISTRIBUTION, 0.9, Priority.HIGH),
        (IntentCategory.COMPARISON, 0.5, Priority.MEDIUM),
        (IntentCategory.COMPARISON, 0.7, Priority.MEDIUM),
    ])
    def test_priority(self, assessor, intent, confidence, expected):
        assert assessor.priority(make_analysis(intent, confidence)) == expected

    def test_financial_impact(self, assessor):
        assert assessor.financial_impact(make_transformed(3, 200.0)) == 60
        assert assessor.financial_impact(make_transformed(0, 0.0)) == 0
        # 2 x 2.5 x 0.1 = 0.5 rounds half up
        assert assessor.financial_impact(make_transformed(2, 2.5)) == 1

    def test_overflowing_estimate_is_zero(self, assessor):
        assert assessor.financial_impact(make_transformed(2, float("inf"))) == 0
        assert assessor.financial_impact(make_transformed(2, float("nan"))) == 0

    def test_assess(self, assessor):
        impact = assessor.assess(
            make_analysis(IntentCategory.TREND_ANALYSIS), make_transformed(100, 500.0)
        )

        assert impact.priority == Priority.HIGH
        assert impact.financial_impact == "$5.0K potential impact"
        assert impact.timeframe == "2-3 months"
        assert impact.stakeholders == ("Strategy Team", "Marketing Manager", "CEO")

    def test_defaults(self, assessor):
        impact = assessor.assess(make_analysis(IntentCategory.SEGMENTATION), make_transformed(0, 0.0))

        assert impact.timeframe == "1-2 months"
        assert impact.stakeholders == ("Manager", "Executive Team")
        assert impact.to_dict()["priority"] == "medium"


class TestGraphInsights:
    @pytest.fixture
    def dataset(self):
        rows = [{"region": "A", "channel": "web", "sales": 10} for _ in range(14)]
        rows += [{"region": "B", "channel": "store", "sales": 10} for _ in range(5)]
        rows.append({"region": "C", "channel": "web", "sales": 1000})
        return Dataset.from_records(
            rows,
            [("region", "categorical"), ("channel", "categorical"), ("sales", "numeric")],
        )

    def test_groups(self, graph_analyzer, dataset):
        insights = graph_analyzer.analyze(dataset, "which group is biggest")

        assert [i.type for i in insights] == ["groups"]
        assert insights[0].answer.startswith(
            'I found 3 distinct groups in your region. The largest group is "A" with 70.0%'
        )
        assert insights[0].details[0] == "A: 14 items (70.0%)"

    def test_connections(self, graph_analyzer, dataset):
        insights = graph_analyzer.analyze(dataset, "what is connected")

        assert [i.type for i in insights] == ["connections"]
        assert insights[0].details[0] == "A -> web (appears 14 times)"

    def test_outliers(self, graph_analyzer, dataset):
        insights = graph_analyzer.analyze(dataset, "any outliers?")

        assert [i.type for i in insights] == ["outliers"]
        assert insights[0].details == ("1000 (much higher than normal)",)

    def test_patterns(self, graph_analyzer, dataset):
        insights = graph_analyzer.analyze(dataset, "any pattern?")

        assert [i.type for i in insights] == ["patterns"]
        assert "95.0%" in insights[0].answer

    def test_default_mix_sorted_by_confidence(self, graph_analyzer, dataset):
        insights = graph_analyzer.analyze(dataset, "tell me about this")

        assert [i.type for i in insights] == ["groups", "outliers", "patterns"]
        confidences = [i.confidence for i in insights]
        assert confidences == sorted(confidences, reverse=True)

    def test_empty_dataset(self, graph_analyzer):
        dataset = Dataset.from_records([], [("sales", "numeric")])

        assert graph_analyzer.analyze(dataset, "anything") == []

    def test_connections_need_two_categoricals(self, graph_analyzer):
        dataset = Dataset.from_records(
            [{"region": "A", "sales": 1}, {"region": "B", "sales": 2}],
            [("region", "categorical"), ("sales", "numeric")],
        )

        insights = graph_analyzer.analyze(dataset, "connections")

        # nothing specific came back, so the general mix is offered instead
        assert [i.type for i in insights] == ["groups"]

    def test_formatted_numbers_are_parsed(self, graph_analyzer):
        rows = [{"sales": "$10"} for _ in range(19)] + [{"sales": "$1,000"}, {"sales": "N/A"}]
        dataset = Dataset.from_records(rows, [("sales", "numeric")])

        insights = graph_analyzer.analyze(dataset, "anything unusual")

        assert [i.type for i in insights] == ["outliers"]
        assert insights[0].details == ("1000 (much higher than normal)",)

    def test_spread_out_values_have_no_outliers(self, graph_analyzer):
        dataset = Dataset.from_records(
            [{"sales": float(v)} for v in np.arange(30)],
            [("sales", "numeric")],
        )

        assert graph_analyzer.analyze(dataset, "outlier") == []
