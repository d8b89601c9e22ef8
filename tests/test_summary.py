"""
Summary Builder and Clause Aggregator Tests
"""

import pytest

from redline.services.comparison import (
    Change,
    ChangeSeverity,
    ChangeType,
    ClauseAggregator,
    ClauseCategory,
    OverallChange,
    RiskLevel,
    SummaryBuilder,
    TextSegment,
)
from redline.services.comparison.summary_builder import LOW_RISK_RECOMMENDATION
from samples import PAYMENT_ORIGINAL


def make_change(
    number: int,
    change_type: ChangeType = ChangeType.MODIFIED,
    severity: ChangeSeverity = ChangeSeverity.MINOR,
    risk_score: float = 0.4,
    category: ClauseCategory = ClauseCategory.OTHER,
    implication=None,
) -> Change:
    segment = TextSegment(
        id=f"orig_{number}",
        text=f"Paragraf {number}",
        start_index=0,
        end_index=10,
        line_number=1,
        paragraph_number=number,
    )
    return Change(
        id=f"change_{number:03d}",
        change_type=change_type,
        severity=severity,
        original_segment=segment if change_type != ChangeType.ADDED else None,
        new_segment=segment if change_type != ChangeType.REMOVED else None,
        clause_category=category,
        risk_score=risk_score,
        legal_implication=implication,
        description=f"Paragraph {number} changed",
    )


@pytest.fixture
def builder():
    return SummaryBuilder()


class TestSummaryBuilder:

    def test_no_changes(self, builder):
        summary = builder.build([])
        assert summary.total_changes == 0
        assert summary.overall_risk_score == 0.0
        assert summary.risk_level == RiskLevel.LOW
        assert summary.key_findings == []
        assert summary.recommendations == [LOW_RISK_RECOMMENDATION]

    def test_counts(self, builder):
        changes = [
            make_change(1, ChangeType.ADDED),
            make_change(2, ChangeType.REMOVED, ChangeSeverity.MAJOR, 0.5),
            make_change(3, ChangeType.FORMATTING, ChangeSeverity.COSMETIC, 0.0),
            make_change(4, ChangeType.MOVED, ChangeSeverity.MINOR, 0.2),
        ]
        summary = builder.build(changes)
        assert summary.total_changes == 4
        assert summary.added_count == 1
        assert summary.removed_count == 1
        assert summary.modified_count == 0
        assert summary.formatting_count == 1
        assert summary.moved_count == 1
        assert summary.major_changes == 1
        assert summary.minor_changes == 2
        assert summary.cosmetic_changes == 1
        assert summary.overall_risk_score == pytest.approx((0.4 + 0.5 + 0.0 + 0.2) / 4)

    def test_any_critical_means_critical(self, builder):
        changes = [make_change(1, severity=ChangeSeverity.CRITICAL, risk_score=0.8)] + [
            make_change(n, severity=ChangeSeverity.COSMETIC, risk_score=0.0) for n in range(2, 10)
        ]
        summary = builder.build(changes)
        assert summary.overall_risk_score < 0.3
        assert summary.risk_level == RiskLevel.CRITICAL
        assert summary.key_findings[0] == "1 critical change(s) require attention"
        assert summary.recommendations[0] == "Discuss the critical changes with your lawyer"

    def test_high_average_without_critical_is_critical(self, builder):
        changes = [make_change(n, severity=ChangeSeverity.MAJOR, risk_score=0.7) for n in (1, 2)]
        assert builder.build(changes).risk_level == RiskLevel.CRITICAL

    def test_more_than_two_majors_is_high(self, builder):
        changes = [make_change(n, severity=ChangeSeverity.MAJOR, risk_score=0.4) for n in (1, 2, 3)]
        assert builder.build(changes).risk_level == RiskLevel.HIGH

    def test_single_major_is_medium(self, builder):
        changes = [make_change(1, severity=ChangeSeverity.MAJOR, risk_score=0.1)]
        summary = builder.build(changes)
        assert summary.risk_level == RiskLevel.MEDIUM
        assert "Assess the legal consequences of the major changes" in summary.recommendations

    def test_low(self, builder):
        changes = [make_change(1, severity=ChangeSeverity.COSMETIC, risk_score=0.1)]
        summary = builder.build(changes)
        assert summary.risk_level == RiskLevel.LOW
        assert summary.recommendations == [LOW_RISK_RECOMMENDATION]

    def test_net_removed_finding(self, builder):
        changes = [
            make_change(1, ChangeType.REMOVED, ChangeSeverity.MAJOR, 0.5),
            make_change(2, ChangeType.REMOVED, ChangeSeverity.MAJOR, 0.5),
            make_change(3, ChangeType.ADDED, ChangeSeverity.MINOR, 0.3),
        ]
        findings = builder.build(changes).key_findings
        assert "1 paragraph(s) removed (simplification or possible loss of rights)" in findings

    def test_net_added_finding(self, builder):
        changes = [make_change(n, ChangeType.ADDED, ChangeSeverity.MINOR, 0.3) for n in (1, 2)]
        assert "2 new paragraph(s) added" in builder.build(changes).key_findings

    def test_only_first_three_implications(self, builder):
        changes = [
            make_change(n, implication=f"INTRODUCED: Risk {n}") for n in range(1, 6)
        ]
        findings = builder.build(changes).key_findings
        assert [f for f in findings if f.startswith("INTRODUCED")] == [
            "INTRODUCED: Risk 1",
            "INTRODUCED: Risk 2",
            "INTRODUCED: Risk 3",
        ]

    @pytest.mark.parametrize("category,expected", [
        (ClauseCategory.LIABILITY, "Review the liability and penalty clauses carefully"),
        (ClauseCategory.PENALTY, "Review the liability and penalty clauses carefully"),
        (ClauseCategory.TERMINATION, "Check the changes to the termination conditions"),
        (ClauseCategory.CONFIDENTIALITY, "Review the confidentiality obligations"),
    ])
    def test_category_recommendations(self, builder, category, expected):
        changes = [make_change(1, severity=ChangeSeverity.COSMETIC, risk_score=0.1, category=category)]
        recommendations = builder.build(changes).recommendations
        assert expected in recommendations
        assert LOW_RISK_RECOMMENDATION not in recommendations


class TestClauseAggregator:

    def test_removed_clause(self, engine):
        result = engine.compare("Gizlilik: bilgiler gizli tutulur.", "")
        assert len(result.clause_comparisons) == 1

        clause = result.clause_comparisons[0]
        assert clause.category == ClauseCategory.CONFIDENTIALITY
        assert clause.overall_change == OverallChange.REMOVED
        assert clause.original_present and not clause.new_present
        assert clause.risk_assessment.level == ChangeSeverity.MAJOR
        assert clause.risk_assessment.reason == "Paragraph 1 removed"

    def test_clause_present_without_own_changes(self, engine):
        revised = PAYMENT_ORIGINAL + "\n\nMadde 2: Fatura bilgileri gizlilik içinde saklanır."
        result = engine.compare(PAYMENT_ORIGINAL, revised)
        by_category = {cc.category: cc for cc in result.clause_comparisons}

        payment = by_category[ClauseCategory.PAYMENT]
        assert payment.overall_change == OverallChange.MODIFIED
        assert [c.id for c in payment.changes] == ["change_001"]

        confidentiality = by_category[ClauseCategory.CONFIDENTIALITY]
        assert confidentiality.overall_change == OverallChange.ADDED
        assert confidentiality.changes == []
        assert confidentiality.risk_assessment.level == ChangeSeverity.COSMETIC
        assert "appears only in the new version" in confidentiality.risk_assessment.reason

    def test_unchanged_categories_omitted(self):
        aggregator = ClauseAggregator()
        assert aggregator.aggregate([], PAYMENT_ORIGINAL, PAYMENT_ORIGINAL) == []

    def test_level_follows_riskiest_change(self):
        aggregator = ClauseAggregator()
        changes = [
            make_change(1, risk_score=0.3, category=ClauseCategory.PAYMENT),
            make_change(2, risk_score=0.6, category=ClauseCategory.PAYMENT, implication="REMOVED: Default interest rate"),
        ]
        clauses = aggregator.aggregate(changes, PAYMENT_ORIGINAL, PAYMENT_ORIGINAL)
        assert len(clauses) == 1
        assert clauses[0].risk_assessment.level == ChangeSeverity.MAJOR
        assert clauses[0].risk_assessment.reason == "REMOVED: Default interest rate"
