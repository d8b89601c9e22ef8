"""
Comparison Engine Tests
=======================

End-to-end behaviour of RedlineEngine on small Turkish contract texts.
"""

import pytest

from redline.services.comparison import (
    ChangeSeverity,
    ChangeType,
    ClauseCategory,
    OverallChange,
    RedlineEngine,
    RiskLevel,
    compare_documents,
    get_change_type_name,
)
from samples import (
    LEASE_ORIGINAL,
    LEASE_REVISED,
    LIABILITY_ORIGINAL,
    LIABILITY_REVISED,
    NOTICE_ORIGINAL,
    NOTICE_REVISED,
    PARAGRAPH_A,
    PARAGRAPH_B,
    PARAGRAPH_C,
    PAYMENT_ORIGINAL,
    PAYMENT_REVISED,
)


class TestScenarios:
    """Reference scenarios"""

    def test_identical_documents(self, engine):
        result = engine.compare(PAYMENT_ORIGINAL, PAYMENT_ORIGINAL)
        assert result.changes == []
        assert result.summary.total_changes == 0
        assert result.summary.risk_level == RiskLevel.LOW
        assert result.summary.overall_risk_score == 0.0

    def test_modified_payment_clause(self, engine):
        result = engine.compare(PAYMENT_ORIGINAL, PAYMENT_REVISED)
        assert len(result.changes) == 1

        change = result.changes[0]
        assert change.change_type == ChangeType.MODIFIED
        assert 0.6 <= change.similarity < 0.95
        assert change.clause_category == ClauseCategory.PAYMENT
        assert change.severity == ChangeSeverity.MINOR
        assert change.risk_score == 0.4
        assert change.description == "Paragraph 1 modified (67% similarity)"

    def test_added_to_empty_document(self, engine):
        result = engine.compare("", "Yeni madde eklendi.")
        assert len(result.changes) == 1
        assert result.changes[0].change_type == ChangeType.ADDED
        assert result.changes[0].original_segment is None
        assert result.summary.added_count == 1
        assert result.summary.removed_count == 0

    def test_removed_unlimited_liability_is_critical(self, engine):
        result = engine.compare(LIABILITY_ORIGINAL, LIABILITY_REVISED)
        critical = result.get_critical_changes()
        assert critical
        assert critical[0].legal_implication == "REMOVED: Unlimited liability clause"
        assert result.summary.risk_level == RiskLevel.CRITICAL

    def test_trailing_whitespace_is_formatting(self, engine):
        result = engine.compare(NOTICE_ORIGINAL, NOTICE_REVISED)
        assert len(result.changes) == 1

        change = result.changes[0]
        assert change.change_type == ChangeType.FORMATTING
        assert change.severity == ChangeSeverity.COSMETIC
        assert change.risk_score == 0.0
        assert result.summary.formatting_count == 1

    def test_whitespace_around_paragraph_is_ignored(self, engine):
        result = engine.compare("Madde 1: Ödeme yapılacaktır.   ", "\n  Madde 1: Ödeme yapılacaktır.")
        assert result.changes == []


class TestLeaseComparison:
    """Multi-paragraph lease with a mix of changes"""

    @pytest.fixture
    def result(self, engine):
        return engine.compare(LEASE_ORIGINAL, LEASE_REVISED, "kira_v1.txt", "kira_v2.txt")

    def test_changes_in_document_order(self, result):
        assert [c.id for c in result.changes] == ["change_001", "change_002", "change_003"]
        assert [c.change_type for c in result.changes] == [
            ChangeType.MODIFIED,
            ChangeType.REMOVED,
            ChangeType.ADDED,
        ]

    def test_risk_per_change(self, result):
        modified, removed, added = result.changes
        assert modified.severity == ChangeSeverity.CRITICAL
        assert modified.clause_category == ClauseCategory.LIABILITY
        assert removed.severity == ChangeSeverity.MAJOR
        assert removed.risk_score == 0.5
        assert added.legal_implication == "INTRODUCED: Automatic renewal clause"
        assert added.clause_category == ClauseCategory.TERM

    def test_summary(self, result):
        summary = result.summary
        assert summary.total_changes == 3
        assert (summary.critical_changes, summary.major_changes, summary.minor_changes) == (1, 1, 1)
        assert summary.overall_risk_score == pytest.approx((0.8 + 0.5 + 0.4) / 3)
        assert summary.risk_level == RiskLevel.CRITICAL
        assert "REMOVED: Unlimited liability clause" in summary.key_findings
        assert "Review the liability and penalty clauses carefully" in summary.recommendations

    def test_clause_comparisons(self, result):
        by_category = {cc.category: cc for cc in result.clause_comparisons}

        liability = by_category[ClauseCategory.LIABILITY]
        assert liability.overall_change == OverallChange.MODIFIED
        assert liability.risk_assessment.level == ChangeSeverity.CRITICAL
        assert liability.risk_assessment.reason == "REMOVED: Unlimited liability clause"

        term = by_category[ClauseCategory.TERM]
        assert term.overall_change == OverallChange.ADDED
        assert not term.original_present and term.new_present

    def test_document_descriptors(self, result):
        assert result.original_document.name == "kira_v1.txt"
        assert result.original_document.segment_count == 6
        assert result.new_document.segment_count == 6
        assert result.original_document.word_count == len(LEASE_ORIGINAL.split())
        assert result.new_document.character_count == len(LEASE_REVISED)
        assert result.processing_time_ms >= 0

    def test_every_change_references_a_segment(self, result):
        for change in result.changes:
            assert change.original_segment or change.new_segment
            if change.change_type in (ChangeType.MODIFIED, ChangeType.FORMATTING, ChangeType.MOVED):
                assert change.original_segment and change.new_segment
            assert 0.0 <= change.risk_score <= 1.0


class TestProperties:

    def test_idempotent(self, engine):
        first = engine.compare(LEASE_ORIGINAL, LEASE_REVISED)
        second = engine.compare(LEASE_ORIGINAL, LEASE_REVISED)
        assert [c.to_dict() for c in first.changes] == [c.to_dict() for c in second.changes]
        assert first.summary.to_dict() == second.summary.to_dict()
        assert first.id != second.id

    def test_no_change_for_identical_pairs(self, engine):
        result = engine.compare(LEASE_ORIGINAL, LEASE_ORIGINAL)
        assert result.changes == []
        assert result.clause_comparisons == []

    def test_everything_removed(self, engine):
        result = engine.compare(LEASE_ORIGINAL, "")
        assert result.summary.removed_count == 6
        assert all(c.change_type == ChangeType.REMOVED for c in result.changes)

    def test_move_detection(self, move_engine):
        original = "\n\n".join([PARAGRAPH_A, PARAGRAPH_B, PARAGRAPH_C])
        revised = "\n\n".join([PARAGRAPH_C, PARAGRAPH_A, PARAGRAPH_B])
        result = move_engine.compare(original, revised)

        assert len(result.changes) == 1
        change = result.changes[0]
        assert change.change_type == ChangeType.MOVED
        assert change.severity == ChangeSeverity.MINOR
        assert change.risk_score == 0.2
        assert result.summary.moved_count == 1
        assert any("moved" in finding for finding in result.summary.key_findings)

    def test_alignments_pair_every_paragraph(self, engine):
        result = engine.compare(LEASE_ORIGINAL, LEASE_REVISED)
        paired = {a.new.id: a.original.id for a in result.alignments if a.original and a.new}
        assert paired == {
            "new_1": "orig_1",
            "new_2": "orig_2",
            "new_3": "orig_3",
            "new_4": "orig_4",
            "new_5": "orig_6",
        }
        assert [a.kind for a in result.alignments].count(ChangeType.UNCHANGED) == 4

    def test_to_dict_is_json_ready(self, engine):
        data = engine.compare(PAYMENT_ORIGINAL, PAYMENT_REVISED).to_dict()
        assert data["changes"][0]["type"] == "modified"
        assert data["changes"][0]["clause_category"] == "payment"
        assert data["created_at"].endswith("Z")
        assert data["summary"]["risk_level"] == "medium"


class TestModuleFunctions:

    def test_compare_documents(self):
        result = compare_documents(PAYMENT_ORIGINAL, PAYMENT_REVISED, "v1", "v2")
        assert result.original_document.name == "v1"
        assert result.summary.modified_count == 1

    def test_config_thresholds(self):
        strict = RedlineEngine({"match_threshold": 0.9})
        result = strict.compare(PAYMENT_ORIGINAL, PAYMENT_REVISED)
        assert sorted(c.change_type.value for c in result.changes) == ["added", "removed"]

    def test_change_type_names(self):
        assert get_change_type_name(ChangeType.ADDED) == "Addition"
        assert get_change_type_name("removed") == "Deletion"
