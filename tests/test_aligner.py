"""
Segment Aligner Tests
"""

from collections import Counter

import pytest

from redline.services.comparison import ChangeType, SegmentAligner, segment_text
from samples import PARAGRAPH_A, PARAGRAPH_B, PARAGRAPH_C, LEASE_ORIGINAL, LEASE_REVISED


def segments(*paragraphs, prefix="orig"):
    return segment_text("\n\n".join(paragraphs), prefix)


@pytest.fixture
def aligner():
    return SegmentAligner()


class TestAlign:

    def test_empty_original_means_all_added(self, aligner):
        result = aligner.align([], segments(PARAGRAPH_A, PARAGRAPH_B, prefix="new"))
        assert [a.kind for a in result] == [ChangeType.ADDED, ChangeType.ADDED]

    def test_empty_new_means_all_removed(self, aligner):
        result = aligner.align(segments(PARAGRAPH_A, PARAGRAPH_B), [])
        assert [a.kind for a in result] == [ChangeType.REMOVED, ChangeType.REMOVED]

    def test_identical_pairs_are_unchanged(self, aligner):
        result = aligner.align(
            segments(PARAGRAPH_A, PARAGRAPH_B),
            segments(PARAGRAPH_A, PARAGRAPH_B, prefix="new"),
        )
        assert [a.kind for a in result] == [ChangeType.UNCHANGED, ChangeType.UNCHANGED]
        assert all(a.similarity == 1.0 for a in result)

    def test_dissimilar_paragraph_is_removed_and_added(self, aligner):
        result = aligner.align(segments(PARAGRAPH_B), segments(PARAGRAPH_C, prefix="new"))
        kinds = sorted(a.kind.value for a in result)
        assert kinds == ["added", "removed"]

    def test_ties_go_to_first_candidate(self, aligner):
        result = aligner.align(segments("aaaa"), segments("aaab", "aaac", prefix="new"))
        matched = [a for a in result if a.kind == ChangeType.MODIFIED]
        assert len(matched) == 1
        assert matched[0].new.id == "new_1"

    def test_one_to_one(self, aligner):
        result = aligner.align(
            segments(PARAGRAPH_A, PARAGRAPH_A),
            segments(PARAGRAPH_A, prefix="new"),
        )
        assert [a.kind for a in result] == [ChangeType.UNCHANGED, ChangeType.REMOVED]
        assert result[1].original.id == "orig_2"

    def test_coverage_every_segment_exactly_once(self, aligner):
        originals = segment_text(LEASE_ORIGINAL, "orig")
        news = segment_text(LEASE_REVISED, "new")
        result = aligner.align(originals, news)

        original_ids = Counter(a.original.id for a in result if a.original)
        new_ids = Counter(a.new.id for a in result if a.new)
        assert original_ids == Counter(s.id for s in originals)
        assert new_ids == Counter(s.id for s in news)

    def test_matched_pairs_respect_thresholds(self, aligner):
        originals = segment_text(LEASE_ORIGINAL, "orig")
        news = segment_text(LEASE_REVISED, "new")
        for alignment in aligner.align(originals, news):
            if alignment.kind == ChangeType.MODIFIED:
                assert 0.6 <= alignment.similarity < 0.95
            elif alignment.kind == ChangeType.FORMATTING:
                assert 0.95 <= alignment.similarity < 1.0

    def test_custom_threshold(self):
        strict = SegmentAligner(match_threshold=0.9)
        result = strict.align(segments("Madde 1: Ödeme yapılacaktır."),
                              segments("Madde 1: Ödeme 30 gün içinde yapılacaktır.", prefix="new"))
        assert sorted(a.kind.value for a in result) == ["added", "removed"]


class TestMoveDetection:

    def test_moves_ignored_by_default(self, aligner):
        result = aligner.align(
            segments(PARAGRAPH_A, PARAGRAPH_B, PARAGRAPH_C),
            segments(PARAGRAPH_C, PARAGRAPH_A, PARAGRAPH_B, prefix="new"),
        )
        assert all(a.kind == ChangeType.UNCHANGED for a in result)

    def test_out_of_order_paragraph_is_moved(self):
        aligner = SegmentAligner(detect_moves=True)
        result = aligner.align(
            segments(PARAGRAPH_A, PARAGRAPH_B, PARAGRAPH_C),
            segments(PARAGRAPH_C, PARAGRAPH_A, PARAGRAPH_B, prefix="new"),
        )
        moved = [a for a in result if a.kind == ChangeType.MOVED]
        assert len(moved) == 1
        assert moved[0].original.text == PARAGRAPH_C
        assert moved[0].new.paragraph_number == 1

    def test_in_order_document_has_no_moves(self):
        aligner = SegmentAligner(detect_moves=True)
        result = aligner.align(
            segments(PARAGRAPH_A, PARAGRAPH_B, PARAGRAPH_C),
            segments(PARAGRAPH_A, PARAGRAPH_C, prefix="new"),
        )
        assert not [a for a in result if a.kind == ChangeType.MOVED]
