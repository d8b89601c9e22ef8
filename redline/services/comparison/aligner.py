"""
Segment Aligner
===============

Greedy one-to-one matching of original paragraphs to new paragraphs.

Each original paragraph, in document order, takes the most similar new
paragraph that is still unmatched. The result is not a globally optimal
assignment, but it is deterministic and covers every segment exactly once.
"""

import bisect
import logging
from typing import List, Optional, Set

from .models import Alignment, ChangeType, TextSegment
from .similarity import similarity

logger = logging.getLogger(__name__)

DEFAULT_MATCH_THRESHOLD = 0.6
DEFAULT_NEAR_IDENTICAL_THRESHOLD = 0.95


class SegmentAligner:
    """
    Pairs original and new segments.

    Similarity >= near_identical_threshold is a formatting change (or
    unchanged at exactly 1.0); >= match_threshold is a modification; below
    that the original is removed and any leftover new segment is added.
    """

    def __init__(
        self,
        match_threshold: float = DEFAULT_MATCH_THRESHOLD,
        near_identical_threshold: float = DEFAULT_NEAR_IDENTICAL_THRESHOLD,
        detect_moves: bool = False,
    ):
        self.match_threshold = match_threshold
        self.near_identical_threshold = near_identical_threshold
        self.detect_moves = detect_moves

    def align(self, originals: List[TextSegment], news: List[TextSegment]) -> List[Alignment]:
        """
        Align two segment lists.

        Returns alignments in original order (matched or removed) followed
        by added segments in new order.
        """
        alignments: List[Alignment] = []
        matched_new: Set[str] = set()

        for original in originals:
            best: Optional[TextSegment] = None
            best_similarity = -1.0
            for candidate in news:
                if candidate.id in matched_new:
                    continue
                score = similarity(original.text, candidate.text)
                if score > best_similarity:
                    best, best_similarity = candidate, score

            kind = self._kind_for(best_similarity) if best else None
            if best is None or kind is None:
                alignments.append(Alignment(ChangeType.REMOVED, original=original))
                continue

            matched_new.add(best.id)
            alignments.append(Alignment(kind, original=original, new=best, similarity=best_similarity))

        for segment in news:
            if segment.id not in matched_new:
                alignments.append(Alignment(ChangeType.ADDED, new=segment))

        if self.detect_moves:
            alignments = self._mark_moves(alignments)

        logger.debug(
            f"Aligned {len(originals)} original / {len(news)} new segments "
            f"into {len(alignments)} alignments"
        )
        return alignments

    def _kind_for(self, score: float) -> Optional[ChangeType]:
        if score >= self.near_identical_threshold:
            return ChangeType.UNCHANGED if score == 1.0 else ChangeType.FORMATTING
        if score >= self.match_threshold:
            return ChangeType.MODIFIED
        return None

    def _mark_moves(self, alignments: List[Alignment]) -> List[Alignment]:
        """
        Reclassify near-identical pairs that break document order as moved.

        The near-identical pairs, taken in original order, keep their kind
        when their new paragraph number lies on the longest increasing
        subsequence; the rest were relocated.
        """
        near_identical = [
            i for i, a in enumerate(alignments)
            if a.kind in (ChangeType.UNCHANGED, ChangeType.FORMATTING)
        ]
        positions = [alignments[i].new.paragraph_number for i in near_identical]
        in_order = {near_identical[k] for k in _longest_increasing_indices(positions)}
        out_of_order = set(near_identical) - in_order

        result = []
        for i, alignment in enumerate(alignments):
            if i in out_of_order:
                alignment = Alignment(
                    ChangeType.MOVED,
                    original=alignment.original,
                    new=alignment.new,
                    similarity=alignment.similarity,
                )
            result.append(alignment)
        return result


def _longest_increasing_indices(values: List[int]) -> List[int]:
    """Indices of one longest strictly increasing subsequence (patience sort)."""
    if not values:
        return []
    tails: List[int] = []        # value at the end of each pile
    tail_index: List[int] = []   # index into values for each pile top
    parent: List[int] = [-1] * len(values)

    for i, value in enumerate(values):
        pile = bisect.bisect_left(tails, value)
        if pile > 0:
            parent[i] = tail_index[pile - 1]
        if pile == len(tails):
            tails.append(value)
            tail_index.append(i)
        else:
            tails[pile] = value
            tail_index[pile] = i

    indices = []
    current = tail_index[-1]
    while current != -1:
        indices.append(current)
        current = parent[current]
    return list(reversed(indices))
