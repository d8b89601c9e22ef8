"""
Redline Engine
==============

Orchestrates one comparison: segment both documents, align the segments,
classify the changes, aggregate by clause and summarize.
"""

import logging
import time
import uuid
from typing import Any, Dict, Optional

from redline.core.utc import utc_now

from .aligner import (
    DEFAULT_MATCH_THRESHOLD,
    DEFAULT_NEAR_IDENTICAL_THRESHOLD,
    SegmentAligner,
)
from .change_classifier import ChangeClassifier
from .clause_aggregator import ClauseAggregator
from .models import (
    CHANGE_TYPE_NAMES,
    ChangeType,
    ComparisonResult,
    DocumentDescriptor,
)
from .segmenter import segment_text
from .summary_builder import SummaryBuilder

logger = logging.getLogger(__name__)


class RedlineEngine:
    """
    Legal document comparison engine.

    Pipeline:
    1. Segmentation → paragraphs with offsets
    2. Alignment → greedy 1:1 paragraph matching
    3. Change classification → type, risk, clause category
    4. Clause aggregation → per-clause verdicts
    5. Summary → counts, risk level, findings, recommendations

    The engine holds no per-comparison state; one instance can serve
    concurrent callers.
    """

    VERSION = "1.0.0"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the engine.

        Args:
            config: Optional overrides (match_threshold,
                near_identical_threshold, detect_moves)
        """
        self.config = config or {}

        self.aligner = SegmentAligner(
            match_threshold=self.config.get("match_threshold", DEFAULT_MATCH_THRESHOLD),
            near_identical_threshold=self.config.get(
                "near_identical_threshold", DEFAULT_NEAR_IDENTICAL_THRESHOLD
            ),
            detect_moves=self.config.get("detect_moves", False),
        )
        self.change_classifier = ChangeClassifier()
        self.clause_aggregator = ClauseAggregator()
        self.summary_builder = SummaryBuilder()

        logger.debug(f"RedlineEngine v{self.VERSION} initialized")

    def compare(
        self,
        original: str,
        new: str,
        original_name: str = "Original",
        new_name: str = "Revised",
    ) -> ComparisonResult:
        """
        Compare two versions of a document.

        Args:
            original: Original document text
            new: Revised document text
            original_name: Display name of the original
            new_name: Display name of the revision

        Returns:
            Immutable ComparisonResult
        """
        start_time = time.perf_counter()

        original_segments = segment_text(original, "orig")
        new_segments = segment_text(new, "new")
        logger.debug(
            f"Segmented {len(original_segments)} original / {len(new_segments)} new paragraphs"
        )

        alignments = self.aligner.align(original_segments, new_segments)
        changes = self.change_classifier.classify(alignments)
        clause_comparisons = self.clause_aggregator.aggregate(changes, original, new)
        logger.debug(f"Aggregated {len(clause_comparisons)} clause comparisons")
        summary = self.summary_builder.build(changes)

        processing_time_ms = (time.perf_counter() - start_time) * 1000

        result = ComparisonResult(
            id=str(uuid.uuid4()),
            original_document=DocumentDescriptor(
                name=original_name,
                content=original,
                word_count=len(original.split()),
                character_count=len(original),
                segment_count=len(original_segments),
            ),
            new_document=DocumentDescriptor(
                name=new_name,
                content=new,
                word_count=len(new.split()),
                character_count=len(new),
                segment_count=len(new_segments),
            ),
            changes=changes,
            clause_comparisons=clause_comparisons,
            summary=summary,
            created_at=utc_now(),
            processing_time_ms=processing_time_ms,
            alignments=alignments,
        )

        logger.info(
            f"Comparison complete: {summary.total_changes} changes, "
            f"risk={summary.risk_level.value}, "
            f"time={processing_time_ms:.0f}ms"
        )
        return result


def compare_documents(
    original: str,
    new: str,
    original_name: str = "Original",
    new_name: str = "Revised",
    config: Optional[Dict[str, Any]] = None,
) -> ComparisonResult:
    """Compare two documents with a one-off engine."""
    return RedlineEngine(config).compare(original, new, original_name, new_name)


def get_change_type_name(change_type: ChangeType) -> str:
    """Display name of a change type."""
    return CHANGE_TYPE_NAMES[ChangeType(change_type)]
