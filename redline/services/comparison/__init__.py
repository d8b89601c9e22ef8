"""
Legal Document Comparison Engine
================================

Compares two versions of a contract paragraph by paragraph and reports
every change with its type, legal risk severity and clause category.

Architecture:
- Segmenter: splits documents into paragraphs with exact offsets
- Similarity: edit-distance similarity with a Jaccard fallback
- Aligner: greedy one-to-one paragraph matching
- Clause Catalog: Turkish keyword rules for clause categories
- Risk Patterns: high-risk provisions introduced or removed
- Change Classifier / Clause Aggregator / Summary Builder
- Renderer: HTML redline and text report
- Review: accept/reject decisions and resolved text

Usage:
    from redline.services.comparison import RedlineEngine, generate_redline

    engine = RedlineEngine()
    result = engine.compare(original_text, revised_text)

    print(f"Risk level: {result.summary.risk_level.value}")
    redline = generate_redline(result)
"""

from .engine import RedlineEngine, compare_documents, get_change_type_name
from .models import (
    TextSegment,
    Alignment,
    RiskAssessment,
    Change,
    ClauseRiskAssessment,
    ClauseComparison,
    ComparisonSummary,
    DocumentDescriptor,
    ComparisonResult,
    RedlineDocument,
    ChangeType,
    ChangeSeverity,
    ClauseCategory,
    RiskLevel,
    OverallChange,
)
from .segmenter import segment_text
from .similarity import (
    similarity,
    levenshtein_distance,
    jaccard_similarity,
    normalize_whitespace,
)
from .aligner import SegmentAligner
from .clause_catalog import ClauseClassifier, get_clause_classifier, get_clause_categories
from .risk_patterns import (
    RiskPatternMatcher,
    get_risk_matcher,
    get_high_risk_patterns,
    severity_for_score,
)
from .change_classifier import ChangeClassifier
from .clause_aggregator import ClauseAggregator
from .summary_builder import SummaryBuilder
from .renderer import RedlineRenderer, generate_redline, format_comparison_report
from .review import ChangeNotFoundError, accept_change, reject_change, resolve_redline

__all__ = [
    # Engine
    "RedlineEngine",
    "compare_documents",
    "get_change_type_name",
    # Models
    "TextSegment",
    "Alignment",
    "RiskAssessment",
    "Change",
    "ClauseRiskAssessment",
    "ClauseComparison",
    "ComparisonSummary",
    "DocumentDescriptor",
    "ComparisonResult",
    "RedlineDocument",
    "ChangeType",
    "ChangeSeverity",
    "ClauseCategory",
    "RiskLevel",
    "OverallChange",
    # Components
    "segment_text",
    "similarity",
    "levenshtein_distance",
    "jaccard_similarity",
    "normalize_whitespace",
    "SegmentAligner",
    "ClauseClassifier",
    "get_clause_classifier",
    "get_clause_categories",
    "RiskPatternMatcher",
    "get_risk_matcher",
    "get_high_risk_patterns",
    "severity_for_score",
    "ChangeClassifier",
    "ClauseAggregator",
    "SummaryBuilder",
    # Rendering & review
    "RedlineRenderer",
    "generate_redline",
    "format_comparison_report",
    "ChangeNotFoundError",
    "accept_change",
    "reject_change",
    "resolve_redline",
]
