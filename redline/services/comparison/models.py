"""
Comparison Engine Data Models
=============================

Data structures shared by every stage of the comparison pipeline:
- Segments and alignments (what was matched to what)
- Changes with type, severity and legal risk
- Clause-level and document-level summaries
- The caller-owned redline document with review decisions
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any

from redline.core.utc import to_iso


# ============================================================================
# ENUMERATIONS
# ============================================================================

class ChangeType(str, Enum):
    """How a paragraph differs between the two versions"""
    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"
    MOVED = "moved"
    FORMATTING = "formatting"
    UNCHANGED = "unchanged"


class ChangeSeverity(str, Enum):
    """Legal severity of a single change"""
    CRITICAL = "critical"    # High-risk legal change
    MAJOR = "major"          # Significant change requiring review
    MINOR = "minor"          # Low-risk change
    COSMETIC = "cosmetic"    # Formatting/style only


class ClauseCategory(str, Enum):
    """Semantic buckets a paragraph is classified into"""
    PARTIES = "parties"
    DEFINITIONS = "definitions"
    SUBJECT = "subject"
    TERM = "term"
    PRICE = "price"
    PAYMENT = "payment"
    DELIVERY = "delivery"
    WARRANTY = "warranty"
    LIABILITY = "liability"
    PENALTY = "penalty"
    CONFIDENTIALITY = "confidentiality"
    NON_COMPETE = "non_compete"
    INTELLECTUAL_PROPERTY = "intellectual_property"
    TERMINATION = "termination"
    FORCE_MAJEURE = "force_majeure"
    DISPUTE_RESOLUTION = "dispute_resolution"
    NOTICE = "notice"
    GENERAL_PROVISIONS = "general_provisions"
    SIGNATURES = "signatures"
    APPENDICES = "appendices"
    OTHER = "other"


class RiskLevel(str, Enum):
    """Document-level risk verdict"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class OverallChange(str, Enum):
    """Clause-level verdict across the whole document"""
    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"
    UNCHANGED = "unchanged"


# Ranking used when ordering changes for reports (most severe first)
SEVERITY_RANK: Dict[ChangeSeverity, int] = {
    ChangeSeverity.CRITICAL: 0,
    ChangeSeverity.MAJOR: 1,
    ChangeSeverity.MINOR: 2,
    ChangeSeverity.COSMETIC: 3,
}

CHANGE_TYPE_NAMES: Dict[ChangeType, str] = {
    ChangeType.ADDED: "Addition",
    ChangeType.REMOVED: "Deletion",
    ChangeType.MODIFIED: "Modification",
    ChangeType.MOVED: "Relocation",
    ChangeType.FORMATTING: "Formatting",
    ChangeType.UNCHANGED: "No change",
}


# ============================================================================
# SEGMENTS AND ALIGNMENTS
# ============================================================================

@dataclass(frozen=True)
class TextSegment:
    """
    A paragraph of a source document.
    Offsets point at the stripped paragraph text inside the source string.
    """
    id: str
    text: str
    start_index: int
    end_index: int
    line_number: int
    paragraph_number: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "start_index": self.start_index,
            "end_index": self.end_index,
            "line_number": self.line_number,
            "paragraph_number": self.paragraph_number,
        }


@dataclass(frozen=True)
class Alignment:
    """
    Correspondence between an original and a new paragraph.
    Exactly one side is None for added/removed paragraphs.
    """
    kind: ChangeType
    original: Optional[TextSegment] = None
    new: Optional[TextSegment] = None
    similarity: float = 0.0

    @property
    def paragraph_number(self) -> int:
        segment = self.original or self.new
        return segment.paragraph_number if segment else 0


@dataclass(frozen=True)
class RiskAssessment:
    """Outcome of the risk pattern matcher for one change"""
    severity: ChangeSeverity
    risk_score: float
    implication: Optional[str] = None


# ============================================================================
# CHANGES
# ============================================================================

@dataclass
class Change:
    """
    A single detected difference between the two documents.
    """
    id: str
    change_type: ChangeType
    severity: ChangeSeverity
    original_text: str = ""
    new_text: str = ""
    original_segment: Optional[TextSegment] = None
    new_segment: Optional[TextSegment] = None
    clause_category: ClauseCategory = ClauseCategory.OTHER
    risk_score: float = 0.0
    legal_implication: Optional[str] = None
    description: str = ""
    suggested_action: Optional[str] = None
    similarity: float = 0.0
    comments: List[str] = field(default_factory=list)

    @property
    def paragraph_number(self) -> int:
        """Original paragraph number when present, otherwise the new one"""
        segment = self.original_segment or self.new_segment
        return segment.paragraph_number if segment else 0

    @property
    def is_high_risk(self) -> bool:
        return self.severity in (ChangeSeverity.CRITICAL, ChangeSeverity.MAJOR)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.change_type.value,
            "severity": self.severity.value,
            "original_segment": self.original_segment.to_dict() if self.original_segment else None,
            "new_segment": self.new_segment.to_dict() if self.new_segment else None,
            "original_text": self.original_text,
            "new_text": self.new_text,
            "clause_category": self.clause_category.value,
            "risk_score": self.risk_score,
            "legal_implication": self.legal_implication,
            "description": self.description,
            "suggested_action": self.suggested_action,
            "similarity": round(self.similarity, 4),
            "comments": list(self.comments),
        }


@dataclass
class ClauseRiskAssessment:
    """Risk verdict for one clause category"""
    level: ChangeSeverity = ChangeSeverity.COSMETIC
    reason: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"level": self.level.value, "reason": self.reason}


@dataclass
class ClauseComparison:
    """
    All changes that fall into one clause category, plus whether the
    category is present in each version at all.
    """
    category: ClauseCategory
    name: str
    original_present: bool
    new_present: bool
    changes: List[Change] = field(default_factory=list)
    overall_change: OverallChange = OverallChange.UNCHANGED
    risk_assessment: ClauseRiskAssessment = field(default_factory=ClauseRiskAssessment)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "name": self.name,
            "original_present": self.original_present,
            "new_present": self.new_present,
            "change_ids": [c.id for c in self.changes],
            "overall_change": self.overall_change.value,
            "risk_assessment": self.risk_assessment.to_dict(),
        }


@dataclass
class ComparisonSummary:
    """Document-level counts and risk verdict"""
    total_changes: int = 0
    added_count: int = 0
    removed_count: int = 0
    modified_count: int = 0
    formatting_count: int = 0
    moved_count: int = 0
    critical_changes: int = 0
    major_changes: int = 0
    minor_changes: int = 0
    cosmetic_changes: int = 0
    overall_risk_score: float = 0.0
    risk_level: RiskLevel = RiskLevel.LOW
    key_findings: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_changes": self.total_changes,
            "added_count": self.added_count,
            "removed_count": self.removed_count,
            "modified_count": self.modified_count,
            "formatting_count": self.formatting_count,
            "moved_count": self.moved_count,
            "critical_changes": self.critical_changes,
            "major_changes": self.major_changes,
            "minor_changes": self.minor_changes,
            "cosmetic_changes": self.cosmetic_changes,
            "overall_risk_score": round(self.overall_risk_score, 4),
            "risk_level": self.risk_level.value,
            "key_findings": list(self.key_findings),
            "recommendations": list(self.recommendations),
        }


# ============================================================================
# RESULTS
# ============================================================================

@dataclass(frozen=True)
class DocumentDescriptor:
    """One side of a comparison"""
    name: str
    content: str
    word_count: int = 0
    character_count: int = 0
    segment_count: int = 0

    def to_dict(self, include_content: bool = True) -> Dict[str, Any]:
        data = {
            "name": self.name,
            "word_count": self.word_count,
            "character_count": self.character_count,
            "segment_count": self.segment_count,
        }
        if include_content:
            data["content"] = self.content
        return data


@dataclass(frozen=True)
class ComparisonResult:
    """
    Complete, read-only snapshot produced by one engine invocation.
    """
    id: str
    original_document: DocumentDescriptor
    new_document: DocumentDescriptor
    changes: List[Change]
    clause_comparisons: List[ClauseComparison]
    summary: ComparisonSummary
    created_at: datetime
    processing_time_ms: float = 0.0
    alignments: List[Alignment] = field(default_factory=list)

    def get_change(self, change_id: str) -> Optional[Change]:
        for change in self.changes:
            if change.id == change_id:
                return change
        return None

    def get_critical_changes(self) -> List[Change]:
        return [c for c in self.changes if c.severity == ChangeSeverity.CRITICAL]

    def get_high_risk_changes(self) -> List[Change]:
        """Critical and major changes, most severe first, document order within a level"""
        return sorted(
            (c for c in self.changes if c.is_high_risk),
            key=lambda c: SEVERITY_RANK[c.severity],
        )

    def to_dict(self, include_content: bool = True) -> Dict[str, Any]:
        return {
            "id": self.id,
            "original_document": self.original_document.to_dict(include_content),
            "new_document": self.new_document.to_dict(include_content),
            "changes": [c.to_dict() for c in self.changes],
            "clause_comparisons": [cc.to_dict() for cc in self.clause_comparisons],
            "summary": self.summary.to_dict(),
            "created_at": to_iso(self.created_at),
            "processing_time_ms": round(self.processing_time_ms, 2),
        }


@dataclass
class RedlineDocument:
    """
    Rendered redline plus the reviewer's accept/reject decisions.
    Owned and mutated by the caller, never by the engine.
    """
    content: str
    html_content: str
    report: str = ""
    changes: List[Change] = field(default_factory=list)
    accepted_changes: List[str] = field(default_factory=list)
    rejected_changes: List[str] = field(default_factory=list)
    # new segment id -> original paragraph number, for every paired paragraph
    paragraph_map: Dict[str, int] = field(default_factory=dict)

    @property
    def pending_changes(self) -> List[str]:
        decided = set(self.accepted_changes) | set(self.rejected_changes)
        return [c.id for c in self.changes if c.id not in decided]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content": self.content,
            "html_content": self.html_content,
            "report": self.report,
            "changes": [c.to_dict() for c in self.changes],
            "accepted_changes": list(self.accepted_changes),
            "rejected_changes": list(self.rejected_changes),
            "pending_changes": self.pending_changes,
        }
