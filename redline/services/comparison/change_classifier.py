"""
Change Classifier
=================

Turns alignments into Change records: risk, clause category, description
and suggested action for every paragraph that did not stay the same.
"""

import logging
from typing import Dict, List, Optional

from .clause_catalog import ClauseClassifier, get_clause_classifier
from .models import Alignment, Change, ChangeSeverity, ChangeType
from .risk_patterns import RiskPatternMatcher, get_risk_matcher

logger = logging.getLogger(__name__)

SUGGESTED_ACTIONS: Dict[ChangeSeverity, str] = {
    ChangeSeverity.CRITICAL: "Obtain legal review before accepting this change",
    ChangeSeverity.MAJOR: "Review carefully and confirm the change with the counterparty",
    ChangeSeverity.MINOR: "Check the wording for consistency with the rest of the contract",
    ChangeSeverity.COSMETIC: "No action required",
}


def describe(alignment: Alignment) -> str:
    """Human readable one-liner for an alignment."""
    if alignment.kind == ChangeType.ADDED:
        return f"New paragraph added (paragraph {alignment.new.paragraph_number})"
    if alignment.kind == ChangeType.REMOVED:
        return f"Paragraph {alignment.original.paragraph_number} removed"
    if alignment.kind == ChangeType.FORMATTING:
        return f"Formatting change in paragraph {alignment.original.paragraph_number}"
    if alignment.kind == ChangeType.MOVED:
        return (
            f"Paragraph {alignment.original.paragraph_number} moved "
            f"to position {alignment.new.paragraph_number}"
        )
    return (
        f"Paragraph {alignment.original.paragraph_number} modified "
        f"({alignment.similarity * 100:.0f}% similarity)"
    )


class ChangeClassifier:
    """Builds the ordered change list for one comparison."""

    def __init__(
        self,
        matcher: Optional[RiskPatternMatcher] = None,
        clauses: Optional[ClauseClassifier] = None,
    ):
        self.matcher = matcher or get_risk_matcher()
        self.clauses = clauses or get_clause_classifier()

    def classify(self, alignments: List[Alignment]) -> List[Change]:
        """
        Convert every non-unchanged alignment into a Change.

        Changes are ordered by paragraph number (the original paragraph
        when there is one, otherwise the new one) and then numbered
        change_001, change_002, ...
        """
        pending = [a for a in alignments if a.kind != ChangeType.UNCHANGED]
        pending.sort(key=lambda a: a.paragraph_number)

        changes = [
            self._build(alignment, f"change_{index:03d}")
            for index, alignment in enumerate(pending, start=1)
        ]
        logger.debug(f"Classified {len(changes)} changes from {len(alignments)} alignments")
        return changes

    def _build(self, alignment: Alignment, change_id: str) -> Change:
        original_text = alignment.original.text if alignment.original else ""
        new_text = alignment.new.text if alignment.new else ""

        risk = self.matcher.assess(original_text, new_text, alignment.kind)
        category = self.clauses.classify(original_text or new_text)

        return Change(
            id=change_id,
            change_type=alignment.kind,
            severity=risk.severity,
            original_text=original_text,
            new_text=new_text,
            original_segment=alignment.original,
            new_segment=alignment.new,
            clause_category=category,
            risk_score=risk.risk_score,
            legal_implication=risk.implication,
            description=describe(alignment),
            suggested_action=SUGGESTED_ACTIONS[risk.severity],
            similarity=alignment.similarity,
        )
