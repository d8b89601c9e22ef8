"""
Clause Aggregator
=================

Groups changes by clause category and decides, per category, whether the
clause was added, removed, modified or left alone.
"""

from typing import List, Optional

from .clause_catalog import CLAUSE_RULES, ClauseClassifier, get_clause_classifier
from .models import (
    Change,
    ChangeSeverity,
    ClauseComparison,
    ClauseRiskAssessment,
    OverallChange,
)
from .risk_patterns import severity_for_score


class ClauseAggregator:
    """Builds clause-level comparisons in catalog order."""

    def __init__(self, clauses: Optional[ClauseClassifier] = None):
        self.clauses = clauses or get_clause_classifier()

    def aggregate(
        self,
        changes: List[Change],
        original_content: str,
        new_content: str,
    ) -> List[ClauseComparison]:
        comparisons: List[ClauseComparison] = []

        for rule in CLAUSE_RULES:
            category_changes = [c for c in changes if c.clause_category == rule.category]
            original_present = self.clauses.detect_presence(rule.category, original_content)
            new_present = self.clauses.detect_presence(rule.category, new_content)

            if not original_present and new_present:
                overall = OverallChange.ADDED
            elif original_present and not new_present:
                overall = OverallChange.REMOVED
            elif category_changes:
                overall = OverallChange.MODIFIED
            else:
                continue

            comparisons.append(ClauseComparison(
                category=rule.category,
                name=rule.name,
                original_present=original_present,
                new_present=new_present,
                changes=category_changes,
                overall_change=overall,
                risk_assessment=self._assess(rule.name, category_changes, overall),
            ))

        return comparisons

    @staticmethod
    def _assess(name: str, changes: List[Change], overall: OverallChange) -> ClauseRiskAssessment:
        riskiest: Optional[Change] = None
        for change in changes:
            if riskiest is None or change.risk_score > riskiest.risk_score:
                riskiest = change

        if riskiest is None:
            if overall == OverallChange.ADDED:
                reason = f"{name} clause appears only in the new version"
            else:
                reason = f"{name} clause no longer appears in the new version"
            return ClauseRiskAssessment(level=ChangeSeverity.COSMETIC, reason=reason)

        return ClauseRiskAssessment(
            level=severity_for_score(riskiest.risk_score),
            reason=riskiest.legal_implication or riskiest.description,
        )
