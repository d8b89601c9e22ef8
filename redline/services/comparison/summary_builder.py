"""
Summary Builder
===============

Document-level counts, overall risk score, risk level, key findings and
recommendations for a list of changes.
"""

from typing import List

from .models import (
    Change,
    ChangeSeverity,
    ChangeType,
    ClauseCategory,
    ComparisonSummary,
    RiskLevel,
)

MAX_IMPLICATION_FINDINGS = 3

# (categories, recommendation) checked in order after the severity-based ones
CATEGORY_RECOMMENDATIONS = (
    ((ClauseCategory.LIABILITY, ClauseCategory.PENALTY),
     "Review the liability and penalty clauses carefully"),
    ((ClauseCategory.TERMINATION,),
     "Check the changes to the termination conditions"),
    ((ClauseCategory.CONFIDENTIALITY,),
     "Review the confidentiality obligations"),
    ((ClauseCategory.NON_COMPETE,),
     "Check the scope and duration of the non-compete restriction"),
    ((ClauseCategory.DISPUTE_RESOLUTION,),
     "Confirm the agreed forum for dispute resolution"),
)

LOW_RISK_RECOMMENDATION = "The changes appear to be low risk"


def risk_level_for(critical: int, major: int, score: float) -> RiskLevel:
    if critical > 0 or score >= 0.7:
        return RiskLevel.CRITICAL
    if major > 2 or score >= 0.5:
        return RiskLevel.HIGH
    if major > 0 or score >= 0.3:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


class SummaryBuilder:
    """Builds the ComparisonSummary for a change list."""

    def build(self, changes: List[Change]) -> ComparisonSummary:
        def count_type(change_type: ChangeType) -> int:
            return sum(1 for c in changes if c.change_type == change_type)

        def count_severity(severity: ChangeSeverity) -> int:
            return sum(1 for c in changes if c.severity == severity)

        summary = ComparisonSummary(
            total_changes=len(changes),
            added_count=count_type(ChangeType.ADDED),
            removed_count=count_type(ChangeType.REMOVED),
            modified_count=count_type(ChangeType.MODIFIED),
            formatting_count=count_type(ChangeType.FORMATTING),
            moved_count=count_type(ChangeType.MOVED),
            critical_changes=count_severity(ChangeSeverity.CRITICAL),
            major_changes=count_severity(ChangeSeverity.MAJOR),
            minor_changes=count_severity(ChangeSeverity.MINOR),
            cosmetic_changes=count_severity(ChangeSeverity.COSMETIC),
        )

        if changes:
            summary.overall_risk_score = sum(c.risk_score for c in changes) / len(changes)

        summary.risk_level = risk_level_for(
            summary.critical_changes, summary.major_changes, summary.overall_risk_score
        )
        summary.key_findings = self._key_findings(summary, changes)
        summary.recommendations = self._recommendations(summary, changes)
        return summary

    @staticmethod
    def _key_findings(summary: ComparisonSummary, changes: List[Change]) -> List[str]:
        findings: List[str] = []

        if summary.critical_changes > 0:
            findings.append(f"{summary.critical_changes} critical change(s) require attention")

        if summary.removed_count > summary.added_count:
            net = summary.removed_count - summary.added_count
            findings.append(f"{net} paragraph(s) removed (simplification or possible loss of rights)")
        elif summary.added_count > summary.removed_count:
            net = summary.added_count - summary.removed_count
            findings.append(f"{net} new paragraph(s) added")

        implications = [c.legal_implication for c in changes if c.legal_implication]
        findings.extend(implications[:MAX_IMPLICATION_FINDINGS])

        if summary.moved_count > 0:
            findings.append(f"{summary.moved_count} paragraph(s) moved to a different position")

        return findings

    @staticmethod
    def _recommendations(summary: ComparisonSummary, changes: List[Change]) -> List[str]:
        recommendations: List[str] = []

        if summary.critical_changes > 0:
            recommendations.append("Discuss the critical changes with your lawyer")
        if summary.major_changes > 0:
            recommendations.append("Assess the legal consequences of the major changes")

        touched = {c.clause_category for c in changes}
        for categories, text in CATEGORY_RECOMMENDATIONS:
            if touched.intersection(categories):
                recommendations.append(text)

        if not recommendations:
            recommendations.append(LOW_RISK_RECOMMENDATION)
        return recommendations
