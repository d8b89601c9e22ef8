"""
Legal Risk Patterns
===================

Ordered table of high-risk contract provisions (Turkish contract law) and
the matcher that scores a single change against it.

A pattern that appears in the new text but not in the original was
INTRODUCED; one that disappears was REMOVED. Introducing a risky provision
scores higher than removing one.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Pattern, Tuple

from .models import ChangeSeverity, ChangeType, ClauseCategory, RiskAssessment
from .similarity import similarity


@dataclass(frozen=True)
class RiskPattern:
    """A provision that changes the legal risk of a contract"""
    pattern: str
    severity: ChangeSeverity
    category: ClauseCategory
    description: str


HIGH_RISK_PATTERNS: Tuple[RiskPattern, ...] = (
    RiskPattern(
        r"sınırsız\s+sorumluluk",
        ChangeSeverity.CRITICAL, ClauseCategory.LIABILITY,
        "Unlimited liability clause",
    ),
    RiskPattern(
        r"tek\s+taraflı\s+fesih",
        ChangeSeverity.MAJOR, ClauseCategory.TERMINATION,
        "Unilateral termination right",
    ),
    RiskPattern(
        r"cayma\s+hakkı.*(?:yoktur|bulunmamaktadır)",
        ChangeSeverity.CRITICAL, ClauseCategory.TERMINATION,
        "Right of withdrawal excluded",
    ),
    RiskPattern(
        r"cezai\s+şart.*(\d+[.,]?\d*)\s*(tl|lira|dolar|euro)",
        ChangeSeverity.MAJOR, ClauseCategory.PENALTY,
        "Contractual penalty amount",
    ),
    RiskPattern(
        r"tüm\s+(?:masraf|gider|harç).*(?:alıcı|kiracı|işçi|tüketici)",
        ChangeSeverity.MAJOR, ClauseCategory.PRICE,
        "All costs shifted to the weaker party",
    ),
    RiskPattern(
        r"yetki.*(?:münhasır|tek|yalnızca).*mahkeme",
        ChangeSeverity.MINOR, ClauseCategory.DISPUTE_RESOLUTION,
        "Exclusive jurisdiction clause",
    ),
    RiskPattern(
        r"tahkim.*(?:zorunlu|bağlayıcı)",
        ChangeSeverity.MAJOR, ClauseCategory.DISPUTE_RESOLUTION,
        "Mandatory arbitration clause",
    ),
    RiskPattern(
        r"otomatik\s+yenileme",
        ChangeSeverity.MINOR, ClauseCategory.TERM,
        "Automatic renewal clause",
    ),
    RiskPattern(
        r"gizlilik.*süresiz|süresiz.*gizlilik",
        ChangeSeverity.MAJOR, ClauseCategory.CONFIDENTIALITY,
        "Perpetual confidentiality obligation",
    ),
    RiskPattern(
        r"rekabet\s+yasağı.*(\d+)\s*yıl",
        ChangeSeverity.MAJOR, ClauseCategory.NON_COMPETE,
        "Non-compete duration",
    ),
    RiskPattern(
        r"(?:devir|temlik).*(?:yasak|izne\s+tabi)",
        ChangeSeverity.MINOR, ClauseCategory.GENERAL_PROVISIONS,
        "Assignment restriction",
    ),
    RiskPattern(
        r"mücbir\s+sebep.*(?:kapsam|dahil|hariç)",
        ChangeSeverity.MAJOR, ClauseCategory.FORCE_MAJEURE,
        "Force majeure scope change",
    ),
    RiskPattern(
        r"kişisel\s+veri.*(?:aktarım|işleme|paylaşım)",
        ChangeSeverity.MAJOR, ClauseCategory.CONFIDENTIALITY,
        "Personal data processing/transfer",
    ),
    RiskPattern(
        r"temerrüt\s+faizi.*%\s*(\d+)",
        ChangeSeverity.MINOR, ClauseCategory.PAYMENT,
        "Default interest rate",
    ),
)

# Scores when a pattern shows up in the new text only
INTRODUCED_SCORES: Dict[ChangeSeverity, float] = {
    ChangeSeverity.CRITICAL: 1.0,
    ChangeSeverity.MAJOR: 0.7,
    ChangeSeverity.MINOR: 0.4,
}

# Scores when a pattern disappears from the original text
REMOVED_SCORES: Dict[ChangeSeverity, float] = {
    ChangeSeverity.CRITICAL: 0.8,
    ChangeSeverity.MAJOR: 0.5,
    ChangeSeverity.MINOR: 0.3,
}


_WHITESPACE = re.compile(r"\s+")


def _squash(text: str) -> str:
    """Text with all whitespace removed."""
    return _WHITESPACE.sub("", text)


def severity_for_score(score: float) -> ChangeSeverity:
    """Bucket a risk score into a severity (monotonic)."""
    if score >= 0.8:
        return ChangeSeverity.CRITICAL
    if score >= 0.5:
        return ChangeSeverity.MAJOR
    if score >= 0.2:
        return ChangeSeverity.MINOR
    return ChangeSeverity.COSMETIC


class RiskPatternMatcher:
    """
    Scores a change by looking for high-risk provisions that appear or
    disappear between the two texts, falling back to type-based defaults.
    """

    def __init__(self, patterns: Tuple[RiskPattern, ...] = HIGH_RISK_PATTERNS):
        self.patterns = patterns
        self._compiled: List[Tuple[Pattern[str], RiskPattern]] = [
            (re.compile(p.pattern, re.IGNORECASE), p) for p in patterns
        ]

    def assess(self, original: str, new: str, change_type: ChangeType) -> RiskAssessment:
        """
        Assess the legal risk of one change.

        Args:
            original: Original paragraph text ("" for additions)
            new: New paragraph text ("" for removals)
            change_type: Alignment kind of the change

        Returns:
            RiskAssessment with severity, score and optional implication
        """
        if change_type == ChangeType.FORMATTING:
            return RiskAssessment(ChangeSeverity.COSMETIC, 0.0)
        # A relocated paragraph keeps its own default even when the text is unchanged
        if change_type != ChangeType.MOVED and _squash(original) == _squash(new):
            return RiskAssessment(ChangeSeverity.COSMETIC, 0.0)

        hit = self.find_pattern_change(original, new)
        if hit:
            return hit

        if change_type == ChangeType.REMOVED:
            return RiskAssessment(ChangeSeverity.MAJOR, 0.5)
        if change_type == ChangeType.ADDED:
            return RiskAssessment(ChangeSeverity.MINOR, 0.3)
        if change_type == ChangeType.MODIFIED:
            sim = similarity(original, new)
            if sim < 0.3:
                return RiskAssessment(ChangeSeverity.MAJOR, 0.6)
            if sim < 0.7:
                return RiskAssessment(ChangeSeverity.MINOR, 0.4)
            return RiskAssessment(ChangeSeverity.COSMETIC, 0.1)
        if change_type == ChangeType.MOVED:
            return RiskAssessment(ChangeSeverity.MINOR, 0.2)
        return RiskAssessment(ChangeSeverity.COSMETIC, 0.1)

    def find_pattern_change(self, original: str, new: str) -> Optional[RiskAssessment]:
        """First high-risk pattern whose presence differs between the texts."""
        for regex, risk in self._compiled:
            in_original = regex.search(original) is not None
            in_new = regex.search(new) is not None
            if in_new and not in_original:
                return RiskAssessment(
                    risk.severity,
                    INTRODUCED_SCORES[risk.severity],
                    f"INTRODUCED: {risk.description}",
                )
            if in_original and not in_new:
                return RiskAssessment(
                    risk.severity,
                    REMOVED_SCORES[risk.severity],
                    f"REMOVED: {risk.description}",
                )
        return None


_matcher: Optional[RiskPatternMatcher] = None


def get_risk_matcher() -> RiskPatternMatcher:
    """Get the shared risk pattern matcher"""
    global _matcher
    if _matcher is None:
        _matcher = RiskPatternMatcher()
    return _matcher


def get_high_risk_patterns() -> List[Dict[str, Any]]:
    """Risk pattern table for display."""
    return [
        {
            "pattern": p.pattern,
            "severity": p.severity.value,
            "category": p.category.value,
            "description": p.description,
        }
        for p in HIGH_RISK_PATTERNS
    ]
