"""
Clause Catalog
==============

Keyword rules that place a paragraph of a Turkish contract into a clause
category. Categories are checked in priority order and the first match
wins; anything unmatched is "other".
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern, Tuple, Any

from .models import ClauseCategory


@dataclass(frozen=True)
class ClauseRule:
    """Patterns and display name for one clause category"""
    category: ClauseCategory
    name: str
    patterns: Tuple[str, ...]


# Priority order matters: a paragraph about "ödeme bedeli" is a price clause
CLAUSE_RULES: Tuple[ClauseRule, ...] = (
    ClauseRule(ClauseCategory.PARTIES, "Parties",
               (r"taraflar", r"işbu\s+sözleşme", r"arasında.*akdedilmiştir")),
    ClauseRule(ClauseCategory.DEFINITIONS, "Definitions",
               (r"tanımlar", r"terimler", r"kavramlar")),
    ClauseRule(ClauseCategory.SUBJECT, "Subject of the Contract",
               (r"sözleşmenin\s+konusu", r"amaç", r"kapsam")),
    ClauseRule(ClauseCategory.TERM, "Term and Duration",
               (r"süre", r"yürürlük", r"geçerlilik", r"başlangıç.*bitiş")),
    ClauseRule(ClauseCategory.PRICE, "Price and Fees",
               (r"bedel", r"ücret", r"fiyat", r"tutar")),
    ClauseRule(ClauseCategory.PAYMENT, "Payment Terms",
               (r"ödeme", r"vade", r"taksit", r"fatura")),
    ClauseRule(ClauseCategory.DELIVERY, "Delivery and Performance",
               (r"teslim", r"teslimat", r"ifa", r"edim")),
    ClauseRule(ClauseCategory.WARRANTY, "Warranties and Representations",
               (r"garanti", r"taahhüt", r"beyan")),
    ClauseRule(ClauseCategory.LIABILITY, "Liability",
               (r"sorumluluk", r"yükümlülük", r"borç")),
    ClauseRule(ClauseCategory.PENALTY, "Penalties and Damages",
               (r"tazminat", r"cezai\s+şart", r"zarar")),
    ClauseRule(ClauseCategory.CONFIDENTIALITY, "Confidentiality",
               (r"gizlilik", r"sır", r"mahrem", r"ifşa")),
    ClauseRule(ClauseCategory.NON_COMPETE, "Non-Compete",
               (r"rekabet", r"yarışma", r"rakip")),
    ClauseRule(ClauseCategory.INTELLECTUAL_PROPERTY, "Intellectual Property",
               (r"fikri\s+mülkiyet", r"telif", r"patent", r"marka", r"lisans")),
    ClauseRule(ClauseCategory.TERMINATION, "Termination",
               (r"fesih", r"sona\s+erme", r"iptal", r"cayma")),
    ClauseRule(ClauseCategory.FORCE_MAJEURE, "Force Majeure",
               (r"mücbir\s+sebep", r"force\s+majeure", r"beklenmeyen\s+hal")),
    ClauseRule(ClauseCategory.DISPUTE_RESOLUTION, "Dispute Resolution",
               (r"uyuşmazlık", r"ihtilaf", r"tahkim", r"arabuluculuk", r"mahkeme")),
    ClauseRule(ClauseCategory.NOTICE, "Notices",
               (r"tebligat", r"bildirim", r"ihbar")),
    ClauseRule(ClauseCategory.GENERAL_PROVISIONS, "General Provisions",
               (r"diğer\s+hükümler", r"çeşitli\s+hükümler", r"son\s+hükümler")),
    ClauseRule(ClauseCategory.SIGNATURES, "Signatures",
               (r"imza", r"taraflar.*kabul", r"tanzim")),
    ClauseRule(ClauseCategory.APPENDICES, "Appendices",
               (r"ek[-\s]", r"lahika", r"appendix")),
)

CATEGORY_NAMES: Dict[ClauseCategory, str] = {rule.category: rule.name for rule in CLAUSE_RULES}
CATEGORY_NAMES[ClauseCategory.OTHER] = "Other"


class ClauseClassifier:
    """
    Classifies paragraphs into clause categories.

    Patterns are compiled once per instance and never mutated, so one
    classifier can be shared between threads.
    """

    def __init__(self, rules: Tuple[ClauseRule, ...] = CLAUSE_RULES):
        self.rules = rules
        self._compiled: List[Tuple[ClauseCategory, List[Pattern[str]]]] = [
            (rule.category, [re.compile(p, re.IGNORECASE) for p in rule.patterns])
            for rule in rules
        ]
        self._by_category = dict(self._compiled)

    def classify(self, text: str) -> ClauseCategory:
        """Return the first category whose patterns match the text."""
        for category, patterns in self._compiled:
            if any(p.search(text) for p in patterns):
                return category
        return ClauseCategory.OTHER

    def detect_presence(self, category: ClauseCategory, document_text: str) -> bool:
        """Whether any pattern of the category occurs anywhere in the document."""
        patterns = self._by_category.get(category)
        if not patterns:
            return False
        return any(p.search(document_text) for p in patterns)

    @staticmethod
    def get_name(category: ClauseCategory) -> str:
        return CATEGORY_NAMES.get(category, category.value)


_classifier: Optional[ClauseClassifier] = None


def get_clause_classifier() -> ClauseClassifier:
    """Get the shared clause classifier"""
    global _classifier
    if _classifier is None:
        _classifier = ClauseClassifier()
    return _classifier


def get_clause_categories() -> List[Dict[str, Any]]:
    """Catalog listing in priority order, for display."""
    return [
        {
            "category": rule.category.value,
            "name": rule.name,
            "patterns": list(rule.patterns),
        }
        for rule in CLAUSE_RULES
    ]
