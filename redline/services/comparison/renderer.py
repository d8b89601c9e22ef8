"""
Redline Renderer
================

Presentation of a ComparisonResult: an HTML redline page with tracked
changes and a plain-text comparison report. No scoring happens here.
"""

import difflib
import html
import re
from typing import Dict, List, Tuple

from redline.core.utc import to_iso

from .models import (
    Change,
    ChangeSeverity,
    ChangeType,
    ComparisonResult,
    OverallChange,
    RedlineDocument,
    RiskLevel,
)
from .segmenter import segment_text

RULE = "─" * 59
BANNER = "═" * 59
EXCERPT_LENGTH = 100

_TOKEN = re.compile(r"\d+[.,]?\d*|\w+|[^\w\s]+|\s+")

RISK_ICONS: Dict[RiskLevel, str] = {
    RiskLevel.CRITICAL: "🔴",
    RiskLevel.HIGH: "🟠",
    RiskLevel.MEDIUM: "🟡",
    RiskLevel.LOW: "🟢",
}

SEVERITY_ICONS: Dict[ChangeSeverity, str] = {
    ChangeSeverity.CRITICAL: "🔴",
    ChangeSeverity.MAJOR: "🟠",
    ChangeSeverity.MINOR: "🟡",
    ChangeSeverity.COSMETIC: "⚪",
}

CLAUSE_CHANGE_ICONS: Dict[OverallChange, str] = {
    OverallChange.ADDED: "+",
    OverallChange.REMOVED: "-",
    OverallChange.MODIFIED: "~",
    OverallChange.UNCHANGED: "=",
}

CSS = """
    body { font-family: 'Times New Roman', serif; line-height: 1.6; max-width: 800px; margin: 40px auto; padding: 20px; }
    .added { background-color: #d4edda; color: #155724; text-decoration: underline; }
    .removed { background-color: #f8d7da; color: #721c24; text-decoration: line-through; }
    .modified-old { background-color: #fff3cd; color: #856404; text-decoration: line-through; }
    .modified-new { background-color: #d4edda; color: #155724; text-decoration: underline; }
    .formatting { border-left: 4px solid #adb5bd; padding-left: 10px; }
    .moved { border-left: 4px solid #17a2b8; padding-left: 10px; }
    .critical { border-left: 4px solid #dc3545; padding-left: 10px; }
    .major { border-left: 4px solid #ffc107; padding-left: 10px; }
    mark.diff-del { background-color: #f5c6cb; }
    mark.diff-add { background-color: #c3e6cb; }
    .change-note { font-size: 0.8em; color: #6c757d; font-style: italic; }
    .summary { background: #f8f9fa; padding: 20px; margin-bottom: 20px; border-radius: 5px; }
"""


def _escape(text: str) -> str:
    return html.escape(text, quote=True)


def _excerpt(text: str) -> str:
    if len(text) > EXCERPT_LENGTH:
        return text[:EXCERPT_LENGTH] + "..."
    return text


def inline_diff(old: str, new: str) -> Tuple[str, str]:
    """
    Word-level diff of two paragraphs as escaped HTML.

    Returns (old_html, new_html) with deleted tokens wrapped in
    <mark class="diff-del"> and inserted tokens in <mark class="diff-add">.
    """
    old_tokens = _TOKEN.findall(old)
    new_tokens = _TOKEN.findall(new)
    matcher = difflib.SequenceMatcher(None, old_tokens, new_tokens, autojunk=False)

    left: List[str] = []
    right: List[str] = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        old_part = _escape("".join(old_tokens[i1:i2]))
        new_part = _escape("".join(new_tokens[j1:j2]))
        if tag == "equal":
            left.append(old_part)
            right.append(new_part)
            continue
        if old_part:
            left.append(f'<mark class="diff-del">{old_part}</mark>')
        if new_part:
            right.append(f'<mark class="diff-add">{new_part}</mark>')
    return "".join(left), "".join(right)


class RedlineRenderer:
    """Renders comparison results as an HTML redline and a text report."""

    # ==========================================================================
    # HTML
    # ==========================================================================

    def render_html(self, result: ComparisonResult) -> str:
        by_new_segment = {c.new_segment.id: c for c in result.changes if c.new_segment}

        body: List[str] = []
        for segment in segment_text(result.new_document.content, "new"):
            change = by_new_segment.get(segment.id)
            if change is None:
                body.append(f"<p>{_escape(segment.text)}</p>")
            else:
                body.extend(self._render_change(change))

        for change in result.changes:
            if change.change_type == ChangeType.REMOVED:
                number = change.original_segment.paragraph_number
                body.append(f'<p class="removed critical">{_escape(change.original_text)}</p>')
                body.append(f'<p class="change-note">[REMOVED - original paragraph {number}]</p>')

        summary = result.summary
        findings = "\n".join(f"      <li>{_escape(f)}</li>" for f in summary.key_findings)
        recommendations = "\n".join(f"      <li>{_escape(r)}</li>" for r in summary.recommendations)
        title = _escape(f"Redline: {result.original_document.name} vs {result.new_document.name}")
        content = "\n".join(f"    {line}" for line in body)

        return f"""<!DOCTYPE html>
<html lang="tr">
<head>
  <meta charset="UTF-8">
  <title>{title}</title>
  <style>{CSS}  </style>
</head>
<body>
  <div class="summary">
    <h2>Comparison Summary</h2>
    <p>Total changes: {summary.total_changes}</p>
    <p>Risk level: {summary.risk_level.value.upper()}</p>
    <p>Added: {summary.added_count} | Removed: {summary.removed_count} | Modified: {summary.modified_count} | Formatting: {summary.formatting_count} | Moved: {summary.moved_count}</p>
  </div>
  <div class="content">
{content}
  </div>
  <div class="summary">
    <h3>Key Findings</h3>
    <ul>
{findings}
    </ul>
    <h3>Recommendations</h3>
    <ul>
{recommendations}
    </ul>
  </div>
</body>
</html>"""

    @staticmethod
    def _render_change(change: Change) -> List[str]:
        severity_class = change.severity.value if change.is_high_risk else ""
        new_text = _escape(change.new_text)

        if change.change_type == ChangeType.ADDED:
            return [
                f'<p class="added {severity_class}">{new_text}</p>',
                '<p class="change-note">[ADDED]</p>',
            ]
        if change.change_type == ChangeType.MODIFIED:
            old_html, new_html = inline_diff(change.original_text, change.new_text)
            return [
                f'<p class="{severity_class}">'
                f'<span class="modified-old">{old_html}</span><br>'
                f'<span class="modified-new">{new_html}</span></p>',
                '<p class="change-note">[MODIFIED]</p>',
            ]
        if change.change_type == ChangeType.MOVED:
            number = change.original_segment.paragraph_number
            return [
                f'<p class="moved">{new_text}</p>',
                f'<p class="change-note">[MOVED - original paragraph {number}]</p>',
            ]
        return [
            f'<p class="formatting">{new_text}</p>',
            '<p class="change-note">[FORMATTING]</p>',
        ]

    # ==========================================================================
    # Text report
    # ==========================================================================

    def render_report(self, result: ComparisonResult) -> str:
        summary = result.summary
        original = result.original_document
        new = result.new_document

        lines = [
            BANNER,
            "                DOCUMENT COMPARISON REPORT",
            BANNER,
            "",
            f"Original: {original.name} ({original.word_count} words)",
            f"Revised:  {new.name} ({new.word_count} words)",
            "",
            "SUMMARY",
            RULE,
            f"   Total changes: {summary.total_changes}",
            f"   ├─ Added: {summary.added_count}",
            f"   ├─ Removed: {summary.removed_count}",
            f"   ├─ Modified: {summary.modified_count}",
            f"   ├─ Moved: {summary.moved_count}",
            f"   └─ Formatting: {summary.formatting_count}",
            "",
            f"{RISK_ICONS[summary.risk_level]} Risk level: {summary.risk_level.value.upper()}",
            f"   Risk score: {summary.overall_risk_score * 100:.0f}%",
            "",
        ]

        if summary.key_findings:
            lines += ["KEY FINDINGS", RULE]
            lines += [f"   {finding}" for finding in summary.key_findings]
            lines.append("")

        if result.clause_comparisons:
            lines += ["CLAUSE-BY-CLAUSE COMPARISON", RULE]
            for clause in result.clause_comparisons:
                icon = CLAUSE_CHANGE_ICONS[clause.overall_change]
                risk = SEVERITY_ICONS[clause.risk_assessment.level]
                lines.append(f"   [{icon}] {clause.name} {risk}")
                if clause.changes:
                    lines.append(
                        f"      {len(clause.changes)} change(s): {clause.risk_assessment.reason}"
                    )
            lines.append("")

        important = result.get_high_risk_changes()
        if important:
            lines += ["IMPORTANT CHANGES", RULE]
            for change in important:
                lines.append("")
                lines.append(f"   [{change.severity.value.upper()}] {change.description}")
                if change.original_text and change.change_type != ChangeType.ADDED:
                    lines.append(f'      OLD: "{_excerpt(change.original_text)}"')
                if change.new_text and change.change_type != ChangeType.REMOVED:
                    lines.append(f'      NEW: "{_excerpt(change.new_text)}"')
                if change.legal_implication:
                    lines.append(f"      >> {change.legal_implication}")
            lines.append("")

        lines += ["RECOMMENDATIONS", RULE]
        lines += [f"   • {rec}" for rec in summary.recommendations]
        lines += [
            "",
            BANNER,
            f"Processing time: {result.processing_time_ms:.0f}ms",
            f"Created: {to_iso(result.created_at)}",
        ]
        return "\n".join(lines) + "\n"


_renderer = RedlineRenderer()


def generate_redline(result: ComparisonResult) -> RedlineDocument:
    """Build a fresh, undecided redline document for a comparison."""
    return RedlineDocument(
        content=result.new_document.content,
        html_content=_renderer.render_html(result),
        report=_renderer.render_report(result),
        changes=list(result.changes),
        paragraph_map={
            a.new.id: a.original.paragraph_number
            for a in result.alignments
            if a.original and a.new
        },
    )


def format_comparison_report(result: ComparisonResult) -> str:
    """Plain-text comparison report."""
    return _renderer.render_report(result)
