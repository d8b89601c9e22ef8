"""
Redline Review
==============

Accept/reject decisions on a RedlineDocument, and resolving the reviewed
redline into final text. Decisions live on the caller's RedlineDocument;
the ComparisonResult it came from is never touched.
"""

import logging
from typing import Dict, List, Optional, Tuple

from .models import Change, RedlineDocument
from .segmenter import segment_text

logger = logging.getLogger(__name__)

PARAGRAPH_SEPARATOR = "\n\n"


class ChangeNotFoundError(LookupError):
    """Raised when a change id is not part of the redline"""

    def __init__(self, change_id: str):
        super().__init__(f"Change not found: {change_id}")
        self.change_id = change_id


def _require_change(redline: RedlineDocument, change_id: str) -> None:
    if not any(c.id == change_id for c in redline.changes):
        raise ChangeNotFoundError(change_id)


def accept_change(redline: RedlineDocument, change_id: str) -> RedlineDocument:
    """Mark a change accepted (idempotent); clears any earlier rejection."""
    _require_change(redline, change_id)
    if change_id not in redline.accepted_changes:
        redline.accepted_changes.append(change_id)
    redline.rejected_changes = [cid for cid in redline.rejected_changes if cid != change_id]
    logger.debug(f"Accepted {change_id}")
    return redline


def reject_change(redline: RedlineDocument, change_id: str) -> RedlineDocument:
    """Mark a change rejected (idempotent); clears any earlier acceptance."""
    _require_change(redline, change_id)
    if change_id not in redline.rejected_changes:
        redline.rejected_changes.append(change_id)
    redline.accepted_changes = [cid for cid in redline.accepted_changes if cid != change_id]
    logger.debug(f"Rejected {change_id}")
    return redline


def resolve_redline(redline: RedlineDocument) -> str:
    """
    Produce the final text implied by the review decisions.

    Accepted and undecided changes take the new text at their new position.
    Rejected changes keep the original text at their original position:
    each one is put back after the last paragraph whose original paragraph
    number precedes its own. Rejected additions are dropped.
    """
    rejected = set(redline.rejected_changes)
    by_new_segment: Dict[str, Change] = {
        c.new_segment.id: c for c in redline.changes if c.new_segment
    }

    # (original paragraph number or None for additions, text) in new-document order
    blocks: List[Tuple[Optional[int], str]] = []
    for segment in segment_text(redline.content, "new"):
        change = by_new_segment.get(segment.id)
        if change is None:
            blocks.append((redline.paragraph_map.get(segment.id), segment.text))
        elif change.id not in rejected:
            anchor = change.original_segment.paragraph_number if change.original_segment else None
            blocks.append((anchor, change.new_text))

    restored = sorted(
        (c for c in redline.changes if c.id in rejected and c.original_segment),
        key=lambda c: c.original_segment.paragraph_number,
    )
    for change in restored:
        number = change.original_segment.paragraph_number
        blocks.insert(_insert_position(blocks, number), (number, change.original_text))

    logger.debug(
        f"Resolved redline: {len(redline.accepted_changes)} accepted, "
        f"{len(rejected)} rejected, {len(redline.pending_changes)} pending"
    )
    return PARAGRAPH_SEPARATOR.join(text for _, text in blocks)


def _insert_position(blocks: List[Tuple[Optional[int], str]], number: int) -> int:
    """Index just after the last block anchored before the given paragraph."""
    position: Optional[int] = None
    for index, (anchor, _) in enumerate(blocks):
        if anchor is not None and anchor < number:
            position = index
    return 0 if position is None else position + 1
