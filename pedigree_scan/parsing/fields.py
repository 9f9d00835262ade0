"""
Field extraction for one card block.

OCR output has no reliable field delimiter, so each field is pulled out with
its own forgiving pattern (optional colons/spaces, mixed case) and anything
that doesn't match is left empty.
"""

import re
import logging
from typing import List, Optional

from pedigree_scan.records import Block, Record, Role
from .dates import normalize_date

logger = logging.getLogger(__name__)

# ============================================================================
# Field Patterns
# ============================================================================

# Characters allowed in an animal name: "Bunny's Pride", "Jack & Jill", "Oak-3"
_NAME_CHARS = r"[A-Za-z0-9'&\-\s]"

# Labels the variety capture must stop in front of.  Keep in sync with the
# labels fixed up in normalization.LABEL_CORRECTIONS.
VARIETY_STOP_LABELS = ('Weight', 'Legs', 'Ear', 'Reg', 'GC', 'Born', 'Sire', 'Dam')

FIELD_PATTERNS = {
    'name': re.compile(r"\b(?:Name|Rabbit|Animal)[:\s]+(" + _NAME_CHARS + r"{3,})", re.IGNORECASE),
    'ear_number': re.compile(r'Ear\s*#[:\s]*([A-Z0-9\-]+)\b', re.IGNORECASE),
    'reg_number': re.compile(r'Reg\s*#[:\s]*([A-Z0-9\-]+)\b', re.IGNORECASE),
    'grand_champion_number': re.compile(r'\bGC\s*#[:\s]*([A-Z0-9\-]+)\b', re.IGNORECASE),
    'variety': re.compile(
        r'Variety[:\s]+([A-Za-z][A-Za-z\s()/\-]+?)\s*'
        r'(?=\b(?:' + '|'.join(VARIETY_STOP_LABELS) + r')|$)',
        re.IGNORECASE,
    ),
    'weight': re.compile(r'Weight[:\s]*([0-9]{1,2}\s*lb\s*[0-9]{1,2}\s*oz)', re.IGNORECASE),
    'legs': re.compile(r'Legs?[:\s]*([0-9]{1,2})\b', re.IGNORECASE),
    'birth_date': re.compile(r'Born[:\s]*([0-9OIl./\-]{6,12})', re.IGNORECASE),
}

# Sire/Dam blocks often carry the name straight after the role label
_ROLE_NAME_RE = re.compile(r"^\s*(?:Sire|Dam)[:\s]+(" + _NAME_CHARS + r"{3,})", re.IGNORECASE)

# The name class includes letters and spaces, so a greedy capture runs on
# into the next label ("Thumper Variety").  Cut it at the first label word.
_NAME_LABEL_CUT_RE = re.compile(
    r'\b(?:Name|Variety|Weight|Legs?|Ear|Reg|GC|Born|Sire|Dam)\b', re.IGNORECASE
)

# Segmentation strips the role keyword off each block; put it back so the
# name patterns have a label to anchor on.
_ROLE_ANCHORS = {
    Role.SUBJECT: 'Name:',
    Role.SIRE: 'Sire:',
    Role.DAM: 'Dam:',
}
_LEADING_LABEL_RE = re.compile(r'^\s*(?:Name|Rabbit|Animal|Sire|Dam)\b', re.IGNORECASE)


def _grab(pattern: re.Pattern, text: str) -> str:
    match = pattern.search(text)
    return match.group(1).strip() if match else ''


def _cut_at_next_label(value: str) -> str:
    return _NAME_LABEL_CUT_RE.split(value, maxsplit=1)[0].strip()


def prepare_block_text(block: Block) -> str:
    """
    Flatten a block to one padded line for pattern matching.

    Newlines become spaces and a space is added at both ends so word
    boundaries anchor at the block edges.  SUBJECT/SIRE/DAM blocks that
    don't start with a label get their role label back in front.
    """
    content = block.content.replace('\n', ' ')
    anchor = _ROLE_ANCHORS.get(block.role)
    if anchor and not _LEADING_LABEL_RE.match(content):
        content = f"{anchor} {content}"
    return f" {content} "


def infer_name_from_role(text: str, role: Role) -> str:
    """
    Fall back to the text right after a 'Sire:'/'Dam:' label.

    Only SIRE and DAM blocks qualify; a SUBJECT or UNKNOWN block never gets
    an inferred name.
    """
    if role not in (Role.SIRE, Role.DAM):
        return ''
    return _cut_at_next_label(_grab(_ROLE_NAME_RE, text))


def extract_record(block: Block, pivot: Optional[int] = None) -> Record:
    """
    Extract the eight card fields from one block.

    Fields that don't match are left as empty strings; this never raises.

    Args:
        block: Role-tagged block from segment_blocks
        pivot: Two-digit year pivot for the birth date (default from CONFIG)

    Returns:
        Record for the block's animal
    """
    text = prepare_block_text(block)

    name = _cut_at_next_label(_grab(FIELD_PATTERNS['name'], text))
    if not name:
        name = infer_name_from_role(text, block.role)

    record = Record(
        role=block.role,
        name=name,
        ear_number=_grab(FIELD_PATTERNS['ear_number'], text),
        reg_number=_grab(FIELD_PATTERNS['reg_number'], text),
        grand_champion_number=_grab(FIELD_PATTERNS['grand_champion_number'], text),
        variety=_grab(FIELD_PATTERNS['variety'], text),
        weight=_grab(FIELD_PATTERNS['weight'], text),
        legs=_grab(FIELD_PATTERNS['legs'], text),
        birth_date=normalize_date(_grab(FIELD_PATTERNS['birth_date'], text), pivot=pivot),
    )

    logger.debug("  [%s] %s", block.role.value,
                 ", ".join(f"{k}={v!r}" for k, v in record.to_dict().items() if v and k != 'role'))
    return record


def extract_records(blocks: List[Block], pivot: Optional[int] = None) -> List[Record]:
    """Apply extract_record to each block, keeping order."""
    return [extract_record(block, pivot=pivot) for block in blocks]
