"""
Text normalization for raw OCR output of pedigree cards.

Handles whitespace cleanup, label misread correction (Variety, Weight, Legs,
Reg #, GC #, Ear #, Born) and weight unit repair, so the segmenter and field
patterns only ever see canonical labels.
"""

import re
import logging
from typing import List, Tuple

logger = logging.getLogger(__name__)

# ============================================================================
# Whitespace
# ============================================================================

_CR_RE = re.compile(r'\r')
_BLANK_LINES_RE = re.compile(r'\n{2,}')
_HSPACE_RUN_RE = re.compile(r'[ \t]{2,}')
# Table borders come through as pipes, often with padding on both sides.
_PIPE_RUN_RE = re.compile(r'[ \t]*(?:\|[ \t]*)+')

# ============================================================================
# Label and unit corrections
# ============================================================================
#
# Applied in order.  Each replacement is already a fixed point of its own
# pattern, which keeps normalize_ocr_text idempotent.  Separator runs accept
# '|' as well as whitespace so that stripping table borders afterwards can't
# expose a new match on a second pass.

LABEL_CORRECTIONS: List[Tuple[str, re.Pattern, str]] = [
    # 'ariety', 'Yariety', 'variety' -> 'Variety'
    ('variety', re.compile(r'\b[a-z]?ariety', re.IGNORECASE), 'Variety'),
    # 'Weght', 'Welght', 'We1ght' -> 'Weight'
    ('weight', re.compile(r'We[il1]?ght', re.IGNORECASE), 'Weight'),
    # 'Leg5' -> 'Legs'
    ('legs', re.compile(r'Leg[s5]', re.IGNORECASE), 'Legs'),
    # 'Reg.', 'Req#', 'REG:' -> 'Reg # '
    ('reg', re.compile(r'\bRe[gq]\b[.\s#:|]*', re.IGNORECASE), 'Reg # '),
    # 'G.C.' is too ambiguous; only 'GC' followed by separators
    ('gc', re.compile(r'\bGC\b[.\s#:|]*', re.IGNORECASE), 'GC # '),
    ('ear', re.compile(r'\bEar[\s#:|]+', re.IGNORECASE), 'Ear # '),
    # Re-anchor the label right against the date token.  Only the label is
    # case-insensitive; the token class must keep O/I/l distinct.
    ('born', re.compile(r'\b(?i:born)[\s:|]*([0-9OIl./\-]+)'), r'Born: \1'),
    # '4 Ib', '41b' -> '4 lb'
    ('pounds', re.compile(r'([0-9])[\s|]*[il1]b\b', re.IGNORECASE), r'\1 lb'),
    # '2 0z', '20z' -> '2 oz'
    ('ounces', re.compile(r'([0-9])[\s|]*[o0]z\b', re.IGNORECASE), r'\1 oz'),
]


def normalize_whitespace(text: str) -> str:
    """
    Unify line endings and collapse blank lines and horizontal runs.

    - '\\r' -> '\\n'
    - '\\n\\n\\n' -> '\\n'
    - 'Dam    Ear' -> 'Dam Ear'
    """
    text = _CR_RE.sub('\n', text)
    text = _BLANK_LINES_RE.sub('\n', text)
    text = _HSPACE_RUN_RE.sub(' ', text)
    return text


def apply_label_corrections(text: str) -> str:
    """Rewrite known OCR misreads of field labels and weight units."""
    for name, pattern, replacement in LABEL_CORRECTIONS:
        text, count = pattern.subn(replacement, text)
        if count:
            logger.debug("  [label:%s] %d substitution(s)", name, count)
    return text


def strip_table_borders(text: str) -> str:
    """Replace pipe characters (and the padding around them) with one space."""
    return _PIPE_RUN_RE.sub(' ', text)


def normalize_ocr_text(text: str) -> str:
    """
    Clean raw OCR text of a pedigree card.

    Steps, in order:
    1. Whitespace and line-ending cleanup
    2. Label and unit misread corrections
    3. Table border removal
    4. Trim

    Never fails; text without any known noise comes back unchanged apart
    from whitespace.

    Args:
        text: Raw text as returned by the OCR engine

    Returns:
        Normalized text
    """
    if not text:
        return ''

    text = normalize_whitespace(text)
    text = apply_label_corrections(text)
    text = strip_table_borders(text)
    return text.strip()
