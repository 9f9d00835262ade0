"""
Split normalized card text into per-animal blocks.

A card lists the animal itself under 'Name', then its 'Sire' and 'Dam'.
Every whole-word occurrence of those keywords starts a new block tagged with
the matching role.
"""

import re
import logging
from typing import List

from pedigree_scan.records import Block, Role

logger = logging.getLogger(__name__)

# The capture group makes re.split keep the keyword between chunks.
_ROLE_BOUNDARY_RE = re.compile(r'\b(Name|Sire|Dam)\b\s*:?\s*', re.IGNORECASE)

ROLE_KEYWORDS = {
    'name': Role.SUBJECT,
    'sire': Role.SIRE,
    'dam': Role.DAM,
}


def split_on_role_keywords(text: str) -> List[Block]:
    """
    Cut text at each role keyword, in discovery order.

    Text ahead of the first keyword becomes an UNKNOWN block when it isn't
    blank.  A keyword with nothing after it still yields a block (with empty
    content).
    """
    parts = _ROLE_BOUNDARY_RE.split(text)

    blocks: List[Block] = []
    leading = parts[0].strip()
    if leading:
        blocks.append(Block(role=Role.UNKNOWN, content=leading))

    # parts = [leading, keyword, content, keyword, content, ...]
    for keyword, content in zip(parts[1::2], parts[2::2]):
        role = ROLE_KEYWORDS[keyword.lower()]
        blocks.append(Block(role=role, content=content.strip()))

    return blocks


def order_blocks(blocks: List[Block]) -> List[Block]:
    """Stable sort: SUBJECT, SIRE, DAM, then UNKNOWN."""
    return sorted(blocks, key=lambda b: b.role.rank)


def segment_blocks(text: str) -> List[Block]:
    """
    Segment normalized card text into role-tagged blocks.

    - 'Name: A Sire: B Dam: C' -> [SUBJECT 'A', SIRE 'B', DAM 'C']
    - 'no keywords here' -> [UNKNOWN 'no keywords here']
    - '' -> []

    Args:
        text: Output of normalize_ocr_text

    Returns:
        Blocks ordered by role rank, ties in original order
    """
    if not text or not text.strip():
        return []

    blocks = order_blocks(split_on_role_keywords(text))
    logger.debug("Segmented %d block(s): %s",
                 len(blocks), ", ".join(b.role.value for b in blocks))
    return blocks
