"""
Card text parsing orchestrator.

Coordinates normalization, segmentation and field extraction in the
correct order.
"""

import logging
from typing import List, Optional

from pedigree_scan.config import CONFIG, PipelineConfig
from pedigree_scan.records import Record
from .normalization import normalize_ocr_text
from .segmentation import segment_blocks
from .fields import extract_records
from .dates import validate_birth_date

logger = logging.getLogger(__name__)


def _log_step(name: str, before: int, after: int) -> None:
    """Log a parsing step, using INFO when records are removed."""
    delta = before - after
    if delta > 0:
        logger.info("  [%s] %d → %d records (removed %d)", name, before, after, delta)
    else:
        logger.debug("  [%s] %d records (no change)", name, before)


def flag_suspicious_dates(records: List[Record]) -> List[Record]:
    """Warn about birth dates with an impossible month or day; values are kept."""
    for record in records:
        if not record.birth_date:
            continue
        validation = validate_birth_date(record.birth_date)
        if not validation['valid']:
            logger.warning("  [%s] suspicious birth date '%s': %s",
                           record.role.value, record.birth_date,
                           ", ".join(validation['issues']))
    return records


def drop_empty_records(records: List[Record]) -> List[Record]:
    """Remove records where no field could be read."""
    return [r for r in records if not r.is_empty()]


def parse_card_text(raw_text: str, config: Optional[PipelineConfig] = None) -> List[Record]:
    """
    Turn raw OCR text of a pedigree card into ordered records.

    Steps:
    1. Normalize OCR noise (labels, units, whitespace, table borders)
    2. Segment into SUBJECT / SIRE / DAM / UNKNOWN blocks
    3. Extract fields per block
    4. Flag suspicious birth dates
    5. Drop all-empty records (if config.drop_empty_records)

    Args:
        raw_text: Literal OCR engine output
        config: Pipeline settings (defaults to CONFIG)

    Returns:
        Records ordered SUBJECT, SIRE, DAM, UNKNOWN
    """
    config = config or CONFIG

    # Step 1
    text = normalize_ocr_text(raw_text or '')
    logger.debug("  [normalize] %d → %d chars", len(raw_text or ''), len(text))

    # Step 2
    blocks = segment_blocks(text)
    logger.debug("  [segment] %d blocks", len(blocks))

    # Step 3
    records = extract_records(blocks, pivot=config.year_pivot)

    # Step 4
    records = flag_suspicious_dates(records)

    # Step 5
    if config.drop_empty_records:
        before = len(records)
        records = drop_empty_records(records)
        _log_step("drop_empty", before, len(records))

    return records
