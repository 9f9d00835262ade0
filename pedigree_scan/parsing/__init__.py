"""
Parsing package for pedigree card OCR text.

Re-exports all public functions for convenient imports.
"""

from .pipeline import parse_card_text, drop_empty_records, flag_suspicious_dates
from .normalization import (
    normalize_ocr_text,
    normalize_whitespace,
    apply_label_corrections,
    strip_table_borders,
    LABEL_CORRECTIONS,
)
from .segmentation import (
    segment_blocks,
    split_on_role_keywords,
    order_blocks,
)
from .fields import (
    extract_record,
    extract_records,
    infer_name_from_role,
    prepare_block_text,
    FIELD_PATTERNS,
    VARIETY_STOP_LABELS,
)
from .dates import (
    normalize_date,
    expand_two_digit_year,
    validate_birth_date,
)

__all__ = [
    # Pipeline
    'parse_card_text',
    'drop_empty_records',
    'flag_suspicious_dates',
    # Normalization
    'normalize_ocr_text',
    'normalize_whitespace',
    'apply_label_corrections',
    'strip_table_borders',
    'LABEL_CORRECTIONS',
    # Segmentation
    'segment_blocks',
    'split_on_role_keywords',
    'order_blocks',
    # Fields
    'extract_record',
    'extract_records',
    'infer_name_from_role',
    'prepare_block_text',
    'FIELD_PATTERNS',
    'VARIETY_STOP_LABELS',
    # Dates
    'normalize_date',
    'expand_two_digit_year',
    'validate_birth_date',
]
