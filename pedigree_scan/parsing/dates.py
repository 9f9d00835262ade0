"""
Birth date normalization and validation for OCR output.

Handles OCR letter/digit confusion in date tokens (O/0, I/l/1), separator
unification, and two-digit year expansion.
"""

import re
import logging
from typing import Optional

from pedigree_scan.config import CONFIG

logger = logging.getLogger(__name__)

# ============================================================================
# Date Normalization
# ============================================================================

# Letters OCR commonly returns in place of digits inside a date token
_DATE_CHAR_FIXES = str.maketrans({
    'O': '0',
    'I': '1',
    'l': '1',
    '.': '/',
    '-': '/',
})

# M/D/YY or MM/DD/YYYY after separator unification.  Shape only; no
# calendar check.
_DATE_SHAPE_RE = re.compile(r'^(\d{1,2})/(\d{1,2})/(\d{2}|\d{4})$')


def expand_two_digit_year(year: str, pivot: Optional[int] = None) -> str:
    """
    Expand a 2-digit year with a sliding window.

    '99' -> '1999', '24' -> '2024' (pivot 70).  4-digit years are returned
    unchanged.
    """
    if len(year) != 2:
        return year
    if pivot is None:
        pivot = CONFIG.year_pivot
    century = '19' if int(year) >= pivot else '20'
    return century + year


def normalize_date(token: str, pivot: Optional[int] = None) -> str:
    """
    Normalize a birth date token to MM/DD/YYYY.

    - '11-10-2024' -> '11/10/2024'
    - 'O1/I5/99' -> '01/15/1999'
    - '3.7.05' -> '03/07/2005'
    - '13/45/2024' -> '13/45/2024' (shape matches; not calendar-checked)
    - 'not-a-date' -> 'not-a-date' (passthrough, trimmed)

    Args:
        token: Raw date-like token captured after a 'Born' label
        pivot: Two-digit year pivot; defaults to CONFIG.year_pivot

    Returns:
        MM/DD/YYYY string, or the trimmed token if it isn't date-shaped
    """
    if not token:
        return ''

    fixed = token.strip().translate(_DATE_CHAR_FIXES)
    match = _DATE_SHAPE_RE.match(fixed)
    if not match:
        logger.debug("Unrecognized date token passed through: '%s'", token.strip())
        return token.strip()

    month, day, year = match.groups()
    return f"{month.zfill(2)}/{day.zfill(2)}/{expand_two_digit_year(year, pivot)}"


# ============================================================================
# Date Validation
# ============================================================================


def validate_birth_date(value: str) -> dict:
    """
    Flag calendar problems in a normalized birth date.

    Does NOT correct anything -- only reports issues for human review, so
    '13/45/2024' stays as extracted but is reported as suspicious.
    """
    result = {
        'raw': value,
        'valid': True,
        'issues': [],
    }

    match = _DATE_SHAPE_RE.match(value or '')
    if not match:
        result['valid'] = False
        result['issues'].append('unrecognized_format')
        return result

    month_int = int(match.group(1))
    day_int = int(match.group(2))

    if month_int < 1 or month_int > 12:
        result['issues'].append('invalid_month')
    if day_int < 1 or day_int > 31:
        result['issues'].append('invalid_day')

    if result['issues']:
        result['valid'] = False

    return result
