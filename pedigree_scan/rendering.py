"""
Output renderers for extracted card records.

Two independent views of the same record list: a readable report for review
and a tab-separated table for spreadsheet import.
"""

import re
from typing import List

from pedigree_scan.records import Record

TSV_HEADER = ['Index', 'Role', 'Name', 'Variety', 'Ear', 'Reg', 'GC', 'Weight', 'Legs', 'Born']

# (label, attribute) in report order
READABLE_FIELDS = [
    ('Name', 'name'),
    ('Variety', 'variety'),
    ('Ear #', 'ear_number'),
    ('Reg #', 'reg_number'),
    ('GC #', 'grand_champion_number'),
    ('Weight', 'weight'),
    ('Legs', 'legs'),
    ('Born', 'birth_date'),
]

_LINE_BREAK_RE = re.compile(r'\r\n|\r|\n')


def escape_markup(line: str) -> str:
    """Escape '&' and '<' so a line can be embedded in HTML."""
    return line.replace('&', '&amp;').replace('<', '&lt;')


def render_readable(records: List[Record], line_break: str = '\n') -> str:
    """
    Render records as a numbered report.

    Example::

        1 — SUBJECT
          Name: Thumper
          Variety: Dutch

    Unpopulated fields are omitted and each record is followed by a blank
    line.  Pass ``line_break='<br>'`` when the host displays HTML.
    """
    lines = []
    for index, record in enumerate(records, start=1):
        lines.append(f"{index} — {record.role.value}")
        for label, attr in READABLE_FIELDS:
            value = getattr(record, attr)
            if value:
                lines.append(f"  {label}: {value}")
        lines.append('')

    return line_break.join(escape_markup(line) for line in lines)


def tsv_safe(value) -> str:
    """Make a value safe for a TSV cell: no tabs, no line breaks, trimmed."""
    text = '' if value is None else str(value)
    text = text.replace('\t', ' ')
    text = _LINE_BREAK_RE.sub(' ', text)
    return text.strip()


def render_tsv(records: List[Record]) -> str:
    """
    Render records as a tab-separated table with a header row.

    The header is always the first line, so zero records give a header-only
    table.
    """
    rows = ['\t'.join(TSV_HEADER)]
    for index, record in enumerate(records, start=1):
        cells = [index, record.role.value] + record.as_row()
        rows.append('\t'.join(tsv_safe(cell) for cell in cells))
    return '\n'.join(rows)
