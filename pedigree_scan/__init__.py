"""
Rabbit pedigree card scanner.

OCR a registration/pedigree card and pull out the subject, sire and dam
records as a readable report and a TSV table.
"""

from .config import CONFIG, PipelineConfig
from .errors import ScanError, MissingImageError, OcrEngineError
from .records import Block, Record, Role
from .parsing import parse_card_text
from .rendering import render_readable, render_tsv
from .scanner import ScanResult, scan_card, render_outputs

__all__ = [
    'CONFIG',
    'PipelineConfig',
    'ScanError',
    'MissingImageError',
    'OcrEngineError',
    'Block',
    'Record',
    'Role',
    'parse_card_text',
    'render_readable',
    'render_tsv',
    'ScanResult',
    'scan_card',
    'render_outputs',
]
