"""
Centralized configuration for the card scanning pipeline.

Settings that more than one module reads, or that change what ends up in
the rendered output, are collected here.  Patterns that belong to a single
parsing stage stay next to that stage.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PipelineConfig:
    """Knobs controlling OCR and parsing behavior.

    Frozen dataclass, treat as read-only at runtime.  To experiment with
    different values, create a new instance and pass it through.
    """

    # ------------------------------------------------------------------
    # OCR engine
    # ------------------------------------------------------------------
    # Cards are printed with English labels only.
    language: str = "eng"
    # "tesseract" or "surya" (see pedigree_scan.engines.create_engine).
    engine: str = "tesseract"
    # Tesseract page segmentation mode.  None keeps the engine default (3),
    # which handles the two-column sire/dam layout better than 6.
    tesseract_psm: Optional[int] = None
    # Surya lines below this confidence are dropped before joining.
    surya_min_confidence: float = 0.4
    # Keep Surya models loaded across scans (batch runs).  terminate() then
    # only ends the scan; the weights are freed when the engine is dropped.
    keep_models_loaded: bool = False

    # ------------------------------------------------------------------
    # Image loading
    # ------------------------------------------------------------------
    pdf_dpi: int = 200
    denoise: bool = True
    deskew: bool = True
    http_timeout_s: float = 30.0

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------
    # Two-digit birth years >= pivot are 19xx, below are 20xx.
    year_pivot: int = 70
    # Drop records with all eight fields empty before rendering.
    drop_empty_records: bool = True


# Singleton used by all modules.  Import this, not PipelineConfig.
CONFIG = PipelineConfig()
