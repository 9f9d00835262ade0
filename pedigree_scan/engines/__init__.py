"""
OCR engine adapters.

Engines only turn an image reference into raw text; all cleanup happens in
pedigree_scan.parsing.
"""

from typing import Optional

from pedigree_scan.config import PipelineConfig
from .base import (
    OcrEngine,
    ProgressEvent,
    ProgressCallback,
    STATUS_LOADING,
    STATUS_RECOGNIZING,
)

ENGINE_NAMES = ('tesseract', 'surya')


def create_engine(name: str, config: Optional[PipelineConfig] = None) -> OcrEngine:
    """
    Build an engine by name.

    Engine modules are imported here rather than at package import so that
    the parsing code and tests don't pull in pytesseract or torch.
    """
    if name == 'tesseract':
        from .tesseract import TesseractEngine
        return TesseractEngine(config=config)
    if name == 'surya':
        from .surya import SuryaEngine
        return SuryaEngine(config=config)
    raise ValueError(f"unknown OCR engine '{name}' (expected one of: {', '.join(ENGINE_NAMES)})")


__all__ = [
    'OcrEngine',
    'ProgressEvent',
    'ProgressCallback',
    'STATUS_LOADING',
    'STATUS_RECOGNIZING',
    'ENGINE_NAMES',
    'create_engine',
]
