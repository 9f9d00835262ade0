import logging
from typing import Optional

import pytesseract

from pedigree_scan.config import CONFIG, PipelineConfig
from pedigree_scan.errors import OcrEngineError
from pedigree_scan.utils.image import load_pages
from .base import OcrEngine, ProgressCallback, STATUS_LOADING, STATUS_RECOGNIZING

logger = logging.getLogger(__name__)


class TesseractEngine(OcrEngine):
    """
    Tesseract OCR via pytesseract, one image_to_string call per page.

    Progress is reported per page: pytesseract gives no finer-grained
    feedback, so a single-image card jumps from 0.0 to 1.0.
    """

    name = "tesseract"

    def __init__(self, config: Optional[PipelineConfig] = None):
        super().__init__()
        self.config = config or CONFIG

    def initialize(self, language: str) -> None:
        try:
            version = pytesseract.get_tesseract_version()
        except pytesseract.TesseractNotFoundError as e:
            raise OcrEngineError("tesseract binary not found on PATH") from e

        try:
            installed = pytesseract.get_languages(config='')
        except pytesseract.TesseractError as e:
            raise OcrEngineError(f"could not list tesseract languages: {e}") from e

        if installed and language not in installed:
            raise OcrEngineError(
                f"tesseract language '{language}' is not installed "
                f"(available: {', '.join(sorted(installed))})"
            )

        logger.info("Tesseract %s ready (lang=%s)", version, language)
        super().initialize(language)

    def _tesseract_config(self) -> str:
        if self.config.tesseract_psm is None:
            return ''
        return f"--psm {self.config.tesseract_psm}"

    def recognize(self, image_ref: str,
                  on_progress: Optional[ProgressCallback] = None) -> str:
        if self.language is None:
            raise OcrEngineError("engine used before initialize()")

        self._emit(on_progress, STATUS_LOADING, 0.0)
        pages = load_pages(
            image_ref,
            dpi=self.config.pdf_dpi,
            timeout=self.config.http_timeout_s,
            denoise=self.config.denoise,
            deskew=self.config.deskew,
        )
        if not pages:
            raise OcrEngineError(f"could not load image: {image_ref}")

        texts = []
        total = len(pages)
        self._emit(on_progress, STATUS_RECOGNIZING, 0.0)
        for i, page in enumerate(pages):
            try:
                text = pytesseract.image_to_string(
                    page, lang=self.language, config=self._tesseract_config()
                )
            except (pytesseract.TesseractError, RuntimeError, OSError) as e:
                raise OcrEngineError(f"tesseract failed on page {i + 1}: {e}") from e
            texts.append(text)
            self._emit(on_progress, STATUS_RECOGNIZING, (i + 1) / total)

        logger.info("Tesseract read %d page(s), %d chars", total, sum(len(t) for t in texts))
        return "\n".join(texts)
