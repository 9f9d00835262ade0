"""
End-to-end card scan: OCR an image, parse the text, render both outputs.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from pedigree_scan.config import CONFIG, PipelineConfig
from pedigree_scan.engines import OcrEngine, ProgressEvent, STATUS_RECOGNIZING, create_engine
from pedigree_scan.errors import MissingImageError, OcrEngineError
from pedigree_scan.parsing import parse_card_text
from pedigree_scan.records import Record
from pedigree_scan.rendering import render_readable, render_tsv

logger = logging.getLogger(__name__)

StatusCallback = Callable[[str], None]

MISSING_IMAGE_MESSAGE = "No image provided."
COMPLETE_MESSAGE = "✅ OCR complete — copy TSV into your sheet (or use readable for review)."


@dataclass
class ScanResult:
    raw_text: str
    records: List[Record] = field(default_factory=list)
    readable: str = ""
    tsv: str = ""


def format_progress(event: ProgressEvent) -> Optional[str]:
    """Status line for a progress event, or None for events not shown."""
    if event.status != STATUS_RECOGNIZING:
        return None
    return f"Scanning: {event.progress * 100:.1f}%"


def render_outputs(raw_text: str, config: Optional[PipelineConfig] = None,
                   line_break: str = '\n') -> ScanResult:
    """Parse OCR text and render it; no engine involved."""
    records = parse_card_text(raw_text, config=config)
    return ScanResult(
        raw_text=raw_text,
        records=records,
        readable=render_readable(records, line_break=line_break),
        tsv=render_tsv(records),
    )


def scan_card(image_ref: Optional[str], engine: Optional[OcrEngine] = None,
              on_status: Optional[StatusCallback] = None,
              config: Optional[PipelineConfig] = None,
              line_break: str = '\n') -> ScanResult:
    """
    Run OCR on a pedigree card and extract its records.

    The engine is always terminated, whether recognition succeeds or not.
    Failures are reported through ``on_status`` before being raised.

    Args:
        image_ref: Path, file:// URI or http(s) URL of the card image
        engine: OCR engine to use; built from config.engine when omitted
        on_status: Receives human-readable progress/status lines
        config: Pipeline settings (defaults to CONFIG)
        line_break: Line separator for the readable report

    Returns:
        ScanResult with raw text, records, readable report and TSV

    Raises:
        MissingImageError: image_ref is empty
        OcrEngineError: the engine failed to start or recognize (unexpected
            engine exceptions are wrapped, original chained)
    """
    config = config or CONFIG

    def report(message: str) -> None:
        if on_status is not None:
            on_status(message)

    def forward_progress(event: ProgressEvent) -> None:
        message = format_progress(event)
        if message is not None:
            report(message)

    if not image_ref:
        report(MISSING_IMAGE_MESSAGE)
        raise MissingImageError(MISSING_IMAGE_MESSAGE)

    if engine is None:
        engine = create_engine(config.engine, config=config)

    try:
        engine.initialize(config.language)
        raw_text = engine.recognize(image_ref, on_progress=forward_progress)
    except OcrEngineError as e:
        logger.error("OCR failed for %s: %s", image_ref, e)
        report(f"OCR failed: {e}")
        raise
    except Exception as e:
        logger.exception("Unexpected OCR error for %s", image_ref)
        report(f"OCR failed: {e}")
        raise OcrEngineError(f"unexpected {type(e).__name__}: {e}") from e
    finally:
        engine.terminate()

    result = render_outputs(raw_text, config=config, line_break=line_break)
    logger.info("Extracted %d record(s) from %s", len(result.records), image_ref)
    report(COMPLETE_MESSAGE)
    return result
