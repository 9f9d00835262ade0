"""
Exceptions raised by the scanning layer.

Parsing stages never raise; only the input check and the OCR engine can
fail a scan.
"""


class ScanError(Exception):
    """Base class for failures that stop a scan."""


class MissingImageError(ScanError):
    """No image reference was supplied."""


class OcrEngineError(ScanError):
    """The OCR engine could not start, load the image, or recognize it."""
