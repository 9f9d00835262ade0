from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional


@dataclass(frozen=True)
class ProgressEvent:
    """
    Progress report from an engine during one recognize() call.

    ``progress`` is the completed fraction in [0, 1].  Engines are expected
    to report non-decreasing values but nothing enforces it; events are
    forwarded as received.
    """

    status: str
    progress: float


ProgressCallback = Callable[[ProgressEvent], None]

# Status used while text is actually being read off the image.
STATUS_RECOGNIZING = "recognizing text"
STATUS_LOADING = "loading image"


class OcrEngine(ABC):
    """
    Interface for OCR engines.

    Lifecycle per scan: initialize(language) -> recognize(image_ref) ->
    terminate().  terminate() must be safe to call after a failed
    initialize() or recognize().

    IMPORTANT:
    - Engines return the literal text hypothesis.
    - Engines must NOT correct labels or reformat fields; that is the
      parsing package's job.
    - Library failures are raised as pedigree_scan.errors.OcrEngineError.
    """

    name = "base"

    def __init__(self):
        self.language: Optional[str] = None

    def initialize(self, language: str) -> None:
        self.language = language

    @abstractmethod
    def recognize(self, image_ref: str,
                  on_progress: Optional[ProgressCallback] = None) -> str:
        raise NotImplementedError

    def terminate(self) -> None:
        self.language = None

    @staticmethod
    def _emit(on_progress: Optional[ProgressCallback], status: str, progress: float) -> None:
        if on_progress is not None:
            on_progress(ProgressEvent(status=status, progress=progress))
