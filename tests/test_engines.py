"""
Tests for the Tesseract engine adapter, image reference handling and
card preprocessing (denoise, deskew).

pytesseract calls are monkeypatched, so the tesseract binary itself is not
needed.
"""

import math

import pytest

pytesseract = pytest.importorskip("pytesseract")
pytest.importorskip("cv2")

import numpy as np
from PIL import Image, ImageDraw

from pedigree_scan.config import PipelineConfig
from pedigree_scan.engines import ProgressEvent
from pedigree_scan.engines import tesseract as tesseract_module
from pedigree_scan.engines.tesseract import TesseractEngine
from pedigree_scan.errors import OcrEngineError
from pedigree_scan.utils.image import (
    denoise_image,
    deskew_image,
    estimate_noise,
    is_remote_reference,
    load_image,
    load_pages,
    resolve_local_path,
)


@pytest.fixture
def ready_tesseract(monkeypatch):
    monkeypatch.setattr(pytesseract, "get_tesseract_version", lambda: "5.3.0")
    monkeypatch.setattr(pytesseract, "get_languages", lambda config='': ["eng", "osd"])


class TestTesseractInitialize:
    def test_binary_missing(self, monkeypatch):
        def missing():
            raise pytesseract.TesseractNotFoundError()
        monkeypatch.setattr(pytesseract, "get_tesseract_version", missing)

        with pytest.raises(OcrEngineError, match="not found"):
            TesseractEngine().initialize("eng")

    def test_language_missing(self, ready_tesseract):
        with pytest.raises(OcrEngineError, match="'deu' is not installed"):
            TesseractEngine().initialize("deu")

    def test_ready(self, ready_tesseract):
        engine = TesseractEngine()
        engine.initialize("eng")
        assert engine.language == "eng"
        engine.terminate()
        assert engine.language is None


class TestTesseractRecognize:
    def test_requires_initialize(self):
        with pytest.raises(OcrEngineError):
            TesseractEngine().recognize("card.png")

    def test_unloadable_image(self, ready_tesseract, monkeypatch):
        monkeypatch.setattr(tesseract_module, "load_pages", lambda ref, **kw: [])
        engine = TesseractEngine()
        engine.initialize("eng")
        with pytest.raises(OcrEngineError, match="could not load image"):
            engine.recognize("missing.png")

    def test_pages_joined_with_progress(self, ready_tesseract, monkeypatch):
        pages = [Image.new("RGB", (10, 10)), Image.new("RGB", (10, 10))]
        monkeypatch.setattr(tesseract_module, "load_pages", lambda ref, **kw: pages)
        texts = iter(["Name: Thumper", "Sire: Big Chief"])
        monkeypatch.setattr(pytesseract, "image_to_string",
                            lambda image, lang=None, config='': next(texts))

        engine = TesseractEngine(config=PipelineConfig(tesseract_psm=4))
        engine.initialize("eng")
        events = []
        text = engine.recognize("card.pdf", on_progress=events.append)

        assert text == "Name: Thumper\nSire: Big Chief"
        assert events == [
            ProgressEvent("loading image", 0.0),
            ProgressEvent("recognizing text", 0.0),
            ProgressEvent("recognizing text", 0.5),
            ProgressEvent("recognizing text", 1.0),
        ]
        assert engine._tesseract_config() == "--psm 4"

    def test_tesseract_error_wrapped(self, ready_tesseract, monkeypatch):
        monkeypatch.setattr(tesseract_module, "load_pages",
                            lambda ref, **kw: [Image.new("RGB", (10, 10))])

        def broken(image, lang=None, config=''):
            raise pytesseract.TesseractError(1, "bad image")
        monkeypatch.setattr(pytesseract, "image_to_string", broken)

        engine = TesseractEngine()
        engine.initialize("eng")
        with pytest.raises(OcrEngineError, match="page 1"):
            engine.recognize("card.png")

    def test_os_error_wrapped(self, ready_tesseract, monkeypatch):
        monkeypatch.setattr(tesseract_module, "load_pages",
                            lambda ref, **kw: [Image.new("RGB", (10, 10))])

        def vanished(image, lang=None, config=''):
            raise pytesseract.TesseractNotFoundError()
        monkeypatch.setattr(pytesseract, "image_to_string", vanished)

        engine = TesseractEngine()
        engine.initialize("eng")
        with pytest.raises(OcrEngineError, match="page 1") as excinfo:
            engine.recognize("card.png")
        assert isinstance(excinfo.value.__cause__, OSError)


class TestImageReferences:
    def test_remote(self):
        assert is_remote_reference("https://example.com/card.jpg") is True
        assert is_remote_reference("/tmp/card.jpg") is False

    def test_file_uri(self):
        assert resolve_local_path("file:///tmp/my%20card.png") == "/tmp/my card.png"

    def test_plain_path(self):
        assert resolve_local_path("cards/a.png") == "cards/a.png"

    def test_missing_file(self, tmp_path):
        assert load_pages(str(tmp_path / "nope.png")) == []

    def test_load_saved_image(self, tmp_path):
        path = tmp_path / "card.png"
        Image.new("L", (20, 10), color=255).save(path)
        pages = load_pages(str(path), denoise=False, deskew=False)
        assert len(pages) == 1
        assert pages[0].mode == "RGB"

    def test_not_an_image(self, tmp_path):
        path = tmp_path / "card.png"
        path.write_text("not an image")
        assert load_image(str(path)) is None

    def test_oversized_image(self, tmp_path, monkeypatch):
        path = tmp_path / "big.png"
        Image.new("L", (20, 10), color=255).save(path)
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 50)
        assert load_image(str(path)) is None
        assert load_pages(str(path)) == []


def _ruled_card(angle=0.0, width=800, height=500):
    """White card with 15 printed field rules tilted by ``angle`` degrees."""
    image = Image.new("RGB", (width, height), "white")
    draw = ImageDraw.Draw(image)
    slope = math.tan(math.radians(angle))
    x1, x2 = 50, width - 50
    for i in range(15):
        y1 = 100 + i * 25
        y2 = y1 - (x2 - x1) * slope
        draw.line([(x1, y1), (x2, y2)], fill="black", width=3)
    return image


def _noisy_card(size=(120, 80)):
    rng = np.random.default_rng(0)
    pixels = rng.normal(128, 20, (size[1], size[0], 3))
    return Image.fromarray(np.clip(pixels, 0, 255).astype(np.uint8))


class TestDenoise:
    def test_clean_card_untouched(self):
        card = Image.new("RGB", (120, 80), "white")
        assert estimate_noise(np.array(card)) < 0.8
        assert denoise_image(card) is card

    def test_noisy_card_filtered(self):
        card = _noisy_card()
        assert estimate_noise(np.array(card)) >= 0.8
        cleaned = denoise_image(card)
        assert cleaned is not card
        assert cleaned.size == card.size
        assert not np.array_equal(np.array(cleaned), np.array(card))

    def test_threshold_respected(self):
        card = _noisy_card()
        assert denoise_image(card, noise_threshold=1000.0) is card


class TestDeskew:
    def test_straight_card_untouched(self):
        card = _ruled_card(0.0)
        assert deskew_image(card) is card

    def test_tilted_card_rotated(self):
        card = _ruled_card(5.0)
        straightened = deskew_image(card)
        assert straightened is not card
        # Rotation expands the canvas to keep the corners
        assert straightened.size[0] > card.size[0]
        assert straightened.size[1] > card.size[1]

    def test_tilt_beyond_max_angle_ignored(self):
        card = _ruled_card(5.0)
        assert deskew_image(card, max_angle=2.0) is card

    def test_blank_card_untouched(self):
        card = Image.new("RGB", (400, 300), "white")
        assert deskew_image(card) is card


class TestLoadPagesPreprocessing:
    def test_noisy_card_is_cleaned(self, tmp_path):
        path = tmp_path / "noisy.png"
        _noisy_card().save(path)
        pages = load_pages(str(path))
        assert len(pages) == 1
        assert not np.array_equal(np.array(pages[0]), np.array(Image.open(path).convert("RGB")))

    def test_tilted_card_deskewed(self, tmp_path):
        path = tmp_path / "tilted.png"
        _ruled_card(5.0).save(path)
        pages = load_pages(str(path), denoise=False)
        assert pages[0].size[0] > 800
