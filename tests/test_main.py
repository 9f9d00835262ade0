"""
Tests for the batch CLI: one engine per run, unique output names, and
per-card failures that do not stop the batch.
"""

import json

import main as cli
from pedigree_scan.engines import OcrEngine


class ScriptedEngine(OcrEngine):
    """Returns canned text per reference; raises for references in ``failing``."""

    name = "scripted"

    def __init__(self, texts, failing=()):
        super().__init__()
        self.texts = texts
        self.failing = set(failing)
        self.scans = 0

    def recognize(self, image_ref, on_progress=None):
        self.scans += 1
        if image_ref in self.failing:
            raise OSError("tesseract vanished mid-run")
        return self.texts[image_ref]


class TestOutputStem:
    def test_plain(self):
        assert cli.output_stem("cards/thumper.png") == "thumper"

    def test_url(self):
        assert cli.output_stem("https://example.com/scans/daisy.jpg") == "daisy"

    def test_repeated_names_get_suffix(self):
        seen = {}
        stems = [cli.output_stem(ref, seen) for ref in
                 ["a/card.png", "b/card.png", "https://example.com/card.jpg", "b/other.png"]]
        assert stems == ["card", "card_2", "card_3", "other"]


class TestMain:
    def _run(self, monkeypatch, tmp_path, engine, references):
        created = []

        def fake_create_engine(name, config=None):
            created.append((name, config.keep_models_loaded))
            return engine
        monkeypatch.setattr(cli, "create_engine", fake_create_engine)

        out_dir = tmp_path / "out"
        code = cli.main([*references, "--output_dir", str(out_dir), "--log-level", "WARNING"])
        return code, out_dir, created

    def test_one_engine_for_the_batch(self, monkeypatch, tmp_path):
        refs = ["a/card.png", "b/card.png"]
        engine = ScriptedEngine({"a/card.png": "Name: Thumper", "b/card.png": "Name: Daisy"})

        code, out_dir, created = self._run(monkeypatch, tmp_path, engine, refs)

        assert code == 0
        assert created == [("tesseract", True)]
        assert engine.scans == 2
        assert "Thumper" in (out_dir / "card.txt").read_text(encoding="utf-8")
        assert "Daisy" in (out_dir / "card_2.txt").read_text(encoding="utf-8")
        assert (out_dir / "card_2.tsv").read_text(encoding="utf-8").split("\n")[1].startswith("1\tSUBJECT\tDaisy")

    def test_failure_recorded_and_batch_continues(self, monkeypatch, tmp_path):
        refs = ["bad.png", "good.png"]
        engine = ScriptedEngine({"good.png": "Dam: Daisy"}, failing=["bad.png"])

        code, out_dir, _ = self._run(monkeypatch, tmp_path, engine, refs)

        assert code == 1
        error = json.loads((out_dir / "bad.error.json").read_text(encoding="utf-8"))
        assert error["image"] == "bad.png"
        assert "tesseract vanished mid-run" in error["error"]
        assert (out_dir / "good.tsv").exists()

    def test_nothing_to_scan(self, monkeypatch, tmp_path, capsys):
        code, _, created = self._run(monkeypatch, tmp_path, ScriptedEngine({}), [])
        assert code == 1
        assert created == []
        assert "No image provided." in capsys.readouterr().out
