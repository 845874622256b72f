from __future__ import annotations

import io

import pytest

import word_gaps.pipeline.extraction as extraction_module
import word_gaps.pipeline.importer as importer_module
from word_gaps.pipeline.extraction import OCRResult, _result_from_data, extract_text_from_image, extract_words_from_text
from word_gaps.pipeline.importer import (
    build_import_preview_from_image,
    build_import_preview_from_text,
    parse_word_pairs,
)


def _png_bytes() -> bytes:
    from PIL import Image

    buf = io.BytesIO()
    Image.new("RGB", (60, 20), "white").save(buf, format="PNG")
    return buf.getvalue()


def test_extract_words_filters_and_dedups():
    text = "Воробей, корова!\n1. молоко  cat воробей\nя «кто-то»"
    assert extract_words_from_text(text) == ["воробей", "корова", "молоко", "кто-то"]


def test_extract_words_skips_masks_and_digits():
    assert extract_words_from_text("в_р_бей 123 к0т") == []


def test_parse_word_pairs():
    pairs = parse_word_pairs("воробей в_р_бей\n\nк_т\nмолоко\n")
    assert pairs == [
        {"full_word": "воробей", "mask": "в_р_бей"},
        {"full_word": "", "mask": "к_т"},
        {"full_word": "молоко", "mask": ""},
    ]


def test_import_preview_validates_rows():
    text = "воробей в_р_бей\nкот кит\nмолоко\nВоробей В_Р_БЕЙ"
    items = build_import_preview_from_text(text, level=2)

    assert len(items) == 3
    valid = items[0]
    assert valid["needs_confirmation"] is False
    assert valid["gaps"] == ["о", "о"]
    assert valid["level"] == 2

    rejected = items[1]
    assert rejected["needs_confirmation"] is True
    assert "position 2" in rejected["error"]

    assert items[2]["error"] == "mask is missing"


def test_result_from_data_groups_lines_and_averages_confidence():
    data = {
        "text": ["Воробей", "", "корова", "x"],
        "block_num": [1, 1, 1, 1],
        "par_num": [1, 1, 1, 1],
        "line_num": [1, 1, 2, 2],
        "conf": ["90", "-1", 80, 70],
    }
    result = _result_from_data(data)
    assert result.text == "Воробей\nкорова x"
    assert result.confidence == 80.0


def test_extract_text_from_image_picks_best_candidate(monkeypatch):
    import pytesseract

    calls = []

    def fake_image_to_data(image, lang, config, output_type):
        calls.append((lang, config))
        words = ["воробей", "корова"] if len(calls) == 2 else ["шум"]
        return {
            "text": words,
            "block_num": [1] * len(words),
            "par_num": [1] * len(words),
            "line_num": list(range(1, len(words) + 1)),
            "conf": [75] * len(words),
        }

    monkeypatch.setattr(pytesseract, "image_to_data", fake_image_to_data)
    result = extract_text_from_image(_png_bytes(), lang="rus", strength="FAST")

    assert result.text == "воробей\nкорова"
    assert result.confidence == 75.0
    assert all(lang == "rus" for lang, _ in calls)


def test_extract_text_from_image_rejects_non_images():
    with pytest.raises(ValueError):
        extract_text_from_image(b"not an image", strength="FAST")


def test_missing_ocr_engine_raises_runtime_error(monkeypatch):
    import pytesseract

    def missing(*_args, **_kwargs):
        raise pytesseract.TesseractNotFoundError()

    monkeypatch.setattr(pytesseract, "image_to_data", missing)
    with pytest.raises(RuntimeError, match="not installed"):
        extraction_module.extract_text_from_image(_png_bytes(), strength="FAST")


def test_image_preview_uses_ocr_text(monkeypatch):
    monkeypatch.setattr(
        importer_module,
        "extract_text_from_image",
        lambda payload, **_kwargs: OCRResult(text="воробей в_р_бей\nкорова", confidence=88.0),
    )
    preview = build_import_preview_from_image("sheet.jpg", b"fake-image-bytes")

    assert preview.words == ["воробей", "корова"]
    assert preview.confidence == 88.0
    assert [item["full_word"] for item in preview.items] == ["воробей", "корова"]
    assert preview.items[0]["needs_confirmation"] is False


def test_image_preview_rejects_other_files():
    with pytest.raises(ValueError, match="unsupported"):
        build_import_preview_from_image("words.pdf", b"%PDF")
