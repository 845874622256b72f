from __future__ import annotations

import io
import logging
import re
from dataclasses import dataclass

from word_gaps.config import OCR_STRENGTHS, OCRSettings

logger = logging.getLogger(__name__)

IMAGE_SUFFIXES = {".png", ".jpg", ".jpeg", ".bmp", ".webp"}
EDGE_NON_LETTERS_RE = re.compile(r"^[\W\d_]+|[\W\d_]+$")
CYRILLIC_WORD_RE = re.compile(r"[а-яё'\-]+")
CYRILLIC_LETTER_RE = re.compile(r"[а-яё]")


@dataclass
class OCRResult:
    text: str
    confidence: float


def extract_text_from_image(
    payload: bytes,
    *,
    lang: str | None = None,
    strength: str | None = None,
) -> OCRResult:
    """Run the OCR engine over a few preprocessed variants of the photo.

    The engine is treated as a black box; the best-scoring transcript wins.
    Raises ``RuntimeError`` when the engine is missing and ``ValueError`` when
    the payload is not a readable image.
    """
    settings = OCRSettings()
    lang = lang or settings.lang
    strength = _normalize_ocr_strength(strength or settings.strength)

    try:
        import pytesseract
        from PIL import Image, ImageEnhance, ImageFilter, ImageOps, UnidentifiedImageError
    except ImportError as exc:  # pragma: no cover
        raise RuntimeError("image import requires pytesseract and Pillow") from exc

    try:
        image = Image.open(io.BytesIO(payload)).convert("RGB")
    except (UnidentifiedImageError, OSError) as exc:
        raise ValueError("uploaded file is not a readable image") from exc

    variants = _build_ocr_variants(
        image=image,
        image_enhance=ImageEnhance,
        image_filter=ImageFilter,
        image_ops=ImageOps,
        strength=strength,
    )

    candidates: list[OCRResult] = []
    try:
        for variant in variants:
            for config in _ocr_psm_configs(strength):
                data = pytesseract.image_to_data(
                    variant,
                    lang=lang,
                    config=config,
                    output_type=pytesseract.Output.DICT,
                )
                result = _result_from_data(data)
                if result.text:
                    candidates.append(result)
    except pytesseract.TesseractNotFoundError as exc:
        logger.warning("tesseract binary not found: %s", exc)
        raise RuntimeError("OCR engine is not installed") from exc
    except pytesseract.TesseractError as exc:
        logger.warning("tesseract failed for lang=%s: %s", lang, exc)
        raise RuntimeError(f"OCR failed: {exc}") from exc

    best = _pick_best_result(candidates)
    logger.debug(
        "ocr picked %d chars at confidence %.1f from %d candidates",
        len(best.text),
        best.confidence,
        len(candidates),
    )
    return best


def _result_from_data(data: dict) -> OCRResult:
    lines: dict[tuple[int, int, int], list[str]] = {}
    confidences: list[float] = []
    for idx, word in enumerate(data.get("text", [])):
        word = (word or "").strip()
        if not word:
            continue
        key = (data["block_num"][idx], data["par_num"][idx], data["line_num"][idx])
        lines.setdefault(key, []).append(word)
        conf = float(data["conf"][idx])
        if conf >= 0:
            confidences.append(conf)

    text = "\n".join(" ".join(words) for _, words in sorted(lines.items()))
    confidence = round(sum(confidences) / len(confidences), 1) if confidences else 0.0
    return OCRResult(text=text, confidence=confidence)


def _pick_best_result(candidates: list[OCRResult]) -> OCRResult:
    if not candidates:
        return OCRResult(text="", confidence=0.0)

    unique: list[OCRResult] = []
    seen: set[str] = set()
    for candidate in candidates:
        norm = " ".join(extract_words_from_text(candidate.text))
        if norm and norm in seen:
            continue
        if norm:
            seen.add(norm)
        unique.append(candidate)
    return max(unique, key=lambda item: (_score_ocr_text(item.text), item.confidence))


def _score_ocr_text(text: str) -> tuple[int, int, int]:
    words = extract_words_from_text(text)
    letter_count = sum(1 for ch in text if CYRILLIC_LETTER_RE.match(ch.lower()))
    digit_count = sum(1 for ch in text if ch.isdigit())
    letter_ratio = int(letter_count * 100 / max(1, len(text)))
    return (len(words), letter_ratio, -digit_count)


def _build_ocr_variants(image, image_enhance, image_filter, image_ops, strength: str) -> list:
    gray = image_ops.grayscale(image)
    variants = [image, image_ops.autocontrast(gray)]

    if strength in {"BALANCED", "ACCURATE"}:
        sharpened = image_enhance.Sharpness(gray).enhance(2.2)
        thresholded = sharpened.point(lambda x: 255 if x > 145 else 0)
        variants.append(thresholded)

    if strength == "ACCURATE":
        denoised = gray.filter(image_filter.MedianFilter(size=3))
        variants.append(image_ops.autocontrast(denoised))

    return variants


def _ocr_psm_configs(strength: str) -> list[str]:
    if strength == "FAST":
        return ["--oem 3 --psm 6"]
    if strength == "ACCURATE":
        return ["--oem 3 --psm 6", "--oem 3 --psm 4", "--oem 3 --psm 11"]
    return ["--oem 3 --psm 6", "--oem 3 --psm 4"]


def _normalize_ocr_strength(value: str) -> str:
    strength = str(value or "BALANCED").strip().upper()
    if strength not in OCR_STRENGTHS:
        return "BALANCED"
    return strength


def extract_words_from_text(text: str) -> list[str]:
    """Dictionary words found in raw recognised text, in reading order.

    Tokens are stripped of surrounding punctuation and digits and lowercased;
    only Cyrillic words (hyphens and apostrophes allowed) of two or more
    characters survive. Duplicates are dropped.
    """
    words: list[str] = []
    seen: set[str] = set()
    for line in text.splitlines():
        for raw in line.split():
            token = EDGE_NON_LETTERS_RE.sub("", raw).lower()
            if len(token) < 2:
                continue
            if not CYRILLIC_WORD_RE.fullmatch(token) or not CYRILLIC_LETTER_RE.search(token):
                continue
            if token in seen:
                continue
            seen.add(token)
            words.append(token)
    return words
