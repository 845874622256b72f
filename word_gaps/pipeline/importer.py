from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from word_gaps.config import LEVEL_MIN, PLACEHOLDER
from word_gaps.masking.aligner import get_missing_letters
from word_gaps.masking.validation import validate_word_entry
from word_gaps.pipeline.extraction import IMAGE_SUFFIXES, extract_text_from_image, extract_words_from_text


@dataclass
class ImagePreview:
    raw_text: str
    confidence: float
    words: list[str] = field(default_factory=list)
    items: list[dict] = field(default_factory=list)


def parse_word_pairs(text: str) -> list[dict]:
    """Read ``word mask`` rows, one per line.

    A line with two or more tokens gives a full word and its mask. A single
    token is a mask when it holds a placeholder and a bare word otherwise;
    the missing side is left empty for the editor to fill.
    """
    pairs: list[dict] = []
    for line in text.splitlines():
        parts = line.split()
        if not parts:
            continue
        if len(parts) >= 2:
            pairs.append({"full_word": parts[0], "mask": parts[1]})
        elif PLACEHOLDER in parts[0]:
            pairs.append({"full_word": "", "mask": parts[0]})
        else:
            pairs.append({"full_word": parts[0], "mask": ""})
    return pairs


def build_import_preview_from_text(text: str, *, level: int = LEVEL_MIN) -> list[dict]:
    items: list[dict] = []
    seen: set[tuple[str, str]] = set()

    for pair in parse_word_pairs(text):
        full_word = pair["full_word"].lower()
        mask = pair["mask"].lower()
        if (full_word, mask) in seen:
            continue
        seen.add((full_word, mask))

        if not full_word or not mask:
            items.append(
                {
                    "full_word": full_word,
                    "mask": mask,
                    "level": level,
                    "gaps": [],
                    "needs_confirmation": True,
                    "error": "mask is missing" if full_word else "word is missing",
                }
            )
            continue

        check = validate_word_entry(full_word, mask, level)
        items.append(
            {
                "full_word": full_word,
                "mask": mask,
                "level": level,
                "gaps": get_missing_letters(full_word, mask) if check.ok else [],
                "needs_confirmation": not check.ok,
                "error": check.error,
            }
        )
    return items


def build_import_preview_from_image(
    filename: str,
    payload: bytes,
    *,
    lang: str | None = None,
    strength: str | None = None,
    level: int = LEVEL_MIN,
) -> ImagePreview:
    if Path(filename).suffix.lower() not in IMAGE_SUFFIXES:
        raise ValueError(f"unsupported image type: {filename}")

    result = extract_text_from_image(payload, lang=lang, strength=strength)
    return ImagePreview(
        raw_text=result.text,
        confidence=result.confidence,
        words=extract_words_from_text(result.text),
        items=build_import_preview_from_text(result.text, level=level),
    )
