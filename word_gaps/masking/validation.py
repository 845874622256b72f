from __future__ import annotations

from dataclasses import dataclass

from word_gaps.config import LEVEL_MAX, LEVEL_MIN, MIN_WORD_LENGTH, PLACEHOLDER
from word_gaps.masking.aligner import align


@dataclass
class MaskCheck:
    ok: bool
    error: str | None = None
    field: str | None = None
    position: int | None = None
    expected: str | None = None
    found: str | None = None

    def as_dict(self) -> dict:
        return {
            "ok": self.ok,
            "error": self.error,
            "field": self.field,
            "position": self.position,
            "expected": self.expected,
            "found": self.found,
        }


def validate_mask(full_word: str, mask: str) -> MaskCheck:
    """Strict alignment: both strings must be consumed exactly."""
    alignment = align(full_word, mask, strict=True)

    if alignment.mismatch is not None:
        mismatch = alignment.mismatch
        return MaskCheck(
            ok=False,
            error=(
                f"mask does not match the word at position {mismatch.position}: "
                f'expected "{mismatch.expected}", found "{mismatch.found}"'
            ),
            field="mask",
            position=mismatch.position,
            expected=mismatch.expected,
            found=mismatch.found,
        )

    for start, end in alignment.runs:
        blank = next((idx for idx in range(start, end) if full_word[idx].isspace()), None)
        if blank is not None:
            position = blank + 1
            return MaskCheck(
                ok=False,
                error=f"a gap cannot cover the space at position {position}; keep spaces in the mask",
                field="mask",
                position=position,
            )

    if alignment.mask_index < len(mask):
        position = alignment.mask_index + 1
        return MaskCheck(
            ok=False,
            error=f"mask has unmatched characters starting at position {position}",
            field="mask",
            position=position,
            found=mask[alignment.mask_index],
        )

    if alignment.word_index < len(full_word):
        position = alignment.word_index + 1
        return MaskCheck(
            ok=False,
            error=f"word has unmatched characters starting at position {position}",
            field="full_word",
            position=position,
            expected=full_word[alignment.word_index],
        )

    return MaskCheck(ok=True)


def validate_word_entry(full_word: str, mask: str, level: int = LEVEL_MIN) -> MaskCheck:
    """Checks an admin-authored word/mask pair before it joins the corpus."""
    full_word = (full_word or "").strip()
    mask = (mask or "").strip()

    if len(full_word) < MIN_WORD_LENGTH:
        return MaskCheck(
            ok=False,
            error=f"word must have at least {MIN_WORD_LENGTH} characters",
            field="full_word",
        )
    if PLACEHOLDER not in mask:
        return MaskCheck(
            ok=False,
            error=f"mask must contain at least one gap ({PLACEHOLDER})",
            field="mask",
        )

    check = validate_mask(full_word, mask)
    if not check.ok:
        return check

    if not LEVEL_MIN <= level <= LEVEL_MAX:
        return MaskCheck(
            ok=False,
            error=f"level must be between {LEVEL_MIN} and {LEVEL_MAX}",
            field="level",
        )
    return MaskCheck(ok=True)
