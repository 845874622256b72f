from __future__ import annotations

from word_gaps.config import PLACEHOLDER
from word_gaps.masking.aligner import align


def gaps_from_mask(full_word: str, mask: str) -> list[bool]:
    """One flag per character of ``full_word``: True where a gap covers it."""
    flags = [False] * len(full_word)
    for start, end in align(full_word, mask).runs:
        for idx in range(start, end):
            flags[idx] = not full_word[idx].isspace()
    return flags


def mask_from_gaps(full_word: str, gaps: list[bool]) -> str:
    # Adjacent selected letters form one gap, so they collapse into one placeholder.
    pieces: list[str] = []
    in_gap = False
    for idx, char in enumerate(full_word):
        selected = idx < len(gaps) and bool(gaps[idx]) and not char.isspace()
        if selected:
            if not in_gap:
                pieces.append(PLACEHOLDER)
            in_gap = True
            continue
        in_gap = False
        pieces.append(char)
    return "".join(pieces)


def toggle_gap_range(full_word: str, gaps: list[bool], start: int, end: int) -> list[bool]:
    """Apply a range click from ``start`` to ``end`` (inclusive, any order).

    The range is cleared when all of its letters are already gaps, otherwise
    every letter in it becomes a gap. Spaces are never selected.
    """
    flags = [idx < len(gaps) and bool(gaps[idx]) for idx in range(len(full_word))]
    low, high = sorted((start, end))
    low = max(low, 0)
    high = min(high, len(full_word) - 1)
    letters = [idx for idx in range(low, high + 1) if not full_word[idx].isspace()]
    if not letters:
        return flags

    value = not all(flags[idx] for idx in letters)
    for idx in letters:
        flags[idx] = value
    return flags
