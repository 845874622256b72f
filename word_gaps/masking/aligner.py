from __future__ import annotations

from dataclasses import dataclass, field

from word_gaps.config import PLACEHOLDER


@dataclass
class Mismatch:
    position: int
    expected: str
    found: str


@dataclass
class Alignment:
    """Outcome of walking a full word and its mask side by side.

    ``runs`` holds the raw ``(start, end)`` slice of the full word consumed by
    every placeholder, ``gaps`` the normalized non-empty runs in order. The
    final cursors let strict callers detect leftovers on either side.
    """

    gaps: list[str] = field(default_factory=list)
    runs: list[tuple[int, int]] = field(default_factory=list)
    word_index: int = 0
    mask_index: int = 0
    mismatch: Mismatch | None = None


def align(full_word: str, mask: str, *, strict: bool = False) -> Alignment:
    """Single forward pass, no backtracking.

    A placeholder consumes at least one letter and stops right before the
    first word character equal to the next mask symbol. A placeholder at the
    end of the mask takes the rest of the word.
    On a mismatch the tolerant mode skips the mask symbol; strict mode stops
    and records where it happened.
    """
    result = Alignment()
    word_len = len(full_word)
    mask_len = len(mask)
    word_index = 0
    mask_index = 0

    while word_index < word_len and mask_index < mask_len:
        symbol = mask[mask_index]
        if symbol == PLACEHOLDER:
            mask_index += 1
            start = word_index
            if mask_index >= mask_len:
                word_index = word_len
            else:
                word_index += 1
                while word_index < word_len and full_word[word_index] != mask[mask_index]:
                    word_index += 1
            result.runs.append((start, word_index))
            run = "".join(full_word[start:word_index].split()).lower()
            if run:
                result.gaps.append(run)
        elif symbol == full_word[word_index]:
            word_index += 1
            mask_index += 1
        elif strict:
            result.mismatch = Mismatch(
                position=word_index + 1,
                expected=full_word[word_index],
                found=symbol,
            )
            break
        else:
            mask_index += 1

    result.word_index = word_index
    result.mask_index = mask_index
    return result


def get_missing_letters(full_word: str, mask: str) -> list[str]:
    return align(full_word, mask).gaps


def count_missing_letters(mask: str) -> int:
    return mask.count(PLACEHOLDER)


def check_word(full_word: str, mask: str, user_input: str) -> bool:
    """True when ``user_input`` is exactly all gaps concatenated in order.

    Comparison ignores case and surrounding whitespace but not length: any
    missing or extra character fails the check.
    """
    if not full_word or not mask or not user_input:
        return False

    sequences = get_missing_letters(full_word, mask)
    if not sequences:
        return False

    answer = user_input.strip().lower()
    offset = 0
    for sequence in sequences:
        if answer[offset : offset + len(sequence)] != sequence:
            return False
        offset += len(sequence)
    return offset == len(answer)


def fill_mask(mask: str, letters: str, full_word: str | None = None) -> str:
    """Substitute ``letters`` into the placeholders of ``mask``.

    With ``full_word`` every placeholder takes a slice as long as its true
    gap; a placeholder left without input shows the true gap instead. Without
    it each placeholder takes a single character.
    """
    if not full_word:
        chars = iter(letters)
        return "".join(next(chars, PLACEHOLDER) if symbol == PLACEHOLDER else symbol for symbol in mask)

    sequences = get_missing_letters(full_word, mask)
    pieces: list[str] = []
    gap_index = 0
    offset = 0
    for symbol in mask:
        if symbol != PLACEHOLDER or gap_index >= len(sequences):
            pieces.append(symbol)
            continue
        expected = sequences[gap_index]
        replacement = letters[offset : offset + len(expected)]
        pieces.append(replacement or expected)
        offset += len(expected)
        gap_index += 1
    return "".join(pieces)
