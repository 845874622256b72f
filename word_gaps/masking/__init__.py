from word_gaps.masking.aligner import (
    align,
    check_word,
    count_missing_letters,
    fill_mask,
    get_missing_letters,
)
from word_gaps.masking.validation import MaskCheck, validate_mask, validate_word_entry

__all__ = [
    "MaskCheck",
    "align",
    "check_word",
    "count_missing_letters",
    "fill_mask",
    "get_missing_letters",
    "validate_mask",
    "validate_word_entry",
]
