from __future__ import annotations

import pytest

from word_gaps.masking.aligner import align, check_word, count_missing_letters, fill_mask, get_missing_letters
from word_gaps.masking.validation import validate_mask

VALID_PAIRS = [
    ("воробей", "в_р_бей"),
    ("русский", "ру_кий"),
    ("русский", "ру_ский"),
    ("русский язык", "ру_кий яз_к"),
    ("русский язык", "русски_ язык"),
    ("кот", "ко_"),
    ("молоко", "м_л_к_"),
]


def test_single_letter_gaps():
    assert get_missing_letters("воробей", "в_р_бей") == ["о", "о"]
    assert check_word("воробей", "в_р_бей", "оо") is True
    assert check_word("воробей", "в_р_бей", "оa") is False


def test_multi_letter_gap_is_one_unit():
    assert get_missing_letters("русский", "ру_кий") == ["сс"]
    assert check_word("русский", "ру_кий", "сс") is True
    assert check_word("русский", "ру_кий", "с") is False


def test_literal_letter_after_gap_stays_in_the_mask():
    assert get_missing_letters("русский", "ру_ский") == ["с"]


def test_gaps_across_words_and_before_space():
    assert get_missing_letters("русский язык", "ру_кий яз_к") == ["сс", "ы"]
    assert get_missing_letters("русский язык", "русски_ язык") == ["й"]


def test_trailing_placeholder_takes_rest_of_word():
    assert get_missing_letters("кот", "ко_") == ["т"]
    assert get_missing_letters("молоко", "м_л_к_") == ["о", "о", "о"]


def test_gap_runs_are_lowercased():
    assert get_missing_letters("Москва", "_осква") == ["м"]


@pytest.mark.parametrize(
    "full_word,mask",
    [("", ""), ("кот", ""), ("", "к_т"), ("кот", "кот")],
)
def test_degenerate_inputs_give_no_gaps(full_word, mask):
    assert get_missing_letters(full_word, mask) == []


def test_tolerant_mode_skips_mismatched_mask_symbols():
    assert get_missing_letters("кот", "кx_") == ["от"]
    assert get_missing_letters("кот", "кит") == []


def test_trailing_word_characters_are_not_a_gap():
    assert get_missing_letters("коты", "к_т") == ["о"]


def test_strict_alignment_stops_on_mismatch():
    result = align("кот", "кит", strict=True)
    assert result.gaps == []
    assert result.mismatch is not None
    assert result.mismatch.position == 2
    assert result.mismatch.expected == "о"
    assert result.mismatch.found == "и"


def test_alignment_records_runs():
    result = align("воробей", "в_р_бей")
    assert result.runs == [(1, 2), (3, 4)]
    assert result.word_index == 7
    assert result.mask_index == 7


def test_count_missing_letters():
    assert count_missing_letters("в_р_бей") == 2
    assert count_missing_letters("ру_кий") == 1
    assert count_missing_letters("") == 0


def test_check_word_ignores_case_and_surrounding_space():
    assert check_word("воробей", "в_р_бей", "  ОО ") is True


def test_check_word_rejects_wrong_length():
    assert check_word("воробей", "в_р_бей", "о") is False
    assert check_word("воробей", "в_р_бей", "ооо") is False


def test_check_word_rejects_empty_inputs():
    assert check_word("воробей", "в_р_бей", "") is False
    assert check_word("", "в_р_бей", "оо") is False
    assert check_word("кот", "кот", "кот") is False


def test_fill_mask_uses_gap_lengths():
    assert fill_mask("в_р_бей", "оо", "воробей") == "воробей"
    assert fill_mask("ру_кий", "ша", "русский") == "рушакий"


def test_fill_mask_shows_true_letters_when_input_runs_out():
    assert fill_mask("в_р_бей", "а", "воробей") == "варобей"
    assert fill_mask("в_р_бей", "", "воробей") == "воробей"


def test_fill_mask_without_full_word_takes_one_letter_per_gap():
    assert fill_mask("в_р_бей", "оо") == "воробей"
    assert fill_mask("в_р_бей", "о") == "вор_бей"


@pytest.mark.parametrize("full_word,mask", VALID_PAIRS)
def test_laws_hold_for_strictly_valid_pairs(full_word, mask):
    assert validate_mask(full_word, mask).ok is True

    gaps = get_missing_letters(full_word, mask)
    answer = "".join(gaps)

    assert len(gaps) == count_missing_letters(mask)
    assert fill_mask(mask, answer, full_word) == full_word
    assert check_word(full_word, mask, answer) is True
    assert check_word(full_word, mask, answer.upper()) is True
    assert check_word(full_word, mask, answer + "а") is False
