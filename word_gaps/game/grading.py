from __future__ import annotations

from dataclasses import dataclass, field

from word_gaps.masking.aligner import get_missing_letters


@dataclass
class GapVerdict:
    expected: str
    given: str
    correct: bool


@dataclass
class GapGrade:
    verdicts: list[GapVerdict] = field(default_factory=list)
    all_correct: bool = False

    def as_dict(self) -> dict:
        return {
            "all_correct": self.all_correct,
            "gaps": [
                {"expected": v.expected, "given": v.given, "correct": v.correct}
                for v in self.verdicts
            ],
        }


def normalize_answer(value: str | None) -> str:
    return "".join(str(value or "").split()).lower()


def grade_gaps(full_word: str, mask: str, answers: list[str]) -> GapGrade:
    """Grade one answer per gap of the word, in gap order."""
    expected = get_missing_letters(full_word, mask)
    verdicts: list[GapVerdict] = []
    for idx, sequence in enumerate(expected):
        given = normalize_answer(answers[idx]) if idx < len(answers) else ""
        verdicts.append(GapVerdict(expected=sequence, given=given, correct=given == sequence))

    all_correct = bool(verdicts) and len(answers) == len(expected) and all(v.correct for v in verdicts)
    return GapGrade(verdicts=verdicts, all_correct=all_correct)
