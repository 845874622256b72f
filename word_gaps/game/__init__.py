from word_gaps.game.grading import GapGrade, GapVerdict, grade_gaps, normalize_answer
from word_gaps.game.session import GameSession, SessionStatus, Word, WordItem, WordStats

__all__ = [
    "GameSession",
    "GapGrade",
    "GapVerdict",
    "SessionStatus",
    "Word",
    "WordItem",
    "WordStats",
    "grade_gaps",
    "normalize_answer",
]
