from __future__ import annotations

import math
import random
from collections import deque
from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class Word:
    id: str
    full_word: str
    mask: str
    level: int = 1

    @classmethod
    def from_dict(cls, row: dict) -> "Word":
        missing = [key for key in ("id", "full_word", "mask") if row.get(key) in (None, "")]
        if missing:
            raise ValueError(f"word record missing fields: {', '.join(missing)}")
        try:
            level = int(row.get("level", 1))
        except (TypeError, ValueError) as exc:
            raise ValueError(f"invalid level for word {row['id']}") from exc
        return cls(
            id=str(row["id"]),
            full_word=str(row["full_word"]),
            mask=str(row["mask"]),
            level=level,
        )


@dataclass
class WordItem:
    """A word as seen by one session: the record plus its attempt counters."""

    word: Word
    attempts: int = 0
    is_completed: bool = False

    @property
    def id(self) -> str:
        return self.word.id

    @property
    def full_word(self) -> str:
        return self.word.full_word

    @property
    def mask(self) -> str:
        return self.word.mask

    @property
    def level(self) -> int:
        return self.word.level

    @property
    def mistakes(self) -> int:
        # The single successful attempt is not a mistake.
        return self.attempts - 1 if self.is_completed else self.attempts

    @property
    def needs_retry(self) -> bool:
        return not self.is_completed and self.attempts > 0

    def record_attempt(self, is_correct: bool) -> None:
        self.attempts += 1
        if is_correct:
            self.is_completed = True


@dataclass
class WordStats:
    word: WordItem
    mistakes: int


@dataclass
class SessionStatus:
    current_word: WordItem | None
    is_retry: bool
    is_completed: bool
    progress: int
    completed_count: int
    total_words: int
    retry_count: int
    mistakes: int


class GameSession:
    """One practice run over a fixed word list.

    Words are shuffled once and served in that order. A missed word leaves
    the main sequence for the back of the retry queue; retries are only
    served after the main sequence is exhausted, and a word missed again
    goes to the back of the queue. The session completes once every word has
    been answered correctly and nothing is left to retry.

    ``handle_answer`` is the only mutating call and must not be re-entered.
    """

    def __init__(self, words: Iterable[Word | dict], *, rng: random.Random | None = None) -> None:
        self._items = [WordItem(word if isinstance(word, Word) else Word.from_dict(word)) for word in words]
        self._order = list(range(len(self._items)))
        self._shuffle(self._order, rng or random.Random())
        self._cursor = 0
        self._retry: deque[int] = deque()
        self._completed: list[int] = []
        self._total_mistakes = 0

    @staticmethod
    def _shuffle(values: list[int], rng: random.Random) -> None:
        for i in range(len(values) - 1, 0, -1):
            j = rng.randrange(i + 1)
            values[i], values[j] = values[j], values[i]

    def _current_index(self) -> int | None:
        if self._cursor < len(self._order):
            return self._order[self._cursor]
        if self._retry:
            return self._retry[0]
        return None

    def get_current_word(self) -> WordItem | None:
        index = self._current_index()
        if index is None:
            return None
        return self._items[index]

    @property
    def is_retry(self) -> bool:
        return self._cursor >= len(self._order) and bool(self._retry)

    def handle_answer(self, is_correct: bool) -> None:
        index = self._current_index()
        if index is None:
            return

        from_main = self._cursor < len(self._order)
        self._items[index].record_attempt(is_correct)

        if is_correct:
            if index not in self._completed:
                self._completed.append(index)
            if from_main:
                self._cursor += 1
            else:
                self._retry.remove(index)
            return

        self._total_mistakes += 1
        if from_main:
            self._retry.append(index)
            self._cursor += 1
        else:
            self._retry.popleft()
            self._retry.append(index)

    def is_completed(self) -> bool:
        return (
            self._cursor >= len(self._order)
            and not self._retry
            and len(self._completed) == len(self._items)
        )

    @property
    def total_words(self) -> int:
        return len(self._items)

    @property
    def completed_count(self) -> int:
        return len(self._completed)

    @property
    def retry_count(self) -> int:
        return len(self._retry)

    @property
    def mistakes(self) -> int:
        return self._total_mistakes

    @property
    def progress(self) -> int:
        if self.total_words == 0:
            return 0
        value = math.floor(self.completed_count * 100 / self.total_words + 0.5)
        if value >= 100 and not self.is_completed():
            return 99
        return value

    def get_words_stats(self) -> list[WordStats]:
        return [WordStats(word=self._items[index], mistakes=self._items[index].mistakes) for index in self._order]

    def get_status(self) -> SessionStatus:
        return SessionStatus(
            current_word=self.get_current_word(),
            is_retry=self.is_retry,
            is_completed=self.is_completed(),
            progress=self.progress,
            completed_count=self.completed_count,
            total_words=self.total_words,
            retry_count=self.retry_count,
            mistakes=self.mistakes,
        )
