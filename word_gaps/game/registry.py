from __future__ import annotations

import logging
import random
import threading
import uuid
from collections import OrderedDict
from typing import Iterable

from word_gaps.config import SessionLimits
from word_gaps.game.grading import GapGrade, grade_gaps
from word_gaps.game.session import GameSession, SessionStatus, Word

logger = logging.getLogger(__name__)


class SessionRegistry:
    """In-memory sessions keyed by id; the oldest is evicted when full."""

    def __init__(self, limits: SessionLimits | None = None) -> None:
        self.limits = limits or SessionLimits()
        self._sessions: OrderedDict[str, GameSession] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, words: Iterable[Word | dict], *, seed: int | None = None) -> tuple[str, GameSession]:
        words = list(words)
        if len(words) > self.limits.max_words:
            raise ValueError(f"too many words for one session (max {self.limits.max_words})")

        rng = random.Random(seed) if seed is not None else None
        session = GameSession(words, rng=rng)
        session_id = uuid.uuid4().hex
        with self._lock:
            while len(self._sessions) >= self.limits.max_sessions:
                evicted_id, _ = self._sessions.popitem(last=False)
                logger.info("evicted session %s", evicted_id)
            self._sessions[session_id] = session
        logger.info("created session %s with %d words", session_id, session.total_words)
        return session_id, session

    def get(self, session_id: str) -> GameSession:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise KeyError(session_id)
        return session

    def discard(self, session_id: str) -> None:
        with self._lock:
            if self._sessions.pop(session_id, None) is None:
                raise KeyError(session_id)

    def answer(
        self,
        session_id: str,
        *,
        is_correct: bool | None = None,
        answers: list[str] | None = None,
    ) -> tuple[SessionStatus, GapGrade | None]:
        """Feed one verdict to a session, grading ``answers`` when given.

        Calls for the same registry are serialised, so a session never sees
        overlapping ``handle_answer`` calls.
        """
        session = self.get(session_id)
        with self._lock:
            current = session.get_current_word()
            grade = None
            if current is None:
                return session.get_status(), None
            if answers is not None:
                grade = grade_gaps(current.full_word, current.mask, answers)
                is_correct = grade.all_correct
            session.handle_answer(bool(is_correct))
            status = session.get_status()
        if status.is_completed:
            logger.info("session %s completed with %d mistakes", session_id, status.mistakes)
        return status, grade
