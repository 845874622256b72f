from __future__ import annotations

from pydantic import BaseModel, Field

from word_gaps.config import LEVEL_MAX, LEVEL_MIN


class WordEntryRequest(BaseModel):
    full_word: str
    mask: str
    level: int = Field(default=LEVEL_MIN)


class GapsRequest(BaseModel):
    full_word: str
    mask: str
    letters: str = Field(default="")


class CheckWordRequest(BaseModel):
    full_word: str
    mask: str
    user_input: str


class MaskEditorRequest(BaseModel):
    full_word: str
    mask: str | None = None
    gaps: list[bool] | None = None
    toggle_start: int | None = Field(default=None, ge=0)
    toggle_end: int | None = Field(default=None, ge=0)


class WordRecord(BaseModel):
    id: str | int
    full_word: str
    mask: str
    level: int = Field(default=LEVEL_MIN)


class SessionCreateRequest(BaseModel):
    words: list[WordRecord] = Field(default_factory=list)
    seed: int | None = None


class AnswerRequest(BaseModel):
    is_correct: bool | None = None
    answers: list[str] | None = None


class TextImportRequest(BaseModel):
    text: str
    level: int = Field(default=LEVEL_MIN, ge=LEVEL_MIN, le=LEVEL_MAX)
