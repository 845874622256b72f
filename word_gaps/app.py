from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware

from word_gaps.api.schemas import (
    AnswerRequest,
    CheckWordRequest,
    GapsRequest,
    MaskEditorRequest,
    SessionCreateRequest,
    TextImportRequest,
    WordEntryRequest,
)
from word_gaps.config import LEVEL_MAX, LEVEL_MIN, configure_logging
from word_gaps.game.registry import SessionRegistry
from word_gaps.game.session import GameSession, SessionStatus, WordItem
from word_gaps.masking.aligner import check_word, count_missing_letters, fill_mask, get_missing_letters
from word_gaps.masking.editor import gaps_from_mask, mask_from_gaps, toggle_gap_range
from word_gaps.masking.validation import validate_mask, validate_word_entry
from word_gaps.pipeline.importer import build_import_preview_from_image, build_import_preview_from_text

logger = logging.getLogger(__name__)

registry = SessionRegistry()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    configure_logging()
    yield


app = FastAPI(title="Word Gaps", version="0.1.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.post("/api/words/validate")
def validate_word(req: WordEntryRequest) -> dict:
    check = validate_word_entry(req.full_word, req.mask, req.level)
    full_word = req.full_word.strip()
    mask = req.mask.strip()
    return {
        **check.as_dict(),
        "gaps": get_missing_letters(full_word, mask) if check.ok else [],
    }


@app.post("/api/words/gaps")
def word_gaps(req: GapsRequest) -> dict:
    return {
        "gaps": get_missing_letters(req.full_word, req.mask),
        "count": count_missing_letters(req.mask),
        "filled": fill_mask(req.mask, req.letters, req.full_word),
    }


@app.post("/api/words/check")
def check_word_answer(req: CheckWordRequest) -> dict:
    return {"correct": check_word(req.full_word, req.mask, req.user_input)}


@app.post("/api/mask/editor")
def mask_editor(req: MaskEditorRequest) -> dict:
    if req.gaps is not None:
        flags = list(req.gaps)
    else:
        flags = gaps_from_mask(req.full_word, req.mask or "")
    if req.toggle_start is not None:
        end = req.toggle_end if req.toggle_end is not None else req.toggle_start
        flags = toggle_gap_range(req.full_word, flags, req.toggle_start, end)
    flags = flags[: len(req.full_word)] + [False] * (len(req.full_word) - len(flags))
    mask = mask_from_gaps(req.full_word, flags)
    return {"gaps": flags, "mask": mask, "check": validate_mask(req.full_word, mask).as_dict()}


@app.post("/api/sessions")
def create_session(req: SessionCreateRequest) -> dict:
    try:
        session_id, session = registry.create(
            [record.model_dump() for record in req.words],
            seed=req.seed,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"ok": True, "session_id": session_id, "status": _status_payload(session.get_status())}


@app.get("/api/sessions/{session_id}")
def session_status(session_id: str) -> dict:
    session = _get_session(session_id)
    return {"ok": True, "status": _status_payload(session.get_status())}


@app.post("/api/sessions/{session_id}/answer")
def answer(session_id: str, req: AnswerRequest) -> dict:
    if req.is_correct is None and req.answers is None:
        raise HTTPException(status_code=400, detail="is_correct or answers is required")
    session = _get_session(session_id)
    try:
        status, grade = registry.answer(session_id, is_correct=req.is_correct, answers=req.answers)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="session not found") from exc
    return {
        "ok": True,
        "grade": grade.as_dict() if grade is not None else None,
        "status": _status_payload(status),
    }


@app.get("/api/sessions/{session_id}/stats")
def session_stats(session_id: str) -> dict:
    session = _get_session(session_id)
    items = [
        {**_word_payload(stats.word), "mistakes": stats.mistakes}
        for stats in session.get_words_stats()
    ]
    return {"ok": True, "items": items, "mistakes": session.mistakes}


@app.delete("/api/sessions/{session_id}")
def delete_session(session_id: str) -> dict:
    try:
        registry.discard(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="session not found") from exc
    return {"ok": True}


@app.post("/api/import/text")
def import_text(req: TextImportRequest) -> dict:
    items = build_import_preview_from_text(req.text, level=req.level)
    return {
        "ok": True,
        "preview_items": items,
        "requires_confirmation": sum(1 for item in items if item["needs_confirmation"]),
    }


@app.post("/api/import/image")
async def import_image(
    level: int = Form(default=LEVEL_MIN),
    lang: str | None = Form(default=None),
    file: UploadFile = File(...),
) -> dict:
    payload = await file.read()
    if not payload:
        raise HTTPException(status_code=400, detail="empty file")
    if not LEVEL_MIN <= level <= LEVEL_MAX:
        raise HTTPException(status_code=400, detail=f"level must be between {LEVEL_MIN} and {LEVEL_MAX}")

    filename = file.filename.replace("/", "_") if file.filename else "upload.png"
    try:
        preview = build_import_preview_from_image(filename, payload, lang=lang, level=level)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except RuntimeError as exc:
        logger.warning("image import failed for %s: %s", filename, exc)
        raise HTTPException(status_code=503, detail=str(exc)) from exc

    return {
        "ok": True,
        "words": preview.words,
        "preview_items": preview.items,
        "confidence": preview.confidence,
        "extracted_text_sample": preview.raw_text[:800],
    }


def _get_session(session_id: str) -> GameSession:
    try:
        return registry.get(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="session not found") from exc


def _word_payload(item: WordItem) -> dict:
    return {
        "id": item.id,
        "full_word": item.full_word,
        "mask": item.mask,
        "level": item.level,
        "attempts": item.attempts,
        "is_completed": item.is_completed,
        "gap_count": count_missing_letters(item.mask),
    }


def _status_payload(status: SessionStatus) -> dict:
    return {
        "current_word": _word_payload(status.current_word) if status.current_word is not None else None,
        "is_retry": status.is_retry,
        "is_completed": status.is_completed,
        "progress": status.progress,
        "completed_count": status.completed_count,
        "total_words": status.total_words,
        "retry_count": status.retry_count,
        "mistakes": status.mistakes,
    }
