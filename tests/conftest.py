from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import word_gaps.app as app_module
from word_gaps.config import SessionLimits
from word_gaps.game.registry import SessionRegistry


@pytest.fixture()
def registry():
    return SessionRegistry(SessionLimits(max_sessions=3, max_words=10))


@pytest.fixture()
def client(registry, monkeypatch):
    monkeypatch.setattr(app_module, "registry", registry)
    with TestClient(app_module.app) as c:
        yield c


@pytest.fixture()
def sample_words():
    return [
        {"id": "w1", "full_word": "воробей", "mask": "в_р_бей", "level": 1},
        {"id": "w2", "full_word": "русский", "mask": "ру_кий", "level": 2},
        {"id": "w3", "full_word": "корова", "mask": "к_р_ва", "level": 1},
    ]
