"""Tests for the deployable ASGI entrypoints."""

import importlib
import sys
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient


@pytest.fixture
def fresh_entrypoint(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("MEAL_TRACKER_STORAGE_BACKEND", "file")
    monkeypatch.setenv("MEAL_TRACKER_DATA_DIR", str(tmp_path))
    for name in ("api.index", "meal_tracker.api.asgi"):
        monkeypatch.delitem(sys.modules, name, raising=False)
    return tmp_path


def test_serverless_entrypoint_exposes_app(fresh_entrypoint: Path) -> None:
    module = importlib.import_module("api.index")

    assert isinstance(module.app, FastAPI)
    client = TestClient(module.app)
    assert client.get("/health").json() == {"status": "ok"}

    oatmeal = {"name": "Oatmeal", "calories": 150, "protein": 5, "fat": 3, "carbs": 27}
    assert client.post("/meals", json=oatmeal).status_code == 201
    assert (fresh_entrypoint / "state.json").exists()
