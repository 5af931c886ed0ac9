import json

import pytest

from fxbias.analysis.models import Score
from fxbias.analysis.store import AnalysisStore, EngineState
from fxbias.persistence import JsonStateStore
from fxbias.utils.errors import PersistenceError


def test_missing_file_yields_empty_store(tmp_path, cache):
    store = JsonStateStore(tmp_path / "none.json").load(
        cache=cache, defaults=EngineState(use_risk_modifier=False)
    )
    assert store.analysis_data == {}
    assert store.history == []
    assert store.cache is cache
    assert store.state.use_risk_modifier is False


def test_save_then_load(tmp_path):
    path = tmp_path / "nested" / "state.json"
    store = AnalysisStore()
    store.merge_scores("USD", {"CPI": Score(score=2, rationale="Hot")})
    store.merge_scores("EUR", {"CPI": Score(score=-1, rationale="Soft")})
    store.save_snapshot("2024-02-01")

    state_file = JsonStateStore(path)
    assert state_file.save(store) == path
    assert not path.with_suffix(".json.tmp").exists()

    loaded = state_file.load()
    assert loaded.analysis_data == store.analysis_data
    assert [s.date for s in loaded.history] == ["2024-02-01"]


def test_invalid_json_raises(tmp_path):
    path = tmp_path / "state.json"
    path.write_text("{not json")
    with pytest.raises(PersistenceError):
        JsonStateStore(path).load()


def test_non_object_raises(tmp_path):
    path = tmp_path / "state.json"
    path.write_text("[]")
    with pytest.raises(PersistenceError):
        JsonStateStore(path).load()


def test_invalid_content_raises(tmp_path):
    path = tmp_path / "state.json"
    path.write_text(json.dumps({"analysis_data": {"USD": {"scores": {"CPI": {"score": 9}}}}}))
    with pytest.raises(PersistenceError, match="Invalid state"):
        JsonStateStore(path).load()


def test_out_of_range_event_modifier_raises(tmp_path):
    path = tmp_path / "state.json"
    path.write_text(json.dumps({
        "analysis_data": {
            "USD": {"scores": {"CPI": {"score": 1, "rationale": "Firm"}}, "event_modifier_score": 9},
            "EUR": {"scores": {"CPI": {"score": -1, "rationale": "Soft"}}},
        }
    }))
    with pytest.raises(PersistenceError, match="event modifier"):
        JsonStateStore(path).load()
