"""Characterization tests for FixtureStore.

Covers save/load of fixtures, unique file naming, validation against a fresh
calculation and tolerance of unreadable files.
"""

from __future__ import annotations

import json
from pathlib import Path

from combo_engine.models import CardGroup, ComboGroup, Probability, ProbabilitySet
from services.combo_config_parser import ComboConfiguration
from services.fixture_store import FIXTURE_VERSION, ComboFixture, FixtureStore


def _configuration() -> ComboConfiguration:
    return ComboConfiguration(
        deck_size=10,
        card_groups=(CardGroup("GA", 4),),
        combo_groups=(ComboGroup("CA", (1,), target_draw=2),),
    )


def _fixture(expected=None) -> ComboFixture:
    if expected is None:
        expected = (ProbabilitySet("CA", (Probability(4, 10), Probability(60, 90))),)
    return ComboFixture(name="single group", configuration=_configuration(), expected=expected)


def _make_store(tmp_path: Path) -> FixtureStore:
    return FixtureStore(tmp_path / "fixtures")


def test_save_then_load_restores_fixture(tmp_path):
    store = _make_store(tmp_path)
    path = store.save(_fixture())

    assert path.exists()
    assert store.load(path) == _fixture()


def test_saved_file_is_versioned_json(tmp_path):
    store = _make_store(tmp_path)
    path = store.save(_fixture())

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["version"] == FIXTURE_VERSION
    assert payload["expected"][0]["probabilities_by_draw"] == [[4, 10], [60, 90]]


def test_unique_path_does_not_overwrite(tmp_path):
    store = _make_store(tmp_path)
    first = store.save(_fixture())
    second = store.save(_fixture())

    assert first != second
    assert first.name == "Test.json"
    assert second.name == "Test 1.json"


def test_validate_accepts_matching_fixture():
    assert FixtureStore.validate(_fixture()) is True


def test_validate_rejects_changed_counts():
    tampered = (ProbabilitySet("CA", (Probability(4, 10), Probability(61, 90))),)
    assert FixtureStore.validate(_fixture(tampered)) is False


def test_validate_rejects_wrong_set_count():
    assert FixtureStore.validate(_fixture(())) is False


def test_load_all_skips_unreadable_files(tmp_path):
    store = _make_store(tmp_path)
    store.save(_fixture())
    (store.fixtures_dir / "broken.json").write_text("{", encoding="utf-8")
    (store.fixtures_dir / "old.json").write_text(json.dumps({"version": 0}), encoding="utf-8")

    fixtures = store.load_all()

    assert [fixture.name for fixture in fixtures] == ["single group"]


def test_load_all_skips_malformed_expected_entries(tmp_path):
    store = _make_store(tmp_path)
    store.save(_fixture())
    payload = _fixture().to_dict()

    payload["expected"][0]["probabilities_by_draw"] = [5]
    (store.fixtures_dir / "short pair.json").write_text(json.dumps(payload), encoding="utf-8")
    payload["expected"] = ["CA"]
    (store.fixtures_dir / "bare name.json").write_text(json.dumps(payload), encoding="utf-8")
    payload["expected"] = 7
    (store.fixtures_dir / "scalar.json").write_text(json.dumps(payload), encoding="utf-8")

    fixtures = store.load_all()

    assert [fixture.name for fixture in fixtures] == ["single group"]


def test_validate_rejects_configuration_the_engine_refuses():
    empty = ComboConfiguration(deck_size=10, card_groups=(), combo_groups=())
    fixture = ComboFixture(name="empty", configuration=empty, expected=())

    assert FixtureStore.validate(fixture) is False


def test_load_all_without_directory_is_empty(tmp_path):
    assert _make_store(tmp_path).load_all() == []
