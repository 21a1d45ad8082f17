"""Tests for ComboProbabilityService and the report builder."""

from __future__ import annotations

import json

import pytest

from combo_engine.errors import AdjustedInput, InvalidConfigurationError
from combo_engine.models import CardGroup, ComboGroup, Probability, ProbabilitySet, Strategy
from services.combo_config_parser import ComboConfiguration
from services.combo_probability_service import ComboProbabilityService
from services.fixture_store import FixtureStore
from services.probability_report import ProbabilityReportBuilder


def _configuration(deck_size: int = 10, target_draw: int = 2) -> ComboConfiguration:
    return ComboConfiguration(
        deck_size=deck_size,
        card_groups=(CardGroup("GA", 4),),
        combo_groups=(ComboGroup("CA", (1,), target_draw=target_draw),),
    )


def _service(tmp_path) -> ComboProbabilityService:
    return ComboProbabilityService(fixture_store=FixtureStore(tmp_path / "fixtures"))


class TestCalculate:
    """Tests for single and batch calculations."""

    def test_calculate_returns_engine_result(self, tmp_path) -> None:
        result = _service(tmp_path).calculate(_configuration())
        assert result.probability_sets[0].probabilities_by_draw[-1] == Probability(60, 90)

    def test_calculate_reports_adjustments(self, tmp_path) -> None:
        result = _service(tmp_path).calculate(_configuration(deck_size=3, target_draw=6))
        assert [diagnostic.field for diagnostic in result.diagnostics] == ["deck_size", "max_draw"]
        assert result.deck_size == 4
        assert result.max_draw == 4

    def test_calculate_reraises_invalid_configuration(self, tmp_path) -> None:
        config = ComboConfiguration(deck_size=10, card_groups=(), combo_groups=())
        with pytest.raises(InvalidConfigurationError):
            _service(tmp_path).calculate(config)

    def test_calculate_rejects_unknown_strategy(self, tmp_path) -> None:
        with pytest.raises(InvalidConfigurationError, match="Unknown strategy"):
            _service(tmp_path).calculate(_configuration(), "fastest")

    def test_calculate_from_file(self, tmp_path) -> None:
        path = tmp_path / "combo.json"
        path.write_text(json.dumps(_configuration().to_dict()), encoding="utf-8")

        result = _service(tmp_path).calculate_from_file(path, "full_table")

        assert result.strategy is Strategy.FULL_TABLE
        assert result.probability_sets[0].probabilities_by_draw[1].successful == 60

    def test_saved_configuration_loads_back(self, tmp_path) -> None:
        service = _service(tmp_path)
        path = service.save_configuration(_configuration(), tmp_path / "config" / "combo.json")

        assert service.load_configuration(path) == _configuration()

    def test_calculate_many_keeps_input_order(self, tmp_path) -> None:
        configs = [_configuration(target_draw=draw) for draw in range(1, 7)]

        results = _service(tmp_path).calculate_many(configs, max_workers=3)

        assert [len(result.probability_sets[0]) for result in results] == [1, 2, 3, 4, 5, 6]

    def test_calculate_many_empty(self, tmp_path) -> None:
        assert _service(tmp_path).calculate_many([]) == []


class TestCompareStrategies:
    """Tests for the cross-strategy check."""

    def test_single_group_agrees_with_closed_form(self, tmp_path) -> None:
        assert _service(tmp_path).compare_strategies(_configuration(target_draw=7)) is True

    def test_multi_group_configuration_agrees(self, tmp_path) -> None:
        config = ComboConfiguration(
            deck_size=12,
            card_groups=(CardGroup("GA", 4), CardGroup("GB", 3), CardGroup("GC", 2)),
            combo_groups=(
                ComboGroup("CA", (1, 1, 0), target_draw=4),
                ComboGroup("CB", (0, 1, 1), target_draw=7),
            ),
        )
        assert _service(tmp_path).compare_strategies(config) is True


class TestFixtures:
    """Tests for fixture creation and validation through the service."""

    def test_save_and_validate_fixtures(self, tmp_path) -> None:
        service = _service(tmp_path)
        service.save_fixture("one group", _configuration())
        service.save_fixture("longer", _configuration(target_draw=5))

        assert service.validate_fixtures() == {"one group": True, "longer": True}

    def test_validate_flags_tampered_fixture(self, tmp_path) -> None:
        service = _service(tmp_path)
        path = service.save_fixture("tampered", _configuration())
        payload = json.loads(path.read_text(encoding="utf-8"))
        payload["expected"][0]["probabilities_by_draw"][1] = [59, 90]
        path.write_text(json.dumps(payload), encoding="utf-8")

        assert service.validate_fixtures() == {"tampered": False}

    def test_validate_reports_uncomputable_fixture_and_continues(self, tmp_path) -> None:
        service = _service(tmp_path)
        service.save_fixture("good", _configuration())
        path = service.save_fixture("empty", _configuration())
        payload = json.loads(path.read_text(encoding="utf-8"))
        payload["configuration"]["card_groups"] = []
        path.write_text(json.dumps(payload), encoding="utf-8")

        assert service.validate_fixtures() == {"good": True, "empty": False}


class TestProbabilityReportBuilder:
    """Tests for report rendering."""

    def test_report_lists_each_draw(self, tmp_path) -> None:
        result = _service(tmp_path).calculate(_configuration())
        report = _service(tmp_path).render_report(result)
        assert report.splitlines() == ["Set: CA", "1: 4/10 (40.000)", "2: 60/90 (66.667)"]

    def test_report_marks_disabled_sets_and_warnings(self) -> None:
        diagnostic = AdjustedInput(field="max_draw", original=12, adjusted=10, message="Reduced.")
        report = ProbabilityReportBuilder().build_report(
            [ProbabilitySet("Off")], [diagnostic], enabled=[False]
        )
        assert report.splitlines() == [
            "Warning: Reduced. (max_draw: 12 -> 10)",
            "",
            "Set: Off",
            "(disabled)",
        ]

    def test_rows_keep_exact_fractions(self) -> None:
        rows = ProbabilityReportBuilder().build_rows(
            [ProbabilitySet("CA", (Probability(4, 10), Probability(60, 90)))]
        )
        assert [row["draw"] for row in rows] == [1, 2]
        assert rows[1]["probability"].numerator == 2
        assert rows[1]["probability"].denominator == 3

    def test_report_keeps_enabled_empty_set_apart_from_disabled(self, tmp_path) -> None:
        config = ComboConfiguration(
            deck_size=0,
            card_groups=(CardGroup("GA", 0),),
            combo_groups=(
                ComboGroup("Live", (0,), target_draw=2),
                ComboGroup("Off", (0,), target_draw=2, enabled=False),
            ),
        )
        service = _service(tmp_path)
        result = service.calculate(config)

        lines = service.render_report(result).splitlines()

        assert lines[-4:] == ["Set: Live", "(no draws)", "Set: Off", "(disabled)"]
