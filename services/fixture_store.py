"""Persist calculation inputs with their expected output for regression checks."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from loguru import logger

from combo_engine.calculator import compute_combo_probabilities
from combo_engine.errors import InvalidConfigurationError
from combo_engine.models import ProbabilitySet, Strategy
from services.combo_config_parser import ComboConfigParser, ComboConfiguration
from utils import constants
from utils.atomic_io import atomic_write_json, read_json

FIXTURE_VERSION = 1


@dataclass(frozen=True)
class ComboFixture:
    name: str
    configuration: ComboConfiguration
    expected: tuple[ProbabilitySet, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": FIXTURE_VERSION,
            "name": self.name,
            "configuration": self.configuration.to_dict(),
            "expected": [probability_set.to_dict() for probability_set in self.expected],
        }


class FixtureStore:
    """Save, load and validate fixtures stored as JSON files in one directory."""

    def __init__(
        self,
        fixtures_dir: Path | None = None,
        config_parser: ComboConfigParser | None = None,
    ) -> None:
        self.fixtures_dir = fixtures_dir or constants.FIXTURES_DIR
        self.config_parser = config_parser or ComboConfigParser()

    def unique_path(self, stem: str = constants.FIXTURE_FILE_PREFIX) -> Path:
        candidate = self.fixtures_dir / f"{stem}.json"
        counter = 1
        while candidate.exists():
            candidate = self.fixtures_dir / f"{stem} {counter}.json"
            counter += 1
        return candidate

    def save(self, fixture: ComboFixture, path: Path | None = None) -> Path:
        target = path or self.unique_path()
        atomic_write_json(target, fixture.to_dict(), indent=2)
        logger.info(f"Saved combo fixture '{fixture.name}' to {target}")
        return target

    def load(self, path: Path) -> ComboFixture:
        payload = read_json(path)
        if not isinstance(payload, dict):
            raise ValueError(f"Fixture {path} must hold a JSON object")
        if payload.get("version") != FIXTURE_VERSION:
            raise ValueError(f"Unsupported fixture version in {path}: {payload.get('version')!r}")
        expected = payload.get("expected", [])
        if not isinstance(expected, list):
            raise ValueError(f"Fixture {path} 'expected' must be a list")
        return ComboFixture(
            name=str(payload.get("name") or path.stem),
            configuration=self.config_parser.parse(payload.get("configuration")),
            expected=tuple(ProbabilitySet.from_dict(entry) for entry in expected),
        )

    def load_all(self) -> list[ComboFixture]:
        if not self.fixtures_dir.exists():
            return []
        fixtures: list[ComboFixture] = []
        for path in sorted(self.fixtures_dir.glob("*.json")):
            try:
                fixtures.append(self.load(path))
            except (json.JSONDecodeError, ValueError) as exc:
                logger.warning(f"Skipping unreadable fixture {path.name}: {exc}")
        return fixtures

    @staticmethod
    def validate(fixture: ComboFixture, strategy: Strategy | str = Strategy.OPTIMIZED) -> bool:
        """Recompute the fixture's configuration and compare against its expected sets."""
        config = fixture.configuration
        try:
            actual = compute_combo_probabilities(
                config.deck_size, config.card_groups, config.combo_groups, strategy
            ).probability_sets
        except InvalidConfigurationError as exc:
            logger.warning(f"[{fixture.name}] Configuration can't be computed: {exc}")
            return False

        if len(actual) != len(fixture.expected):
            logger.warning(
                f"[{fixture.name}] Number of probability sets doesn't match "
                f"({len(actual)} != {len(fixture.expected)})"
            )
            return False
        for position, (computed, expected) in enumerate(zip(actual, fixture.expected)):
            if not computed.compare(expected):
                logger.warning(f"[{fixture.name}] Probability set #{position} '{expected.name}' differs")
                return False
        return True


__all__ = ["ComboFixture", "FixtureStore", "FIXTURE_VERSION"]
