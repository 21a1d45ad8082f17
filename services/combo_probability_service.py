"""
Combo Probability Service - Business logic around the probability engine.

This module wires the engine to the rest of the application:
- Running calculations from parsed configurations and logging adjustments
- Batch calculations on a thread pool
- Cross-checking the three table strategies against each other
- Rendering reports
- Creating and validating regression fixtures
"""

from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from loguru import logger

from combo_engine.calculator import ComboProbabilityResult, compute_combo_probabilities
from combo_engine.errors import InvalidConfigurationError
from combo_engine.models import Strategy, compare_probability_sets
from services.combo_config_parser import ComboConfigParser, ComboConfiguration
from services.fixture_store import ComboFixture, FixtureStore
from services.probability_report import ProbabilityReportBuilder
from utils import constants
from utils.atomic_io import atomic_write_json
from utils.math_utils import successful_sequences_at_least


class ComboProbabilityService:
    """Service for combo probability calculations."""

    def __init__(
        self,
        config_parser: ComboConfigParser | None = None,
        report_builder: ProbabilityReportBuilder | None = None,
        fixture_store: FixtureStore | None = None,
    ):
        self.config_parser = config_parser or ComboConfigParser()
        self.report_builder = report_builder or ProbabilityReportBuilder()
        self.fixture_store = fixture_store or FixtureStore(config_parser=self.config_parser)

    # ============= Calculations =============

    def calculate(
        self,
        configuration: ComboConfiguration,
        strategy: Strategy | str = Strategy.OPTIMIZED,
    ) -> ComboProbabilityResult:
        """
        Run the engine on a configuration.

        Adjustments made to the inputs are logged as warnings and returned on the
        result; invalid configurations are logged and re-raised.
        """
        try:
            result = compute_combo_probabilities(
                configuration.deck_size,
                configuration.card_groups,
                configuration.combo_groups,
                strategy,
            )
        except InvalidConfigurationError as exc:
            logger.error(f"Invalid combo configuration: {exc}")
            raise

        for diagnostic in result.diagnostics:
            logger.warning(str(diagnostic))
        return result

    def calculate_from_file(
        self, path: Path | None = None, strategy: Strategy | str = Strategy.OPTIMIZED
    ) -> ComboProbabilityResult:
        return self.calculate(self.load_configuration(path), strategy)

    def calculate_many(
        self,
        configurations: Iterable[ComboConfiguration],
        strategy: Strategy | str = Strategy.OPTIMIZED,
        max_workers: int | None = None,
    ) -> list[ComboProbabilityResult]:
        """
        Calculate independent configurations concurrently.

        Every calculation allocates its own table, so they share no state.
        Results come back in input order; the first failure is re-raised.
        """
        configurations = list(configurations)
        if not configurations:
            return []
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [
                executor.submit(self.calculate, configuration, strategy)
                for configuration in configurations
            ]
            return [future.result() for future in futures]

    def compare_strategies(self, configuration: ComboConfiguration) -> bool:
        """
        Check that all three strategies agree on a configuration.

        Single-group configurations with one enabled combo are also checked against
        the closed-form hypergeometric count.
        """
        results = {
            strategy: self.calculate(configuration, strategy) for strategy in Strategy
        }
        reference = results[Strategy.FULL_TABLE]
        for strategy, result in results.items():
            if not compare_probability_sets(reference.probability_sets, result.probability_sets):
                logger.warning(f"Strategy {strategy.value} disagrees with {Strategy.FULL_TABLE.value}")
                return False

        enabled = [combo for combo in configuration.combo_groups if combo.enabled]
        if len(configuration.card_groups) == 1 and len(enabled) == 1:
            return self._matches_closed_form(reference, configuration)
        return True

    # ============= Configuration =============

    def load_configuration(self, path: Path | None = None) -> ComboConfiguration:
        return self.config_parser.load(path or constants.COMBO_CONFIG_FILE)

    def save_configuration(
        self, configuration: ComboConfiguration, path: Path | None = None
    ) -> Path:
        if path is None:
            constants.ensure_base_dirs()
            path = constants.COMBO_CONFIG_FILE
        atomic_write_json(path, configuration.to_dict(), indent=2)
        logger.debug(f"Saved combo configuration to {path}")
        return path

    # ============= Reporting =============

    def render_report(self, result: ComboProbabilityResult) -> str:
        return self.report_builder.build_report(
            result.probability_sets, result.diagnostics, result.enabled
        )

    # ============= Fixtures =============

    def create_fixture(self, name: str, configuration: ComboConfiguration) -> ComboFixture:
        result = self.calculate(configuration)
        return ComboFixture(
            name=name, configuration=configuration, expected=result.probability_sets
        )

    def save_fixture(
        self, name: str, configuration: ComboConfiguration, path: Path | None = None
    ) -> Path:
        return self.fixture_store.save(self.create_fixture(name, configuration), path)

    def validate_fixtures(self) -> dict[str, bool]:
        """Validate every stored fixture, keyed by fixture name."""
        outcomes: dict[str, bool] = {}
        for fixture in self.fixture_store.load_all():
            outcomes[fixture.name] = self.fixture_store.validate(fixture)
        failed = [name for name, passed in outcomes.items() if not passed]
        if failed:
            logger.warning(f"{len(failed)} of {len(outcomes)} fixtures failed: {', '.join(failed)}")
        return outcomes

    @staticmethod
    def _matches_closed_form(
        result: ComboProbabilityResult, configuration: ComboConfiguration
    ) -> bool:
        group_size = configuration.card_groups[0].size
        for combo, probability_set in zip(configuration.combo_groups, result.probability_sets):
            if not combo.enabled:
                continue
            required = combo.required_for(0)
            for draw, probability in enumerate(probability_set.probabilities_by_draw, start=1):
                expected = successful_sequences_at_least(
                    result.deck_size, group_size, draw, required
                )
                if probability.successful != expected:
                    logger.warning(
                        f"'{combo.name}' at draw {draw}: {probability.successful} sequences, "
                        f"closed form gives {expected}"
                    )
                    return False
        return True
