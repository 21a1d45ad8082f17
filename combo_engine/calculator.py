"""
Exact combo probabilities for cards drawn without replacement.

This module is the entry point of the engine. It validates the inputs, lays out
the state space for the selected strategy, runs the draws and returns one
ProbabilitySet per ComboGroup together with the table and any adjustments made
to the inputs.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from combo_engine.errors import AdjustedInput, InvalidConfigurationError
from combo_engine.evaluation import ComboTracker
from combo_engine.models import (
    MAX_CARD_GROUPS,
    CardGroup,
    ComboGroup,
    ProbabilitySet,
    Strategy,
)
from combo_engine.state_space import StateLayout, StateTable
from combo_engine.strategies import run_layered, run_rolling

DECK_SIZE_ADJUSTED = (
    "Total number of cards in card groups exceeded the number of cards in the deck. "
    "Increased the deck size accordingly."
)
DRAWS_ADJUSTED = (
    "Total card draws can't exceed the deck size. "
    "The number of draws has been reduced to the deck size."
)


@dataclass(frozen=True)
class ValidatedInputs:
    deck_size: int
    max_draw: int
    group_sizes: tuple[int, ...]
    required_maxima: tuple[int, ...]
    diagnostics: tuple[AdjustedInput, ...]


@dataclass(frozen=True)
class ComboProbabilityResult:
    """Output of one engine invocation.

    ``probability_sets`` has one entry per input ComboGroup, in input order.
    ``deck_size`` and ``max_draw`` are the values actually used, after any
    adjustment listed in ``diagnostics``. ``enabled`` mirrors each combo's flag so
    an empty set can be told apart from a disabled combo.

    Disabled combos are left out when sizing ``table``: they do not raise
    ``max_draw`` and do not widen the cropped axes, so the table can be shallower
    or narrower than one built with every combo counted.
    """

    probability_sets: tuple[ProbabilitySet, ...]
    table: StateTable
    diagnostics: tuple[AdjustedInput, ...]
    strategy: Strategy
    deck_size: int
    max_draw: int
    enabled: tuple[bool, ...] = ()

    def __iter__(self):
        return iter(self.probability_sets)

    def __len__(self) -> int:
        return len(self.probability_sets)

    def by_name(self, name: str) -> ProbabilitySet | None:
        for probability_set in self.probability_sets:
            if probability_set.name == name:
                return probability_set
        return None


def validate_inputs(
    deck_size: int,
    card_groups: Sequence[CardGroup],
    combo_groups: Sequence[ComboGroup],
) -> ValidatedInputs:
    """
    Check the inputs and clamp the deck size and draw count.

    Raises:
        InvalidConfigurationError: If there are no card groups, more than four card
            groups, a combo with more than four required counts, or a negative
            size/count or a target draw below 1.
    """
    if not card_groups:
        raise InvalidConfigurationError("The card groups list is empty.")
    if len(card_groups) > MAX_CARD_GROUPS:
        raise InvalidConfigurationError(
            f"This algorithm doesn't support more than {MAX_CARD_GROUPS} card groups "
            f"(got {len(card_groups)})."
        )
    if deck_size < 0:
        raise InvalidConfigurationError(f"Deck size must be non-negative, got {deck_size}")

    for group in card_groups:
        if group.size < 0:
            raise InvalidConfigurationError(
                f"Card group '{group.name}' size must be non-negative, got {group.size}"
            )

    for combo in combo_groups:
        if len(combo.required_count) > MAX_CARD_GROUPS:
            raise InvalidConfigurationError(
                f"Combo group '{combo.name}' lists {len(combo.required_count)} required counts; "
                f"at most {MAX_CARD_GROUPS} are supported."
            )
        if any(count < 0 for count in combo.required_count):
            raise InvalidConfigurationError(
                f"Combo group '{combo.name}' required counts must be non-negative, "
                f"got {list(combo.required_count)}"
            )
        if combo.target_draw < 1:
            raise InvalidConfigurationError(
                f"Combo group '{combo.name}' target draw must be at least 1, got {combo.target_draw}"
            )

    dimensions = len(card_groups)
    enabled = [combo for combo in combo_groups if combo.enabled]
    group_sizes = tuple(group.size for group in card_groups)
    required_maxima = tuple(
        max((combo.required_for(axis) for combo in enabled), default=0)
        for axis in range(dimensions)
    )
    max_draw = max((combo.target_draw for combo in enabled), default=0)

    diagnostics: list[AdjustedInput] = []
    grouped_cards = sum(group_sizes)
    if grouped_cards > deck_size:
        diagnostics.append(
            AdjustedInput(
                field="deck_size",
                original=deck_size,
                adjusted=grouped_cards,
                message=DECK_SIZE_ADJUSTED,
            )
        )
        deck_size = grouped_cards

    if max_draw > deck_size:
        diagnostics.append(
            AdjustedInput(
                field="max_draw",
                original=max_draw,
                adjusted=deck_size,
                message=DRAWS_ADJUSTED,
            )
        )
        max_draw = deck_size

    return ValidatedInputs(
        deck_size=deck_size,
        max_draw=max_draw,
        group_sizes=group_sizes,
        required_maxima=required_maxima,
        diagnostics=tuple(diagnostics),
    )


def build_layout(inputs: ValidatedInputs, strategy: Strategy) -> StateLayout:
    if strategy is Strategy.FULL_TABLE:
        axis_lengths = [size + 1 for size in inputs.group_sizes]
    else:
        axis_lengths = [required + 1 for required in inputs.required_maxima]
    return StateLayout(inputs.group_sizes, axis_lengths)


def compute_combo_probabilities(
    deck_size: int,
    card_groups: Sequence[CardGroup],
    combo_groups: Sequence[ComboGroup],
    strategy: Strategy | str = Strategy.OPTIMIZED,
) -> ComboProbabilityResult:
    """
    Count the ordered draw sequences that satisfy each combo, draw by draw.

    Combos are checked in the given order after every draw. At a combo's target
    draw, every sequence that misses it is removed from the table, so each later
    result is conditioned on all earlier combos having been met (AND logic).

    Args:
        deck_size: Number of cards in the deck. Raised to the sum of the card group
            sizes when smaller.
        card_groups: One to four tracked card groups. Cards outside every group
            count as "other".
        combo_groups: Requirements to check. Disabled combos produce an empty set.
        strategy: Table construction strategy; all give identical probabilities.

    Returns:
        ComboProbabilityResult with one ProbabilitySet per combo group. A set holds
        one Probability per draw up to ``min(target_draw, max_draw)``: when a
        target lies beyond the (adjusted) deck size the set stops at the last
        possible draw instead of being padded with 0/0 entries, so every
        recorded ``total`` is positive.

    Raises:
        InvalidConfigurationError: If the inputs fail validation.

    Example:
        >>> result = compute_combo_probabilities(
        ...     10, [CardGroup("GA", 4)], [ComboGroup("CA", (1,), target_draw=2)]
        ... )
        >>> str(result.probability_sets[0].probabilities_by_draw[1])
        '60/90 (66.667)'
    """
    strategy = Strategy.coerce(strategy)
    inputs = validate_inputs(deck_size, card_groups, combo_groups)
    layout = build_layout(inputs, strategy)

    trackers = [
        ComboTracker.for_layout(combo, layout) for combo in combo_groups if combo.enabled
    ]

    if strategy is Strategy.OPTIMIZED:
        table = run_rolling(layout, inputs.deck_size, inputs.max_draw, trackers)
    else:
        table = run_layered(layout, inputs.deck_size, inputs.max_draw, trackers)

    pending = iter(trackers)
    probability_sets = tuple(
        next(pending).to_probability_set() if combo.enabled else ProbabilitySet(combo.name)
        for combo in combo_groups
    )

    return ComboProbabilityResult(
        probability_sets=probability_sets,
        table=table,
        diagnostics=inputs.diagnostics,
        strategy=strategy,
        deck_size=inputs.deck_size,
        max_draw=inputs.max_draw,
        enabled=tuple(bool(combo.enabled) for combo in combo_groups),
    )


__all__ = [
    "ComboProbabilityResult",
    "ValidatedInputs",
    "build_layout",
    "compute_combo_probabilities",
    "validate_inputs",
]
