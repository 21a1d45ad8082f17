"""Combo checks run against a draw layer after every draw."""

from __future__ import annotations

from collections.abc import MutableSequence
from dataclasses import dataclass, field

from combo_engine.models import ComboGroup, Probability, ProbabilitySet
from combo_engine.state_space import StateLayout


@dataclass
class ComboTracker:
    """Running state of one enabled combo during a computation."""

    combo: ComboGroup
    satisfied: tuple[int, ...]
    failing: tuple[int, ...]
    probabilities: list[Probability] = field(default_factory=list)

    @classmethod
    def for_layout(cls, combo: ComboGroup, layout: StateLayout) -> ComboTracker:
        required = [combo.required_for(axis) for axis in range(layout.dimensions)]
        satisfied = layout.satisfied_indices(required)
        satisfied_set = set(satisfied)
        failing = [index for index in range(layout.cell_count) if index not in satisfied_set]
        return cls(combo=combo, satisfied=tuple(satisfied), failing=tuple(failing))

    def to_probability_set(self) -> ProbabilitySet:
        return ProbabilitySet(name=self.combo.name, probabilities_by_draw=tuple(self.probabilities))


def evaluate_draw(
    layer: MutableSequence[int],
    trackers: list[ComboTracker],
    draw: int,
    total: int,
) -> None:
    """Record every combo's success count for ``draw`` and prune at target draws.

    At a combo's target draw the sequences that miss it are zeroed in ``layer``,
    so later draws and later combos only count sequences that made it. Trackers
    are visited in the order the combos were supplied.
    """
    for tracker in trackers:
        target_draw = tracker.combo.target_draw
        if draw > target_draw:
            continue
        successful = sum(layer[index] for index in tracker.satisfied)
        if draw == target_draw:
            for index in tracker.failing:
                layer[index] = 0
        tracker.probabilities.append(Probability(successful=successful, total=total))


__all__ = ["ComboTracker", "evaluate_draw"]
