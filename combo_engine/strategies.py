"""Table construction strategies.

All strategies walk the same transition: from a state holding ``count``
sequences, drawing a card of a group that can still advance moves
``count * remaining`` sequences one step along that group's axis, and drawing
any other undrawn card keeps ``count * (undrawn - remaining_sum)`` sequences in
place. Multiplying by the number of physical cards eligible for the next draw is
what makes the counts ordered sequences.
"""

from __future__ import annotations

from loguru import logger

from combo_engine.evaluation import ComboTracker, evaluate_draw
from combo_engine.state_space import StateLayout, StateTable


def run_layered(
    layout: StateLayout,
    deck_size: int,
    max_draw: int,
    trackers: list[ComboTracker],
) -> StateTable:
    """Build one layer per draw from the previous one.

    Used by both the full and the cropped table; the two differ only in the axis
    bounds of ``layout``.
    """
    first = [0] * layout.cell_count
    first[0] = 1
    layers = [first]
    total = 1

    for draw in range(1, max_draw + 1):
        undrawn = deck_size - (draw - 1)
        previous = layers[-1]
        current = [0] * layout.cell_count

        for cell in layout.cells:
            count = previous[cell.index]
            if not count:
                continue
            stay = undrawn - cell.remaining_sum
            if stay > 0:
                current[cell.index] += count * stay
            for target, remaining in cell.advances:
                current[target] += count * remaining

        total *= undrawn
        evaluate_draw(current, trackers, draw, total)
        layers.append(current)

    logger.debug(f"Built {len(layers)} layers over axes {layout.axis_lengths}")
    return StateTable(layout, layers)


def run_rolling(
    layout: StateLayout,
    deck_size: int,
    max_draw: int,
    trackers: list[ComboTracker],
) -> StateTable:
    """Update a single layer in place, walking states from the highest index down.

    Advances only write to higher indices, which are already final for this draw,
    so every cell is read while it still holds the previous draw's count. The cell
    itself already holds that count, hence the ``stay - 1`` correction.
    """
    table = [0] * layout.cell_count
    table[0] = 1
    total = 1

    for draw in range(1, max_draw + 1):
        undrawn = deck_size - (draw - 1)

        for cell in layout.descending:
            count = table[cell.index]
            if not count:
                continue
            stay = undrawn - cell.remaining_sum
            if stay > 0:
                table[cell.index] += count * (stay - 1)
            else:
                table[cell.index] -= count
            for target, remaining in cell.advances:
                table[target] += count * remaining

        total *= undrawn
        evaluate_draw(table, trackers, draw, total)

    logger.debug(f"Rolled {max_draw} draws over axes {layout.axis_lengths}")
    return StateTable(layout, [table], rolling=True)


__all__ = ["run_layered", "run_rolling"]
