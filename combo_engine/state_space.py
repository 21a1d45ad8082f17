"""Flattened N-dimensional state space for the draw tables.

A state is the tuple of cards drawn so far from each tracked card group. States
are stored row-major in a flat list: the last axis has stride 1 and each earlier
axis strides over the full block of the axes after it.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Any


def compute_strides(axis_lengths: Sequence[int]) -> tuple[int, ...]:
    strides = [1] * len(axis_lengths)
    for axis in range(len(axis_lengths) - 2, -1, -1):
        strides[axis] = strides[axis + 1] * axis_lengths[axis + 1]
    return tuple(strides)


def odometer(axis_lengths: Sequence[int], *, descending: bool = False) -> Iterator[tuple[int, ...]]:
    """Yield every state of the grid in flat-index order, or in reverse order.

    The last axis turns fastest, so the n-th yielded state has flat index n
    (or ``cell_count - 1 - n`` when descending).
    """
    if not axis_lengths or any(length <= 0 for length in axis_lengths):
        return
    last_axis = len(axis_lengths) - 1
    if descending:
        digits = [length - 1 for length in axis_lengths]
    else:
        digits = [0] * len(axis_lengths)

    while True:
        yield tuple(digits)
        axis = last_axis
        while axis >= 0:
            if descending:
                if digits[axis] > 0:
                    digits[axis] -= 1
                    break
                digits[axis] = axis_lengths[axis] - 1
            else:
                if digits[axis] < axis_lengths[axis] - 1:
                    digits[axis] += 1
                    break
                digits[axis] = 0
            axis -= 1
        if axis < 0:
            return


@dataclass(frozen=True)
class Cell:
    """Transition data for one state, computed once per invocation.

    ``advances`` lists ``(target_index, remaining)`` for every axis that can still
    move forward; ``remaining_sum`` counts the undrawn cards that would move the
    state. Every other undrawn card keeps the state where it is.
    """

    index: int
    drawn: tuple[int, ...]
    remaining_sum: int
    advances: tuple[tuple[int, int], ...]


class StateLayout:
    """Axis bounds, strides and per-cell transition data for one computation."""

    def __init__(self, group_sizes: Sequence[int], axis_lengths: Sequence[int]) -> None:
        if len(group_sizes) != len(axis_lengths):
            raise ValueError("Each card group needs exactly one axis")
        self.group_sizes = tuple(group_sizes)
        self.axis_lengths = tuple(axis_lengths)
        self.strides = compute_strides(self.axis_lengths)
        self.cell_count = 1
        for length in self.axis_lengths:
            self.cell_count *= length
        self.cells = self._build_cells()
        self.descending = tuple(
            self.cells[self._flat_index(drawn)]
            for drawn in odometer(self.axis_lengths, descending=True)
        )

    @property
    def dimensions(self) -> int:
        return len(self.axis_lengths)

    def index_of(self, drawn: Sequence[int]) -> int:
        if len(drawn) != self.dimensions:
            raise ValueError(f"Expected a state with {self.dimensions} axes, got {len(drawn)}")
        for axis, value in enumerate(drawn):
            if not 0 <= value < self.axis_lengths[axis]:
                raise IndexError(f"Axis {axis} value {value} outside 0..{self.axis_lengths[axis] - 1}")
        return self._flat_index(drawn)

    def _flat_index(self, drawn: Sequence[int]) -> int:
        return sum(value * stride for value, stride in zip(drawn, self.strides))

    def satisfied_indices(self, required: Sequence[int]) -> list[int]:
        """Flat indices of every state meeting all per-axis minimums."""
        return [
            cell.index
            for cell in self.cells
            if all(drawn >= needed for drawn, needed in zip(cell.drawn, required))
        ]

    def _build_cells(self) -> tuple[Cell, ...]:
        edges = [length - 1 for length in self.axis_lengths]
        cells: list[Cell] = []
        for index, drawn in enumerate(odometer(self.axis_lengths)):
            advances: list[tuple[int, int]] = []
            remaining_sum = 0
            for axis, value in enumerate(drawn):
                if value >= edges[axis]:
                    # Edge cell: further cards of this group no longer move the state.
                    continue
                remaining = max(0, self.group_sizes[axis] - value)
                if remaining:
                    advances.append((index + self.strides[axis], remaining))
                    remaining_sum += remaining
            cells.append(
                Cell(
                    index=index,
                    drawn=drawn,
                    remaining_sum=remaining_sum,
                    advances=tuple(advances),
                )
            )
        return tuple(cells)


class StateTable:
    """Sequence counts produced by a computation.

    ``layers[d]`` holds the counts after ``d`` draws for the full and cropped
    strategies. The optimized strategy keeps a single layer holding the counts
    after the last computed draw.
    """

    def __init__(self, layout: StateLayout, layers: list[list[int]], *, rolling: bool = False) -> None:
        self.layout = layout
        self.layers = layers
        self.rolling = rolling

    @property
    def axis_lengths(self) -> tuple[int, ...]:
        return self.layout.axis_lengths

    @property
    def layer_count(self) -> int:
        return len(self.layers)

    def count(self, drawn: Sequence[int], draw: int | None = None) -> int:
        """Number of sequences in state ``drawn`` after ``draw`` draws (last layer by default)."""
        if draw is None or self.rolling:
            layer = self.layers[-1]
        else:
            layer = self.layers[draw]
        return layer[self.layout.index_of(drawn)]

    def layer_total(self, draw: int | None = None) -> int:
        layer = self.layers[-1] if draw is None or self.rolling else self.layers[draw]
        return sum(layer)

    def as_nested(self, draw: int | None = None) -> Any:
        """Return one layer reshaped into nested lists, one level per axis."""
        layer = self.layers[-1] if draw is None or self.rolling else self.layers[draw]
        return _reshape(layer, self.layout.axis_lengths)


def _reshape(flat: Sequence[int], axis_lengths: Sequence[int]) -> Any:
    if len(axis_lengths) == 1:
        return list(flat)
    block = len(flat) // axis_lengths[0]
    return [
        _reshape(flat[start : start + block], axis_lengths[1:])
        for start in range(0, len(flat), block)
    ]


__all__ = ["Cell", "StateLayout", "StateTable", "compute_strides", "odometer"]
