"""Value types shared by the engine and the services built on top of it."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from fractions import Fraction
from typing import Any

from loguru import logger

from combo_engine.errors import InvalidConfigurationError

MAX_CARD_GROUPS = 4


class Strategy(str, Enum):
    """Table construction strategies. All three produce identical probabilities.

    FULL_TABLE keeps one layer per draw with every axis sized to its card group,
    which makes it the one to use for charts. CROPPED_TABLE bounds each axis to the
    highest requirement and folds the rest into the edge cell. OPTIMIZED updates a
    single cropped layer in place and is the fastest.
    """

    FULL_TABLE = "full_table"
    CROPPED_TABLE = "cropped_table"
    OPTIMIZED = "optimized"

    @classmethod
    def coerce(cls, value: Strategy | str | None) -> Strategy:
        if value is None:
            return cls.OPTIMIZED
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace("-", "_").replace(" ", "_")
        for member in cls:
            if normalized in {member.value, member.name.lower()}:
                return member
        raise InvalidConfigurationError(f"Unknown strategy: {value!r}")


@dataclass(frozen=True)
class CardGroup:
    name: str
    size: int

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "size": self.size}


@dataclass(frozen=True)
class ComboGroup:
    """A named requirement: at least ``required_count[i]`` cards of group ``i`` by ``target_draw``."""

    name: str
    required_count: tuple[int, ...]
    target_draw: int = 2
    enabled: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "required_count", tuple(self.required_count))

    def required_for(self, axis: int) -> int:
        if axis < len(self.required_count):
            return self.required_count[axis]
        return 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "enabled": self.enabled,
            "required_count": list(self.required_count),
            "target_draw": self.target_draw,
        }


@dataclass(frozen=True)
class Probability:
    """Exact count pair: ``successful`` ordered sequences out of ``total``."""

    successful: int
    total: int

    def as_fraction(self) -> Fraction:
        return Fraction(self.successful, self.total)

    def as_percentage(self) -> float:
        # Display only; the exact value is the count pair.
        return 100.0 * self.successful / self.total

    def __str__(self) -> str:
        return f"{self.successful}/{self.total} ({self.as_percentage():.3f})"


@dataclass(frozen=True)
class ProbabilitySet:
    name: str
    probabilities_by_draw: tuple[Probability, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "probabilities_by_draw", tuple(self.probabilities_by_draw))

    def __len__(self) -> int:
        return len(self.probabilities_by_draw)

    def compare(self, other: ProbabilitySet) -> bool:
        """Return True when both sets hold the same counts for every draw.

        Names are not compared. The reason for a mismatch is logged at debug level.
        """
        if len(self.probabilities_by_draw) != len(other.probabilities_by_draw):
            logger.debug(
                f"Draw counts of '{self.name}' don't match "
                f"({len(self.probabilities_by_draw)} != {len(other.probabilities_by_draw)})"
            )
            return False
        for draw, (mine, theirs) in enumerate(
            zip(self.probabilities_by_draw, other.probabilities_by_draw), start=1
        ):
            if mine.successful != theirs.successful:
                logger.debug(
                    f"Successful sequences of '{self.name}' at draw {draw} don't match "
                    f"({mine.successful} != {theirs.successful})"
                )
                return False
            if mine.total != theirs.total:
                logger.debug(
                    f"Total sequences of '{self.name}' at draw {draw} don't match "
                    f"({mine.total} != {theirs.total})"
                )
                return False
        return True

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "probabilities_by_draw": [
                [probability.successful, probability.total]
                for probability in self.probabilities_by_draw
            ],
        }

    @classmethod
    def from_dict(cls, payload: Any) -> ProbabilitySet:
        """Rebuild a set from ``to_dict`` output.

        Raises:
            ValueError: If the payload is not a mapping or an entry is not a
                ``[successful, total]`` pair of integers.
        """
        if not isinstance(payload, dict):
            raise ValueError(f"Probability set must be an object, got {type(payload).__name__}")
        name = str(payload.get("name", ""))
        entries = payload.get("probabilities_by_draw", [])
        if not isinstance(entries, list):
            raise ValueError(f"Probability set '{name}' draws must be a list")

        probabilities = []
        for draw, entry in enumerate(entries, start=1):
            if not isinstance(entry, (list, tuple)) or len(entry) != 2:
                raise ValueError(
                    f"Probability set '{name}' draw {draw} must be a [successful, total] pair, "
                    f"got {entry!r}"
                )
            try:
                successful, total = (int(value) for value in entry)
            except TypeError as exc:
                raise ValueError(
                    f"Probability set '{name}' draw {draw} holds non-integer counts: {entry!r}"
                ) from exc
            probabilities.append(Probability(successful=successful, total=total))
        return cls(name=name, probabilities_by_draw=tuple(probabilities))


def compare_probability_sets(
    expected: list[ProbabilitySet] | tuple[ProbabilitySet, ...],
    actual: list[ProbabilitySet] | tuple[ProbabilitySet, ...],
) -> bool:
    """Field-wise comparison of two result lists, in order."""
    if len(expected) != len(actual):
        logger.debug(f"Number of probability sets doesn't match ({len(expected)} != {len(actual)})")
        return False
    return all(left.compare(right) for left, right in zip(expected, actual))


__all__ = [
    "MAX_CARD_GROUPS",
    "CardGroup",
    "ComboGroup",
    "Probability",
    "ProbabilitySet",
    "Strategy",
    "compare_probability_sets",
]
