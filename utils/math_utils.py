"""
Closed-form counting helpers for single-group card draws.

This module provides exact hypergeometric probabilities (as ``Fraction``) and
the ordered-sequence counts they are built from. The engine does not use them;
they serve as an independent reference for one-group configurations.
"""

from fractions import Fraction
import math


def falling_factorial(n: int, r: int) -> int:
    """
    Number of ordered sequences of ``r`` distinct items taken from ``n``.

    Formula: n × (n-1) × ... × (n-r+1)

    Raises:
        ValueError: If either argument is negative or ``r`` exceeds ``n``.

    Example:
        >>> falling_factorial(10, 2)
        90
    """
    if n < 0:
        raise ValueError(f"Population must be non-negative, got {n}")
    if r < 0:
        raise ValueError(f"Sample size must be non-negative, got {r}")
    if r > n:
        raise ValueError(f"Sample size ({r}) cannot exceed population ({n})")
    return math.perm(n, r)


def hypergeometric_probability(
    population: int,
    successes_in_pop: int,
    sample_size: int,
    successes_in_sample: int,
) -> Fraction:
    """
    Exact probability of drawing exactly ``successes_in_sample`` target cards.

    Formula: P(X = k) = [C(K, k) × C(N-K, n-k)] / C(N, n)

    Args:
        population: Total number of cards in the deck (N)
        successes_in_pop: Number of target cards in the deck (K)
        sample_size: Number of cards drawn (n)
        successes_in_sample: Target number of cards to draw (k)

    Raises:
        ValueError: If any input is negative or the counts are inconsistent.
    """
    if population < 0:
        raise ValueError(f"Population must be non-negative, got {population}")
    if successes_in_pop < 0:
        raise ValueError(f"Successes in population must be non-negative, got {successes_in_pop}")
    if sample_size < 0:
        raise ValueError(f"Sample size must be non-negative, got {sample_size}")
    if successes_in_sample < 0:
        raise ValueError(f"Successes in sample must be non-negative, got {successes_in_sample}")
    if successes_in_pop > population:
        raise ValueError(
            f"Successes in population ({successes_in_pop}) cannot exceed "
            f"population ({population})"
        )
    if sample_size > population:
        raise ValueError(f"Sample size ({sample_size}) cannot exceed population ({population})")

    if successes_in_sample > successes_in_pop or successes_in_sample > sample_size:
        return Fraction(0)
    failures_in_pop = population - successes_in_pop
    failures_in_sample = sample_size - successes_in_sample
    if failures_in_sample > failures_in_pop:
        return Fraction(0)

    numerator = math.comb(successes_in_pop, successes_in_sample) * math.comb(
        failures_in_pop, failures_in_sample
    )
    return Fraction(numerator, math.comb(population, sample_size))


def hypergeometric_at_least(
    population: int,
    successes_in_pop: int,
    sample_size: int,
    min_successes: int,
) -> Fraction:
    """
    Exact probability of drawing at least ``min_successes`` target cards.

    Example:
        >>> hypergeometric_at_least(10, 4, 2, 1)
        Fraction(2, 3)
    """
    if min_successes < 0:
        raise ValueError(f"Minimum successes must be non-negative, got {min_successes}")
    if min_successes == 0:
        return Fraction(1)

    max_successes = min(sample_size, successes_in_pop)
    return sum(
        (
            hypergeometric_probability(population, successes_in_pop, sample_size, k)
            for k in range(min_successes, max_successes + 1)
        ),
        Fraction(0),
    )


def successful_sequences_at_least(
    population: int,
    successes_in_pop: int,
    sample_size: int,
    min_successes: int,
) -> int:
    """Ordered sequences of ``sample_size`` draws holding at least ``min_successes`` targets."""
    total = falling_factorial(population, sample_size)
    probability = hypergeometric_at_least(population, successes_in_pop, sample_size, min_successes)
    return probability.numerator * total // probability.denominator
