"""Unit tests for the closed-form counting helpers."""

from fractions import Fraction

import pytest

from utils.math_utils import (
    falling_factorial,
    hypergeometric_at_least,
    hypergeometric_probability,
    successful_sequences_at_least,
)


class TestFallingFactorial:
    """Tests for falling_factorial function."""

    def test_two_draws_from_ten(self) -> None:
        """10 × 9 ordered pairs."""
        assert falling_factorial(10, 2) == 90

    def test_zero_draws_is_one(self) -> None:
        assert falling_factorial(7, 0) == 1

    def test_full_deck_is_factorial(self) -> None:
        assert falling_factorial(6, 6) == 720

    def test_beyond_sixty_four_bits(self) -> None:
        """A 30-card deck drawn out exceeds any 64-bit counter."""
        assert falling_factorial(30, 30) > 2**64

    def test_sample_exceeding_population_raises(self) -> None:
        with pytest.raises(ValueError, match="cannot exceed population"):
            falling_factorial(3, 4)

    def test_negative_population_raises(self) -> None:
        with pytest.raises(ValueError, match="Population must be non-negative"):
            falling_factorial(-1, 0)


class TestHypergeometricProbability:
    """Tests for hypergeometric_probability function."""

    def test_opening_hand_exactly_one_playset(self) -> None:
        """Probability of exactly 1 copy of a 4-of in 7-card opening hand (60-card deck).

        Expected: ~33.63%
        """
        prob = hypergeometric_probability(60, 4, 7, 1)
        assert 0.335 <= float(prob) <= 0.337

    def test_result_is_exact(self) -> None:
        """Drawing 2 of 10 with 4 targets: exactly one target is 24/45."""
        assert hypergeometric_probability(10, 4, 2, 1) == Fraction(24, 45)

    def test_more_targets_than_exist_is_zero(self) -> None:
        assert hypergeometric_probability(60, 4, 7, 5) == 0

    def test_not_enough_other_cards_is_zero(self) -> None:
        """9 cards with 8 targets: drawing 3 can't hold 0 targets."""
        assert hypergeometric_probability(9, 8, 3, 0) == 0

    def test_sum_of_all_probabilities_equals_one(self) -> None:
        pop, k_pop, n = 60, 4, 7
        total = sum(hypergeometric_probability(pop, k_pop, n, k) for k in range(min(k_pop, n) + 1))
        assert total == 1

    def test_negative_sample_raises(self) -> None:
        with pytest.raises(ValueError, match="Sample size must be non-negative"):
            hypergeometric_probability(60, 4, -1, 1)

    def test_successes_exceed_population_raises(self) -> None:
        with pytest.raises(ValueError, match="cannot exceed population"):
            hypergeometric_probability(60, 61, 7, 1)


class TestHypergeometricAtLeast:
    """Tests for hypergeometric_at_least and its sequence count."""

    def test_at_least_one_in_two_draws(self) -> None:
        """1 - C(6,2)/C(10,2) = 1 - 15/45."""
        assert hypergeometric_at_least(10, 4, 2, 1) == Fraction(2, 3)

    def test_at_least_zero_always_one(self) -> None:
        assert hypergeometric_at_least(60, 4, 7, 0) == 1

    def test_at_least_more_than_possible(self) -> None:
        assert hypergeometric_at_least(60, 4, 7, 5) == 0

    def test_negative_minimum_raises(self) -> None:
        with pytest.raises(ValueError, match="Minimum successes must be non-negative"):
            hypergeometric_at_least(60, 4, 7, -1)

    def test_successful_sequences(self) -> None:
        """90 ordered pairs, 30 of which hold no target."""
        assert successful_sequences_at_least(10, 4, 2, 1) == 60
