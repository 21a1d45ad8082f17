from .calculator import ComboProbabilityResult, compute_combo_probabilities
from .errors import AdjustedInput, InvalidConfigurationError
from .models import (
    CardGroup,
    ComboGroup,
    Probability,
    ProbabilitySet,
    Strategy,
    compare_probability_sets,
)
from .state_space import StateTable

__all__ = [
    "AdjustedInput",
    "CardGroup",
    "ComboGroup",
    "ComboProbabilityResult",
    "InvalidConfigurationError",
    "Probability",
    "ProbabilitySet",
    "StateTable",
    "Strategy",
    "compare_probability_sets",
    "compute_combo_probabilities",
]
