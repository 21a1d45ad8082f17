"""Errors and diagnostics raised or returned by the combo probability engine."""

from __future__ import annotations

from dataclasses import dataclass


class InvalidConfigurationError(ValueError):
    """Raised when the engine inputs cannot describe a valid computation."""


@dataclass(frozen=True)
class AdjustedInput:
    """A non-fatal correction applied to the inputs before computing.

    The computation proceeds with ``adjusted`` in place of ``original``;
    callers should surface ``message`` to the user.
    """

    field: str
    original: int
    adjusted: int
    message: str

    def __str__(self) -> str:
        return f"{self.message} ({self.field}: {self.original} -> {self.adjusted})"


__all__ = ["AdjustedInput", "InvalidConfigurationError"]
