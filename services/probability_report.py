"""Helpers for rendering probability sets as text or chart rows."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from combo_engine.errors import AdjustedInput
from combo_engine.models import ProbabilitySet


class ProbabilityReportBuilder:
    """Construct human-readable reports from engine output."""

    def build_report(
        self,
        probability_sets: Iterable[ProbabilitySet],
        diagnostics: Iterable[AdjustedInput] = (),
        enabled: Sequence[bool] | None = None,
    ) -> str:
        """Render sets as text, one line per draw.

        ``enabled`` holds each set's combo flag, in order; sets without a flag
        count as enabled. A disabled combo shows ``(disabled)``, an enabled one
        with no draws to report shows ``(no draws)``.
        """
        lines: list[str] = []
        for diagnostic in diagnostics:
            lines.append(f"Warning: {diagnostic}")
        if lines:
            lines.append("")

        flags = list(enabled or ())
        for position, probability_set in enumerate(probability_sets):
            lines.append(f"Set: {probability_set.name}")
            if position < len(flags) and not flags[position]:
                lines.append("(disabled)")
                continue
            if not probability_set.probabilities_by_draw:
                lines.append("(no draws)")
                continue
            for draw, probability in enumerate(probability_set.probabilities_by_draw, start=1):
                lines.append(f"{draw}: {probability}")

        return "\n".join(lines)

    def build_rows(self, probability_sets: Iterable[ProbabilitySet]) -> list[dict[str, Any]]:
        """Flatten sets into one row per (set, draw) for charting or CSV export."""
        rows: list[dict[str, Any]] = []
        for probability_set in probability_sets:
            for draw, probability in enumerate(probability_set.probabilities_by_draw, start=1):
                rows.append(
                    {
                        "set": probability_set.name,
                        "draw": draw,
                        "successful": probability.successful,
                        "total": probability.total,
                        "probability": probability.as_fraction(),
                    }
                )
        return rows
