"""Parse combo calculation settings from JSON documents or plain mappings."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from loguru import logger

from combo_engine.errors import InvalidConfigurationError
from combo_engine.models import CardGroup, ComboGroup
from utils.atomic_io import read_json


@dataclass(frozen=True)
class ComboConfiguration:
    """Everything the engine needs besides the strategy."""

    deck_size: int
    card_groups: tuple[CardGroup, ...]
    combo_groups: tuple[ComboGroup, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "deck_size": self.deck_size,
            "card_groups": [group.to_dict() for group in self.card_groups],
            "combo_groups": [combo.to_dict() for combo in self.combo_groups],
        }


class ComboConfigParser:
    """Turn loosely typed settings into a ComboConfiguration.

    Scalars are coerced the way saved settings usually arrive ("4", "true");
    structural problems raise InvalidConfigurationError.
    """

    def parse(self, payload: Any) -> ComboConfiguration:
        if not isinstance(payload, dict):
            raise InvalidConfigurationError("Configuration must be a JSON object")

        if "deck_size" not in payload:
            raise InvalidConfigurationError("Configuration is missing 'deck_size'")
        deck_size = self.coerce_int(payload["deck_size"], "deck_size")

        raw_groups = payload.get("card_groups")
        if not isinstance(raw_groups, list):
            raise InvalidConfigurationError("'card_groups' must be a list")
        raw_combos = payload.get("combo_groups", [])
        if not isinstance(raw_combos, list):
            raise InvalidConfigurationError("'combo_groups' must be a list")

        card_groups = tuple(
            self._parse_card_group(entry, index) for index, entry in enumerate(raw_groups)
        )
        combo_groups = tuple(
            self._parse_combo_group(entry, index) for index, entry in enumerate(raw_combos)
        )
        return ComboConfiguration(
            deck_size=deck_size, card_groups=card_groups, combo_groups=combo_groups
        )

    def parse_text(self, text: str) -> ComboConfiguration:
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise InvalidConfigurationError(f"Configuration is not valid JSON: {exc}") from exc
        return self.parse(payload)

    def load(self, path: Path) -> ComboConfiguration:
        try:
            payload = read_json(path)
        except json.JSONDecodeError as exc:
            logger.error(f"Failed to parse combo configuration {path}: {exc}")
            raise InvalidConfigurationError(f"Configuration {path} is not valid JSON") from exc
        return self.parse(payload)

    def _parse_card_group(self, entry: Any, index: int) -> CardGroup:
        if not isinstance(entry, dict):
            raise InvalidConfigurationError(f"Card group #{index} must be an object")
        name = str(entry.get("name") or f"Group {index + 1}")
        if "size" not in entry:
            raise InvalidConfigurationError(f"Card group '{name}' is missing 'size'")
        return CardGroup(name=name, size=self.coerce_int(entry["size"], f"{name}.size"))

    def _parse_combo_group(self, entry: Any, index: int) -> ComboGroup:
        if not isinstance(entry, dict):
            raise InvalidConfigurationError(f"Combo group #{index} must be an object")
        name = str(entry.get("name") or f"Combo {index + 1}")
        raw_required = entry.get("required_count", [])
        if not isinstance(raw_required, list):
            raise InvalidConfigurationError(f"Combo group '{name}' required_count must be a list")
        required = tuple(
            self.coerce_int(value, f"{name}.required_count[{position}]")
            for position, value in enumerate(raw_required)
        )
        target_draw = self.coerce_int(entry.get("target_draw", 2), f"{name}.target_draw")
        enabled = self.coerce_bool(entry.get("enabled", True))
        return ComboGroup(
            name=name, required_count=required, target_draw=target_draw, enabled=enabled
        )

    @staticmethod
    def coerce_bool(value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "on"}
        return bool(value)

    @staticmethod
    def coerce_int(value: Any, label: str) -> int:
        if isinstance(value, bool):
            raise InvalidConfigurationError(f"{label} must be an integer, got {value!r}")
        if isinstance(value, int):
            return value
        try:
            number = float(value)
        except (TypeError, ValueError) as exc:
            raise InvalidConfigurationError(f"{label} must be an integer, got {value!r}") from exc
        if not number.is_integer():
            raise InvalidConfigurationError(f"{label} must be a whole number, got {value!r}")
        return int(number)


__all__ = ["ComboConfigParser", "ComboConfiguration"]
