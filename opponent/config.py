from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class OrchestratorConfig:
    # Artificial "thinking" delay before the computer moves
    min_delay_ms: int = 500
    max_delay_ms: int = 1500
    # Raise on a rejected engine move instead of logging and skipping it
    strict_moves: bool = False


@dataclass
class GameConfig:
    default_level: int = 3
    default_mode: str = "ai"
    ai_color: str = "black"


@dataclass
class Config:
    orchestrator: OrchestratorConfig = field(default_factory=OrchestratorConfig)
    game: GameConfig = field(default_factory=GameConfig)
    log_level: str = "INFO"

    def validate(self) -> "Config":
        orch = self.orchestrator
        if orch.min_delay_ms < 0 or orch.max_delay_ms < 0:
            raise ValueError("Thinking delays must be non-negative")
        if orch.min_delay_ms > orch.max_delay_ms:
            raise ValueError(
                f"min_delay_ms ({orch.min_delay_ms}) exceeds max_delay_ms ({orch.max_delay_ms})"
            )
        if self.game.default_level not in range(1, 6):
            raise ValueError(f"Unknown difficulty level: {self.game.default_level}")
        if self.game.default_mode not in ("ai", "pvp"):
            raise ValueError(f"Unknown game mode: {self.game.default_mode}")
        if self.game.ai_color not in ("white", "black"):
            raise ValueError(f"Unknown color: {self.game.ai_color}")
        return self

    @staticmethod
    def from_dict(raw: Dict[str, Any]) -> "Config":
        cfg = Config()
        for section in ("orchestrator", "game"):
            values = raw.get(section, {})
            if not isinstance(values, dict):
                raise ValueError(f"[{section}] must be a table")
            for k, v in values.items():
                target = getattr(cfg, section)
                if hasattr(target, k):
                    setattr(target, k, _coerce(f"{section}.{k}", getattr(target, k), v))
        if "log_level" in raw:
            cfg.log_level = str(raw["log_level"])
        return cfg

    @staticmethod
    def load_from_toml(path: str = "config.toml") -> "Config":
        if not os.path.exists(path):
            return Config()
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        return Config.from_dict(raw)

    def apply_env(self, environ=None) -> "Config":
        environ = os.environ if environ is None else environ
        level = environ.get("OPPONENT_LOG_LEVEL")
        if level:
            self.log_level = level.upper()
        strict = environ.get("OPPONENT_STRICT_MOVES")
        if strict is not None:
            self.orchestrator.strict_moves = _BOOL_WORDS.get(strict.strip().lower(), False)
        return self


_BOOL_WORDS = {
    "1": True, "true": True, "yes": True, "on": True,
    "0": False, "false": False, "no": False, "off": False,
}


def _coerce(name: str, default: Any, value: Any) -> Any:
    """Convert a raw TOML value to the type of the field's default."""
    kind = type(default)
    if kind is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in _BOOL_WORDS:
            return _BOOL_WORDS[value.strip().lower()]
        raise ValueError(f"Invalid value for {name}: {value!r}")
    try:
        return kind(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid value for {name}: {value!r}") from None


def load_config(path: str | None = None) -> Config:
    path = path or os.environ.get("OPPONENT_CONFIG_TOML", "config.toml")
    return Config.load_from_toml(path).apply_env().validate()


# single globally importable config instance
CONFIG = load_config()
