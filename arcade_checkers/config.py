"""
Central configuration for the engine's tunables.
Pydantic models for type-safe configuration management.
"""
from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from .types import Difficulty


class AISettings(BaseModel):
    """AI opponent settings."""

    difficulty: Difficulty = Field(default=Difficulty.MEDIUM, description="Default AI difficulty tier")
    seed: Optional[int] = Field(default=None, description="Seed for the AI's random tie-breaking")
    think_delay_ms: Dict[Difficulty, int] = Field(
        default_factory=lambda: {Difficulty.EASY: 600, Difficulty.MEDIUM: 900, Difficulty.HARD: 1200},
        description="Cosmetic 'thinking' pause a UI may apply before asking for an AI move",
    )

    @field_validator('think_delay_ms')
    @classmethod
    def validate_delays(cls, v):
        for key, ms in v.items():
            if ms < 0:
                raise ValueError(f"think delay for {key} must be non-negative")
        return v

    def delay_for(self, difficulty: Optional[Difficulty] = None) -> int:
        return self.think_delay_ms.get(Difficulty(difficulty or self.difficulty), 0)


class GameRulesSettings(BaseModel):
    """Game session settings."""

    allow_undo: bool = Field(default=True, description="Allow undoing moves")

    @field_validator('allow_undo', mode='before')
    @classmethod
    def validate_bool_fields(cls, v):
        if isinstance(v, str):
            return v.strip().lower() in ('1', 'true', 'yes', 'on')
        return bool(v)


class LoggingSettings(BaseModel):
    """Logging configuration."""

    log_level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)")

    @field_validator('log_level', mode='before')
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR']
        v_upper = v.upper() if isinstance(v, str) else str(v).upper()
        if v_upper not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v_upper


class CheckersConfig(BaseModel):
    """Main configuration model for the checkers engine."""

    ai: AISettings = Field(default_factory=AISettings)
    rules: GameRulesSettings = Field(default_factory=GameRulesSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    version: str = Field(default="1.0.0", description="Configuration version")
    config_file: Optional[str] = Field(default=None, description="Path to config file")

    @classmethod
    def from_env(cls) -> 'CheckersConfig':
        """Create configuration from environment variables."""
        seed = os.getenv('CHECKERS_SEED')
        return cls(
            ai=AISettings(
                difficulty=os.getenv('CHECKERS_DIFFICULTY', 'medium').lower(),
                seed=int(seed) if seed else None,
            ),
            rules=GameRulesSettings(
                allow_undo=os.getenv('CHECKERS_ALLOW_UNDO', 'true'),
            ),
            logging=LoggingSettings(
                log_level=os.getenv('CHECKERS_LOG_LEVEL', 'INFO'),
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a JSON-ready dictionary."""
        return self.model_dump(mode='json')

    def save_to_file(self, filepath: str) -> None:
        """Save configuration to JSON file."""
        config_dict = self.to_dict()
        config_dict['config_file'] = filepath
        with open(filepath, 'w') as f:
            json.dump(config_dict, f, indent=2)

    @classmethod
    def load_from_file(cls, filepath: str) -> 'CheckersConfig':
        """Load configuration from JSON file."""
        with open(filepath, 'r') as f:
            data = json.load(f)

        return cls(
            ai=AISettings(**data.get('ai', {})),
            rules=GameRulesSettings(**data.get('rules', {})),
            logging=LoggingSettings(**data.get('logging', {})),
            version=data.get('version', '1.0.0'),
            config_file=filepath,
        )


# Global configuration instance
_config: Optional[CheckersConfig] = None


def get_config() -> CheckersConfig:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = CheckersConfig.from_env()
    return _config


def load_config_from_file(filepath: str) -> CheckersConfig:
    """Load configuration from file and update global instance."""
    global _config
    _config = CheckersConfig.load_from_file(filepath)
    return _config


def reset_config() -> None:
    """Reset the global configuration to defaults."""
    global _config
    _config = None


def get_ai_settings() -> AISettings:
    return get_config().ai


def get_game_rules() -> GameRulesSettings:
    return get_config().rules


def setup_logging(level: Optional[str] = None) -> None:
    """Configure root logging once; level from argument, then config/env."""
    if getattr(setup_logging, "_configured", False):
        return
    name = (level or get_config().logging.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    setup_logging._configured = True  # type: ignore[attr-defined]
