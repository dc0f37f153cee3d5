"""Configuration for Eloquence.

This module provides the Config class for customizing rating behavior,
score weighting, and the models used by the speech analyzers.
"""

from __future__ import annotations

import math
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, model_validator

from .exceptions import ConfigError


class Config(BaseModel):
    """Configuration for Eloquence.

    Attributes:
        initial_rating: Rating assigned to a new user.
        par_rating: Fixed "opponent" rating every session is scored against.
        k_factor: K-factor used when adaptive_k_factor is off.
        adaptive_k_factor: Scale K by experience (40 / 32 / 24).
        speech_weight: Weight of the speech average in the combined score.
        visual_weight: Weight of the visual average in the combined score.
        transcription_model: OpenAI model used for transcription.
        analysis_model: OpenAI model used for tone analysis.
        feedback_model: Anthropic model used for coaching notes.
        temperature: Sampling temperature for LLM calls.
        timeout_seconds: Timeout for each analyzer request.
        verbose: Enable verbose output.
        openai_api_key: OpenAI API key (defaults to env var).
        anthropic_api_key: Anthropic API key (defaults to env var).
    """

    # Rating
    initial_rating: int = Field(default=1200, ge=0, le=4000)
    par_rating: int = Field(default=1200, ge=0, le=4000)
    k_factor: int = Field(default=32, ge=1, le=100)
    adaptive_k_factor: bool = True

    # Score combination
    speech_weight: float = Field(default=0.7, ge=0.0, le=1.0)
    visual_weight: float = Field(default=0.3, ge=0.0, le=1.0)

    # Analyzers
    transcription_model: str = "whisper-1"
    analysis_model: str = "gpt-4o"
    feedback_model: str = "claude-sonnet-4-20250514"
    temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    timeout_seconds: int = Field(default=30, ge=1, le=300)

    # Output
    verbose: bool = False

    # API Keys (defaults to env vars)
    openai_api_key: str | None = None
    anthropic_api_key: str | None = None

    @model_validator(mode="after")
    def validate_weights(self) -> Config:
        """Speech and visual weights must add up to 1."""
        total = self.speech_weight + self.visual_weight
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ValueError(
                f"speech_weight + visual_weight must equal 1.0 (got {total:g})"
            )
        return self

    def model_post_init(self, __context: Any) -> None:
        """Load API keys from environment if not provided."""
        if self.openai_api_key is None:
            self.openai_api_key = os.environ.get("OPENAI_API_KEY")
        if self.anthropic_api_key is None:
            self.anthropic_api_key = os.environ.get("ANTHROPIC_API_KEY")

    @classmethod
    def from_yaml(cls, path: str | Path) -> Config:
        """Load configuration from a YAML file.

        The settings may sit at the top level or under a ``coach:`` section.

        Args:
            path: Path to the YAML configuration file.

        Returns:
            Config instance.

        Raises:
            FileNotFoundError: If the config file doesn't exist.
            ConfigError: If the YAML is not a mapping or has invalid values.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"expected a mapping, got {type(data).__name__}")

        if "coach" in data:
            data = data["coach"] or {}
            if not isinstance(data, dict):
                raise ConfigError("expected a mapping", field="coach")

        try:
            return cls(**data)
        except ValueError as e:
            raise ConfigError(str(e)) from e
