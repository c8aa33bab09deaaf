"""
Runtime configuration for DeckScout.

Values are read from the environment with the ``DECKSCOUT_`` prefix, e.g.
``DECKSCOUT_CONFIRMATION_THRESHOLD=0.9``.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Prediction engine and service settings."""

    model_config = SettingsConfigDict(env_prefix="DECKSCOUT_", env_file=".env", extra="ignore")

    app_name: str = "DeckScout"
    log_level: str = "INFO"

    # Confirmation policy
    confirmation_threshold: float = Field(default=0.95, ge=0.0, le=1.0)
    min_cards_for_prediction: int = Field(default=2, ge=0)
    min_cards_for_confirmation: int = Field(default=3, ge=0)

    # Ranking
    max_predictions: int = Field(default=5, ge=1)
    top_probability_floor: float = Field(default=0.4, ge=0.0, le=0.99)

    # Scoring
    signature_multiplier: float = Field(default=2.0, ge=0.0)
    consistency_weight: float = Field(default=0.0, ge=0.0)

    # Game context
    play_pattern_size: int = Field(default=10, ge=1)


settings = Settings()
