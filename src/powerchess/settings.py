"""Application configuration."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Rule constants loaded from environment variables (POWERCHESS_*)."""

    model_config = SettingsConfigDict(
        env_prefix="POWERCHESS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Obstacles (10 half-moves = 5 rounds)
    obstacle_lifespan: int = 10

    # Powers
    blessing_half_moves: int = 6
    freeze_half_moves: int = 8  # 4 full rounds
    offer_size: int = 4

    # Bonus token
    bonus_token_value: int = 10
    bonus_token_interval: int = 6

    # Hazard zone
    hazard_interval: int = 16
    hazard_countdown: int = 4

    # Knight passive: captures needed before the swap can be used
    knight_passive_threshold: int = 2

    # Randomness (offer rotation, token and hazard placement)
    rng_seed: int | None = None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
