"""Engine configuration settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.shared_types import GameVariant, TileDistribution
from src.solitaire.default_layouts import TraditionalLayout, TwoCornerLayout


class Settings(BaseSettings):
    """Settings loaded from SOLITAIRE_* environment variables (or a .env file)."""

    default_variant: GameVariant = GameVariant.TWO_CORNER
    default_distribution: TileDistribution = TileDistribution.PRIORITIZE_BOTH_PAIRS
    simple_shuffle: bool = False
    use_wildcards: bool = True

    # Known-good layouts the service falls back to when a requested layout yields no board.
    fallback_two_corner_code: str = TwoCornerLayout.LARGE.value
    fallback_traditional_code: str = TraditionalLayout.TURTLE.value

    model_config = SettingsConfigDict(
        env_prefix="SOLITAIRE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def fallback_code(self, variant: GameVariant) -> str:
        if variant == GameVariant.TRADITIONAL:
            return self.fallback_traditional_code
        return self.fallback_two_corner_code


@lru_cache
def get_settings() -> Settings:
    """Settings are read once per process. Tests can call get_settings.cache_clear()."""
    return Settings()
