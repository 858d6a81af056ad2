"""Unit tests for src/core/config.py"""

import pytest

from src.core.config import Settings, get_settings
from src.core.shared_types import GameVariant, TileDistribution
from src.solitaire.default_layouts import TraditionalLayout, TwoCornerLayout


def test_defaults(settings: Settings) -> None:
    assert settings.default_variant == GameVariant.TWO_CORNER
    assert settings.default_distribution == TileDistribution.PRIORITIZE_BOTH_PAIRS
    assert settings.simple_shuffle is False
    assert settings.use_wildcards is True


@pytest.mark.parametrize(
    "variant, code",
    [
        (GameVariant.TWO_CORNER, TwoCornerLayout.LARGE),
        (GameVariant.TRADITIONAL, TraditionalLayout.TURTLE),
    ],
)
def test_fallback_code_is_a_default_layout(
    settings: Settings, variant: GameVariant, code: str
) -> None:
    assert settings.fallback_code(variant) == code
    assert type(settings.fallback_code(variant)) is str


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SOLITAIRE_DEFAULT_VARIANT", "MJS")
    monkeypatch.setenv("SOLITAIRE_DEFAULT_DISTRIBUTION", "single pairs")
    monkeypatch.setenv("SOLITAIRE_SIMPLE_SHUFFLE", "true")
    monkeypatch.setenv("SOLITAIRE_FALLBACK_TWO_CORNER_CODE", TwoCornerLayout.SMALL.value)

    settings = Settings(_env_file=None)
    assert settings.default_variant == GameVariant.TRADITIONAL
    assert settings.default_distribution == TileDistribution.SINGLE_PAIRS
    assert settings.simple_shuffle is True
    assert settings.fallback_code(GameVariant.TWO_CORNER) == TwoCornerLayout.SMALL


def test_unprefixed_variables_are_ignored(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SIMPLE_SHUFFLE", "true")
    assert Settings(_env_file=None).simple_shuffle is False


def test_get_settings_is_cached(settings: Settings) -> None:
    """The settings fixture resets the cache, so this is the first call."""
    assert get_settings() is get_settings()
