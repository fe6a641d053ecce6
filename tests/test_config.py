"""Tests for RenderSettings."""

import pytest

from pathtracer.config import QUALITY_LEVELS, RenderSettings


def test_height_is_derived_from_aspect_ratio():
    assert RenderSettings(width=300, aspect_ratio=1.5).height == 200
    assert RenderSettings(width=8, aspect_ratio=2.0).height == 4
    # Very wide images still get one row
    assert RenderSettings(width=3, aspect_ratio=10.0).height == 1
    assert RenderSettings(width=8, aspect_ratio=2.0).total_pixels == 32


def test_from_quality():
    settings = RenderSettings.from_quality("preview", width=100)
    assert settings.samples_per_pixel == QUALITY_LEVELS["preview"]["samples"]
    assert settings.max_depth == QUALITY_LEVELS["preview"]["bounces"]
    assert settings.width == 100


def test_from_unknown_quality():
    with pytest.raises(ValueError):
        RenderSettings.from_quality("cinematic")


def test_with_overrides_ignores_none():
    base = RenderSettings(width=100, samples_per_pixel=8, workers=2)
    changed = base.with_overrides(samples_per_pixel=None, workers=4)
    assert changed.samples_per_pixel == 8
    assert changed.workers == 4
    assert base.workers == 2


@pytest.mark.parametrize("changes", [
    {"width": 0},
    {"aspect_ratio": 0.0},
    {"samples_per_pixel": 0},
    {"max_depth": -1},
    {"workers": 0},
    {"executor": "gpu"},
    {"t_min": 1.0, "t_max": 0.5},
])
def test_validate_rejects(changes):
    with pytest.raises(ValueError):
        RenderSettings(workers=1).with_overrides(**changes).validate()


def test_validate_returns_self():
    settings = RenderSettings(workers=1)
    assert settings.validate() is settings
