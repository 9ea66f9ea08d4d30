from __future__ import annotations

# We use pytest because the repository already standardizes on it for automated checks.
import pytest

# We import the existing Settings loader so tests run with the real default config structure.
from placecore.config.settings import get_settings

# We test the override helper directly because it is pure and guards what callers may change.
from placecore.config.overrides import apply_settings_overrides


def test_default_settings_come_from_packaged_yaml():
    settings = get_settings()

    # Values mirror `src/placecore/config/defaults.yaml`.
    assert settings.distance.unit == "metric"
    assert settings.distance.label_suffix == "away"
    assert settings.hours.clock == "24h"
    assert settings.catalog.path == "data/catalogs/places.json"


def test_apply_settings_overrides_returns_same_object_when_none():
    # Load the baseline settings once (this is a cached Pydantic model).
    settings = get_settings()

    # When no overrides are provided, we expect a no-op and the same object back (fast path).
    out = apply_settings_overrides(settings, None)

    # Identity equality is intentional here: the function returns early without rebuilding the model.
    assert out is settings


def test_apply_settings_overrides_can_override_display_knobs():
    # Load the baseline settings (do not mutate it; it is shared via lru_cache).
    settings = get_settings()

    # Switch one request to imperial units with two decimals and a 12-hour clock.
    overrides = {"distance": {"unit": "imperial", "precision_mi": 2}, "hours": {"clock": "12h"}}

    # Apply the override; this returns a NEW Settings model validated by Pydantic.
    out = apply_settings_overrides(settings, overrides)

    # The override should take effect on the returned model.
    assert out.distance.unit == "imperial"
    assert out.distance.precision_mi == 2
    assert out.hours.clock == "12h"

    # Untouched knobs keep their defaults.
    assert out.distance.precision_km == settings.distance.precision_km

    # The original shared settings should remain unchanged (avoids cross-request leakage).
    assert settings.distance.unit == "metric"


def test_apply_settings_overrides_rejects_disallowed_keys_with_clear_path():
    settings = get_settings()

    # File paths are never overridable per request.
    overrides = {"catalog": {"path": "/etc/passwd"}}

    # Note: in regex, a literal dot must be escaped as `\.` (a raw string avoids double escaping).
    with pytest.raises(ValueError, match=r"disallowed key: 'catalog'"):
        apply_settings_overrides(settings, overrides)

    with pytest.raises(ValueError, match=r"hours\.timezone"):
        apply_settings_overrides(settings, {"hours": {"timezone": "UTC"}})


def test_apply_settings_overrides_rejects_wrong_value_shapes_for_restricted_subtrees():
    settings = get_settings()

    # `hours` is a restricted subtree (only `clock` is allowed), so it must be a mapping.
    with pytest.raises(ValueError, match=r"settings_overrides key 'hours' must be a mapping"):
        apply_settings_overrides(settings, {"hours": "12h"})


def test_apply_settings_overrides_revalidates_values():
    settings = get_settings()

    # Pydantic still enforces the Literal/range constraints after merging.
    with pytest.raises(ValueError):
        apply_settings_overrides(settings, {"distance": {"unit": "furlongs"}})
