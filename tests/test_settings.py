from decimal import Decimal

from academy.app.core.settings import Settings, get_settings, reset_settings
from academy.app.services.rates import category_override_rules


def test_defaults_match_academy_configuration():
    settings = Settings()
    location = settings.academy_location()
    assert (location.latitude, location.longitude, location.radius_meters) == (29.073694, 31.112250, 50)
    assert settings.category_override_rate == Decimal("75")
    assert settings.money_precision == settings.hours_precision == 2


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("ACADEMY_ATTENDANCE_RADIUS_METERS", "120")
    monkeypatch.setenv("ACADEMY_CATEGORY_OVERRIDE_TOKENS", '["tournament"]')
    monkeypatch.setenv("ACADEMY_CATEGORY_OVERRIDE_RATE", "90")
    settings = Settings()
    assert settings.attendance_radius_meters == 120
    rules = category_override_rules(settings)
    assert len(rules) == 1
    assert rules[0].matches("Spring Tournament")
    assert not rules[0].matches("Spring Competition")
    assert rules[0].rate == Decimal("90")


def test_default_rule_tolerates_misspelling():
    rule = category_override_rules(Settings())[0]
    assert rule.matches("Advanced Competetion Prep")
    assert rule.matches("COMPETITION")
    assert not rule.matches("Compete Club")
    assert not rule.matches(None)


def test_get_settings_is_singleton():
    assert get_settings() is get_settings()
    first = get_settings()
    reset_settings()
    try:
        assert get_settings() is not first
    finally:
        reset_settings()
