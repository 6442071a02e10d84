import pytest
from pydantic import ValidationError

from fitclub.core.config import Settings


def test_defaults_describe_twelve_hourly_slots():
    settings = Settings(_env_file=None)

    assert settings.slot_day_start_hour == 8
    assert settings.slot_day_end_hour == 20
    assert settings.slot_length_minutes == 60
    assert settings.reminder_offset_hours == 24


def test_window_must_be_ordered():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, slot_day_start_hour=20, slot_day_end_hour=8)


def test_window_must_divide_into_slots():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, slot_day_start_hour=8, slot_day_end_hour=9, slot_length_minutes=45)


def test_cors_origins_are_split():
    settings = Settings(_env_file=None, cors_allowed_origins="http://a.test, http://b.test,")

    assert settings.cors_origins == ["http://a.test", "http://b.test"]


@pytest.mark.parametrize("name,expected", [("production", True), ("Prod", True), ("dev", False)])
def test_is_production(name, expected):
    assert Settings(_env_file=None, environment=name).is_production is expected
