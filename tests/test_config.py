"""
Feed configuration gate.
"""
from intake_board.config import REQUIRED_SETTINGS, load_settings


def test_all_settings_present():
    settings = load_settings(environ={
        "INTAKE_FEED_PROJECT_ID": "shop-01",
        "INTAKE_FEED_DATABASE_PATH": "data/intake.db",
    })

    assert settings.is_configured
    assert settings.missing == []
    assert settings.project_id == "shop-01"
    assert settings.database_path == "data/intake.db"
    assert settings.log_level == "INFO"


def test_any_missing_setting_disables_feed():
    settings = load_settings(environ={"INTAKE_FEED_PROJECT_ID": "shop-01"})

    assert not settings.is_configured
    assert settings.missing == ["INTAKE_FEED_DATABASE_PATH"]


def test_blank_values_count_as_missing():
    settings = load_settings(environ={
        "INTAKE_FEED_PROJECT_ID": "   ",
        "INTAKE_FEED_DATABASE_PATH": "",
        "INTAKE_LOG_LEVEL": "DEBUG",
    })

    assert settings.missing == REQUIRED_SETTINGS
    assert settings.log_level == "DEBUG"
