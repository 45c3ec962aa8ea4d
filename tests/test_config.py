import pytest
from pydantic import ValidationError

from trafficstats.config import Settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("REPORT_TIMEZONE", raising=False)

    settings = Settings(_env_file=None)

    assert settings.database_url == "sqlite:///./traffic.sqlite"
    assert settings.chart_rows == 15
    assert settings.tz is None


@pytest.mark.parametrize("rows", [0, 2])
def test_chart_rows_leave_room_for_axis_labels(rows):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, chart_rows=rows)

    assert Settings(_env_file=None, chart_rows=3).chart_rows == 3


def test_timezone_and_log_level():
    settings = Settings(_env_file=None, report_timezone="Europe/Berlin", log_level="debug")

    assert settings.tz.key == "Europe/Berlin"
    assert settings.log_level == "DEBUG"
    assert Settings(_env_file=None, report_timezone=" ").tz is None

    with pytest.raises(ValidationError):
        Settings(_env_file=None, report_timezone="Mars/Olympus")
