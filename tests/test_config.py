import pytest

from imagesteps.config import Settings, get_settings
from imagesteps.errors import ConfigurationError


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    for name in ("IMAGESTEPS_FETCH_TIMEOUT", "IMAGESTEPS_USER_AGENT", "IMAGESTEPS_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults():
    assert Settings.from_env() == Settings(fetch_timeout=30.0, user_agent="imagesteps/0.1", log_level="INFO")


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("IMAGESTEPS_FETCH_TIMEOUT", "2.5")
    monkeypatch.setenv("IMAGESTEPS_USER_AGENT", "tester/1")
    monkeypatch.setenv("IMAGESTEPS_LOG_LEVEL", "debug")

    settings = get_settings()

    assert settings == Settings(fetch_timeout=2.5, user_agent="tester/1", log_level="DEBUG")
    assert get_settings() is settings


@pytest.mark.parametrize(
    "name,value",
    [
        ("IMAGESTEPS_FETCH_TIMEOUT", "soon"),
        ("IMAGESTEPS_FETCH_TIMEOUT", "0"),
        ("IMAGESTEPS_FETCH_TIMEOUT", "-3"),
        ("IMAGESTEPS_LOG_LEVEL", "chatty"),
    ],
)
def test_malformed_values_raise_configuration_error(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigurationError) as excinfo:
        Settings.from_env()
    assert excinfo.value.variable == name
