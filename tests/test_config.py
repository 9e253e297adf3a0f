import pytest

from tinytools.config import DEFAULT_PORT
from tinytools.config import load_settings
from tinytools.config import parse_port


@pytest.mark.parametrize(
    "value,expected",
    [
        (None, DEFAULT_PORT),
        ("", DEFAULT_PORT),
        ("abc", DEFAULT_PORT),
        ("0", DEFAULT_PORT),
        ("-1", DEFAULT_PORT),
        ("8080", 8080),
        (" 5000 ", 5000),
    ],
)
def test_parse_port(value, expected):
    assert parse_port(value) == expected


def test_load_settings_reads_environment(monkeypatch):
    monkeypatch.setenv("PORT", "4321")
    monkeypatch.setenv("HOST", "127.0.0.1")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    settings = load_settings()

    assert settings.port == 4321
    assert settings.host == "127.0.0.1"
    assert settings.log_level == "DEBUG"


def test_load_settings_defaults(monkeypatch):
    monkeypatch.delenv("PORT", raising=False)
    monkeypatch.delenv("HOST", raising=False)

    settings = load_settings()

    assert settings.port == 3000
    assert settings.host == "0.0.0.0"
    assert settings.manifest_path.name == "tools-manifest.json"
