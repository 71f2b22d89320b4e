"""
Tests for gateway configuration
"""

import pytest
from pydantic import ValidationError

from inference_gateway.config import Settings
from inference_gateway.models.prediction import ModelType


def test_defaults(monkeypatch):
    for var in ("APNEA_URL", "DIABETES_URL", "PORT", "MAX_FILE_SIZE_BYTES", "UPSTREAM_TIMEOUT_SECONDS", "UPLOAD_DIR"):
        monkeypatch.delenv(var, raising=False)

    settings = Settings(_env_file=None)

    assert settings.port == 5000
    assert settings.max_file_size_bytes == 10 * 1024 * 1024
    assert settings.upstream_timeout_seconds == 30.0
    assert settings.upstream_headers == {"ngrok-skip-browser-warning": "true"}
    assert settings.upload_dir == "uploads"
    assert not settings.apnea_url.endswith("/")


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("APNEA_URL", "http://apnea.internal:8000/")
    monkeypatch.setenv("DIABETES_URL", "http://diabetes.internal:8000")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("UPSTREAM_HEADERS", '{"x-api-key": "secret"}')

    settings = Settings(_env_file=None)

    assert settings.apnea_url == "http://apnea.internal:8000"
    assert settings.diabetes_url == "http://diabetes.internal:8000"
    assert settings.port == 8080
    assert settings.upstream_headers == {"x-api-key": "secret"}


def test_model_url_mapping():
    settings = Settings(_env_file=None, apnea_url="http://a", diabetes_url="http://d/")

    assert settings.model_urls() == {
        ModelType.APNEA: "http://a",
        ModelType.DIABETES: "http://d",
    }
    assert settings.upstream_url(ModelType.APNEA) == "http://a/predict"
    assert settings.upstream_url(ModelType.DIABETES) == "http://d/predict"


@pytest.mark.parametrize(
    "field,value",
    [
        ("port", 0),
        ("port", 70000),
        ("upstream_timeout_seconds", 0),
        ("max_file_size_bytes", 0),
        ("log_format", "xml"),
    ],
)
def test_invalid_values_rejected(field, value):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **{field: value})


def test_model_type_values():
    assert [m.value for m in ModelType] == ["apnea", "diabetes"]
    assert ModelType("apnea") is ModelType.APNEA
    with pytest.raises(ValueError):
        ModelType("heart")
