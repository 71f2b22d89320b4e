"""
Pytest fixtures for inference gateway tests
"""

import os
from typing import List, Tuple

import pytest
from fastapi.testclient import TestClient

from inference_gateway.config import Settings
from inference_gateway.main import create_app

APNEA_URL = "http://apnea.test"
DIABETES_URL = "http://diabetes.test"


@pytest.fixture
def upload_dir(tmp_path) -> str:
    """Empty upload directory for one test"""
    return str(tmp_path / "uploads")


@pytest.fixture
def settings(upload_dir) -> Settings:
    """Gateway settings pointing at fake upstreams"""
    return Settings(
        apnea_url=APNEA_URL + "/",
        diabetes_url=DIABETES_URL,
        upload_dir=upload_dir,
        max_file_size_bytes=1024,
        upstream_timeout_seconds=1.0,
        log_format="console",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    """Test client; server errors are returned as responses"""
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def record_files() -> List[Tuple[str, Tuple[str, bytes, str]]]:
    """A WFDB header/data pair as multipart parts"""
    return [
        ("files", ("a01.hea", b"a01 1 100 3000\na01.dat 16 200 16 0 -17 0 0 ECG\n", "application/octet-stream")),
        ("files", ("a01.dat", bytes(range(256)) * 2, "application/octet-stream")),
    ]


def stored_files(upload_dir: str) -> List[str]:
    """Files currently left in the upload directory"""
    return os.listdir(upload_dir) if os.path.isdir(upload_dir) else []
