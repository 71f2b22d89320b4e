"""
Pytest configuration for inference gateway tests
"""

import os
import tempfile

# Importing inference_gateway.main builds an app from the environment; keep its uploads out of the repo
os.environ.setdefault(
    "UPLOAD_DIR", os.path.join(tempfile.gettempdir(), "inference-gateway-test-uploads")
)


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "asyncio: mark test as an asyncio test."
    )
