"""
FastAPI Dependencies
Per-application settings and upstream client
"""

from fastapi import Request

from inference_gateway.config import Settings
from inference_gateway.utils.upstream_client import UpstreamClient


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was built with"""
    return request.app.state.settings


def get_upstream_client(request: Request) -> UpstreamClient:
    """Upstream client shared by the application's requests"""
    return request.app.state.upstream_client
