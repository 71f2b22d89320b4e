"""
Data models for the inference gateway
"""

from .prediction import ModelType, ErrorResponse, HealthResponse, ServiceInfo

__all__ = [
    "ModelType",
    "ErrorResponse",
    "HealthResponse",
    "ServiceInfo",
]
