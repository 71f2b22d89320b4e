"""
Prediction request and response schemas
"""

from typing import Any, Dict, Optional
from enum import Enum

from pydantic import BaseModel, Field


class ModelType(str, Enum):
    """Inference model selector"""
    APNEA = "apnea"
    DIABETES = "diabetes"


class ErrorResponse(BaseModel):
    """Error envelope returned for every failed prediction"""
    success: bool = Field(default=False, description="Always false for errors")
    error: str = Field(..., description="Human readable error message")
    details: Optional[Any] = Field(None, description="Upstream body or extra context")

    def content(self) -> Dict[str, Any]:
        """JSON body, leaving out ``details`` when there are none"""
        exclude = {"details"} if self.details is None else None
        return self.model_dump(exclude=exclude)


class HealthResponse(BaseModel):
    """Health check payload"""
    status: str = "healthy"
    timestamp: str
    apnea_url: str
    diabetes_url: str


class ServiceInfo(BaseModel):
    """Root endpoint payload"""
    service: str
    status: str = "running"
    version: str
    docs: str = "/docs"
