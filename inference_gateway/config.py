"""
Configuration Management
Environment-based configuration for upstream model servers and the HTTP listener
"""

from typing import Dict, List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import structlog

from inference_gateway.models.prediction import ModelType

logger = structlog.get_logger(__name__)


class Settings(BaseSettings):
    """Gateway settings"""

    # Service info
    service_name: str = "inference-gateway"
    service_version: str = "1.0.0"
    environment: str = "development"

    # Listener
    host: str = "0.0.0.0"
    port: int = 5000

    # Upstream model servers (ngrok tunnels in front of the notebooks)
    apnea_url: str = "https://merry-ewe-endlessly.ngrok-free.app"
    diabetes_url: str = "https://seaworthy-superadequate-rebekah.ngrok-free.dev"
    upstream_timeout_seconds: float = 30.0
    upstream_headers: Dict[str, str] = {"ngrok-skip-browser-warning": "true"}

    # Uploads
    upload_dir: str = "uploads"
    max_file_size_bytes: int = 10 * 1024 * 1024

    # CORS
    cors_origins: List[str] = ["*"]

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("apnea_url", "diabetes_url")
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip("/")

    @field_validator("port")
    @classmethod
    def validate_port(cls, v):
        if not 1 <= v <= 65535:
            raise ValueError("Port must be between 1 and 65535")
        return v

    @field_validator("upstream_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v):
        if v <= 0:
            raise ValueError("Upstream timeout must be positive")
        return v

    @field_validator("max_file_size_bytes")
    @classmethod
    def validate_max_file_size(cls, v):
        if v < 1:
            raise ValueError("Maximum file size must be at least 1 byte")
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        v = v.lower()
        if v not in ("json", "console"):
            raise ValueError("Log format must be 'json' or 'console'")
        return v

    def model_urls(self) -> Dict[ModelType, str]:
        """Base URL for each model type"""
        return {
            ModelType.APNEA: self.apnea_url,
            ModelType.DIABETES: self.diabetes_url,
        }

    def upstream_url(self, model_type: ModelType) -> str:
        """Prediction endpoint of the upstream serving ``model_type``"""
        return f"{self.model_urls()[model_type]}/predict"

    def log_config(self):
        """Log configuration"""
        logger.info(
            "Gateway configuration",
            environment=self.environment,
            listen=f"{self.host}:{self.port}",
            apnea_url=self.apnea_url,
            diabetes_url=self.diabetes_url,
            upload_dir=self.upload_dir,
            max_file_size_bytes=self.max_file_size_bytes,
            upstream_timeout_seconds=self.upstream_timeout_seconds,
        )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get settings instance"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
