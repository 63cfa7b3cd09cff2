"""
Core configuration and settings for the Variant Engine
Environment variables (and an optional .env file) override every default
"""

from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Engine configuration with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",  # Allow extra fields to be ignored
    )

    # Service information
    service_name: str = Field(default="variant-engine")
    service_version: str = Field(default="1.0.0")
    environment: str = Field(default="development")

    # Server configuration (HTTP adapter only)
    port: int = Field(default=8003)
    host: str = Field(default="0.0.0.0")  # nosec B104

    # Logging configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")
    log_to_file: bool = Field(default=False)
    log_to_console: bool = Field(default=True)
    log_file_path: Optional[str] = Field(default=None)

    # Request tracing
    correlation_id_header: str = Field(default="X-Correlation-ID")

    # Variant generation
    sku_regeneration_policy: str = Field(default="preserve_manual")
    max_variants_per_product: int = Field(default=1000, gt=0)

    # Variant media normalization
    media_max_width: int = Field(default=1024, gt=0)
    media_max_height: int = Field(default=1024, gt=0)
    media_quality: float = Field(default=0.8, gt=0, le=1)
    media_output_format: str = Field(default="JPEG")

    @field_validator("sku_regeneration_policy")
    @classmethod
    def validate_policy(cls, v):
        """Only the two documented regeneration policies are accepted."""
        v = v.strip().lower()
        if v not in ("preserve_manual", "always_fresh"):
            raise ValueError(
                "sku_regeneration_policy must be 'preserve_manual' or 'always_fresh'"
            )
        return v

    @property
    def resolved_log_file_path(self) -> str:
        """Log file location, derived from the service name when unset"""
        return self.log_file_path or f"logs/{self.service_name}.log"


# Global config instance
config = Config()
