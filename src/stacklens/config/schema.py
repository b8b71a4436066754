"""Pydantic models for configuration schema."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_WINDOW_SIZE = 11

DEFAULT_NATIVE_MARKERS = ["<frozen ", "<built-in", "node:", "ext:"]
DEFAULT_NATIVE_SENTINEL = "native"
DEFAULT_MODULE_MARKERS = ["site-packages/", "dist-packages/", "node_modules/"]


class ParserConfig(BaseModel):
    """Error parser configuration."""

    offset: int = Field(0, ge=0, description="Number of leading frames to drop")
    window_size: int = Field(
        DEFAULT_WINDOW_SIZE, ge=1, le=201, description="Source lines shown per frame"
    )


class ClassifierConfig(BaseModel):
    """Frame classification configuration."""

    native_markers: list[str] = DEFAULT_NATIVE_MARKERS
    native_sentinel: str = DEFAULT_NATIVE_SENTINEL
    module_markers: list[str] = DEFAULT_MODULE_MARKERS

    @field_validator("native_markers", "module_markers")
    @classmethod
    def validate_markers(cls, v: list[str]) -> list[str]:
        """Reject empty markers, which would match every file."""
        if any(not marker for marker in v):
            raise ValueError("Markers must be non-empty strings")
        return v


class RemoteSourceConfig(BaseModel):
    """Remote source loader configuration."""

    enabled: bool = False
    base_url: str | None = None
    timeout: float = Field(10.0, gt=0.0, le=120.0)
    max_attempts: int = Field(3, ge=1, le=10)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str | None) -> str | None:
        """Validate remote source server URL scheme."""
        if v is not None and not v.startswith(("http://", "https://")):
            raise ValueError(f"Invalid source server URL: {v}. Expected http(s)://")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["json", "console"] = "console"


class StacklensConfig(BaseSettings):
    """Root configuration for stacklens."""

    parser: ParserConfig = ParserConfig()
    classifier: ClassifierConfig = ClassifierConfig()
    remote: RemoteSourceConfig = RemoteSourceConfig()
    logging: LoggingConfig = LoggingConfig()

    model_config = SettingsConfigDict(
        env_prefix="STACKLENS_",
        env_nested_delimiter="__",
    )
