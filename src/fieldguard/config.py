"""Configuration management for FieldGuard."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Encryption at rest
    encryption_key: SecretStr = Field(
        description="64 hex characters used verbatim, or a passphrase hashed to 32 bytes"
    )
    encryption_strict: bool = Field(
        default=False,
        description="Raise on decrypt failure instead of passing the stored value through",
    )

    # Application
    environment: str = Field(default="production", description="Environment name")
    log_level: str = Field(default="INFO", description="Logging level")

    # File logging
    log_to_file: bool = Field(default=False, description="Also write logs to rotating files")
    log_directory: str = Field(default="logs", description="Directory for log files")
    log_file_max_bytes: int = Field(
        default=10 * 1024 * 1024, description="Rotate log files after this many bytes"
    )
    log_file_backup_count: int = Field(default=5, description="Rotated log files to keep")
    log_error_file_enabled: bool = Field(
        default=True, description="Write WARNING and above to a separate file"
    )

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"

    @property
    def log_file_path(self) -> str:
        """Path of the main log file."""
        return str(Path(self.log_directory) / "fieldguard.log")

    @property
    def error_log_file_path(self) -> str:
        """Path of the warning/error log file."""
        return str(Path(self.log_directory) / "fieldguard_error.log")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
