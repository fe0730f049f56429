"""
Configuration settings for FastAPI application.
"""
from pydantic_settings import BaseSettings
from pydantic import Field

DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://localhost:5173", "http://127.0.0.1:3000"]


class FastAPISettings(BaseSettings):
    """FastAPI application settings with environment variable loading."""

    # Application settings
    app_name: str = Field(default="Rooming List API", description="Application name")
    app_description: str = Field(default="Reconciled guest roster built from travel-agency booking emails", description="Application description")
    app_version: str = Field(default="1.0.0", description="Application version")

    # Server settings
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8001, description="Server port")
    environment: str = Field(default="development", description="Environment (development, staging, production)")

    # API settings
    api_version: str = Field(default="v1", description="API version")
    api_prefix: str = Field(default="/api", description="API prefix")

    # Comma-separated list, e.g. "http://localhost:3000,https://roster.example.com"
    cors_origins: str = Field(default="", description="Allowed CORS origins", validation_alias="CORS_ORIGINS")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    model_config = {"extra": "ignore"}

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse CORS origins from the environment or return the defaults."""
        origins = [origin.strip() for origin in self.cors_origins.split(',') if origin.strip()]
        return origins if origins else list(DEFAULT_CORS_ORIGINS)


# Global settings instance
settings = FastAPISettings()
