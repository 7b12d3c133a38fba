from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="WORLDGEN_", extra="ignore")

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    allowed_origins: str = Field(default="*", description="CORS allowed origins, comma separated")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (plain or json)")

    # World Generation Configuration
    default_seed: int = Field(default=42, description="Seed of the world served at startup")
    max_region_tiles: int = Field(default=65536, description="Max samples a single region request may compute")

    @property
    def cors_origins(self) -> list:
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


settings = Settings()
