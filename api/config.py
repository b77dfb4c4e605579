"""
Configuration management for the FuelEU Ledger API.
Loads environment variables and provides typed configuration.
"""
from typing import List
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ========================================================================
    # Database Configuration
    # ========================================================================
    database_url: str = "sqlite:///./fueleu_ledger.db"
    db_echo: bool = False

    # ========================================================================
    # API Configuration
    # ========================================================================
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # ========================================================================
    # CORS Configuration
    # ========================================================================
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    # ========================================================================
    # Application Configuration
    # ========================================================================
    environment: str = "development"
    log_level: str = "info"
    debug: bool = False

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development."""
        return self.environment.lower() == "development"

    # ========================================================================
    # Fuel Data Source
    # ========================================================================
    # "mock": fixed intensity/energy for every ship
    # "routes": derive consumption from the route registry (route id == ship id)
    fuel_data_source: str = "mock"
    mock_actual_intensity: float = 90.5  # gCO2eq/MJ
    mock_energy_scope_mj: float = 5_000_000.0
    # In "routes" mode, fall back to the mock values for ships without a route
    mock_fallback: bool = True

    # ========================================================================
    # Pydantic Settings Configuration
    # ========================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Application settings
    """
    return Settings()


# Convenience exports
settings = get_settings()

if settings.fuel_data_source not in ("mock", "routes"):
    raise ValueError(
        f"FUEL_DATA_SOURCE must be 'mock' or 'routes', got '{settings.fuel_data_source}'"
    )

# Mocked fuel data must never back a production ledger
if settings.is_production and settings.fuel_data_source == "mock":
    raise ValueError(
        "FUEL_DATA_SOURCE=mock is not allowed in production! "
        "Register routes and set FUEL_DATA_SOURCE=routes."
    )
