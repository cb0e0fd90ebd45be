from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    
    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below
    """
    
    # Environment
    environment: str = "development"
    debug: bool = True
    
    # Application
    app_name: str = "Short Links"
    app_version: str = "1.0.0"
    
    # Server
    host: str = "127.0.0.1"
    port: int = 5000
    
    # Short link generation
    base_url: str = "http://localhost:5000"
    short_code_length: int = 6
    max_retries: int = 256  # Attempts before giving up on a random code
    
    # Expiration
    default_validity_minutes: int = 30
    sweep_enabled: bool = True
    sweep_interval_seconds: int = 60
    
    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None
    log_json: bool = False
    
    # CORS
    cors_origins: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]
    
    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Create settings instance
settings = Settings()
