"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./adanfo.db"

    # External Services
    verifier_api_base: str = "http://localhost:8001"

    # Service
    service_name: str = "adanfo-gateway"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0

    # Lending rules
    max_principal: float = 10_000.0
    min_gpa: float = 1.5
    min_months_to_completion: int = 5
    default_credit_score: int = 650  # Pricing/ledger base when a borrower has no score yet


settings = Settings()
