"""
Application settings loaded from environment variables.

Uses pydantic-settings for validation and type safety.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings.

    All values loaded from .env file or environment variables.
    Validation happens automatically on startup.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),  # Check current dir, then parent
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra env vars
    )

    # ===================
    # SUPABASE
    # ===================
    supabase_url: str = Field(
        ...,
        description="Supabase project URL"
    )
    supabase_key: str = Field(
        ...,
        description="Supabase anon/public key"
    )
    supabase_service_key: Optional[str] = Field(
        None,
        description="Supabase service role key (for admin operations)"
    )

    # ===================
    # BOM UPLOAD DEFAULTS
    # ===================
    bom_default_category: str = Field(
        default="General",
        min_length=1,
        description="Category assigned to items created from a BOM upload"
    )
    bom_default_tax_rate: float = Field(
        default=12,
        ge=0,
        le=100,
        description="Tax rate (%) assigned to items created from a BOM upload"
    )
    bom_selling_markup: float = Field(
        default=1.4,
        ge=1,
        le=10,
        description="Selling price = unit cost x markup (rounded) for new items"
    )
    bom_low_stock_threshold: int = Field(
        default=5,
        ge=0,
        description="Low-stock threshold assigned to new items"
    )
    bom_similarity_threshold: float = Field(
        default=0.7,
        ge=0,
        le=1,
        description="Word-overlap score above which a parsed name matches an item"
    )
    bom_session_ttl_minutes: int = Field(
        default=30,
        ge=1,
        le=1440,
        description="Minutes an upload session survives between review and commit"
    )
    bom_text_extractor: str = Field(
        default="simulated",
        pattern="^(simulated|pdfplumber)$",
        description="Text extractor used for PDF and image uploads"
    )
    ocr_simulated_delay_seconds: float = Field(
        default=0,
        ge=0,
        le=30,
        description="Artificial delay applied by the simulated OCR extractor"
    )

    # ===================
    # DASHBOARD
    # ===================
    dashboard_top_items_limit: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Number of best-selling items shown on the dashboard"
    )
    dashboard_recent_invoices_limit: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Number of today's invoices shown on the dashboard"
    )
    store_timezone: str = Field(
        default="Asia/Kolkata",
        description="IANA timezone used to determine the start of the business day"
    )

    # ===================
    # APP SETTINGS
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Application environment"
    )
    debug: bool = Field(
        default=True,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API host"
    )
    api_port: int = Field(
        default=8000,
        ge=1000,
        le=65535,
        description="API port"
    )
    cors_origins: list[str] = Field(
        default=[
            "http://localhost:3000",
            "http://localhost:5173",
        ],
        description="Origins allowed by CORS (JSON list in the environment)"
    )

    # ===================
    # COMPUTED PROPERTIES
    # ===================
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings: Application settings

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    return Settings()


# For convenient imports: from config.settings import settings
settings = get_settings()
