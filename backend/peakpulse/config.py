"""
Peak Pulse Configuration
========================
All environment variables in one place. Pydantic Settings validates
types at startup so a missing Supabase URL or a malformed flag shows up
when the process boots, not on the first checkout.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Loaded from environment variables or a .env file."""

    # --- Supabase ---
    supabase_url: str = "http://localhost:54321"
    supabase_anon_key: str = ""  # public client, RLS applies
    supabase_service_key: str = ""  # service_role key, bypasses RLS

    # --- Anthropic / Claude API ---
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-20250514"
    # Shipping estimates and loan summaries are small JSON objects
    anthropic_max_tokens: int = 512
    anthropic_timeout_seconds: float = 20.0

    # --- App settings ---
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:9002"]

    # --- Commerce ---
    currency: str = "NPR"
    # Flat fee charged for deliveries inside Nepal
    domestic_shipping_fee_npr: float = 500.0
    home_country: str = "Nepal"

    # --- Feature flags ---
    # Kill switches for the AI flows. Checkout still works with them off,
    # international shipping estimates just become unavailable.
    enable_ai_shipping_estimates: bool = True
    enable_ai_loan_analysis: bool = True

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
