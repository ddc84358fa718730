"""Portal configuration from environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Hosted backend (auth + tables)
    SUPABASE_URL: str = "https://ozjibqqasfjbiymwnihy.supabase.co"
    SUPABASE_ANON_KEY: str = ""

    REDIS_URL: str = "redis://redis:6379/0"
    FSM_STORAGE: str = "memory"  # "memory" or "redis"

    NOMINATIM_URL: str = "https://nominatim.openstreetmap.org"
    GEOCODE_USER_AGENT: str = "CityProDrivers/1.0 (info@driveease.in)"
    GEOCODE_CACHE_ENABLED: bool = True

    WHATSAPP_NUMBER: str = "919876543210"

    SESSION_COOKIE: str = "cpd_session"
    CORS_ORIGINS: str = "*"
    LOG_LEVEL: str = "INFO"

    OTP_COOLDOWN_SECONDS: int = 60
    OTP_FAILURE_COOLDOWN_SECONDS: int = 10

    # Portal sessions unused for this long are dropped
    SESSION_IDLE_SECONDS: int = 2 * 3600

    class Config:
        env_file = ".env"
        extra = "allow"


settings = Settings()
