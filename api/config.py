"""
Configuración del microservicio usando Pydantic Settings.
Lee variables de entorno o .env file.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings de la API de consulta CEP."""

    # API Configuration
    api_key: str = "development-key-change-in-production"

    # Redis / RQ
    redis_url: str = "redis://localhost:6379"
    queue_name: str = "default"

    # Jobs
    job_timeout_minutes: int = 5
    result_ttl_seconds: int = 86400

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def redis_connection_url(self) -> str:
        # Upstash requiere SSL - solo convertir si es upstash.io
        if self.redis_url.startswith("redis://") and "upstash.io" in self.redis_url:
            return self.redis_url.replace("redis://", "rediss://", 1)
        return self.redis_url


# Singleton
settings = Settings()
