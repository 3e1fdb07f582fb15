"""
Configuración de la consulta CEP usando Pydantic Settings.
Lee variables de entorno (prefijo CEP_QUERY_) o .env file.
"""

import sys
from typing import Any, Dict, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from config.banxico_selectors import CEP_URL


class Settings(BaseSettings):
    """Settings del servicio de consulta CEP."""

    # Página de Banxico
    url: str = CEP_URL

    # Ejecución del script
    python_binary: str = sys.executable
    cwd: Optional[str] = None
    process_timeout: int = 120  # segundos

    # Opciones por defecto del navegador
    headless: bool = True
    slow_mo: int = 100
    timeout: int = 45000  # milisegundos

    model_config = SettingsConfigDict(
        env_prefix="CEP_QUERY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def default_browser_options(self) -> Dict[str, Any]:
        return {"headless": self.headless, "slowMo": self.slow_mo, "timeout": self.timeout}


# Singleton
settings = Settings()
