"""
Modelos de datos (DTOs) para la API REST.
Define request/response schemas usando Pydantic.
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, Optional
from enum import Enum


class TipoCriterioEnum(str, Enum):
    """Criterios de búsqueda del formulario."""
    CLAVE_RASTREO = "T"
    REFERENCIA = "R"


class QueryRequest(BaseModel):
    """Request body para consultar un pago."""

    fecha: str = Field(..., description="Fecha del pago (dd-mm-yyyy o dd/mm/yyyy)")
    tipoCriterio: TipoCriterioEnum = Field(..., description="'T' clave de rastreo | 'R' número de referencia")
    criterio: str = Field(..., description="Clave de rastreo (≤30) o número de referencia (≤7)")
    emisor: str = Field(..., description="Código del banco emisor")
    receptor: str = Field(..., description="Código del banco receptor")
    cuenta: str = Field(..., description="Cuenta beneficiaria (CLABE de 18 dígitos)")
    monto: str = Field(..., description="Monto del pago (se permiten comas)")
    receptorParticipante: Optional[bool] = Field(None, description="Pago a Banco")
    options: Optional[Dict[str, Any]] = Field(
        None,
        description="Opciones del navegador (headless, slowMo, timeout). Sobrescriben los defaults."
    )

    class Config:
        json_schema_extra = {
            "example": {
                "fecha": "03/08/2025",
                "tipoCriterio": "R",
                "criterio": "1234567",
                "emisor": "40002",
                "receptor": "40014",
                "cuenta": "123456789012345678",
                "monto": "1500.00"
            }
        }

    def to_form_data(self) -> Dict[str, Any]:
        data = self.model_dump(exclude={"options"}, exclude_none=True)
        data["tipoCriterio"] = self.tipoCriterio.value
        return data


class QueryResponse(BaseModel):
    """Response de una consulta síncrona."""

    data: Optional[Dict[str, Any]] = Field(None, description="Resultado (table | text | error) o null")

    class Config:
        json_schema_extra = {
            "example": {
                "data": {
                    "type": "table",
                    "headers": ["Fecha", "Clave de rastreo", "Estado"],
                    "rows": [["03-08-2025", "ABC123", "Liquidado"]]
                }
            }
        }


class JobStatusEnum(str, Enum):
    """Estados posibles de un job."""
    QUEUED = "queued"
    STARTED = "started"
    FINISHED = "finished"
    FAILED = "failed"


class JobResponse(BaseModel):
    """Response al encolar una consulta."""

    job_id: str = Field(..., description="ID único del job")
    message: str = Field(..., description="Mensaje descriptivo")


class JobStatusResponse(BaseModel):
    """Response del endpoint /jobs/{job_id}."""

    job_id: str
    status: JobStatusEnum
    result: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "job_id": "cep_1729634567_ab12",
                "status": "finished",
                "result": {"success": True, "data": None},
                "error": None
            }
        }


class BanksResponse(BaseModel):
    """Catálogo de bancos código → nombre."""

    banks: Dict[str, str]


class BankLookupResponse(BaseModel):
    """Código de banco encontrado por nombre."""

    name: str
    code: str


class HealthResponse(BaseModel):
    """Response del endpoint /healthz."""

    status: str = Field(..., description="Estado del servicio")
    version: str = Field(..., description="Versión de la API")
    redis_connected: bool = Field(..., description="Conexión a Redis OK")

    class Config:
        json_schema_extra = {
            "example": {
                "status": "healthy",
                "version": "1.0.0",
                "redis_connected": True
            }
        }


class ErrorResponse(BaseModel):
    """Response estándar de error."""

    detail: str = Field(..., description="Mensaje de error")
