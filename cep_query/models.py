"""Modelos de datos para la consulta de CEP: campos, opciones, resultados y envelope."""

import json
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from config.banxico_selectors import CHROMIUM_ARGS


class FieldKind(str, Enum):
    """Tipos de campo soportados por el formulario."""
    TEXT = "text"
    DATE = "date"
    SELECT = "select"
    CHECKBOX = "checkbox"


class FieldDescriptor(BaseModel):
    """Descripción estática de un campo del formulario."""
    name: str
    locator: str
    kind: FieldKind
    required: bool = False
    max_length: Optional[int] = None
    options: Optional[Dict[str, str]] = None
    description: str = ""


class BrowserOptions(BaseModel):
    """
    Opciones de lanzamiento del navegador.

    Las llaves desconocidas se conservan y se pasan tal cual a
    ``chromium.launch()``.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    headless: bool = True
    slow_mo: int = Field(100, alias="slowMo")
    timeout: int = 45000
    args: List[str] = Field(default_factory=lambda: list(CHROMIUM_ARGS))

    @classmethod
    def merged(cls, defaults: Dict[str, Any], overrides: Optional[Dict[str, Any]] = None) -> "BrowserOptions":
        """
        Combina las opciones del llamador sobre los defaults, llave por llave.

        Args:
            defaults: Opciones por defecto
            overrides: Opciones del llamador (tienen precedencia)

        Returns:
            BrowserOptions resultante
        """
        data = _normalize_option_keys(defaults)
        data.update(_normalize_option_keys(overrides or {}))
        return cls(**data)

    def launch_kwargs(self) -> Dict[str, Any]:
        """Argumentos para ``chromium.launch()``."""
        kwargs = dict(self.model_extra or {})
        kwargs.update(headless=self.headless, slow_mo=self.slow_mo, args=self.args)
        return kwargs

    def to_wire(self) -> Dict[str, Any]:
        """Forma serializable que se embebe en el script generado."""
        return self.model_dump(by_alias=True)


def _normalize_option_keys(options: Dict[str, Any]) -> Dict[str, Any]:
    # slow_mo y slowMo son la misma llave
    normalized = dict(options)
    if "slow_mo" in normalized:
        normalized["slowMo"] = normalized.pop("slow_mo")
    return normalized


class FlowTimings(BaseModel):
    """Tiempos de espera del flujo (segundos salvo wait_timeout_ms)."""
    settle_delay: float = 2.5
    final_settle_delay: float = 3.0
    wait_timeout_ms: int = 45000
    post_visible_delay: float = 5.0


PRODUCTION_TIMINGS = FlowTimings()
MODULE_TIMINGS = FlowTimings(
    settle_delay=0.0,
    final_settle_delay=0.0,
    wait_timeout_ms=30000,
    post_visible_delay=1.0,
)


# ============================================================================
# RESULTADOS
# ============================================================================

class TableResult(BaseModel):
    """Tabla extraída del modal de resultados."""
    type: Literal["table"] = "table"
    headers: List[str] = Field(default_factory=list)
    rows: List[List[str]] = Field(default_factory=list)


class TextResult(BaseModel):
    """Contenido del modal cuando no trae tabla."""
    type: Literal["text"] = "text"
    content: str
    html: str


class ErrorResult(BaseModel):
    """Contenido parcial del modal tras una espera fallida."""
    type: Literal["error"] = "error"
    content: str
    html: str
    display: str = ""


QueryResult = Annotated[Union[TableResult, TextResult, ErrorResult], Field(discriminator="type")]

QueryResultAdapter = TypeAdapter(Optional[QueryResult])


def parse_query_result(data: Optional[Dict[str, Any]]) -> Optional[Union[TableResult, TextResult, ErrorResult]]:
    """Convierte el ``data`` crudo del envelope en el modelo correspondiente."""
    return QueryResultAdapter.validate_python(data)


class ExecutionEnvelope(BaseModel):
    """Resultado único que emite cada sesión de navegador."""
    success: bool
    data: Any = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: Any) -> "ExecutionEnvelope":
        return cls(success=True, data=data)

    @classmethod
    def failure(cls, error: str) -> "ExecutionEnvelope":
        return cls(success=False, error=error)

    def to_wire(self) -> Dict[str, Any]:
        """Diccionario con el orden de llaves del contrato (success primero)."""
        if not self.success:
            return {"success": False, "error": self.error or "Unknown error"}
        data = self.data.model_dump() if isinstance(self.data, BaseModel) else self.data
        return {"success": True, "data": data}

    def to_line(self) -> str:
        """Una sola línea JSON que comienza con ``{"success"``."""
        return json.dumps(self.to_wire(), ensure_ascii=False)
