"""
Consulta automatizada de CEPs (Comprobante Electrónico de Pago) en Banxico.

Componentes:
- form_driver: Llenado secuencial del formulario
- submission: Envío, espera del modal y extracción de resultados
- bank_options: Catálogo de bancos del select emisor
- session: Sesión de navegador que emite el envelope JSON
- form_filler: Módulo reutilizable sobre una página ya abierta
- service: Wrapper que valida, genera el script y parsea su salida
- models: Modelos de datos
"""

from cep_query.service import CEPQueryService
from cep_query.form_filler import CEPFormFiller
from cep_query.models import (
    BrowserOptions, ExecutionEnvelope, FieldDescriptor, TableResult, TextResult, ErrorResult,
)

__version__ = "1.0.0"

__all__ = [
    "CEPQueryService",
    "CEPFormFiller",
    "BrowserOptions",
    "ExecutionEnvelope",
    "FieldDescriptor",
    "TableResult",
    "TextResult",
    "ErrorResult",
]
