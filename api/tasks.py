"""
Task worker RQ que ejecuta consultas de CEP en background.

Cada job corre una consulta completa: validación → script → sesión de
navegador → envelope. El resultado queda guardado en el job.
"""

import logging
from typing import Any, Dict, Optional

from cep_query.service import CEPQueryService
from cep_query.validation import sanitize_log_data

logger = logging.getLogger(__name__)


def run_cep_query(
    job_id: str,
    form_data: Dict[str, Any],
    options: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Ejecuta una consulta de CEP.

    Este es el worker RQ que procesa en background.

    Args:
        job_id: ID único del job
        form_data: Datos del formulario
        options: Opciones del navegador

    Returns:
        Envelope con el resultado de la consulta
    """
    print("=" * 80)
    print(f"🚀 INICIANDO CONSULTA CEP - Job ID: {job_id}")
    print("=" * 80)
    print(f"📋 Datos: {sanitize_log_data(form_data)}")

    service = CEPQueryService()
    data = service.query_payment(form_data, options)

    print(f"✅ Consulta completada - Job ID: {job_id}")
    logger.info("Job %s completado (has_data=%s)", job_id, data is not None)
    return {"success": True, "data": data}
