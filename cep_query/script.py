"""
Generación del script que corre cada sesión de navegador.

Los datos del formulario y las opciones se embeben como literales al
generar el script: cada llamada produce un cuerpo nuevo.
"""

import json
import os
import tempfile
from typing import Any, Dict, Optional


QUERY_SCRIPT_TEMPLATE = '''\
import json

from cep_query.session import run_query

FORM_DATA = json.loads({form_data!r})
OPTIONS = json.loads({options!r})

run_query(FORM_DATA, OPTIONS, url={url!r})
'''

BANK_OPTIONS_SCRIPT_TEMPLATE = '''\
import json

from cep_query.session import run_bank_options

OPTIONS = json.loads({options!r})

run_bank_options(OPTIONS, url={url!r})
'''


def _literal(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def create_execution_script(form_data: Dict[str, Any], options: Dict[str, Any], url: str) -> str:
    """Cuerpo del script de consulta con los datos embebidos."""
    return QUERY_SCRIPT_TEMPLATE.format(form_data=_literal(form_data), options=_literal(options), url=url)


def create_bank_options_script(url: str, options: Optional[Dict[str, Any]] = None) -> str:
    """Cuerpo del script que lee el catálogo de bancos."""
    return BANK_OPTIONS_SCRIPT_TEMPLATE.format(options=_literal(options or {}), url=url)


def create_temp_script(content: str) -> str:
    """
    Escribe el script en un archivo temporal.

    Returns:
        Ruta del archivo creado (el llamador debe borrarlo)
    """
    fd, path = tempfile.mkstemp(prefix="cep_query_", suffix=".py")
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(content)
    return path
