"""
Servicio de consulta de CEP (Comprobante Electrónico de Pago) de Banxico.

Valida los datos, genera un script por llamada, lo ejecuta en un proceso
aparte y toma de su salida la única línea JSON que empieza con
``{"success"``. Las demás líneas son diagnóstico y se ignoran.
"""

import json
import logging
import os
import subprocess
from pathlib import Path
from typing import Any, Dict, Optional

import jsonschema

from cep_query.config import Settings, settings as default_settings
from cep_query.exceptions import (
    EmptyOutputError, EnvelopeNotFoundError, InvalidEnvelopeError, MalformedEnvelopeError,
    ScriptExecutionError, ScriptFailedError,
)
from cep_query.json_schema import ENVELOPE_SCHEMA
from cep_query.models import BrowserOptions
from cep_query.script import create_bank_options_script, create_execution_script, create_temp_script
from cep_query.validation import format_date, sanitize_log_data, validate_form_data

logger = logging.getLogger(__name__)

ENVELOPE_PREFIX = '{"success"'


def parse_script_output(output: str) -> Any:
    """
    Extrae el ``data`` del envelope en la salida del script.

    Raises:
        EmptyOutputError: Salida vacía
        EnvelopeNotFoundError: Ninguna línea comienza con ``{"success"``
        MalformedEnvelopeError: La línea no es JSON válido
        InvalidEnvelopeError: El JSON no cumple el schema del envelope
        ScriptFailedError: El envelope reporta ``success: false``
    """
    output = (output or "").strip()
    logger.debug("Raw script output: %s", output)

    if not output:
        raise EmptyOutputError("Script returned empty output")

    json_line = None
    for line in output.splitlines():
        line = line.strip()
        if line.startswith(ENVELOPE_PREFIX):
            json_line = line
            break

    if json_line is None:
        raise EnvelopeNotFoundError(f"No valid JSON found in script output: {output[:500]}")

    try:
        result = json.loads(json_line)
    except json.JSONDecodeError as e:
        raise MalformedEnvelopeError(f"Invalid JSON output: {e.msg} | Line: {json_line}") from e

    try:
        jsonschema.validate(instance=result, schema=ENVELOPE_SCHEMA)
    except jsonschema.ValidationError as e:
        raise InvalidEnvelopeError(f"Invalid response format: {e.message}. Full output: {output}") from e

    if not result["success"]:
        raise ScriptFailedError(
            f"Script execution failed: {result.get('error', 'Unknown error')} | Full output: {output}"
        )

    data = result.get("data")
    logger.info(
        "CEP script execution successful (has_data=%s, data_type=%s)",
        data is not None, type(data).__name__,
    )
    return data


class CEPQueryService:
    """Consulta de pagos SPEI en el sitio de CEP de Banxico."""

    format_date = staticmethod(format_date)

    def __init__(self, settings: Optional[Settings] = None):
        """
        Args:
            settings: Configuración (default: settings cargados del entorno)
        """
        self.settings = settings or default_settings
        self.working_directory: Optional[str] = None

    def query_payment(self, form_data: Dict[str, Any], options: Optional[Dict[str, Any]] = None) -> Optional[Dict]:
        """
        Consulta un pago con los datos del formulario.

        Args:
            form_data: fecha, tipoCriterio, criterio, emisor, receptor, cuenta, monto
            options: Opciones del navegador (sobrescriben los defaults)

        Returns:
            Resultado de la consulta (table/text/error) o None

        Raises:
            CEPQueryError: Validación, ejecución o contrato de salida
        """
        try:
            data = validate_form_data(form_data)
            browser_options = BrowserOptions.merged(self.settings.default_browser_options(), options)

            content = create_execution_script(data, browser_options.to_wire(), self.settings.url)
            return self._run_script(content)

        except Exception as e:
            logger.error("CEP Query failed: %s | formData=%s", e, sanitize_log_data(form_data))
            raise

    def get_bank_options(self) -> Dict[str, str]:
        """
        Catálogo de bancos del formulario.

        Returns:
            Diccionario código → nombre del banco
        """
        try:
            content = create_bank_options_script(self.settings.url, {"headless": self.settings.headless})
            return self._run_script(content) or {}

        except Exception as e:
            logger.error("Failed to get bank options: %s", e)
            raise

    def get_bank_code_by_name(self, bank_name: str) -> Optional[str]:
        """Busca el código de un banco por nombre (sin distinguir mayúsculas)."""
        banks = self.get_bank_options()
        wanted = bank_name.strip().lower()

        for code, name in banks.items():
            if wanted in name.lower():
                return code
        return None

    def set_working_directory(self, path: str) -> "CEPQueryService":
        self.working_directory = path
        return self

    def _run_script(self, content: str) -> Any:
        script_path = create_temp_script(content)
        try:
            output = self.execute_script(script_path)
            return parse_script_output(output)
        finally:
            if os.path.exists(script_path):
                os.unlink(script_path)

    def resolve_working_directory(self, working_directory: Optional[str] = None) -> str:
        """Precedencia: argumento → instancia → settings → directorio actual."""
        return (
            working_directory
            or self.working_directory
            or self.settings.cwd
            or os.getcwd()
        )

    def build_env(self, working_directory: str) -> Dict[str, str]:
        """Entorno del proceso: ``cep_query`` debe poder importarse desde el directorio de trabajo."""
        env = dict(os.environ)
        paths = [working_directory, str(Path(__file__).resolve().parent.parent)]
        if env.get("PYTHONPATH"):
            paths.append(env["PYTHONPATH"])
        env["PYTHONPATH"] = os.pathsep.join(paths)
        env["PYTHONIOENCODING"] = "utf-8"
        return env

    def execute_script(self, script_path: str, working_directory: Optional[str] = None) -> str:
        """
        Ejecuta el script con el intérprete configurado.

        Returns:
            Salida estándar del proceso

        Raises:
            ScriptExecutionError: Código de salida distinto de cero o timeout
        """
        cwd = self.resolve_working_directory(working_directory)
        command = [self.settings.python_binary, script_path]

        try:
            completed = subprocess.run(
                command,
                cwd=cwd,
                env=self.build_env(cwd),
                capture_output=True,
                text=True,
                encoding="utf-8",
                timeout=self.settings.process_timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise ScriptExecutionError(
                f"Script execution failed: timeout after {self.settings.process_timeout} seconds"
            ) from e
        except OSError as e:
            raise ScriptExecutionError(f"Script execution failed: {e}") from e

        if completed.returncode != 0:
            raise ScriptExecutionError(
                f"Script execution failed: exit code {completed.returncode}: {completed.stderr.strip()[:500]}"
            )
        return completed.stdout
