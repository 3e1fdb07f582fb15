"""Validación y normalización de los datos del formulario antes de lanzar el navegador."""

import re
from datetime import date, datetime
from typing import Any, Dict, Mapping, Union

from cep_query.exceptions import FormDataError


REQUIRED_FIELDS = ["fecha", "tipoCriterio", "criterio", "emisor", "receptor", "cuenta", "monto"]

TIPOS_CRITERIO = {"T", "R"}
MAX_REFERENCIA = 7
MAX_CLAVE_RASTREO = 30
CLABE_LENGTH = 18

RE_DATE_SLASH = re.compile(r"^\d{2}/\d{2}/\d{4}$")
RE_DATE_DASH = re.compile(r"^\d{2}-\d{2}-\d{4}$")
RE_DATE_ISO = re.compile(r"^\d{4}-\d{2}-\d{2}$")
RE_CLABE = re.compile(r"^\d{18}$")
RE_NUMERIC = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")


def _is_numeric(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    return bool(RE_NUMERIC.match(str(value)))


def validate_form_data(form_data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Valida los datos del formulario y devuelve una copia normalizada.

    - fecha dd/mm/yyyy se convierte a dd-mm-yyyy
    - cuenta solo se revisa como CLABE cuando mide exactamente 18 caracteres

    Raises:
        FormDataError: Si falta un campo o alguno tiene formato inválido
    """
    data = dict(form_data)

    for field in REQUIRED_FIELDS:
        if not data.get(field):
            raise FormDataError(f"Required field missing: {field}")

    if data["tipoCriterio"] not in TIPOS_CRITERIO:
        raise FormDataError("Invalid tipoCriterio. Must be 'T' (tracking key) or 'R' (reference number)")

    criterio = str(data["criterio"])
    if data["tipoCriterio"] == "R" and len(criterio) > MAX_REFERENCIA:
        raise FormDataError(f"Reference number cannot exceed {MAX_REFERENCIA} characters")
    if data["tipoCriterio"] == "T" and len(criterio) > MAX_CLAVE_RASTREO:
        raise FormDataError(f"Tracking key cannot exceed {MAX_CLAVE_RASTREO} characters")

    fecha = str(data["fecha"])
    if RE_DATE_SLASH.match(fecha):
        data["fecha"] = fecha.replace("/", "-")
    elif not RE_DATE_DASH.match(fecha):
        raise FormDataError("Invalid date format. Use dd-mm-yyyy or dd/mm/yyyy")

    # Solo se revisa el patrón cuando ya mide 18; otras longitudes pasan
    cuenta = str(data["cuenta"])
    if len(cuenta) == CLABE_LENGTH and not RE_CLABE.match(cuenta):
        raise FormDataError("Invalid CLABE format. Must be 18 digits")

    if not _is_numeric(str(data["monto"]).replace(",", "")):
        raise FormDataError("Invalid amount format")

    if not _is_numeric(data["emisor"]) or not _is_numeric(data["receptor"]):
        raise FormDataError("Invalid bank codes. Must be numeric")

    return data


def sanitize_log_data(form_data: Mapping[str, Any]) -> Dict[str, Any]:
    """Enmascara cuenta (últimos 4) y criterio (últimos 3) para los logs."""
    sanitized = dict(form_data)
    if "cuenta" in sanitized and sanitized["cuenta"] is not None:
        sanitized["cuenta"] = "***" + str(sanitized["cuenta"])[-4:]
    if "criterio" in sanitized and sanitized["criterio"] is not None:
        sanitized["criterio"] = "***" + str(sanitized["criterio"])[-3:]
    return sanitized


def format_date(value: Union[str, date, datetime]) -> str:
    """
    Formatea una fecha para el formulario (dd-mm-yyyy).

    Acepta date/datetime, "yyyy-mm-dd" y "dd/mm/yyyy"; cualquier otro texto
    se devuelve sin cambios.
    """
    if isinstance(value, (date, datetime)):
        return value.strftime("%d-%m-%Y")

    if RE_DATE_ISO.match(value):
        try:
            return datetime.strptime(value, "%Y-%m-%d").strftime("%d-%m-%Y")
        except ValueError:
            return value

    if RE_DATE_SLASH.match(value):
        return value.replace("/", "-")

    return value
